"""Recursive component discovery with directory, path and file-name policy."""

from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path
from typing import Iterable, List, Tuple

from ..cache import RunCache
from ..detectors.framework import get_extensions
from ..extractors.component import ComponentMetadataExtractor, error_metadata
from ..logging import get_logger
from ..models import FoundComponent

COMPONENTS_DIR = "components"

IGNORED_DIRECTORIES = frozenset(
    {
        # Build & distribution
        "node_modules",
        "dist",
        "build",
        "coverage",
        ".next",
        "out",
        # Version control & editors
        ".git",
        ".github",
        ".vscode",
        ".idea",
        # Testing & documentation
        "examples",
        "stories",
        "test",
        "tests",
        "__tests__",
        "__mocks__",
        "cypress",
        "e2e",
        "docs",
        "documentation",
        # Development tools
        "tools",
        "scripts",
        "utils",
        "helpers",
        "hooks",
        "playground",
        "playgrounds",
        "sandbox",
        "demo",
        "internal",
        # Package management
        "lerna.json",
        "pnpm-workspace.yaml",
        "yarn.lock",
        "package-lock.json",
        # Assets & resources
        "assets",
        "static",
        "media",
        "images",
        "icons",
        "fonts",
        "styles",
        "themes",
        "locales",
        "i18n",
        "translations",
    }
)

IGNORED_PATH_PATTERNS = (
    re.compile(
        r"/(playgrounds|examples|test-utils|__tests__|stories|hooks|utils|helpers"
        r"|test|tests|demo|sandbox|docs)/"
    ),
    re.compile(
        r"/(documentation|assets|static|media|images|icons|fonts|styles|themes"
        r"|locales|i18n|translations|config)/"
    ),
    re.compile(
        r"/(scripts|tools|public|build|dist|coverage|\.next|out|node_modules"
        r"|\.git|\.github|\.vscode|\.idea|internal)/"
    ),
    re.compile(r"/(lerna\.json|pnpm-workspace\.yaml|yarn\.lock|package-lock\.json)$"),
)

COMPONENT_ANTI_PATTERNS = (
    re.compile(r"\.stories\."),
    re.compile(r"\.stories$"),
    re.compile(r"\.test\."),
    re.compile(r"\.spec\."),
    re.compile(r"\.e2e\."),
    re.compile(r"\.config\."),
    re.compile(r"\.setup\."),
    re.compile(r"\.mocks?\."),
    re.compile(r"\.fixtures?\."),
    re.compile(r"\.d\.ts$"),
)

_Entry = Tuple[str, bool, bool]


def _list_entries(directory: Path) -> List[_Entry]:
    entries: List[_Entry] = []
    with os.scandir(directory) as iterator:
        for entry in iterator:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file(follow_symlinks=False)
            except OSError:
                continue
            entries.append((entry.name, is_dir, is_file))
    return entries


def should_ignore_path(relative_path: str) -> bool:
    """Return True when a ``/``-prefixed POSIX path hits an ignored segment."""
    return any(pattern.search(relative_path) for pattern in IGNORED_PATH_PATTERNS)


def matches_anti_pattern(file_name: str) -> bool:
    return any(pattern.search(file_name) for pattern in COMPONENT_ANTI_PATTERNS)


class ComponentWalker:
    """Walks a directory tree collecting component files for one framework.

    Sibling entries are visited concurrently. A directory named ``components``
    switches the traversal into priority mode for its subtree; it is still
    visited exactly once.
    """

    def __init__(
        self,
        extractor: ComponentMetadataExtractor | None = None,
        extra_ignored_dirs: Iterable[str] = (),
    ) -> None:
        self.extractor = extractor or ComponentMetadataExtractor()
        self.ignored_dirs = IGNORED_DIRECTORIES | {name.lower() for name in extra_ignored_dirs}
        self.logger = get_logger("finders.walker")

    async def walk(
        self,
        root_dir: Path | str,
        framework: str,
        cache: RunCache | None = None,
        *,
        base: Path | str | None = None,
    ) -> List[FoundComponent]:
        """Return every component file under ``root_dir`` (unordered).

        Path patterns are matched against paths relative to ``base``, the
        project root, which defaults to ``root_dir``.
        """
        cache = cache if cache is not None else RunCache()
        root = Path(os.path.abspath(root_dir))
        base_path = Path(os.path.abspath(base)) if base is not None else root
        found: List[FoundComponent] = []
        await self._walk(root, base_path, framework, cache, found, priority=False)
        return found

    def should_ignore_directory(self, name: str, cache: RunCache) -> bool:
        decision = cache.directory_decisions.get(name)
        if decision is None:
            decision = name.lower() in self.ignored_dirs
            cache.directory_decisions[name] = decision
        return decision

    def is_component_file(self, file_name: str, framework: str, cache: RunCache) -> bool:
        key = (file_name, framework)
        decision = cache.file_decisions.get(key)
        if decision is None:
            decision = file_name.endswith(get_extensions(framework)) and not matches_anti_pattern(
                file_name
            )
            cache.file_decisions[key] = decision
        return decision

    async def _walk(
        self,
        directory: Path,
        base: Path,
        framework: str,
        cache: RunCache,
        found: List[FoundComponent],
        *,
        priority: bool,
    ) -> None:
        try:
            entries = await asyncio.to_thread(_list_entries, directory)
        except FileNotFoundError:
            return
        except OSError as exc:
            self.logger.error("Error traversing directory %s: %s", directory, exc)
            return

        await asyncio.gather(
            *(
                self._visit(entry, directory, base, framework, cache, found, priority=priority)
                for entry in entries
            )
        )

    async def _visit(
        self,
        entry: _Entry,
        directory: Path,
        base: Path,
        framework: str,
        cache: RunCache,
        found: List[FoundComponent],
        *,
        priority: bool,
    ) -> None:
        name, is_dir, is_file = entry
        full_path = directory / name
        relative = "/" + Path(os.path.relpath(full_path, base)).as_posix()

        if is_dir:
            if should_ignore_path(relative + "/") or self.should_ignore_directory(name, cache):
                return
            entering = not priority and name.lower() == COMPONENTS_DIR
            if entering:
                self.logger.debug("Prioritising components directory %s", full_path)
            await self._walk(
                full_path, base, framework, cache, found, priority=priority or entering
            )
            return

        if should_ignore_path(relative):
            return
        if is_file and self.is_component_file(name, framework, cache):
            found.append(await self._process_file(full_path, framework, priority))

    async def _process_file(self, path: Path, framework: str, priority: bool) -> FoundComponent:
        try:
            metadata = await self.extractor.extract(path, framework)
        except Exception as exc:
            self.logger.error("Error processing component file %s: %s", path, exc)
            metadata = error_metadata(path, framework)
        if priority:
            self.logger.debug("Found component %s in components directory", path)
        return FoundComponent(path=str(path), framework=framework, metadata=metadata)


__all__ = [
    "COMPONENT_ANTI_PATTERNS",
    "ComponentWalker",
    "IGNORED_DIRECTORIES",
    "IGNORED_PATH_PATTERNS",
    "matches_anti_pattern",
    "should_ignore_path",
]
