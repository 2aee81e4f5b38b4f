"""UI framework detection for project and workspace directories."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Any, Dict, Optional, Set, Tuple

from ..cache import RunCache
from ..logging import get_logger
from ..manifest import ManifestError, ManifestReader, manifest_path, workspace_patterns
from .base import first_match

UNKNOWN = "unknown"

FRAMEWORK_EXTENSIONS: Dict[str, Tuple[str, ...]] = {
    "react": (".jsx", ".tsx"),
    "vue": (".vue",),
    "svelte": (".svelte",),
    "angular": (".component.ts", ".component.html"),
    UNKNOWN: (".js", ".jsx", ".ts", ".tsx", ".vue", ".svelte", ".component.html"),
}

# Checked in priority order.
FRAMEWORK_PACKAGES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("react", ("react", "react-dom")),
    ("vue", ("vue",)),
    ("svelte", ("svelte",)),
    ("angular", ("@angular/core",)),
)

_PATH_HINTS = ("react", "vue", "svelte", "angular")

_FILE_SUFFIXES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    ((".jsx", ".tsx"), "react"),
    ((".vue",), "vue"),
    ((".svelte",), "svelte"),
    ((".component.ts", ".component.html"), "angular"),
)


def get_extensions(framework: str) -> Tuple[str, ...]:
    """Return the component file extensions associated with a framework tag."""
    return FRAMEWORK_EXTENSIONS.get(framework, FRAMEWORK_EXTENSIONS[UNKNOWN])


def match_framework_dependencies(manifest: Dict[str, Any]) -> Optional[str]:
    """Return the framework tag implied by manifest dependency names, if any."""
    names: Set[str] = set()
    for section in ("dependencies", "devDependencies"):
        deps = manifest.get(section)
        if isinstance(deps, dict):
            names.update(deps.keys())
    for framework, packages in FRAMEWORK_PACKAGES:
        if any(package in names for package in packages):
            return framework
    return None


class FrameworkDetector:
    """Infers which UI framework a directory uses.

    Strategies run in order and the first one returning a tag wins:
    path hints, manifest dependencies (declared workspaces first), then file
    extensions of the directory's immediate entries.
    """

    def __init__(self, reader: ManifestReader | None = None) -> None:
        self.reader = reader or ManifestReader()
        self.logger = get_logger("detectors.framework")
        self.strategies = (
            ("path_hint", self.from_path_hint),
            ("manifest", self.from_manifest),
            ("file_extensions", self.from_file_extensions),
        )

    async def detect(self, dir_path: Path | str, cache: RunCache | None = None) -> str:
        """Return the framework tag for ``dir_path``, ``unknown`` when undecided."""
        cache = cache if cache is not None else RunCache()
        path = Path(dir_path)
        try:
            match = await first_match(self.strategies, path, cache)
        except ManifestError as exc:
            self.logger.debug("No usable manifest for framework detection: %s", exc)
            return UNKNOWN
        except OSError as exc:
            self.logger.warning("Error detecting framework in %s: %s", path, exc)
            return UNKNOWN

        if match is None:
            return UNKNOWN
        strategy, framework = match
        self.logger.debug("Detected %s in %s via %s", framework, path, strategy)
        return framework

    def get_extensions(self, framework: str) -> Tuple[str, ...]:
        return get_extensions(framework)

    async def from_path_hint(self, path: Path, cache: RunCache) -> Optional[str]:
        text = str(path)
        for hint in _PATH_HINTS:
            if hint in text:
                return hint
        return None

    async def from_manifest(self, path: Path, cache: RunCache) -> Optional[str]:
        manifest = await self.reader.load(path, cache)
        visited = {str(manifest_path(path))}
        return await self._scan_manifest_tree(path, manifest, cache, visited)

    async def from_file_extensions(self, path: Path, cache: RunCache) -> Optional[str]:
        names = await asyncio.to_thread(os.listdir, path)
        for name in names:
            for suffixes, framework in _FILE_SUFFIXES:
                if name.endswith(suffixes):
                    return framework
        return None

    async def _scan_manifest_tree(
        self,
        base: Path,
        manifest: Dict[str, Any],
        cache: RunCache,
        visited: Set[str],
    ) -> Optional[str]:
        for pattern in workspace_patterns(manifest):
            workspace = base / pattern
            key = str(manifest_path(workspace))
            if key in visited:
                continue
            visited.add(key)
            try:
                workspace_manifest = await self.reader.load(workspace, cache)
            except ManifestError:
                continue
            framework = await self._scan_manifest_tree(
                workspace, workspace_manifest, cache, visited
            )
            if framework is not None:
                return framework
        return match_framework_dependencies(manifest)


__all__ = [
    "FRAMEWORK_EXTENSIONS",
    "FRAMEWORK_PACKAGES",
    "FrameworkDetector",
    "UNKNOWN",
    "get_extensions",
    "match_framework_dependencies",
]
