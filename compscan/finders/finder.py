"""Monorepo-aware component finder built on the discovery walker."""

from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path
from typing import Dict, Iterable, List

from ..cache import RunCache
from ..detectors.framework import FrameworkDetector
from ..logging import get_logger
from ..manifest import ManifestReader
from ..models import FoundComponent
from ..workspaces import WorkspaceResolver
from .base import Finder
from .walker import ComponentWalker

_NON_COMPONENT_WORKSPACE = re.compile(r"/(playground|examples|demo|sandbox)")

_FRAMEWORK_RANK = {"react": 0, "vue": 1}


def sort_components(components: Iterable[FoundComponent]) -> List[FoundComponent]:
    """Order react components first, then vue, then the rest; by path within groups."""
    return sorted(
        components,
        key=lambda component: (_FRAMEWORK_RANK.get(component.framework, 2), component.path),
    )


def dedupe_components(components: Iterable[FoundComponent]) -> List[FoundComponent]:
    unique: Dict[str, FoundComponent] = {}
    for component in components:
        unique.setdefault(component.path, component)
    return list(unique.values())


class ComponentFinder(Finder):
    """Finds components in a single package or across declared workspaces."""

    def __init__(
        self,
        walker: ComponentWalker | None = None,
        framework_detector: FrameworkDetector | None = None,
        resolver: WorkspaceResolver | None = None,
        reader: ManifestReader | None = None,
    ) -> None:
        self.reader = reader or ManifestReader()
        self.frameworks = framework_detector or FrameworkDetector(self.reader)
        self.resolver = resolver or WorkspaceResolver(self.reader)
        self.walker = walker or ComponentWalker()
        self.logger = get_logger("finders.finder")

    async def find(
        self,
        project_path: Path | str,
        cache: RunCache | None = None,
        *,
        base: Path | str | None = None,
    ) -> List[FoundComponent]:
        cache = cache if cache is not None else RunCache()
        root = Path(os.path.abspath(project_path))
        base_path = Path(os.path.abspath(base)) if base is not None else root
        manifest = await self.reader.read(root, cache)

        if manifest.get("workspaces") is not None:
            components = await self._find_in_workspaces(root, base_path, cache)
        else:
            framework = await self.frameworks.detect(root, cache)
            components = await self.walker.walk(root, framework, cache, base=base_path)

        return sort_components(dedupe_components(components))

    async def _find_in_workspaces(
        self, root: Path, base: Path, cache: RunCache
    ) -> List[FoundComponent]:
        workspaces = await self.resolver.resolve(root, cache)
        self.logger.info("Found %d workspaces in monorepo", len(workspaces))
        results = await asyncio.gather(
            *(self._find_in_workspace(root, base, workspace, cache) for workspace in workspaces)
        )
        return [component for result in results for component in result]

    async def _find_in_workspace(
        self, root: Path, base: Path, workspace: Path, cache: RunCache
    ) -> List[FoundComponent]:
        relative = "/" + Path(os.path.relpath(workspace, root)).as_posix()
        if _NON_COMPONENT_WORKSPACE.search(relative):
            self.logger.info("Skipping non-component directory: %s", workspace)
            return []

        try:
            if not await asyncio.to_thread(workspace.is_dir):
                self.logger.warning(
                    "Workspace doesn't exist or can't be accessed: %s", workspace
                )
                return []
            framework = await self.frameworks.detect(workspace, cache)
            return await self.walker.walk(workspace, framework, cache, base=base)
        except Exception as exc:
            self.logger.error("Error processing workspace %s: %s", workspace, exc)
            return []


__all__ = ["ComponentFinder", "dedupe_components", "sort_components"]
