"""Detector, finder and formatter pipeline for plain component listings."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Any, List

from .cache import RunCache
from .detectors.base import Detector
from .detectors.monorepo import MonorepoDetector
from .finders.base import Finder
from .finders.finder import ComponentFinder
from .formatters import Formatter, JsonFormatter
from .logging import get_logger
from .manifest import ManifestReader
from .models import FoundComponent
from .workspaces import WorkspaceResolver


class ComponentScanner:
    """Lists components of a project, walking each workspace of a monorepo."""

    def __init__(
        self,
        detector: Detector | None = None,
        finder: Finder | None = None,
        formatter: Formatter | None = None,
        reader: ManifestReader | None = None,
    ) -> None:
        self.reader = reader or ManifestReader()
        self.detector = detector or MonorepoDetector(self.reader)
        self.finder = finder or ComponentFinder(reader=self.reader)
        self.formatter = formatter or JsonFormatter()
        self.resolver = WorkspaceResolver(self.reader)
        self.logger = get_logger("scanner")

    def scan(self, project_path: Path | str) -> Any:
        return asyncio.run(self.scan_async(project_path))

    async def scan_async(self, project_path: Path | str) -> Any:
        cache = RunCache()
        root = Path(os.path.abspath(project_path))
        detection = await self.detector.detect(root, cache)
        if not detection.is_monorepo:
            return self.formatter.format(await self.finder.find(root, cache))

        workspaces = await self.resolver.resolve(root, cache)
        self.logger.info("Scanning %d workspaces under %s", len(workspaces), root)
        components: List[FoundComponent] = []
        for workspace in workspaces:
            components.extend(await self.finder.find(workspace, cache, base=root))
        return self.formatter.format(components)


__all__ = ["ComponentScanner"]
