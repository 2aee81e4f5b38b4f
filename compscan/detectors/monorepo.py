"""Monorepo detection based on markers, workspace declarations and nested manifests."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import List, Optional

from ..cache import RunCache
from ..logging import get_logger
from ..manifest import MANIFEST_FILENAME, ManifestReader, concrete_workspaces
from ..models import DetectionResult
from .base import Detector, first_match

MONOREPO_MARKERS = (
    "lerna.json",
    "pnpm-workspace.yaml",
    "rush.json",
    "nx.json",
    "turbo.json",
)

_logger = get_logger("detectors.monorepo")


def count_manifests(root: Path, limit: int | None = None) -> int:
    """Count package.json files below ``root``, skipping hidden directories.

    Stops early once ``limit`` manifests have been seen.
    """
    count = 0
    pending: List[str] = [str(root)]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        is_dir = entry.is_dir(follow_symlinks=False)
                    except OSError:
                        continue
                    if is_dir:
                        if not entry.name.startswith("."):
                            pending.append(entry.path)
                    elif entry.name == MANIFEST_FILENAME:
                        count += 1
                        if limit is not None and count >= limit:
                            return count
        except OSError as exc:
            _logger.debug("Error counting manifests in %s: %s", current, exc)
    return count


class MonorepoDetector(Detector):
    """Decides whether a project root is a multi-package workspace."""

    def __init__(self, reader: ManifestReader | None = None) -> None:
        self.reader = reader or ManifestReader()
        self.logger = _logger
        self.strategies = (
            ("markers", self.from_markers),
            ("workspaces", self.from_workspaces),
            ("nested_manifests", self.from_nested_manifests),
        )

    async def detect(
        self, project_path: Path | str, cache: RunCache | None = None
    ) -> DetectionResult:
        cache = cache if cache is not None else RunCache()
        path = Path(project_path)
        try:
            match = await first_match(self.strategies, path, cache)
        except Exception as exc:
            self.logger.error("Error detecting monorepo in %s: %s", path, exc)
            return DetectionResult(root_path=str(path), is_monorepo=False)

        if match is None:
            return DetectionResult(root_path=str(path), is_monorepo=False)
        _, evidence = match
        self.logger.debug("Monorepo evidence for %s: %s", path, evidence)
        return DetectionResult(root_path=str(path), is_monorepo=True, evidence=evidence)

    async def from_markers(self, path: Path, cache: RunCache) -> Optional[str]:
        names = set(await asyncio.to_thread(os.listdir, path))
        for marker in MONOREPO_MARKERS:
            if marker in names:
                return f"marker:{marker}"
        return None

    async def from_workspaces(self, path: Path, cache: RunCache) -> Optional[str]:
        manifest = await self.reader.read(path, cache)
        workspaces = concrete_workspaces(manifest)
        if workspaces:
            return "workspaces:" + ",".join(workspaces)
        return None

    async def from_nested_manifests(self, path: Path, cache: RunCache) -> Optional[str]:
        count = await asyncio.to_thread(count_manifests, path, 2)
        if count > 1:
            return f"manifests:{count}"
        return None


__all__ = ["MONOREPO_MARKERS", "MonorepoDetector", "count_manifests"]
