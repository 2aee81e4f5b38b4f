"""Expansion of workspace declarations into concrete package directories."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path, PurePosixPath
from typing import List

from .cache import RunCache
from .logging import get_logger
from .manifest import ManifestReader, is_glob, workspace_patterns

CONVENTIONAL_WORKSPACE_DIRS = ("packages", "apps", "src")

_GLOB_EXCLUDED_DIRS = {"node_modules", "dist", "build"}

_logger = get_logger("workspaces")


def expand_workspace_glob(root: Path, pattern: str) -> List[Path]:
    """Return directories under ``root`` matching ``pattern`` in enumeration order."""
    cleaned = pattern[2:] if pattern.startswith("./") else pattern
    cleaned = cleaned.rstrip("/")
    matches: List[Path] = []
    for match in root.glob(cleaned):
        if not match.is_dir():
            continue
        if _GLOB_EXCLUDED_DIRS.intersection(match.relative_to(root).parts):
            continue
        matches.append(match)
    return matches


def escapes_root(pattern: str) -> bool:
    """Return True for absolute patterns or ones that climb out with ``..``."""
    if pattern.startswith(("/", "\\")) or os.path.isabs(pattern):
        return True
    return ".." in PurePosixPath(pattern).parts


def conventional_workspaces(root: Path) -> List[Path]:
    """Return conventional package directories that exist under ``root``."""
    found: List[Path] = []
    for name in CONVENTIONAL_WORKSPACE_DIRS:
        candidate = root / name
        if not candidate.is_dir():
            continue
        found.append(candidate)
        if name != "packages":
            continue
        try:
            with os.scandir(candidate) as entries:
                for entry in entries:
                    if entry.is_dir():
                        found.append(Path(entry.path))
        except OSError as exc:
            _logger.debug("Unable to list %s: %s", candidate, exc)
    return found


class WorkspaceResolver:
    """Resolves a project's workspace roots from its manifest."""

    def __init__(self, reader: ManifestReader | None = None) -> None:
        self.reader = reader or ManifestReader()
        self.logger = _logger

    async def resolve(self, project_path: Path | str, cache: RunCache | None = None) -> List[Path]:
        """Return existing workspace directories, falling back to conventional ones."""
        root = Path(os.path.abspath(project_path))
        manifest = await self.reader.read(root, cache)

        resolved: List[Path] = []
        for pattern in workspace_patterns(manifest):
            if is_glob(pattern):
                if escapes_root(pattern):
                    self.logger.warning("Ignoring workspace pattern outside the project: %s", pattern)
                    continue
                try:
                    matches = await asyncio.to_thread(expand_workspace_glob, root, pattern)
                except (OSError, ValueError, NotImplementedError) as exc:
                    self.logger.error("Error resolving glob pattern %s: %s", pattern, exc)
                    continue
                resolved.extend(matches)
                continue

            candidate = Path(os.path.normpath(root / pattern))
            if await asyncio.to_thread(candidate.is_dir):
                resolved.append(candidate)
            else:
                self.logger.warning("Workspace path does not exist: %s", candidate)

        if not resolved:
            resolved = await asyncio.to_thread(conventional_workspaces, root)
            if resolved:
                self.logger.debug(
                    "No declared workspaces resolved; using %d conventional directories",
                    len(resolved),
                )
        return resolved


__all__ = [
    "CONVENTIONAL_WORKSPACE_DIRS",
    "WorkspaceResolver",
    "conventional_workspaces",
    "escapes_root",
    "expand_workspace_glob",
]
