"""Reading and interpreting package.json manifests."""

from __future__ import annotations

import asyncio
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List

from .cache import RunCache
from .logging import get_logger

MANIFEST_FILENAME = "package.json"

_RANGE_PREFIX = re.compile(r"^[\^~]")
_GLOB_CHARS = ("*", "?", "[")


class ManifestError(RuntimeError):
    """Raised when a manifest is missing or cannot be parsed."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


def manifest_path(path: Path | str) -> Path:
    """Return the manifest file for a package directory (or the file itself)."""
    candidate = Path(path)
    if candidate.name == MANIFEST_FILENAME:
        return Path(os.path.abspath(candidate))
    return Path(os.path.abspath(candidate / MANIFEST_FILENAME))


def _parse_manifest(path: Path) -> Dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("manifest root must be a JSON object")
    return data


class ManifestReader:
    """Loads manifests once per run and hands out the cached mapping."""

    def __init__(self) -> None:
        self.logger = get_logger("manifest")

    async def load(self, path: Path | str, cache: RunCache | None = None) -> Dict[str, Any]:
        """Return the parsed manifest or raise ManifestError."""
        cache = cache if cache is not None else RunCache()
        target = manifest_path(path)
        key = str(target)
        cached = cache.manifests.get(key)
        if cached is not None:
            return cached

        try:
            data = await asyncio.to_thread(_parse_manifest, target)
        except FileNotFoundError as exc:
            raise ManifestError(target, "manifest not found") from exc
        except (OSError, ValueError) as exc:
            raise ManifestError(target, f"unreadable manifest ({exc})") from exc

        cache.manifests[key] = data
        return data

    async def read(self, path: Path | str, cache: RunCache | None = None) -> Dict[str, Any]:
        """Return the parsed manifest, or an empty mapping when unavailable."""
        try:
            return await self.load(path, cache)
        except ManifestError as exc:
            self.logger.debug("Falling back to empty manifest: %s", exc)
            return {}


def workspace_patterns(manifest: Dict[str, Any]) -> List[str]:
    """Return declared workspace entries from a list or ``{packages: [...]}`` form."""
    declared = manifest.get("workspaces")
    if isinstance(declared, dict):
        declared = declared.get("packages")
    if not isinstance(declared, list):
        return []
    return [entry for entry in declared if isinstance(entry, str) and entry]


def is_glob(pattern: str) -> bool:
    return any(char in pattern for char in _GLOB_CHARS)


def concrete_workspaces(manifest: Dict[str, Any]) -> List[str]:
    """Return declared workspaces that are plain paths rather than wildcards."""
    return [entry for entry in workspace_patterns(manifest) if "*" not in entry]


def strip_range(version: Any) -> str:
    """Drop a leading ``^`` or ``~`` range operator for display."""
    return _RANGE_PREFIX.sub("", str(version))


__all__ = [
    "MANIFEST_FILENAME",
    "ManifestError",
    "ManifestReader",
    "concrete_workspaces",
    "is_glob",
    "manifest_path",
    "strip_range",
    "workspace_patterns",
]
