"""Lightweight per-file metadata extraction for component sources."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any, Dict, List

from ..logging import get_logger

_IMPORT = re.compile(r"""import\s+(?:{[^}]*}|\*\s+as\s+\w+|\w+)\s+from\s+['"]([^'"]+)['"]""")
_EXPORT = re.compile(r"export\s+(?:default\s+)?(?:function|class|const|let|var)\s+(\w+)")
_HOOK = re.compile(r"(?:function|const)\s+(use[A-Z][a-zA-Z0-9]*)")

EXTRACTION_ERROR = "Failed to extract metadata"


def component_name(path: Path | str, framework: str) -> str:
    """Return the file stem up to its first dot, capitalised for react."""
    base = Path(path).name.split(".")[0]
    if framework == "react" and base:
        return base[0].upper() + base[1:]
    return base


def error_metadata(path: Path | str, framework: str) -> Dict[str, Any]:
    return {
        "name": component_name(path, framework),
        "framework": framework,
        "error": EXTRACTION_ERROR,
    }


def extract_imports(content: str) -> List[str]:
    return _IMPORT.findall(content)


def extract_exports(content: str) -> List[str]:
    return _EXPORT.findall(content)


def extract_hooks(content: str) -> List[str]:
    return _HOOK.findall(content)


class ComponentMetadataExtractor:
    """Reads a component file and summarises its imports, exports and hooks."""

    def __init__(self) -> None:
        self.logger = get_logger("extractors.component")

    async def extract(self, path: Path | str, framework: str) -> Dict[str, Any]:
        """Return metadata for ``path``; read failures yield an error marker."""
        try:
            content = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
        except (OSError, ValueError) as exc:
            self.logger.warning("Error extracting metadata from %s: %s", path, exc)
            return error_metadata(path, framework)

        metadata: Dict[str, Any] = {
            "name": component_name(path, framework),
            "framework": framework,
            "size": len(content),
            "lines": len(content.split("\n")),
            "imports": extract_imports(content),
            "exports": extract_exports(content),
        }
        if framework == "react":
            metadata["hooks"] = extract_hooks(content)
        return metadata


__all__ = [
    "ComponentMetadataExtractor",
    "EXTRACTION_ERROR",
    "component_name",
    "error_metadata",
    "extract_exports",
    "extract_hooks",
    "extract_imports",
]
