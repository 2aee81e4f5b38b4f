"""Output formatters for discovered components."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .models import FoundComponent


class Formatter(ABC):
    """Turns a list of found components into an output structure."""

    @abstractmethod
    def format(self, components: Sequence[FoundComponent]) -> Any:
        """Return the formatted representation of ``components``."""


class JsonFormatter(Formatter):
    """Emits ``{path, framework}`` mappings, relative to ``base_path`` when given."""

    def __init__(self, base_path: Path | str | None = None) -> None:
        self.base_path: Optional[str] = os.path.abspath(base_path) if base_path else None

    def format(self, components: Sequence[FoundComponent]) -> List[Dict[str, str]]:
        return [
            {"path": self._display_path(component.path), "framework": component.framework}
            for component in components
        ]

    def _display_path(self, path: str) -> str:
        if self.base_path is None:
            return path
        return Path(os.path.relpath(path, self.base_path)).as_posix()


class FolderFormatter(Formatter):
    """Groups component paths by their parent folder."""

    def format(self, components: Sequence[FoundComponent]) -> Dict[str, List[str]]:
        folders: Dict[str, List[str]] = {}
        for component in components:
            folders.setdefault(os.path.dirname(component.path), []).append(component.path)
        return folders


__all__ = ["Formatter", "FolderFormatter", "JsonFormatter"]
