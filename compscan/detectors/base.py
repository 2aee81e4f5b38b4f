"""Base classes for project detectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence, Tuple, TypeVar

from ..cache import RunCache
from ..models import DetectionResult

T = TypeVar("T")

Strategy = Callable[[Path, RunCache], Awaitable[Optional[T]]]


class Detector(ABC):
    """Contract for detectors that classify a project root as monorepo or not."""

    @abstractmethod
    async def detect(
        self, project_path: Path | str, cache: RunCache | None = None
    ) -> DetectionResult:
        """Return the detection result for ``project_path``."""


async def first_match(
    strategies: Sequence[Tuple[str, Strategy[T]]], path: Path, cache: RunCache
) -> Optional[Tuple[str, T]]:
    """Run strategies in order and return ``(name, result)`` for the first hit."""
    for name, strategy in strategies:
        result = await strategy(path, cache)
        if result is not None:
            return name, result
    return None


__all__ = ["Detector", "Strategy", "first_match"]
