"""Base classes for component finders."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..cache import RunCache
from ..models import FoundComponent


class Finder(ABC):
    """Contract for finders that locate component files within a project."""

    @abstractmethod
    async def find(
        self,
        project_path: Path | str,
        cache: Optional[RunCache] = None,
        *,
        base: Path | str | None = None,
    ) -> List[FoundComponent]:
        """Return the component files discovered under ``project_path``.

        ``base`` is the project root that path exclusions are relative to.
        """
