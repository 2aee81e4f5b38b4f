"""Component discovery: the recursive walker and the monorepo-aware finder."""

from .base import Finder
from .finder import ComponentFinder, sort_components
from .walker import ComponentWalker

__all__ = ["ComponentFinder", "ComponentWalker", "Finder", "sort_components"]
