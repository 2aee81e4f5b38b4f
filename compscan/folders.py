"""Helpers for locating the folder that best represents a component library."""

from __future__ import annotations

import os
from typing import Dict, Iterable, List, Optional, Union

from .models import FoundComponent

ComponentLike = Union[FoundComponent, str]

_PROMOTING_PARENTS = ("components", "ui")


def _path_of(component: ComponentLike) -> str:
    return component if isinstance(component, str) else component.path


def get_best_component_folder(components: Iterable[ComponentLike]) -> Optional[str]:
    """Return the directory holding the most components.

    Ties go to the lexicographically smallest directory. When the winner sits
    directly inside a ``components`` or ``ui`` directory, that parent is
    returned instead.
    """
    counts: Dict[str, int] = {}
    for component in components:
        folder = os.path.dirname(_path_of(component))
        counts[folder] = counts.get(folder, 0) + 1
    if not counts:
        return None

    best = min(counts, key=lambda folder: (-counts[folder], folder))
    parent = os.path.dirname(best)
    if os.path.basename(parent) in _PROMOTING_PARENTS:
        return parent
    return best


def get_nested_component_paths(
    best_folder: Optional[str], components: Iterable[ComponentLike]
) -> List[str]:
    """Return component paths relative to ``best_folder`` nested at least one level deep."""
    if not best_folder:
        return []
    nested: List[str] = []
    for component in components:
        relative = os.path.relpath(_path_of(component), best_folder)
        if len(relative.split(os.sep)) > 1:
            nested.append(relative)
    return nested


__all__ = ["get_best_component_folder", "get_nested_component_paths"]
