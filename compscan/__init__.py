"""Monorepo-aware UI component discovery and package.json metadata aggregation."""

from .analyzer import PackageAnalyzer, merge_metadata
from .folders import get_best_component_folder, get_nested_component_paths
from .models import FoundComponent, ProjectSummary
from .scanner import ComponentScanner

__all__ = [
    "ComponentScanner",
    "FoundComponent",
    "PackageAnalyzer",
    "ProjectSummary",
    "get_best_component_folder",
    "get_nested_component_paths",
    "merge_metadata",
]
