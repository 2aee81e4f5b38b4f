"""Project-level aggregation of component discovery and manifest metadata."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Awaitable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from .cache import RunCache
from .config import CompscanConfig, ConfigError, load_config
from .detectors.base import Detector
from .detectors.monorepo import MonorepoDetector
from .finders.base import Finder
from .finders.finder import ComponentFinder
from .finders.walker import ComponentWalker
from .logging import get_logger
from .manifest import ManifestReader, concrete_workspaces, strip_range
from .models import (
    DetectionResult,
    FoundComponent,
    FrameworkInfo,
    ManifestMetadata,
    ProjectSummary,
    StepOutcome,
    ToolInfo,
    UtilityLibrary,
    WorkspaceSummary,
)

T = TypeVar("T")

CONCISE_MANIFEST_FIELDS = ("name", "version", "description", "main", "types")

_FRAMEWORK_SUBSTRINGS = ("react", "vue", "angular", "svelte")

_UTILITY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("styling", ("styled", "css", "sass", "less")),
    ("state-management", ("redux", "mobx", "recoil", "zustand")),
    ("utility", ("lodash", "date-fns", "axios")),
)

_TOOL_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("bundler", ("webpack", "vite")),
    ("transpiler", ("babel",)),
    ("linter", ("eslint",)),
    ("formatter", ("prettier",)),
    ("testing", ("jest", "mocha")),
    ("language", ("typescript",)),
)

# Only these fragments make a dependency a used tool; mocha is categorized but not listed.
_USED_TOOL_FRAGMENTS = ("webpack", "vite", "babel", "eslint", "prettier", "jest", "typescript")

_logger = get_logger("analyzer")


def _string_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items()}


def detect_manifest_framework(dependencies: Dict[str, str]) -> Optional[FrameworkInfo]:
    """Return the first dependency whose name mentions a UI framework."""
    for name, version in dependencies.items():
        if any(fragment in name for fragment in _FRAMEWORK_SUBSTRINGS):
            return FrameworkInfo(
                name=name, version=strip_range(version), is_primary="react" in name
            )
    return None


def categorize_utility(name: str) -> str:
    for category, fragments in _UTILITY_RULES:
        if any(fragment in name for fragment in fragments):
            return category
    return "other"


def categorize_tool(name: str) -> str:
    for category, fragments in _TOOL_RULES:
        if any(fragment in name for fragment in fragments):
            return category
    return "other"


def collect_tools(dependencies: Dict[str, str]) -> List[ToolInfo]:
    tools: List[ToolInfo] = []
    for name, version in dependencies.items():
        if any(fragment in name for fragment in _USED_TOOL_FRAGMENTS):
            tools.append(
                ToolInfo(name=name, version=strip_range(version), category=categorize_tool(name))
            )
    return tools


def extract_metadata(manifest: Dict[str, Any], cache: RunCache | None = None) -> ManifestMetadata:
    """Extract dependencies, scripts, framework and utility libraries from a manifest.

    Results are cached by the canonical JSON text of the manifest.
    """
    key = json.dumps(manifest, sort_keys=True, default=str)
    if cache is not None and key in cache.package_metadata:
        return cache.package_metadata[key]

    dependencies = _string_map(manifest.get("dependencies"))
    dev_dependencies = _string_map(manifest.get("devDependencies"))
    combined = {**dependencies, **dev_dependencies}

    metadata = ManifestMetadata(
        dependencies=dependencies,
        dev_dependencies=dev_dependencies,
        scripts=_string_map(manifest.get("scripts")),
        version=str(manifest.get("version") or "0.0.0"),
        framework=detect_manifest_framework(dependencies),
        utility_libraries=[
            UtilityLibrary(name=name, version=strip_range(version), category=categorize_utility(name))
            for name, version in combined.items()
        ],
    )
    if cache is not None:
        cache.package_metadata[key] = metadata
    return metadata


def merge_metadata(
    root: ManifestMetadata,
    workspaces: Sequence[ManifestMetadata],
    *,
    dedupe_utilities: bool = False,
) -> ManifestMetadata:
    """Merge workspace metadata into a copy of the root metadata.

    Dependency, devDependency and script maps are applied root first, then
    each workspace in order; the last writer of a key wins. Utility libraries
    are concatenated, keeping duplicates unless ``dedupe_utilities`` is set
    (first occurrence of each ``(name, category)`` survives). The root's
    framework wins, otherwise the first workspace that has one.
    """
    merged = ManifestMetadata(
        dependencies=dict(root.dependencies),
        dev_dependencies=dict(root.dev_dependencies),
        scripts=dict(root.scripts),
        version=root.version,
        framework=root.framework,
        utility_libraries=list(root.utility_libraries),
    )
    for workspace in workspaces:
        merged.dependencies.update(workspace.dependencies)
        merged.dev_dependencies.update(workspace.dev_dependencies)
        merged.scripts.update(workspace.scripts)
        merged.utility_libraries.extend(workspace.utility_libraries)
        if merged.framework is None and workspace.framework is not None:
            merged.framework = workspace.framework

    if dedupe_utilities:
        seen = set()
        unique: List[UtilityLibrary] = []
        for library in merged.utility_libraries:
            key = (library.name, library.category)
            if key in seen:
                continue
            seen.add(key)
            unique.append(library)
        merged.utility_libraries = unique
    return merged


def project_manifest(manifest: Dict[str, Any], verbose: bool) -> Dict[str, Any]:
    """Return the full manifest when verbose, else only its identifying fields."""
    if verbose:
        return manifest
    return {key: manifest[key] for key in CONCISE_MANIFEST_FIELDS if key in manifest}


def project_components(components: Iterable[FoundComponent], verbose: bool) -> List[FoundComponent]:
    if verbose:
        return list(components)
    return [FoundComponent(path=item.path, framework=item.framework) for item in components]


def collect_extensions(components: Iterable[FoundComponent]) -> set[str]:
    extensions = set()
    for component in components:
        suffix = os.path.splitext(component.path)[1].lower()
        if suffix:
            extensions.add(suffix)
    return extensions


async def guard(name: str, operation: Awaitable[T], default: T) -> Tuple[T, StepOutcome]:
    """Await ``operation``; on failure log it and return ``default`` with the reason."""
    try:
        value = await operation
    except Exception as exc:
        _logger.error("Step %s failed: %s", name, exc)
        return default, StepOutcome(name=name, ok=False, reason=str(exc) or type(exc).__name__)
    return value, StepOutcome(name=name, ok=True)


class PackageAnalyzer:
    """Detects layout, discovers components and merges manifest metadata."""

    def __init__(
        self,
        project_path: Path | str,
        detector: Detector | None = None,
        finder: Finder | None = None,
        reader: ManifestReader | None = None,
        config: CompscanConfig | None = None,
    ) -> None:
        self.project_path = Path(os.path.abspath(Path(project_path).expanduser()))
        self.reader = reader or ManifestReader()
        self.detector = detector or MonorepoDetector(self.reader)
        self._finder = finder
        self._config = config
        self.logger = _logger

    def analyze(self, verbose: bool | None = None) -> ProjectSummary:
        """Run the analysis to completion on a fresh event loop."""
        return asyncio.run(self.analyze_async(verbose))

    async def analyze_async(self, verbose: bool | None = None) -> ProjectSummary:
        """Return the project summary; never raises for project content."""
        config = await self._resolve_config()
        if verbose is None:
            verbose = config.output.verbose
        finder = self._finder or ComponentFinder(
            walker=ComponentWalker(extra_ignored_dirs=config.scan.exclude_dirs),
            reader=self.reader,
        )
        cache = RunCache()
        root = self.project_path
        summary = ProjectSummary()

        self.logger.info("Analyzing project at: %s", root)
        (detection, detect_outcome), (manifest, manifest_outcome), (components, find_outcome) = (
            await asyncio.gather(
                guard(
                    "monorepo_detection",
                    self.detector.detect(root, cache),
                    DetectionResult(root_path=str(root), is_monorepo=False),
                ),
                guard("manifest", self.reader.load(root, cache), {}),
                guard("component_discovery", finder.find(root, cache), []),
            )
        )
        summary.outcomes.extend([detect_outcome, manifest_outcome, find_outcome])

        summary.monorepo = detection.is_monorepo
        summary.component_count = len(components)
        summary.components = project_components(components, verbose)
        if summary.monorepo:
            self.logger.info("Detected monorepo structure")

        if manifest:
            self.logger.info("Processing package.json: %s", manifest.get("name") or "unnamed package")
            summary.manifest = project_manifest(manifest, verbose)
            workspace_metadata: List[ManifestMetadata] = []
            if summary.monorepo:
                summary.workspaces, workspace_metadata = await self._process_workspaces(
                    manifest, cache, verbose, summary.outcomes
                )
            summary.metadata = merge_metadata(
                extract_metadata(manifest, cache),
                workspace_metadata,
                dedupe_utilities=config.scan.dedupe_utility_libraries,
            )
        else:
            self.logger.warning("No package.json found or package.json is empty")

        self._populate_derived_fields(summary)
        return summary

    async def _resolve_config(self) -> CompscanConfig:
        if self._config is not None:
            return self._config
        try:
            return await asyncio.to_thread(load_config, self.project_path)
        except ConfigError as exc:
            self.logger.warning("Ignoring invalid configuration: %s", exc)
            return CompscanConfig(root=self.project_path)

    async def _process_workspaces(
        self,
        manifest: Dict[str, Any],
        cache: RunCache,
        verbose: bool,
        outcomes: List[StepOutcome],
    ) -> Tuple[List[WorkspaceSummary], List[ManifestMetadata]]:
        declared = concrete_workspaces(manifest)
        self.logger.info("Found %d workspace packages", len(declared))
        results = await asyncio.gather(
            *(
                guard(f"workspace:{workspace}", self._process_workspace(workspace, cache, verbose), None)
                for workspace in declared
            )
        )

        summaries: List[WorkspaceSummary] = []
        metadata: List[ManifestMetadata] = []
        for result, outcome in results:
            outcomes.append(outcome)
            if result is None:
                continue
            workspace_summary, workspace_metadata = result
            summaries.append(workspace_summary)
            metadata.append(workspace_metadata)
        self.logger.info("Successfully processed %d workspaces", len(summaries))
        return summaries, metadata

    async def _process_workspace(
        self, workspace: str, cache: RunCache, verbose: bool
    ) -> Tuple[WorkspaceSummary, ManifestMetadata]:
        self.logger.debug("Processing workspace: %s", workspace)
        manifest = await self.reader.load(self.project_path / workspace, cache)
        metadata = extract_metadata(manifest, cache)
        name = manifest.get("name")
        summary = WorkspaceSummary(
            name=name if isinstance(name, str) else None,
            path=workspace,
            manifest=project_manifest(manifest, verbose),
            dependencies=metadata.dependencies,
            dev_dependencies=metadata.dev_dependencies,
            scripts=metadata.scripts,
            version=metadata.version,
            framework=metadata.framework,
            utility_libraries=metadata.utility_libraries,
        )
        return summary, metadata

    @staticmethod
    def _populate_derived_fields(summary: ProjectSummary) -> None:
        if summary.metadata.framework is not None:
            summary.detected_frameworks = [summary.metadata.framework]
        summary.used_tools = collect_tools(
            {**summary.metadata.dependencies, **summary.metadata.dev_dependencies}
        )
        summary.extensions = collect_extensions(summary.components)


__all__ = [
    "PackageAnalyzer",
    "categorize_tool",
    "categorize_utility",
    "collect_extensions",
    "collect_tools",
    "detect_manifest_framework",
    "extract_metadata",
    "guard",
    "merge_metadata",
    "project_manifest",
]
