"""Core data models shared across compscan components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

FRAMEWORK_TAGS = ("react", "vue", "svelte", "angular", "unknown")
UTILITY_CATEGORIES = ("styling", "utility", "state-management", "other")
TOOL_CATEGORIES = (
    "bundler",
    "transpiler",
    "linter",
    "formatter",
    "testing",
    "language",
    "other",
)


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of monorepo detection for a project root."""

    root_path: str
    is_monorepo: bool
    evidence: Optional[str] = None


@dataclass(frozen=True)
class FoundComponent:
    """A component file located by the discovery walker."""

    path: str
    framework: str
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"path": self.path, "framework": self.framework}
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data


@dataclass
class FrameworkInfo:
    """Framework dependency detected in a manifest."""

    name: str
    version: str
    is_primary: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "version": self.version, "isPrimary": self.is_primary}


@dataclass
class UtilityLibrary:
    """Dependency tagged with a coarse utility category."""

    name: str
    version: str
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "version": self.version, "category": self.category}


@dataclass
class ToolInfo:
    """Well-known build or quality tool found among dependencies."""

    name: str
    version: str
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "version": self.version, "category": self.category}


@dataclass
class ManifestMetadata:
    """Dependencies, scripts and derived facts extracted from one manifest."""

    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    scripts: Dict[str, str] = field(default_factory=dict)
    version: str = "0.0.0"
    framework: Optional[FrameworkInfo] = None
    utility_libraries: List[UtilityLibrary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dependencies": dict(self.dependencies),
            "devDependencies": dict(self.dev_dependencies),
            "scripts": dict(self.scripts),
            "version": self.version,
            "framework": self.framework.to_dict() if self.framework else None,
            "utilityLibraries": [lib.to_dict() for lib in self.utility_libraries],
        }


@dataclass
class WorkspaceSummary:
    """Per-workspace slice of a monorepo analysis."""

    name: Optional[str]
    path: str
    manifest: Dict[str, Any]
    dependencies: Dict[str, str]
    dev_dependencies: Dict[str, str]
    scripts: Dict[str, str]
    version: str
    framework: Optional[FrameworkInfo]
    utility_libraries: List[UtilityLibrary]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "packageJson": self.manifest,
            "dependencies": dict(self.dependencies),
            "devDependencies": dict(self.dev_dependencies),
            "scripts": dict(self.scripts),
            "version": self.version,
            "framework": self.framework.to_dict() if self.framework else None,
            "utilityLibraries": [lib.to_dict() for lib in self.utility_libraries],
        }


@dataclass(frozen=True)
class StepOutcome:
    """Records whether a guarded unit of work succeeded, and why not."""

    name: str
    ok: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "ok": self.ok, "reason": self.reason}


@dataclass
class ProjectSummary:
    """Project-level aggregate returned by the package analyzer."""

    monorepo: bool = False
    manifest: Dict[str, Any] = field(default_factory=dict)
    components: List[FoundComponent] = field(default_factory=list)
    metadata: ManifestMetadata = field(default_factory=ManifestMetadata)
    detected_frameworks: List[FrameworkInfo] = field(default_factory=list)
    used_tools: List[ToolInfo] = field(default_factory=list)
    component_count: int = 0
    extensions: Set[str] = field(default_factory=set)
    workspaces: List[WorkspaceSummary] = field(default_factory=list)
    outcomes: List[StepOutcome] = field(default_factory=list)

    def best_component_folder(self) -> Optional[str]:
        """Return the folder holding most components, or None without components."""
        from .folders import get_best_component_folder

        return get_best_component_folder(self.components)

    def failed_steps(self) -> List[StepOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-ready mapping using the manifest's camelCase naming."""
        return {
            "monorepo": self.monorepo,
            "packageJson": self.manifest,
            "components": [component.to_dict() for component in self.components],
            "metadata": self.metadata.to_dict(),
            "detectedFrameworks": [item.to_dict() for item in self.detected_frameworks],
            "usedTools": [tool.to_dict() for tool in self.used_tools],
            "componentCount": self.component_count,
            "extensions": sorted(self.extensions),
            "workspaces": [workspace.to_dict() for workspace in self.workspaces],
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }
