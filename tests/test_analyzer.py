"""Tests for the project-level package analyzer."""

from __future__ import annotations

import asyncio
from pathlib import Path

from compscan.analyzer import (
    PackageAnalyzer,
    categorize_tool,
    categorize_utility,
    collect_tools,
    detect_manifest_framework,
    extract_metadata,
    merge_metadata,
    project_manifest,
)
from compscan.cache import RunCache
from compscan.config import CompscanConfig, OutputConfig, ScanConfig
from compscan.models import DetectionResult, FrameworkInfo, ManifestMetadata, ToolInfo


def _monorepo(repo_builder, root_extra=None, a_extra=None, b_extra=None) -> None:
    repo_builder.manifest({"name": "root", "workspaces": ["packages/a", "packages/b"], **(root_extra or {})})
    repo_builder.manifest(
        {"name": "pkg-a", "version": "1.0.0", "dependencies": {"vue": "^3.3.0"}, **(a_extra or {})},
        "packages/a",
    )
    repo_builder.manifest(
        {"name": "pkg-b", "version": "2.0.0", "dependencies": {"react": "^18.2.0"}, **(b_extra or {})},
        "packages/b",
    )
    repo_builder.write(
        {"packages/a/src/Hero.vue": "<template />", "packages/b/src/Button.jsx": ""}
    )


def test_single_package_summary(repo_builder) -> None:
    repo_builder.manifest(
        {
            "name": "app",
            "version": "1.0.0",
            "private": True,
            "dependencies": {"react": "^18.0.0"},
            "devDependencies": {"vite": "^5.0.0", "eslint": "8.0.0"},
        }
    )
    repo_builder.write({"src/Button.tsx": "export default function Button() {}"})

    summary = repo_builder.analyze(verbose=False)

    assert summary.monorepo is False
    assert summary.metadata.framework == FrameworkInfo(name="react", version="18.0.0", is_primary=True)
    assert summary.detected_frameworks == [summary.metadata.framework]
    assert summary.component_count == 1
    assert summary.extensions == {".tsx"}
    assert summary.manifest == {"name": "app", "version": "1.0.0"}
    assert summary.components[0].metadata is None
    assert summary.used_tools == [
        ToolInfo(name="vite", version="5.0.0", category="bundler"),
        ToolInfo(name="eslint", version="8.0.0", category="linter"),
    ]
    assert summary.workspaces == []
    assert summary.failed_steps() == []


def test_summary_serialises_with_manifest_naming(repo_builder) -> None:
    repo_builder.manifest({"dependencies": {"react": "^18.0.0"}})
    repo_builder.write({"src/Button.tsx": ""})

    data = repo_builder.analyze().to_dict()

    assert data["metadata"]["framework"] == {"name": "react", "version": "18.0.0", "isPrimary": True}
    assert data["componentCount"] == 1
    assert data["extensions"] == [".tsx"]
    assert {"packageJson", "detectedFrameworks", "usedTools", "workspaces", "outcomes"} <= set(data)


def test_monorepo_framework_comes_from_first_declared_workspace(repo_builder) -> None:
    _monorepo(repo_builder)

    summary = repo_builder.analyze()

    assert summary.monorepo is True
    assert summary.metadata.framework == FrameworkInfo(name="vue", version="3.3.0", is_primary=False)
    assert [workspace.path for workspace in summary.workspaces] == ["packages/a", "packages/b"]
    assert [workspace.name for workspace in summary.workspaces] == ["pkg-a", "pkg-b"]
    assert summary.workspaces[1].framework.is_primary is True
    assert summary.component_count == 2
    assert summary.extensions == {".vue", ".jsx"}
    assert [component.framework for component in summary.components] == ["react", "vue"]


def test_root_framework_wins_over_workspaces(repo_builder) -> None:
    _monorepo(repo_builder, root_extra={"dependencies": {"svelte": "^4.0.0"}})

    assert repo_builder.analyze().metadata.framework.name == "svelte"


def test_workspace_dependencies_merge_last_write_wins(repo_builder) -> None:
    _monorepo(
        repo_builder,
        root_extra={"dependencies": {"lodash": "4.0.0"}, "scripts": {"build": "root"}},
        a_extra={"dependencies": {"vue": "^3.3.0", "lodash": "4.1.0"}, "scripts": {"build": "a"}},
        b_extra={"dependencies": {"react": "^18.2.0", "lodash": "4.2.0"}},
    )

    metadata = repo_builder.analyze().metadata

    assert metadata.dependencies["lodash"] == "4.2.0"
    assert metadata.dependencies["vue"] == "^3.3.0"
    assert metadata.dependencies["react"] == "^18.2.0"
    assert metadata.scripts == {"build": "a"}


def test_utility_libraries_are_concatenated_by_default(repo_builder) -> None:
    styled = {"styled-components": "^6.0.0"}
    _monorepo(
        repo_builder,
        root_extra={"devDependencies": styled},
        a_extra={"devDependencies": styled},
        b_extra={"devDependencies": styled},
    )

    libraries = repo_builder.analyze().metadata.utility_libraries

    assert [lib.name for lib in libraries].count("styled-components") == 3


def test_utility_libraries_dedupe_when_configured(repo_builder) -> None:
    styled = {"styled-components": "^6.0.0"}
    _monorepo(
        repo_builder,
        root_extra={"devDependencies": styled},
        a_extra={"devDependencies": styled},
        b_extra={"devDependencies": styled},
    )
    repo_builder.write({".compscan.yml": "scan:\n  dedupe_utility_libraries: true\n"})

    libraries = repo_builder.analyze().metadata.utility_libraries

    assert [lib.name for lib in libraries].count("styled-components") == 1


def test_verbose_keeps_full_manifest_and_component_metadata(repo_builder) -> None:
    _monorepo(repo_builder)

    summary = repo_builder.analyze(verbose=True)

    assert summary.manifest["workspaces"] == ["packages/a", "packages/b"]
    assert summary.workspaces[0].manifest["dependencies"] == {"vue": "^3.3.0"}
    assert all(component.metadata is not None for component in summary.components)


def test_concise_projection_applies_to_workspace_manifests(repo_builder) -> None:
    _monorepo(repo_builder)

    summary = repo_builder.analyze(verbose=False)

    assert summary.manifest == {"name": "root"}
    assert summary.workspaces[0].manifest == {"name": "pkg-a", "version": "1.0.0"}


def test_config_supplies_default_verbosity(repo_builder) -> None:
    repo_builder.manifest({"name": "app", "license": "MIT"})
    repo_builder.write({".compscan.yml": "output:\n  verbose: true\n"})

    assert repo_builder.analyze().manifest == {"name": "app", "license": "MIT"}
    assert repo_builder.analyze(verbose=False).manifest == {"name": "app"}


def test_config_exclude_dirs_reach_the_walker(repo_builder) -> None:
    repo_builder.manifest({"dependencies": {"react": "18.0.0"}})
    repo_builder.write(
        {
            "src/generated/Auto.jsx": "",
            "src/Manual.jsx": "",
            ".compscan.yml": "scan:\n  exclude_dirs: [generated]\n",
        }
    )

    summary = repo_builder.analyze()

    assert [component.path for component in summary.components] == [
        str(repo_builder.path("src/Manual.jsx"))
    ]


def test_invalid_config_falls_back_to_defaults(repo_builder) -> None:
    repo_builder.manifest({"name": "app", "license": "MIT"})
    repo_builder.write({".compscan.yml": "- not\n- a mapping\n"})

    assert repo_builder.analyze().manifest == {"name": "app"}


def test_missing_manifest_still_reports_components(repo_builder) -> None:
    repo_builder.write({"src/Button.jsx": ""})

    summary = repo_builder.analyze()

    assert summary.component_count == 1
    assert summary.components[0].framework == "unknown"
    assert summary.metadata == ManifestMetadata()
    assert summary.manifest == {}
    (failed,) = summary.failed_steps()
    assert failed.name == "manifest"
    assert "manifest not found" in failed.reason


def test_empty_manifest_keeps_default_metadata(repo_builder) -> None:
    repo_builder.write({"package.json": "{}", "src/Card.jsx": ""})

    summary = repo_builder.analyze()

    assert summary.metadata == ManifestMetadata()
    assert summary.failed_steps() == []
    assert summary.component_count == 1


def test_unreadable_workspace_is_omitted_with_outcome(repo_builder) -> None:
    repo_builder.manifest({"name": "root", "workspaces": ["packages/a", "packages/missing"]})
    repo_builder.manifest({"name": "pkg-a", "dependencies": {"vue": "^3.0.0"}}, "packages/a")

    summary = repo_builder.analyze()

    assert [workspace.path for workspace in summary.workspaces] == ["packages/a"]
    failed = {outcome.name: outcome for outcome in summary.failed_steps()}
    assert set(failed) == {"workspace:packages/missing"}


def test_monorepo_components_skip_excluded_workspaces(repo_builder) -> None:
    repo_builder.manifest({"name": "root", "workspaces": ["/abs/*", "apps/docs", "packages/ui"]})
    repo_builder.manifest({"name": "docs", "dependencies": {"react": "18.0.0"}}, "apps/docs")
    repo_builder.manifest({"name": "ui", "dependencies": {"react": "18.0.0"}}, "packages/ui")
    repo_builder.write({"apps/docs/src/Page.tsx": "", "packages/ui/src/Button.tsx": ""})

    summary = repo_builder.analyze()

    paths = [Path(item.path).relative_to(repo_builder.path()).as_posix() for item in summary.components]
    assert summary.monorepo is True
    assert paths == ["packages/ui/src/Button.tsx"]
    assert summary.component_count == 1
    assert summary.failed_steps() == []


def test_failing_step_degrades_to_default(repo_builder) -> None:
    class _BrokenDetector:
        async def detect(self, project_path, cache=None) -> DetectionResult:
            raise RuntimeError("detector exploded")

    repo_builder.manifest({"name": "app", "workspaces": ["packages/a"]})
    repo_builder.manifest({"name": "pkg-a"}, "packages/a")

    analyzer = PackageAnalyzer(
        repo_builder.path(), detector=_BrokenDetector(), config=CompscanConfig(root=repo_builder.path())
    )
    summary = analyzer.analyze()

    assert summary.monorepo is False
    assert summary.workspaces == []
    (failed,) = summary.failed_steps()
    assert failed.name == "monorepo_detection"
    assert failed.reason == "detector exploded"


def test_analyze_async_accepts_injected_config(repo_builder) -> None:
    repo_builder.manifest({"name": "app", "license": "MIT"})
    config = CompscanConfig(root=repo_builder.path(), scan=ScanConfig(), output=OutputConfig(verbose=True))

    summary = asyncio.run(PackageAnalyzer(repo_builder.path(), config=config).analyze_async())

    assert summary.manifest["license"] == "MIT"


def test_best_component_folder_from_summary(repo_builder) -> None:
    repo_builder.manifest({"dependencies": {"react": "18.0.0"}})
    repo_builder.write(
        {"src/components/Button.jsx": "", "src/components/Input.jsx": "", "src/layout/Grid.jsx": ""}
    )

    summary = repo_builder.analyze()

    assert summary.best_component_folder() == str(repo_builder.path("src/components"))


def test_extract_metadata_is_cached_by_content() -> None:
    run_cache = RunCache()
    manifest = {"version": "1.0.0", "dependencies": {"axios": "^1.0.0"}}

    first = extract_metadata(manifest, run_cache)
    second = extract_metadata(dict(reversed(list(manifest.items()))), run_cache)

    assert first is second
    assert first.utility_libraries[0].category == "utility"
    assert first.utility_libraries[0].version == "1.0.0"


def test_manifest_framework_uses_first_matching_dependency() -> None:
    framework = detect_manifest_framework({"lodash": "4", "vue-router": "^4.0.0", "vue": "^3.0.0"})

    assert framework == FrameworkInfo(name="vue-router", version="4.0.0", is_primary=False)
    assert detect_manifest_framework({"lodash": "4"}) is None


def test_utility_and_tool_categories() -> None:
    assert categorize_utility("styled-components") == "styling"
    assert categorize_utility("@reduxjs/toolkit") == "state-management"
    assert categorize_utility("date-fns") == "utility"
    assert categorize_utility("left-pad") == "other"
    assert categorize_tool("@babel/core") == "transpiler"
    assert categorize_tool("ts-jest") == "testing"
    assert categorize_tool("typescript") == "language"
    assert categorize_tool("mocha") == "testing"
    assert categorize_tool("lodash") == "other"


def test_used_tools_leave_out_mocha() -> None:
    tools = collect_tools({"mocha": "10.0.0", "jest": "^29.0.0", "lodash": "4.17.21"})

    assert tools == [ToolInfo(name="jest", version="29.0.0", category="testing")]


def test_merge_preserves_last_writer_in_declared_order() -> None:
    root = ManifestMetadata(dependencies={"shared": "1"})
    first = ManifestMetadata(dependencies={"shared": "2", "only-first": "1"})
    second = ManifestMetadata(dependencies={"shared": "3"})

    forward = merge_metadata(root, [first, second])
    swapped_disjoint = merge_metadata(root, [ManifestMetadata(dependencies={"only-first": "1"}), first, second])

    assert forward.dependencies == {"shared": "3", "only-first": "1"}
    assert swapped_disjoint.dependencies == forward.dependencies
    assert root.dependencies == {"shared": "1"}


def test_project_manifest_omits_absent_fields() -> None:
    manifest = {"name": "x", "types": "index.d.ts", "scripts": {}}

    assert project_manifest(manifest, verbose=False) == {"name": "x", "types": "index.d.ts"}
    assert project_manifest(manifest, verbose=True) is manifest
