"""Tests for the framework detector strategies."""

from __future__ import annotations

import asyncio

from compscan.cache import RunCache
from compscan.detectors.framework import (
    FrameworkDetector,
    get_extensions,
    match_framework_dependencies,
)


def _detect(path) -> str:
    return asyncio.run(FrameworkDetector().detect(path, RunCache()))


def test_path_hint_takes_precedence_over_manifest(repo_builder) -> None:
    repo_builder.manifest({"dependencies": {"react": "^18.0.0"}}, "my-svelte-lib")

    assert _detect(repo_builder.path("my-svelte-lib")) == "svelte"


def test_manifest_dependencies_decide_framework(repo_builder) -> None:
    repo_builder.manifest({"dependencies": {"vue": "^3.0.0"}})

    assert _detect(repo_builder.path()) == "vue"


def test_dev_dependencies_and_companion_packages_count(repo_builder) -> None:
    repo_builder.manifest({"devDependencies": {"react-dom": "^18.0.0"}})

    assert _detect(repo_builder.path()) == "react"


def test_priority_order_prefers_first_framework(repo_builder) -> None:
    repo_builder.manifest({"dependencies": {"@angular/core": "17.0.0", "vue": "3.0.0"}})

    assert _detect(repo_builder.path()) == "vue"


def test_declared_workspaces_are_checked_before_root(repo_builder) -> None:
    repo_builder.manifest({"workspaces": ["web"], "dependencies": {"vue": "^3.0.0"}})
    repo_builder.manifest({"dependencies": {"react": "^18.0.0"}}, "web")

    assert _detect(repo_builder.path()) == "react"


def test_missing_workspace_manifest_is_skipped(repo_builder) -> None:
    repo_builder.manifest({"workspaces": ["missing"], "dependencies": {"svelte": "^4.0.0"}})

    assert _detect(repo_builder.path()) == "svelte"


def test_file_extensions_used_when_manifest_is_silent(repo_builder) -> None:
    repo_builder.manifest({"name": "plain"})
    repo_builder.write({"Widget.vue": "<template />"})

    assert _detect(repo_builder.path()) == "vue"


def test_unknown_without_any_signal(repo_builder) -> None:
    repo_builder.manifest({"name": "plain"})
    repo_builder.write({"index.js": "export const x = 1;"})

    assert _detect(repo_builder.path()) == "unknown"


def test_unknown_when_manifest_is_missing(repo_builder) -> None:
    repo_builder.write({"Button.jsx": "export default function Button() {}"})

    assert _detect(repo_builder.path()) == "unknown"


def test_unknown_when_manifest_is_malformed(repo_builder) -> None:
    repo_builder.write({"package.json": "{oops"})

    assert _detect(repo_builder.path()) == "unknown"


def test_match_framework_dependencies_without_match() -> None:
    assert match_framework_dependencies({"dependencies": {"lodash": "4"}}) is None
    assert match_framework_dependencies({"dependencies": None}) is None


def test_get_extensions_per_framework() -> None:
    assert get_extensions("react") == (".jsx", ".tsx")
    assert get_extensions("angular") == (".component.ts", ".component.html")
    assert ".svelte" in get_extensions("unknown")
    assert get_extensions("something-else") == get_extensions("unknown")
