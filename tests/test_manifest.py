"""Tests for compscan.manifest."""

from __future__ import annotations

import asyncio

import pytest

from compscan.cache import RunCache
from compscan.manifest import (
    ManifestError,
    ManifestReader,
    concrete_workspaces,
    manifest_path,
    strip_range,
    workspace_patterns,
)


def test_load_parses_manifest_from_directory(repo_builder, cache: RunCache) -> None:
    repo_builder.manifest({"name": "pkg", "version": "1.2.3"})

    data = asyncio.run(ManifestReader().load(repo_builder.path(), cache))

    assert data == {"name": "pkg", "version": "1.2.3"}
    assert str(manifest_path(repo_builder.path())) in cache.manifests


def test_load_accepts_manifest_file_path(repo_builder, cache: RunCache) -> None:
    path = repo_builder.manifest({"name": "pkg"})

    data = asyncio.run(ManifestReader().load(path, cache))

    assert data["name"] == "pkg"


def test_load_uses_cached_manifest_for_the_run(repo_builder, cache: RunCache) -> None:
    path = repo_builder.manifest({"name": "first"})
    reader = ManifestReader()
    asyncio.run(reader.load(repo_builder.path(), cache))

    path.write_text('{"name": "second"}', encoding="utf-8")

    assert asyncio.run(reader.load(repo_builder.path(), cache))["name"] == "first"
    assert asyncio.run(reader.load(repo_builder.path(), RunCache()))["name"] == "second"


def test_load_raises_for_missing_manifest(repo_builder) -> None:
    with pytest.raises(ManifestError) as excinfo:
        asyncio.run(ManifestReader().load(repo_builder.path()))

    assert excinfo.value.path == manifest_path(repo_builder.path())


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_load_raises_for_malformed_manifest(repo_builder, content: str) -> None:
    repo_builder.write({"package.json": content})

    with pytest.raises(ManifestError):
        asyncio.run(ManifestReader().load(repo_builder.path()))


def test_read_returns_empty_mapping_on_failure(repo_builder) -> None:
    repo_builder.write({"package.json": "{broken"})

    assert asyncio.run(ManifestReader().read(repo_builder.path())) == {}


def test_workspace_patterns_accepts_both_declaration_forms() -> None:
    assert workspace_patterns({"workspaces": ["a", "packages/*"]}) == ["a", "packages/*"]
    assert workspace_patterns({"workspaces": {"packages": ["libs/*"]}}) == ["libs/*"]
    assert workspace_patterns({"workspaces": "packages/*"}) == []
    assert workspace_patterns({"workspaces": ["a", 3, None, ""]}) == ["a"]
    assert workspace_patterns({}) == []


def test_concrete_workspaces_drops_wildcards() -> None:
    manifest = {"workspaces": ["packages/*", "apps/site", "tools/**/x"]}

    assert concrete_workspaces(manifest) == ["apps/site"]


@pytest.mark.parametrize(
    ("declared", "expected"),
    [("^18.0.0", "18.0.0"), ("~1.2.0", "1.2.0"), (">=2", ">=2"), ("1.0.0", "1.0.0")],
)
def test_strip_range_removes_leading_operator_only(declared: str, expected: str) -> None:
    assert strip_range(declared) == expected
