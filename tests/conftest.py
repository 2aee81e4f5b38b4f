from __future__ import annotations

from pathlib import Path

import pytest

from compscan.cache import RunCache
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a throwaway project builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def cache() -> RunCache:
    return RunCache()
