"""Tests for component output formatters."""

from __future__ import annotations

from compscan.formatters import FolderFormatter, JsonFormatter
from compscan.models import FoundComponent

COMPONENTS = [
    FoundComponent(path="/work/app/src/Button.jsx", framework="react", metadata={"name": "Button"}),
    FoundComponent(path="/work/app/src/forms/Input.jsx", framework="react"),
    FoundComponent(path="/work/app/src/Card.jsx", framework="react"),
]


def test_json_formatter_drops_metadata() -> None:
    assert JsonFormatter().format(COMPONENTS[:1]) == [
        {"path": "/work/app/src/Button.jsx", "framework": "react"}
    ]


def test_json_formatter_relativises_to_base_path() -> None:
    formatted = JsonFormatter(base_path="/work/app").format(COMPONENTS)

    assert [item["path"] for item in formatted] == [
        "src/Button.jsx",
        "src/forms/Input.jsx",
        "src/Card.jsx",
    ]


def test_folder_formatter_groups_by_parent() -> None:
    assert FolderFormatter().format(COMPONENTS) == {
        "/work/app/src": ["/work/app/src/Button.jsx", "/work/app/src/Card.jsx"],
        "/work/app/src/forms": ["/work/app/src/forms/Input.jsx"],
    }
