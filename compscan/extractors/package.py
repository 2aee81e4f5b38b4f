"""Standalone manifest metadata extractor with exact-name matching."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Tuple

from ..cache import RunCache
from ..manifest import ManifestReader
from ..models import FrameworkInfo, ManifestMetadata, UtilityLibrary

FRAMEWORK_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("react", re.compile(r"^react$")),
    ("vue", re.compile(r"^vue$")),
    ("svelte", re.compile(r"^svelte$")),
    ("angular", re.compile(r"^@angular/core$")),
    ("next", re.compile(r"^next$")),
    ("nuxt", re.compile(r"^nuxt$")),
    ("remix", re.compile(r"^@remix-run/react$")),
    ("gatsby", re.compile(r"^gatsby$")),
    ("astro", re.compile(r"^astro$")),
)

UTILITY_PATTERNS: Tuple[Tuple[str, Tuple[Tuple[str, Pattern[str]], ...]], ...] = (
    (
        "styling",
        (
            ("tailwindcss", re.compile(r"^tailwindcss$")),
            ("styled-components", re.compile(r"^styled-components$")),
            ("emotion", re.compile(r"^@emotion/react$")),
            ("sass", re.compile(r"^sass$")),
            ("less", re.compile(r"^less$")),
            ("postcss", re.compile(r"^postcss$")),
        ),
    ),
    (
        "utility",
        (
            ("clsx", re.compile(r"^clsx$")),
            ("classnames", re.compile(r"^classnames$")),
        ),
    ),
    (
        "state-management",
        (
            ("redux", re.compile(r"^redux$")),
            ("mobx", re.compile(r"^mobx$")),
            ("zustand", re.compile(r"^zustand$")),
            ("recoil", re.compile(r"^recoil$")),
            ("jotai", re.compile(r"^jotai$")),
        ),
    ),
)


def _string_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items()}


def detect_framework(dependencies: Dict[str, str]) -> Optional[FrameworkInfo]:
    for framework, pattern in FRAMEWORK_PATTERNS:
        for name, version in dependencies.items():
            if pattern.match(name):
                return FrameworkInfo(name=framework, version=version, is_primary=True)
    return None


def detect_utility_libraries(dependencies: Dict[str, str]) -> List[UtilityLibrary]:
    detected: List[UtilityLibrary] = []
    for category, patterns in UTILITY_PATTERNS:
        for library, pattern in patterns:
            for name, version in dependencies.items():
                if pattern.match(name):
                    detected.append(
                        UtilityLibrary(name=library, version=version, category=category)
                    )
    return detected


class PackageMetadataExtractor:
    """Extracts framework and utility facts from a single package.json."""

    def __init__(self, reader: ManifestReader | None = None) -> None:
        self.reader = reader or ManifestReader()

    async def extract(
        self, package_json_path: Path | str, cache: RunCache | None = None
    ) -> ManifestMetadata:
        """Return metadata for the manifest; raises ManifestError when unreadable."""
        manifest = await self.reader.load(package_json_path, cache)
        dependencies = _string_map(manifest.get("dependencies"))
        dev_dependencies = _string_map(manifest.get("devDependencies"))
        combined = {**dependencies, **dev_dependencies}

        return ManifestMetadata(
            dependencies=dependencies,
            dev_dependencies=dev_dependencies,
            scripts=_string_map(manifest.get("scripts")),
            version=str(manifest.get("version") or "0.0.0"),
            framework=detect_framework(combined),
            utility_libraries=detect_utility_libraries(combined),
        )


__all__ = [
    "FRAMEWORK_PATTERNS",
    "PackageMetadataExtractor",
    "UTILITY_PATTERNS",
    "detect_framework",
    "detect_utility_libraries",
]
