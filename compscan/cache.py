"""Per-run caches shared by the detectors, walker and analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .models import ManifestMetadata


@dataclass
class RunCache:
    """Key-value stores scoped to a single analysis run.

    Keys:
        manifests: absolute manifest path -> parsed JSON mapping.
        package_metadata: canonical manifest JSON (sorted keys) -> extracted metadata.
        directory_decisions: directory name as listed on disk -> skip decision.
        file_decisions: (file name, framework tag) -> component-file decision.

    Writes are idempotent, so concurrent coroutines on one event loop may
    recompute and overwrite an entry without coordination.
    """

    manifests: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    package_metadata: Dict[str, ManifestMetadata] = field(default_factory=dict)
    directory_decisions: Dict[str, bool] = field(default_factory=dict)
    file_decisions: Dict[Tuple[str, str], bool] = field(default_factory=dict)

    def clear(self) -> None:
        self.manifests.clear()
        self.package_metadata.clear()
        self.directory_decisions.clear()
        self.file_decisions.clear()


__all__ = ["RunCache"]
