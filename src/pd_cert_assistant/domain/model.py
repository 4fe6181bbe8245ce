"""Domain types exchanged between the engine and its adapters."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class CycleOutcome(StrEnum):
    """Terminal state of one reconciliation cycle."""

    COMMITTED = "committed"
    UNCHANGED = "unchanged"
    SKIPPED_FETCH_ERROR = "skipped-fetch-error"
    SKIPPED_EMPTY_RESULT = "skipped-empty-result"
    SKIPPED_NO_CONSENSUS = "skipped-no-consensus"
    SKIPPED_COMMIT_ERROR = "skipped-commit-error"


@dataclass(slots=True)
class Certificate:
    """A cert-manager Certificate as read from the cluster.

    ``body`` keeps the full manifest (including ``resourceVersion``) so an update
    can be sent back without losing fields this service does not manage.
    """

    namespace: str
    name: str
    ip_addresses: list[str] = field(default_factory=list)
    annotations: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_manifest(cls, manifest: dict[str, Any]) -> Certificate:
        metadata = manifest.get("metadata") or {}
        spec = manifest.get("spec") or {}
        return cls(
            namespace=metadata.get("namespace", ""),
            name=metadata.get("name", ""),
            ip_addresses=list(spec.get("ipAddresses") or []),
            annotations=dict(metadata.get("annotations") or {}),
            body=copy.deepcopy(manifest),
        )

    def to_manifest(self) -> dict[str, Any]:
        manifest = copy.deepcopy(self.body)
        metadata = manifest.setdefault("metadata", {})
        metadata["namespace"] = self.namespace
        metadata["name"] = self.name
        metadata["annotations"] = dict(self.annotations)
        manifest.setdefault("spec", {})["ipAddresses"] = list(self.ip_addresses)
        return manifest


__all__ = ["Certificate", "CycleOutcome"]
