"""Commit an aggregated address set to the cert-manager Certificate."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pd_cert_assistant.domain.errors import ResourceNotFoundError
from pd_cert_assistant.domain.ipset import set_equal
from pd_cert_assistant.domain.model import CycleOutcome

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from pd_cert_assistant.config.certificate import CertificateTemplate
    from pd_cert_assistant.domain.ports import CertificateStore

log = getLogger(__name__)

MANAGED_BY_ANNOTATION = "managed-by"
MANAGED_BY_VALUE = "pd-assistant"
LAST_UPDATED_ANNOTATION = "last-updated"
LAST_UPDATED_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def provenance_annotations(existing: Mapping[str, str] | None, *, now: datetime) -> dict[str, str]:
    """Return ``existing`` plus the ``managed-by`` and ``last-updated`` stamps."""

    annotations = dict(existing or {})
    annotations[MANAGED_BY_ANNOTATION] = MANAGED_BY_VALUE
    annotations[LAST_UPDATED_ANNOTATION] = now.astimezone(UTC).strftime(LAST_UPDATED_FORMAT)
    return annotations


@dataclass(slots=True)
class CertificateReconciler:
    """Creates or updates the certificate so its IP SANs match a candidate set.

    The reconciler never deletes the resource and never writes an empty SAN
    list. Store errors propagate as ``CommitError``; retrying is left to the
    next scheduled cycle.
    """

    store: CertificateStore
    template: CertificateTemplate
    clock: Clock = field(default=_utc_now)

    async def reconcile(self, candidate: Sequence[str]) -> CycleOutcome:
        if not candidate:
            log.error("Refusing to commit an empty IP address list")
            return CycleOutcome.SKIPPED_EMPTY_RESULT

        namespace, name = self.template.namespace, self.template.name
        try:
            current = await self.store.get(namespace, name)
        except ResourceNotFoundError:
            log.info("Certificate %s/%s not found, creating a new one", namespace, name)
            await self.store.create(self._render_new(candidate))
            log.info("Certificate %s/%s created successfully", namespace, name)
            return CycleOutcome.COMMITTED

        if set_equal(current.ip_addresses, candidate):
            log.debug(
                "Certificate %s/%s already has the same IPs, no update needed", namespace, name
            )
            return CycleOutcome.UNCHANGED

        log.info(
            "Updating certificate %s/%s IPs: %s -> %s",
            namespace,
            name,
            sorted(current.ip_addresses),
            sorted(candidate),
        )
        current.ip_addresses = list(candidate)
        current.annotations = provenance_annotations(current.annotations, now=self.clock())
        await self.store.update(current)
        log.info("Certificate %s/%s updated successfully", namespace, name)
        return CycleOutcome.COMMITTED

    def _render_new(self, candidate: Sequence[str]) -> dict[str, object]:
        body = self.template.render()
        metadata = body.setdefault("metadata", {})
        metadata["annotations"] = provenance_annotations(
            metadata.get("annotations"), now=self.clock()
        )
        body.setdefault("spec", {})["ipAddresses"] = list(candidate)
        return body


__all__ = [
    "LAST_UPDATED_ANNOTATION",
    "LAST_UPDATED_FORMAT",
    "MANAGED_BY_ANNOTATION",
    "MANAGED_BY_VALUE",
    "CertificateReconciler",
    "provenance_annotations",
]
