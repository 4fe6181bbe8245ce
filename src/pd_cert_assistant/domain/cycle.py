"""One reconciliation cycle: resolve peers, aggregate, check consensus, commit."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pd_cert_assistant.domain.errors import (
    CommitError,
    ConsensusMismatchError,
    EmptyResultError,
    PdAssistantError,
)
from pd_cert_assistant.domain.model import CycleOutcome

if TYPE_CHECKING:
    from pd_cert_assistant.common.metrics import AssistantMetrics
    from pd_cert_assistant.domain.aggregation import PeerAggregator
    from pd_cert_assistant.domain.certificate import CertificateReconciler
    from pd_cert_assistant.domain.discovery import PeerResolver
    from pd_cert_assistant.domain.state import SharedState

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationCycle:
    resolver: PeerResolver
    aggregator: PeerAggregator
    reconciler: CertificateReconciler
    state: SharedState
    metrics: AssistantMetrics
    consensus: bool = True

    async def run(self) -> CycleOutcome:
        """Run one cycle to a terminal outcome; per-cycle errors never escape."""

        outcome = await self._run()
        self.metrics.cycles.labels(outcome=outcome.value).inc()
        log.info("Reconciliation cycle finished: %s", outcome)
        return outcome

    async def _run(self) -> CycleOutcome:
        try:
            peers = await self.resolver.resolve()
        except PdAssistantError as exc:
            log.error("Failed to fetch PD Assistant URLs: %s", exc)
            return CycleOutcome.SKIPPED_FETCH_ERROR

        try:
            candidate = await self.aggregator.aggregate(peers)
        except EmptyResultError as exc:
            log.error("Empty IP list reported by pd-assistants: %s", exc)
            return CycleOutcome.SKIPPED_EMPTY_RESULT
        except PdAssistantError as exc:
            log.error("Failed to fetch IPs from pd-assistants: %s", exc)
            return CycleOutcome.SKIPPED_FETCH_ERROR

        if not candidate:
            log.error("No IPs found in pd-assistants")
            return CycleOutcome.SKIPPED_EMPTY_RESULT

        # Peers read this through /api/v1/allips for their consensus check.
        self.state.aggregate.replace(candidate)
        self.metrics.all_ips.set(len(candidate))
        log.debug("All IPs fetched from pd-assistants: %s", candidate)

        if self.consensus:
            try:
                await self.aggregator.validate_consensus(peers)
            except ConsensusMismatchError as exc:
                self.metrics.consensus_errors.inc()
                log.error("IP address consensus check failed, skipping certificate update: %s", exc)
                return CycleOutcome.SKIPPED_NO_CONSENSUS
            except PdAssistantError as exc:
                self.metrics.consensus_errors.inc()
                log.error("Failed to check IP address consensus: %s", exc)
                return CycleOutcome.SKIPPED_FETCH_ERROR
            log.info("IP address consensus check passed")

        try:
            outcome = await self.reconciler.reconcile(candidate)
        except CommitError as exc:
            self.metrics.cert_update_errors.inc()
            log.error("Failed to update certificate: %s", exc)
            return CycleOutcome.SKIPPED_COMMIT_ERROR
        return outcome


__all__ = ["ReconciliationCycle"]
