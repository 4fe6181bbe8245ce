"""Reconciliation engine: peer discovery, aggregation, consensus and commit."""

from __future__ import annotations

from .aggregation import FetchKind, PeerAggregator, views_agree
from .certificate import CertificateReconciler, provenance_annotations
from .cycle import ReconciliationCycle
from .discovery import PeerResolver
from .ipset import extract_urls, set_equal, unique_domains
from .model import Certificate, CycleOutcome
from .state import AddressSnapshot, SharedState, SnapshotHolder

__all__ = [
    "AddressSnapshot",
    "Certificate",
    "CertificateReconciler",
    "CycleOutcome",
    "FetchKind",
    "PeerAggregator",
    "PeerResolver",
    "ReconciliationCycle",
    "SharedState",
    "SnapshotHolder",
    "extract_urls",
    "provenance_annotations",
    "set_equal",
    "unique_domains",
    "views_agree",
]
