"""Prometheus metrics exposed on ``/metrics``."""

from __future__ import annotations

from dataclasses import dataclass, field

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
)

NAMESPACE = "pd_assistant"


@dataclass(slots=True)
class AssistantMetrics:
    """All collectors, bound to a dedicated registry.

    A private registry keeps the exposition free of the default process
    collectors and lets every test build an isolated instance.
    """

    version: str = "unknown"
    registry: CollectorRegistry = field(default_factory=CollectorRegistry)
    config: Gauge = field(init=False)
    local_ips: Gauge = field(init=False)
    all_ips: Gauge = field(init=False)
    fetch_errors: Counter = field(init=False)
    consensus_errors: Counter = field(init=False)
    cert_update_errors: Counter = field(init=False)
    inventory_errors: Counter = field(init=False)
    cycles: Counter = field(init=False)

    def __post_init__(self) -> None:
        self.config = Gauge(
            "config",
            "App config info",
            ["version"],
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.local_ips = Gauge(
            "local_ips_count",
            "Number of IP addresses found on local Cilium nodes",
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.all_ips = Gauge(
            "all_ips_count",
            "Number of IP addresses aggregated from all PD Assistants",
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.fetch_errors = Counter(
            "fetch_errors",
            "Total number of errors fetching data from PD Assistants",
            ["pd_assistant", "kind"],
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.consensus_errors = Counter(
            "consensus_errors",
            "Total number of failed IP address consensus checks",
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.cert_update_errors = Counter(
            "cert_update_errors",
            "Total number of certificate update errors",
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.inventory_errors = Counter(
            "inventory_errors",
            "Total number of failed CiliumNode inventory refreshes",
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.cycles = Counter(
            "reconcile_cycles",
            "Reconciliation cycles by outcome",
            ["outcome"],
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.config.labels(version=self.version).set(1)

    def fetch_error_count(self, peer: str, kind: str) -> float:
        value = self.registry.get_sample_value(
            f"{NAMESPACE}_fetch_errors_total", {"pd_assistant": peer, "kind": kind}
        )
        return value or 0.0

    def cycle_count(self, outcome: str) -> float:
        value = self.registry.get_sample_value(
            f"{NAMESPACE}_reconcile_cycles_total", {"outcome": outcome}
        )
        return value or 0.0

    def render(self) -> tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
