"""Application orchestration: wire adapters, run the periodic loops, build the app."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pd_cert_assistant.adapters.discovery import (
    PDDiscoveryClient,
    PDMembersClient,
    discovery_client_config,
)
from pd_cert_assistant.adapters.kubernetes import (
    CiliumNodeInventory,
    KubernetesCertificateStore,
    custom_objects_api,
    load_api_client,
)
from pd_cert_assistant.adapters.peers import PeerClient, peer_client_config
from pd_cert_assistant.common.metrics import AssistantMetrics
from pd_cert_assistant.config.assistant import DiscoveryMode
from pd_cert_assistant.domain.aggregation import FetchKind, PeerAggregator
from pd_cert_assistant.domain.certificate import CertificateReconciler
from pd_cert_assistant.domain.cycle import ReconciliationCycle
from pd_cert_assistant.domain.discovery import PeerResolver
from pd_cert_assistant.domain.errors import EmptyResultError, PdAssistantError
from pd_cert_assistant.domain.state import SharedState
from pd_cert_assistant.server.api import create_app

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

    from pd_cert_assistant.config.assistant import AppConfig
    from pd_cert_assistant.domain.ports import (
        CertificateStore,
        MemberSource,
        NodeInventory,
        PeerViewSource,
    )

log = getLogger(__name__)


@dataclass(slots=True)
class Service:
    """Everything a running replica needs, already wired together."""

    config: AppConfig
    state: SharedState
    metrics: AssistantMetrics
    inventory: NodeInventory
    cycle: ReconciliationCycle


def build_member_source(config: AppConfig) -> MemberSource | None:
    if config.peers.static_urls:
        return None
    client_config = discovery_client_config(config)
    if config.discovery.mode is DiscoveryMode.MEMBERS:
        return PDMembersClient(discovery=config.discovery, config=client_config)
    return PDDiscoveryClient(discovery=config.discovery, config=client_config)


def build_service(
    config: AppConfig,
    *,
    inventory: NodeInventory,
    store: CertificateStore,
    version: str = "unknown",
    peer_source: PeerViewSource | None = None,
    members: MemberSource | None = None,
) -> Service:
    state = SharedState()
    metrics = AssistantMetrics(version=version)

    def count_fetch_error(peer: str, kind: FetchKind) -> None:
        metrics.fetch_errors.labels(pd_assistant=peer, kind=kind.value).inc()

    aggregator = PeerAggregator(
        source=peer_source or PeerClient(peer_client_config(config)),
        max_concurrency=config.peers.max_concurrency,
        on_fetch_error=count_fetch_error,
    )
    cycle = ReconciliationCycle(
        resolver=PeerResolver(config.peers, members or build_member_source(config)),
        aggregator=aggregator,
        reconciler=CertificateReconciler(store=store, template=config.certificate),
        state=state,
        metrics=metrics,
        consensus=config.peers.consensus,
    )
    return Service(config=config, state=state, metrics=metrics, inventory=inventory, cycle=cycle)


def build_kubernetes_service(
    config: AppConfig, *, kubeconfig: str | None = None, version: str = "unknown"
) -> Service:
    api = custom_objects_api(load_api_client(kubeconfig))
    timeout = config.http_timeout_seconds
    return build_service(
        config,
        inventory=CiliumNodeInventory(api=api, timeout_seconds=timeout),
        store=KubernetesCertificateStore(api=api, timeout_seconds=timeout),
        version=version,
    )


async def refresh_local_addresses(service: Service) -> bool:
    """Replace the local snapshot; on any failure keep the previous one."""

    try:
        addresses = await service.inventory.list_internal_ips()
        if not addresses:
            raise EmptyResultError("No CiliumInternalIP addresses found on CiliumNodes")
    except PdAssistantError as exc:
        service.metrics.inventory_errors.inc()
        log.error("Failed to fetch CiliumNodes: %s", exc)
        return False

    service.state.local.replace(addresses)
    service.metrics.local_ips.set(len(addresses))
    log.debug("Updated state with local IPs: %s", addresses)
    return True


async def run_inventory_loop(service: Service) -> None:
    interval = service.config.kubernetes_poll_interval
    while True:
        log.debug("Fetching CiliumNode resources from Kubernetes API")
        try:
            await refresh_local_addresses(service)
        except Exception:  # noqa: BLE001
            log.exception("Unexpected error while refreshing CiliumNode inventory")
        await asyncio.sleep(interval)


async def run_reconcile_loop(service: Service) -> None:
    interval = service.config.pd_assistant_poll_interval
    while True:
        await asyncio.sleep(interval)
        try:
            await service.cycle.run()
        except Exception:  # noqa: BLE001
            log.exception("Unexpected error in reconciliation cycle")


def build_app(service: Service, *, version: str = "unknown") -> FastAPI:
    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        tasks = [
            asyncio.create_task(run_inventory_loop(service), name="inventory"),
            asyncio.create_task(run_reconcile_loop(service), name="reconcile"),
        ]
        log.info("Started inventory and reconciliation loops")
        try:
            yield
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            log.info("Stopped background loops")

    return create_app(
        state=service.state,
        metrics=service.metrics,
        bearer_token=service.config.bearer_token,
        version=version,
        lifespan=lifespan,
    )
