"""HTTP client for the IP endpoints of other pd-assistant replicas."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from pd_cert_assistant.adapters.http_client import HttpClient, default_client_factory
from pd_cert_assistant.config.http_client import ClientConfig, TLSConfig
from pd_cert_assistant.domain.errors import DecodeError

from .schema import API_ALL_IPS_PATH, API_IPS_PATH, IPListAdapter

if TYPE_CHECKING:
    from collections.abc import Callable

    from pd_cert_assistant.config.assistant import AppConfig

log = getLogger(__name__)


def peer_client_config(config: AppConfig) -> ClientConfig:
    return ClientConfig(
        name="pd-assistant",
        timeout_seconds=config.http_timeout_seconds,
        tls=TLSConfig(insecure=config.peers.tls_insecure),
        bearer_token=config.bearer_token,
    )


@dataclass(slots=True)
class PeerClient:
    """Reads ``/api/v1/ips`` and ``/api/v1/allips`` from a peer base URL."""

    config: ClientConfig
    client_factory: Callable[[ClientConfig], HttpClient] = field(default=default_client_factory)

    async def fetch_local(self, peer: str) -> list[str]:
        return await self._fetch_ips(peer, API_IPS_PATH)

    async def fetch_aggregate(self, peer: str) -> list[str]:
        return await self._fetch_ips(peer, API_ALL_IPS_PATH)

    async def _fetch_ips(self, peer: str, path: str) -> list[str]:
        url = peer.rstrip("/") + path
        log.debug("GET %s", url)
        async with self.client_factory(self.config) as client:
            payload = await client.get_json(url)
        try:
            return IPListAdapter.validate_python(payload)
        except ValidationError as exc:
            raise DecodeError(f"Unexpected IP list payload from {url}: {exc}") from exc
