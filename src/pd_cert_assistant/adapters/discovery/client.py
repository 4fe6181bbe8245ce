"""Clients that list the PD members a pd-assistant fleet fronts."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from pd_cert_assistant.adapters.http_client import HttpClient, default_client_factory
from pd_cert_assistant.config.http_client import ClientConfig
from pd_cert_assistant.domain.errors import DecodeError, DiscoveryError, PdAssistantError
from pd_cert_assistant.domain.ipset import extract_urls, unique_hosts

from .schema import MembersResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from pd_cert_assistant.config.assistant import AppConfig, PDDiscoveryConfig

log = getLogger(__name__)

PD_MEMBERS_PATH = "/pd/api/v1/members"


def encode_discovery_path(cluster_name: str, cluster_namespace: str) -> str:
    """Base64 of the first PD peer address, as the discovery service expects it."""

    domain = f"{cluster_name}-pd-0.{cluster_name}-pd-peer.{cluster_namespace}.svc:2380"
    return base64.b64encode(domain.encode("utf-8")).decode("ascii")


def discovery_client_config(config: AppConfig) -> ClientConfig:
    return ClientConfig(
        name="pd-discovery",
        timeout_seconds=config.http_timeout_seconds,
        tls=config.discovery.tls,
    )


@dataclass(slots=True)
class PDDiscoveryClient:
    """Reads member URLs from the TiDB operator's PD discovery service."""

    discovery: PDDiscoveryConfig
    config: ClientConfig
    client_factory: Callable[[ClientConfig], HttpClient] = field(default=default_client_factory)

    @property
    def url(self) -> str:
        path = encode_discovery_path(self.discovery.cluster_name, self.discovery.cluster_namespace)
        return f"{self.discovery.url}/new/{path}"

    async def fetch_member_hosts(self) -> list[str]:
        url = self.url
        try:
            async with self.client_factory(self.config) as client:
                body = await client.get_text(url)
        except PdAssistantError as exc:
            raise DiscoveryError(f"Failed to get PD member names: {exc}") from exc

        log.debug("PD Discovery response body: %s", body)
        urls = extract_urls(body)
        for found in urls:
            log.debug("Found PD URL: %s", found)
        return unique_hosts(urls)


@dataclass(slots=True)
class PDMembersClient:
    """Reads member names straight from a PD server's members API."""

    discovery: PDDiscoveryConfig
    config: ClientConfig
    client_factory: Callable[[ClientConfig], HttpClient] = field(default=default_client_factory)

    @property
    def url(self) -> str:
        scheme = "https" if self.discovery.tls.ca_path else "http"
        return f"{scheme}://{self.discovery.pd_address}{PD_MEMBERS_PATH}"

    async def fetch_member_hosts(self) -> list[str]:
        url = self.url
        try:
            async with self.client_factory(self.config) as client:
                payload = await client.get_json(url)
            try:
                response = MembersResponse.model_validate(payload)
            except ValidationError as exc:
                raise DecodeError(f"Invalid members payload from {url}: {exc}") from exc
        except PdAssistantError as exc:
            raise DiscoveryError(f"Failed to get PD member names: {exc}") from exc

        names = response.names
        log.debug("PD member names: %s", names)
        return names
