"""Resolve the pd-assistant peers to poll in a reconciliation cycle."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pd_cert_assistant.domain.errors import DiscoveryError
from pd_cert_assistant.domain.ipset import unique_domains

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pd_cert_assistant.config.assistant import PeerConfig
    from pd_cert_assistant.domain.ports import MemberSource

log = getLogger(__name__)


def build_assistant_hostnames(prefix: str, member_hosts: Iterable[str]) -> list[str]:
    """Map PD member hosts to ``{prefix}.{parent domain}``, one per distinct domain."""

    return [f"{prefix}.{domain}" for domain in unique_domains(member_hosts)]


def build_assistant_urls(config: PeerConfig, member_hosts: Iterable[str]) -> list[str]:
    return [
        f"{config.scheme}://{hostname}:{config.port}"
        for hostname in build_assistant_hostnames(config.host_prefix, member_hosts)
    ]


@dataclass(slots=True)
class PeerResolver:
    """Static peer URLs when configured, otherwise derived from PD member hosts."""

    config: PeerConfig
    members: MemberSource | None = None

    async def resolve(self) -> list[str]:
        if self.config.static_urls:
            return list(self.config.static_urls)

        if self.members is None:
            raise DiscoveryError("No static pd-assistant URLs and no discovery source configured")

        hosts = await self.members.fetch_member_hosts()
        log.debug("PD member hosts: %s", hosts)
        urls = build_assistant_urls(self.config, hosts)
        if not urls:
            raise DiscoveryError(f"No PD Assistant hostnames derived from PD members {hosts}")
        log.debug("Resolved pd-assistant peers: %s", urls)
        return urls


__all__ = ["PeerResolver", "build_assistant_hostnames", "build_assistant_urls"]
