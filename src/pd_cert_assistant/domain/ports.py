"""Ports through which the reconciliation engine reaches its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pd_cert_assistant.domain.model import Certificate


@runtime_checkable
class NodeInventory(Protocol):
    """Lists the internal addresses of the nodes in this replica's cluster."""

    async def list_internal_ips(self) -> list[str]: ...


@runtime_checkable
class PeerViewSource(Protocol):
    """Reads the address lists a peer replica reports about itself."""

    async def fetch_local(self, peer: str) -> list[str]: ...

    async def fetch_aggregate(self, peer: str) -> list[str]: ...


@runtime_checkable
class MemberSource(Protocol):
    """Returns the hostnames of the PD members this fleet fronts."""

    async def fetch_member_hosts(self) -> list[str]: ...


@runtime_checkable
class CertificateStore(Protocol):
    """Get/create/update access to one kind of certificate resource.

    ``get`` raises ``ResourceNotFoundError`` when the resource is absent and
    ``CommitError`` for any other API failure; ``create`` and ``update`` raise
    ``CommitError``.
    """

    async def get(self, namespace: str, name: str) -> Certificate: ...

    async def create(self, body: Mapping[str, Any]) -> Certificate: ...

    async def update(self, certificate: Certificate) -> Certificate: ...


__all__ = ["CertificateStore", "MemberSource", "NodeInventory", "PeerViewSource"]
