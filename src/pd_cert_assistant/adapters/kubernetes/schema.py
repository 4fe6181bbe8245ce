"""Typed views of the Kubernetes custom resources this service reads."""

from __future__ import annotations

from logging import getLogger

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

log = getLogger(__name__)

CILIUM_INTERNAL_IP = "CiliumInternalIP"


class KubernetesBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ObjectMeta(KubernetesBaseModel):
    name: str = ""
    namespace: str | None = None


class NodeAddress(KubernetesBaseModel):
    type: str | None = None
    ip: str | None = None


class CiliumNodeSpec(KubernetesBaseModel):
    addresses: list[NodeAddress] = Field(default_factory=list)

    @field_validator("addresses", mode="before")
    @classmethod
    def _drop_malformed_addresses(cls, value: object) -> list[NodeAddress]:
        if not isinstance(value, list):
            log.warning("Ignoring CiliumNode addresses that are not a list: %r", value)
            return []
        addresses: list[NodeAddress] = []
        for entry in value:
            try:
                addresses.append(NodeAddress.model_validate(entry))
            except ValidationError:
                log.warning("Skipping malformed CiliumNode address entry: %r", entry)
        return addresses


class CiliumNode(KubernetesBaseModel):
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: CiliumNodeSpec = Field(default_factory=CiliumNodeSpec)

    def internal_ips(self) -> list[str]:
        return [
            address.ip
            for address in self.spec.addresses
            if address.type == CILIUM_INTERNAL_IP and address.ip
        ]


def parse_cilium_nodes(items: list[object]) -> list[CiliumNode]:
    """Validate list items one by one, skipping the ones that do not fit the schema."""

    nodes: list[CiliumNode] = []
    for item in items:
        try:
            nodes.append(CiliumNode.model_validate(item))
        except ValidationError as exc:
            log.warning("Skipping malformed CiliumNode: %s", exc)
    return nodes
