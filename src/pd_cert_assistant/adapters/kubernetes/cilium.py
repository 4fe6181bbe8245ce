"""Local inventory: internal addresses of this cluster's Cilium nodes."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from pd_cert_assistant.domain.errors import DecodeError, StatusError, TransportError

from .schema import parse_cilium_nodes

if TYPE_CHECKING:
    from kubernetes import client

log = getLogger(__name__)

CILIUM_GROUP = "cilium.io"
CILIUM_VERSION = "v2"
CILIUM_NODES_PLURAL = "ciliumnodes"


@dataclass(slots=True)
class CiliumNodeInventory:
    api: client.CustomObjectsApi
    timeout_seconds: float = 5.0

    async def list_internal_ips(self) -> list[str]:
        payload = await asyncio.to_thread(self._list_nodes)
        items = payload.get("items")
        if not isinstance(items, list):
            raise DecodeError("CiliumNode list has no items array")

        internal_ips: list[str] = []
        for node in parse_cilium_nodes(items):
            log.debug("Processing CiliumNode: %s", node.metadata.name)
            internal_ips.extend(node.internal_ips())
        return internal_ips

    def _list_nodes(self) -> dict[str, Any]:
        try:
            return self.api.list_cluster_custom_object(
                CILIUM_GROUP,
                CILIUM_VERSION,
                CILIUM_NODES_PLURAL,
                _request_timeout=self.timeout_seconds,
            )
        except ApiException as exc:
            raise StatusError(
                f"Failed to list CiliumNode resources: {exc.status} {exc.reason}",
                status_code=exc.status or 0,
            ) from exc
        except Urllib3HTTPError as exc:
            raise TransportError(f"Failed to list CiliumNode resources: {exc}") from exc
