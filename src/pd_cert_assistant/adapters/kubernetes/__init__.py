"""Public interface for the Kubernetes adapter."""

from __future__ import annotations

from .certificates import KubernetesCertificateStore
from .cilium import CiliumNodeInventory
from .client import custom_objects_api, load_api_client
from .schema import CILIUM_INTERNAL_IP, CiliumNode, parse_cilium_nodes

__all__ = [
    "CILIUM_INTERNAL_IP",
    "CiliumNode",
    "CiliumNodeInventory",
    "KubernetesCertificateStore",
    "custom_objects_api",
    "load_api_client",
    "parse_cilium_nodes",
]
