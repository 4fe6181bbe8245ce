"""Public interface for the PD discovery adapter."""

from __future__ import annotations

from .client import (
    PD_MEMBERS_PATH,
    PDDiscoveryClient,
    PDMembersClient,
    discovery_client_config,
    encode_discovery_path,
)
from .schema import MembersResponse

__all__ = [
    "PD_MEMBERS_PATH",
    "MembersResponse",
    "PDDiscoveryClient",
    "PDMembersClient",
    "discovery_client_config",
    "encode_discovery_path",
]
