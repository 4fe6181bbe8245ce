"""Public interface for the pd-assistant peer adapter."""

from __future__ import annotations

from .client import PeerClient, peer_client_config
from .schema import API_ALL_IPS_PATH, API_IPS_PATH

__all__ = [
    "API_ALL_IPS_PATH",
    "API_IPS_PATH",
    "PeerClient",
    "peer_client_config",
]
