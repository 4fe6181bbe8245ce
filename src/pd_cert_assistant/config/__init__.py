"""Application configuration helpers."""

from __future__ import annotations

from .assistant import (
    AppConfig,
    DiscoveryMode,
    PDDiscoveryConfig,
    PeerConfig,
    get_app_config,
    get_discovery_config,
    get_peer_config,
)
from .certificate import CertificateTemplate, IssuerRef, load_certificate_template
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_client import ClientConfig, TLSConfig

__all__ = [
    "AppConfig",
    "CertificateTemplate",
    "ClientConfig",
    "ConfigurationError",
    "DiscoveryMode",
    "IssuerRef",
    "MissingConfigurationError",
    "PDDiscoveryConfig",
    "PeerConfig",
    "TLSConfig",
    "get_app_config",
    "get_discovery_config",
    "get_peer_config",
    "load_certificate_template",
    "require_env_var",
    "require_env_vars",
]
