"""Top-level configuration for a pd-assistant replica."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .certificate import CertificateTemplate, get_certificate_template
from .env import env_bool, env_list, env_positive_int, env_str, require_env_var, require_env_vars
from .errors import ConfigurationError
from .http_client import DEFAULT_HTTP_TIMEOUT_SECONDS, TLSConfig, get_http_timeout, get_tls_config

DEFAULT_KUBERNETES_POLL_INTERVAL = 180
DEFAULT_PD_ASSISTANT_POLL_INTERVAL = 60


class DiscoveryMode(StrEnum):
    DISCOVERY = "discovery"
    MEMBERS = "members"


@dataclass(slots=True, frozen=True)
class PDDiscoveryConfig:
    """Where to look up PD members when peers are not listed statically."""

    mode: DiscoveryMode = DiscoveryMode.DISCOVERY
    url: str = ""
    cluster_name: str = ""
    cluster_namespace: str = ""
    pd_address: str = ""
    tls: TLSConfig = field(default_factory=TLSConfig)


@dataclass(slots=True, frozen=True)
class PeerConfig:
    """How this replica reaches the other pd-assistant replicas."""

    static_urls: tuple[str, ...] = ()
    host_prefix: str = "pd-assistant"
    scheme: str = "https"
    port: int = 443
    tls_insecure: bool = False
    consensus: bool = True
    max_concurrency: int = 1


@dataclass(frozen=True)
class AppConfig:
    bearer_token: str
    certificate: CertificateTemplate
    peers: PeerConfig = field(default_factory=PeerConfig)
    discovery: PDDiscoveryConfig = field(default_factory=PDDiscoveryConfig)
    http_timeout_seconds: int = DEFAULT_HTTP_TIMEOUT_SECONDS
    kubernetes_poll_interval: int = DEFAULT_KUBERNETES_POLL_INTERVAL
    pd_assistant_poll_interval: int = DEFAULT_PD_ASSISTANT_POLL_INTERVAL


def get_peer_config() -> PeerConfig:
    scheme = env_str("PD_ASSISTANT_SCHEME", "https").lower()
    if scheme not in {"http", "https"}:
        raise ConfigurationError(f"PD_ASSISTANT_SCHEME must be http or https, got {scheme!r}")
    return PeerConfig(
        static_urls=tuple(url.rstrip("/") for url in env_list("PD_ASSISTANT_URLS")),
        host_prefix=env_str("PD_ASSISTANT_HOST_PREFIX", "pd-assistant"),
        scheme=scheme,
        port=env_positive_int("PD_ASSISTANT_PORT", 443),
        tls_insecure=env_bool("PD_ASSISTANT_TLS_INSECURE", default=False),
        consensus=env_bool("PD_ASSISTANT_CONSENSUS", default=True),
        max_concurrency=env_positive_int("PD_ASSISTANT_MAX_CONCURRENCY", 1),
    )


def get_discovery_config(*, required: bool) -> PDDiscoveryConfig:
    """Read discovery settings; the inputs of the selected mode are mandatory when ``required``."""

    raw_mode = env_str("PD_DISCOVERY_MODE", DiscoveryMode.DISCOVERY.value).lower()
    try:
        mode = DiscoveryMode(raw_mode)
    except ValueError as exc:
        raise ConfigurationError(f"Unsupported PD_DISCOVERY_MODE: {raw_mode!r}") from exc

    tls = get_tls_config()
    if not required:
        return PDDiscoveryConfig(
            mode=mode,
            url=env_str("PD_DISCOVERY_URL").rstrip("/"),
            cluster_name=env_str("TIDB_CLUSTER_NAME"),
            cluster_namespace=env_str("TIDB_CLUSTER_NAMESPACE"),
            pd_address=env_str("PD_ADDRESS"),
            tls=tls,
        )

    if mode is DiscoveryMode.MEMBERS:
        return PDDiscoveryConfig(mode=mode, pd_address=require_env_var("PD_ADDRESS"), tls=tls)

    values = require_env_vars(("PD_DISCOVERY_URL", "TIDB_CLUSTER_NAME", "TIDB_CLUSTER_NAMESPACE"))
    return PDDiscoveryConfig(
        mode=mode,
        url=values["PD_DISCOVERY_URL"].strip().rstrip("/"),
        cluster_name=values["TIDB_CLUSTER_NAME"].strip(),
        cluster_namespace=values["TIDB_CLUSTER_NAMESPACE"].strip(),
        tls=tls,
    )


def get_app_config() -> AppConfig:
    """Build the replica configuration from the environment, failing fast on bad input."""

    peers = get_peer_config()
    return AppConfig(
        bearer_token=require_env_var("BEARER_TOKEN").strip(),
        certificate=get_certificate_template(),
        peers=peers,
        discovery=get_discovery_config(required=not peers.static_urls),
        http_timeout_seconds=get_http_timeout(),
        kubernetes_poll_interval=env_positive_int(
            "KUBERNETES_POLL_INTERVAL", DEFAULT_KUBERNETES_POLL_INTERVAL
        ),
        pd_assistant_poll_interval=env_positive_int(
            "PD_ASSISTANT_POLL_INTERVAL", DEFAULT_PD_ASSISTANT_POLL_INTERVAL
        ),
    )
