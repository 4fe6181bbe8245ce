"""Configuration types for outbound HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .env import env_bool, env_positive_int, env_str
from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_HTTP_TIMEOUT_SECONDS = 5


@dataclass(slots=True, frozen=True)
class TLSConfig:
    cert_path: str | None = None
    key_path: str | None = None
    ca_path: str | None = None
    insecure: bool = False

    @property
    def client_cert(self) -> tuple[str, str] | None:
        if self.cert_path and self.key_path:
            return self.cert_path, self.key_path
        return None


@dataclass(slots=True, frozen=True)
class ClientConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    tls: TLSConfig = field(default_factory=TLSConfig)
    bearer_token: str | None = None
    default_headers: Mapping[str, str] | None = None


def get_tls_config() -> TLSConfig:
    cert_path = env_str("TLS_CERT") or None
    key_path = env_str("TLS_KEY") or None
    if (cert_path is None) != (key_path is None):
        raise ConfigurationError("TLS_CERT and TLS_KEY must be set together")
    return TLSConfig(
        cert_path=cert_path,
        key_path=key_path,
        ca_path=env_str("TLS_CA") or None,
        insecure=env_bool("TLS_INSECURE", default=False),
    )


def get_http_timeout() -> int:
    return env_positive_int("HTTP_REQUEST_TIMEOUT", DEFAULT_HTTP_TIMEOUT_SECONDS)
