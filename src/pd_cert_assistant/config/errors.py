"""Startup configuration failures; ``main`` reports them and exits with status 2."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment value, the certificate template or the kubeconfig is unusable."""


class MissingConfigurationError(ConfigurationError):
    """A required environment variable is unset or blank."""
