"""Kubernetes API client bootstrap."""

from __future__ import annotations

from logging import getLogger

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from pd_cert_assistant.config.errors import ConfigurationError

log = getLogger(__name__)


def load_api_client(kubeconfig: str | None = None) -> client.ApiClient:
    """Use ``kubeconfig`` when given, the in-cluster service account otherwise."""

    try:
        if kubeconfig:
            log.info("Loading Kubernetes configuration from %s", kubeconfig)
            config.load_kube_config(config_file=kubeconfig)
        else:
            log.info("Loading in-cluster Kubernetes configuration")
            config.load_incluster_config()
    except (ConfigException, OSError) as exc:
        raise ConfigurationError(f"Failed to initialize Kubernetes client: {exc}") from exc
    return client.ApiClient()


def custom_objects_api(api_client: client.ApiClient) -> client.CustomObjectsApi:
    return client.CustomObjectsApi(api_client)
