"""cert-manager Certificate access through the custom objects API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from http import HTTPStatus
from logging import getLogger
from typing import TYPE_CHECKING, Any

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from pd_cert_assistant.domain.errors import CommitError, ResourceNotFoundError
from pd_cert_assistant.domain.model import Certificate

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from kubernetes import client

log = getLogger(__name__)

CERT_MANAGER_GROUP = "cert-manager.io"
CERT_MANAGER_VERSION = "v1"
CERTIFICATES_PLURAL = "certificates"


@dataclass(slots=True)
class KubernetesCertificateStore:
    """Get/create/update cert-manager Certificates.

    Updates send back the fetched ``resourceVersion``, so the API server rejects
    the write with a conflict when another replica changed the resource first.
    """

    api: client.CustomObjectsApi
    timeout_seconds: float = 5.0

    async def get(self, namespace: str, name: str) -> Certificate:
        try:
            manifest = await self._call(
                "get",
                self.api.get_namespaced_custom_object,
                CERT_MANAGER_GROUP,
                CERT_MANAGER_VERSION,
                namespace,
                CERTIFICATES_PLURAL,
                name,
            )
        except ApiException as exc:
            if exc.status == HTTPStatus.NOT_FOUND:
                raise ResourceNotFoundError(f"Certificate {namespace}/{name} not found") from exc
            raise CommitError(
                f"Failed to get certificate {namespace}/{name}: {exc.status} {exc.reason}"
            ) from exc
        return Certificate.from_manifest(manifest)

    async def create(self, body: Mapping[str, Any]) -> Certificate:
        metadata = body.get("metadata") or {}
        namespace, name = metadata.get("namespace", ""), metadata.get("name", "")
        try:
            manifest = await self._call(
                "create",
                self.api.create_namespaced_custom_object,
                CERT_MANAGER_GROUP,
                CERT_MANAGER_VERSION,
                namespace,
                CERTIFICATES_PLURAL,
                dict(body),
            )
        except ApiException as exc:
            raise CommitError(
                f"Failed to create certificate {namespace}/{name}: {exc.status} {exc.reason}"
            ) from exc
        return Certificate.from_manifest(manifest)

    async def update(self, certificate: Certificate) -> Certificate:
        namespace, name = certificate.namespace, certificate.name
        try:
            manifest = await self._call(
                "update",
                self.api.replace_namespaced_custom_object,
                CERT_MANAGER_GROUP,
                CERT_MANAGER_VERSION,
                namespace,
                CERTIFICATES_PLURAL,
                name,
                certificate.to_manifest(),
            )
        except ApiException as exc:
            raise CommitError(
                f"Failed to update certificate {namespace}/{name}: {exc.status} {exc.reason}"
            ) from exc
        return Certificate.from_manifest(manifest)

    async def _call(self, verb: str, func: Callable[..., Any], *args: object) -> dict[str, Any]:
        log.debug("Certificate %s request in namespace %s", verb, args[2])
        try:
            return await asyncio.to_thread(func, *args, _request_timeout=self.timeout_seconds)
        except Urllib3HTTPError as exc:
            msg = f"Kubernetes API unreachable during certificate {verb}: {exc}"
            raise CommitError(msg) from exc
