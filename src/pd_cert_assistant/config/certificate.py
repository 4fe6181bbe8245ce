"""Certificate template and issuer configuration."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .env import env_str, require_env_var
from .errors import ConfigurationError

CERTIFICATE_API_VERSION = "cert-manager.io/v1"
CERTIFICATE_KIND = "Certificate"


@dataclass(slots=True, frozen=True)
class IssuerRef:
    name: str
    kind: str = "ClusterIssuer"
    group: str = "cert-manager.io"

    def as_dict(self) -> dict[str, str]:
        return {"name": self.name, "kind": self.kind, "group": self.group}


@dataclass(frozen=True)
class CertificateTemplate:
    """A cert-manager Certificate manifest used when the resource must be created."""

    body: dict[str, Any]
    issuer: IssuerRef | None = None

    @property
    def namespace(self) -> str:
        return self.body["metadata"]["namespace"]

    @property
    def name(self) -> str:
        return self.body["metadata"]["name"]

    def render(self) -> dict[str, Any]:
        """Return a fresh, mutable copy of the manifest with the issuer applied."""

        body = copy.deepcopy(self.body)
        if self.issuer is not None:
            body.setdefault("spec", {})["issuerRef"] = self.issuer.as_dict()
        return body


def load_certificate_template(
    path: str | Path, *, issuer: IssuerRef | None = None
) -> CertificateTemplate:
    template_path = Path(path).expanduser()
    if not template_path.exists():
        raise ConfigurationError(f"Certificate template not found: {template_path}")

    with template_path.open(encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            msg = f"Invalid certificate template {template_path}: {exc}"
            raise ConfigurationError(msg) from exc

    if not isinstance(data, dict):
        raise ConfigurationError("Certificate template root must be a mapping")
    if data.get("kind") != CERTIFICATE_KIND:
        raise ConfigurationError(f"Expected kind {CERTIFICATE_KIND!r}, got {data.get('kind')!r}")
    if data.get("apiVersion") != CERTIFICATE_API_VERSION:
        raise ConfigurationError(
            f"Expected apiVersion {CERTIFICATE_API_VERSION!r}, got {data.get('apiVersion')!r}"
        )
    metadata = data.get("metadata")
    if not isinstance(metadata, dict) or not metadata.get("name") or not metadata.get("namespace"):
        raise ConfigurationError("Certificate template needs metadata.name and metadata.namespace")
    if not isinstance(data.get("spec"), dict):
        raise ConfigurationError("Certificate template needs a spec mapping")

    return CertificateTemplate(body=data, issuer=issuer)


def get_issuer_ref() -> IssuerRef | None:
    name = env_str("ISSUER_NAME")
    if not name:
        return None
    return IssuerRef(
        name=name,
        kind=env_str("ISSUER_KIND", "ClusterIssuer"),
        group=env_str("ISSUER_GROUP", "cert-manager.io"),
    )


def get_certificate_template() -> CertificateTemplate:
    return load_certificate_template(
        require_env_var("CERTIFICATE_TEMPLATE"), issuer=get_issuer_ref()
    )
