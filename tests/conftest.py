from __future__ import annotations

from pathlib import Path

import pytest

from pd_cert_assistant.config import (
    AppConfig,
    CertificateTemplate,
    PeerConfig,
    load_certificate_template,
)

DATA_DIR = Path(__file__).resolve().parent / "data"

PEERS = (
    "https://pd-assistant.cluster-a.example.com:443",
    "https://pd-assistant.cluster-b.example.com:443",
    "https://pd-assistant.cluster-c.example.com:443",
)


@pytest.fixture
def certificate_template_path() -> Path:
    return DATA_DIR / "certificate.yaml"


@pytest.fixture
def certificate_template(certificate_template_path: Path) -> CertificateTemplate:
    return load_certificate_template(certificate_template_path)


@pytest.fixture
def app_config(certificate_template: CertificateTemplate) -> AppConfig:
    return AppConfig(
        bearer_token="s3cret",
        certificate=certificate_template,
        peers=PeerConfig(static_urls=PEERS),
    )
