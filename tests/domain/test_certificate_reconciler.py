from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING

import pytest

from pd_cert_assistant.config import CertificateTemplate, IssuerRef, load_certificate_template
from pd_cert_assistant.domain.certificate import (
    LAST_UPDATED_ANNOTATION,
    MANAGED_BY_ANNOTATION,
    CertificateReconciler,
    provenance_annotations,
)
from pd_cert_assistant.domain.errors import CommitError
from pd_cert_assistant.domain.model import CycleOutcome
from tests.support.fakes import FakeCertificateStore

if TYPE_CHECKING:
    from pathlib import Path

    from pd_cert_assistant.domain.model import Certificate

FIXED_NOW = datetime(2025, 3, 4, 5, 6, 7, tzinfo=UTC)
KEY = ("default", "example-certificate")


def _reconciler(
    store: FakeCertificateStore, template: CertificateTemplate
) -> CertificateReconciler:
    return CertificateReconciler(store=store, template=template, clock=lambda: FIXED_NOW)


def _existing(template: CertificateTemplate, ips: list[str]) -> dict[str, object]:
    body = template.render()
    body["metadata"]["resourceVersion"] = "42"
    body["spec"]["ipAddresses"] = ips
    return body


def test_provenance_annotations_keep_existing_keys() -> None:
    annotations = provenance_annotations({"existing-key": "existing-value"}, now=FIXED_NOW)

    assert annotations == {
        "existing-key": "existing-value",
        MANAGED_BY_ANNOTATION: "pd-assistant",
        LAST_UPDATED_ANNOTATION: "2025-03-04T05:06:07Z",
    }


def test_provenance_annotations_without_existing() -> None:
    annotations = provenance_annotations(None, now=FIXED_NOW)

    assert annotations[MANAGED_BY_ANNOTATION] == "pd-assistant"
    assert datetime.strptime(annotations[LAST_UPDATED_ANNOTATION], "%Y-%m-%dT%H:%M:%SZ")


def test_last_updated_is_rfc3339_utc() -> None:
    offset = timezone(timedelta(hours=2))

    annotations = provenance_annotations({}, now=datetime(2025, 1, 2, 5, 4, 5, tzinfo=offset))

    assert annotations[LAST_UPDATED_ANNOTATION] == "2025-01-02T03:04:05Z"


def test_creates_missing_certificate_from_template(
    certificate_template: CertificateTemplate,
) -> None:
    store = FakeCertificateStore()
    reconciler = _reconciler(store, certificate_template)

    outcome = asyncio.run(reconciler.reconcile(["10.0.0.2", "10.0.0.1"]))

    assert outcome is CycleOutcome.COMMITTED
    assert len(store.creates) == 1
    created = store.creates[0]
    assert created["spec"]["ipAddresses"] == ["10.0.0.2", "10.0.0.1"]
    assert created["spec"]["secretName"] == "example-certificate-secret"
    assert created["metadata"]["annotations"][MANAGED_BY_ANNOTATION] == "pd-assistant"
    assert created["metadata"]["annotations"]["team"] == "database"
    # the template itself stays pristine
    assert "ipAddresses" not in certificate_template.body["spec"]


def test_create_applies_configured_issuer(certificate_template_path: Path) -> None:
    template = load_certificate_template(certificate_template_path, issuer=IssuerRef(name="pd-ca"))
    store = FakeCertificateStore()

    asyncio.run(_reconciler(store, template).reconcile(["10.0.0.1"]))

    assert store.creates[0]["spec"]["issuerRef"] == {
        "name": "pd-ca",
        "kind": "ClusterIssuer",
        "group": "cert-manager.io",
    }


def test_second_cycle_with_same_candidate_does_not_write(
    certificate_template: CertificateTemplate,
) -> None:
    store = FakeCertificateStore()
    reconciler = _reconciler(store, certificate_template)

    first = asyncio.run(reconciler.reconcile(["10.0.0.1", "10.0.0.2"]))
    second = asyncio.run(reconciler.reconcile(["10.0.0.2", "10.0.0.1"]))

    assert first is CycleOutcome.COMMITTED
    assert second is CycleOutcome.UNCHANGED
    assert store.writes == 1


def test_unchanged_certificate_issues_no_write(certificate_template: CertificateTemplate) -> None:
    store = FakeCertificateStore(manifests={KEY: _existing(certificate_template, ["10.0.0.1"])})

    outcome = asyncio.run(_reconciler(store, certificate_template).reconcile(["10.0.0.1"]))

    assert outcome is CycleOutcome.UNCHANGED
    assert store.writes == 0


def test_changed_addresses_update_in_place(certificate_template: CertificateTemplate) -> None:
    store = FakeCertificateStore(
        manifests={KEY: _existing(certificate_template, ["10.0.0.1", "10.0.0.9"])}
    )

    outcome = asyncio.run(
        _reconciler(store, certificate_template).reconcile(["10.0.0.1", "10.0.0.2"])
    )

    assert outcome is CycleOutcome.COMMITTED
    assert store.creates == []
    updated: Certificate = store.updates[0]
    assert updated.ip_addresses == ["10.0.0.1", "10.0.0.2"]
    assert updated.annotations[LAST_UPDATED_ANNOTATION] == "2025-03-04T05:06:07Z"
    manifest = updated.to_manifest()
    assert manifest["metadata"]["resourceVersion"] == "42"
    assert manifest["spec"]["dnsNames"][0] == "pd.example.com"


def test_empty_candidate_never_writes(certificate_template: CertificateTemplate) -> None:
    store = FakeCertificateStore(manifests={KEY: _existing(certificate_template, ["10.0.0.1"])})

    outcome = asyncio.run(_reconciler(store, certificate_template).reconcile([]))

    assert outcome is CycleOutcome.SKIPPED_EMPTY_RESULT
    assert store.writes == 0
    assert store.manifests[KEY]["spec"]["ipAddresses"] == ["10.0.0.1"]


@pytest.mark.parametrize("verb", ["get", "create", "update"])
def test_store_errors_surface_as_commit_errors(
    certificate_template: CertificateTemplate, verb: str
) -> None:
    manifests = {} if verb == "create" else {KEY: _existing(certificate_template, ["10.0.0.9"])}
    store = FakeCertificateStore(manifests=manifests, fail_on={verb})

    with pytest.raises(CommitError):
        asyncio.run(_reconciler(store, certificate_template).reconcile(["10.0.0.1"]))

    assert store.writes == 0
