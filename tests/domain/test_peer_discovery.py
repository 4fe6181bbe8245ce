from __future__ import annotations

import asyncio

import pytest

from pd_cert_assistant.config import PeerConfig
from pd_cert_assistant.domain.discovery import (
    PeerResolver,
    build_assistant_hostnames,
    build_assistant_urls,
)
from pd_cert_assistant.domain.errors import DiscoveryError
from tests.support.fakes import FakeMemberSource

MEMBER_HOSTS = [
    "basic-pd-0.basic-pd-peer.tidb-a.svc",
    "basic-pd-1.basic-pd-peer.tidb-a.svc",
    "basic-pd-0.basic-pd-peer.tidb-b.svc",
]


def test_build_assistant_hostnames_one_per_domain() -> None:
    assert build_assistant_hostnames("pd-assistant", MEMBER_HOSTS) == [
        "pd-assistant.basic-pd-peer.tidb-a.svc",
        "pd-assistant.basic-pd-peer.tidb-b.svc",
    ]


def test_build_assistant_urls_uses_scheme_and_port() -> None:
    config = PeerConfig(host_prefix="pda", scheme="http", port=8765)

    assert build_assistant_urls(config, MEMBER_HOSTS[:1]) == [
        "http://pda.basic-pd-peer.tidb-a.svc:8765"
    ]


def test_static_urls_skip_discovery() -> None:
    members = FakeMemberSource(hosts=DiscoveryError("must not be called"))
    resolver = PeerResolver(PeerConfig(static_urls=("https://a:443", "https://b:443")), members)

    assert asyncio.run(resolver.resolve()) == ["https://a:443", "https://b:443"]


def test_discovered_peers() -> None:
    resolver = PeerResolver(PeerConfig(), FakeMemberSource(hosts=MEMBER_HOSTS))

    assert asyncio.run(resolver.resolve()) == [
        "https://pd-assistant.basic-pd-peer.tidb-a.svc:443",
        "https://pd-assistant.basic-pd-peer.tidb-b.svc:443",
    ]


def test_no_derivable_hostnames_is_an_error() -> None:
    resolver = PeerResolver(PeerConfig(), FakeMemberSource(hosts=["localhost", "pd.svc"]))

    with pytest.raises(DiscoveryError, match="No PD Assistant hostnames"):
        asyncio.run(resolver.resolve())


def test_missing_member_source_is_an_error() -> None:
    with pytest.raises(DiscoveryError):
        asyncio.run(PeerResolver(PeerConfig()).resolve())
