from __future__ import annotations

import itertools

import pytest

from pd_cert_assistant.domain.ipset import (
    domain_from_host,
    extract_urls,
    host_from_url,
    set_equal,
    unique_domains,
    unique_hosts,
)

ADDRESSES = ["10.0.0.1", "10.0.0.2", "10.0.1.7"]


def test_set_equal_is_reflexive() -> None:
    assert set_equal(ADDRESSES, ADDRESSES)


@pytest.mark.parametrize("permutation", list(itertools.permutations(ADDRESSES)))
def test_set_equal_ignores_order(permutation: tuple[str, ...]) -> None:
    assert set_equal(ADDRESSES, list(permutation))


def test_set_equal_empty_lists() -> None:
    assert set_equal([], [])


def test_set_equal_different_lengths() -> None:
    assert not set_equal(["10.0.0.1"], ["10.0.0.1", "10.0.0.2"])
    assert not set_equal([], ["10.0.0.1"])


def test_set_equal_different_members() -> None:
    assert not set_equal(["10.0.0.1", "10.0.0.2"], ["10.0.0.1", "10.0.0.3"])


def test_set_equal_does_not_collapse_duplicates() -> None:
    assert not set_equal(["10.0.0.1", "10.0.0.1"], ["10.0.0.1"])
    assert not set_equal(["10.0.0.1", "10.0.0.1"], ["10.0.0.1", "10.0.0.2"])
    assert set_equal(["10.0.0.1", "10.0.0.2", "10.0.0.1"], ["10.0.0.1", "10.0.0.1", "10.0.0.2"])


def test_set_equal_leaves_inputs_untouched() -> None:
    a = ["10.0.0.3", "10.0.0.1"]
    b = ["10.0.0.1", "10.0.0.3"]

    set_equal(a, b)

    assert a == ["10.0.0.3", "10.0.0.1"]
    assert b == ["10.0.0.1", "10.0.0.3"]


def test_unique_domains_keeps_first_seen_order() -> None:
    hosts = ["pd-1.example.com", "pd-2.example.com", "pd-3.example.org"]

    assert unique_domains(hosts) == ["example.com", "example.org"]


def test_unique_domains_skips_short_hosts() -> None:
    assert unique_domains(["localhost", "example.com", "pd-0.svc.local"]) == ["svc.local"]


def test_domain_from_host() -> None:
    assert domain_from_host("basic-pd-0.basic-pd-peer.tidb.svc") == "basic-pd-peer.tidb.svc"
    assert domain_from_host("example.com") == ""


def test_host_from_url() -> None:
    assert host_from_url("https://pd-0.example.com:2380") == "pd-0.example.com"
    assert host_from_url("http://pd-0.example.com/pd/api") == "pd-0.example.com"
    assert host_from_url("pd-0.example.com:2379") == "pd-0.example.com"
    assert host_from_url("https://") == ""


def test_extract_urls_returns_distinct_matches() -> None:
    text = (
        "--initial-cluster=pd-0=https://pd-0.a.example.com:2380,"
        "pd-1=https://pd-1.b.example.com:2380 --join=http://pd-0.a.example.com:2379 "
        "--peer=https://pd-0.a.example.com:2380"
    )

    assert set(extract_urls(text)) == {
        "https://pd-0.a.example.com:2380",
        "https://pd-1.b.example.com:2380",
        "http://pd-0.a.example.com:2379",
    }
    assert len(extract_urls(text)) == 3


def test_extract_urls_without_matches() -> None:
    assert extract_urls("--initial-cluster=pd-0=pd-0:2380") == []


def test_unique_hosts_drops_ports_and_duplicates() -> None:
    urls = ["https://pd-0.a.example.com:2380", "http://pd-0.a.example.com:2379", "https://"]

    assert unique_hosts(urls) == ["pd-0.a.example.com"]
