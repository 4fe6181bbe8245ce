from __future__ import annotations

import asyncio

import pytest

from pd_cert_assistant.domain.aggregation import FetchKind, PeerAggregator, views_agree
from pd_cert_assistant.domain.errors import (
    ConsensusMismatchError,
    EmptyResultError,
    StatusError,
    TransportError,
)
from tests.support.fakes import FakePeerSource, server_error

PEERS = ["https://a:443", "https://b:443", "https://c:443"]


def _aggregator(
    source: FakePeerSource, errors: list[tuple[str, FetchKind]], **kwargs: int
) -> PeerAggregator:
    return PeerAggregator(
        source=source,
        on_fetch_error=lambda peer, kind: errors.append((peer, kind)),
        **kwargs,
    )


def test_views_agree_ignores_order() -> None:
    views = [["A", "B", "C"], ["C", "B", "A"], ["A", "B", "C"]]

    assert views_agree(views)


def test_views_agree_detects_mismatch() -> None:
    assert not views_agree([["A", "B"], ["A", "C"]])
    assert views_agree([])
    assert views_agree([["A"]])


def test_aggregate_concatenates_in_peer_order_keeping_duplicates() -> None:
    source = FakePeerSource(
        local={
            PEERS[0]: ["10.0.0.1", "10.0.0.2"],
            PEERS[1]: ["10.1.0.1"],
            PEERS[2]: ["10.0.0.1"],
        }
    )
    errors: list[tuple[str, FetchKind]] = []

    result = asyncio.run(_aggregator(source, errors).aggregate(PEERS))

    assert result == ["10.0.0.1", "10.0.0.2", "10.1.0.1", "10.0.0.1"]
    assert errors == []


def test_aggregate_aborts_when_one_peer_fails() -> None:
    source = FakePeerSource(
        local={PEERS[0]: ["10.0.0.1"], PEERS[1]: server_error(PEERS[1]), PEERS[2]: ["10.2.0.1"]}
    )
    errors: list[tuple[str, FetchKind]] = []

    with pytest.raises(StatusError):
        asyncio.run(_aggregator(source, errors).aggregate(PEERS))

    assert errors == [(PEERS[1], FetchKind.LOCAL)]


def test_aggregate_aborts_on_empty_peer_view() -> None:
    source = FakePeerSource(local={PEERS[0]: ["10.0.0.1"], PEERS[1]: [], PEERS[2]: ["10.2.0.1"]})
    errors: list[tuple[str, FetchKind]] = []

    with pytest.raises(EmptyResultError):
        asyncio.run(_aggregator(source, errors).aggregate(PEERS))

    assert errors == [(PEERS[1], FetchKind.LOCAL)]


def test_sequential_aggregate_stops_at_first_failure() -> None:
    source = FakePeerSource(
        local={
            PEERS[0]: TransportError("connection refused"),
            PEERS[1]: ["10.1.0.1"],
            PEERS[2]: server_error(PEERS[2]),
        }
    )
    errors: list[tuple[str, FetchKind]] = []

    with pytest.raises(TransportError):
        asyncio.run(_aggregator(source, errors).aggregate(PEERS))

    assert source.calls == [("local", PEERS[0])]
    assert errors == [(PEERS[0], FetchKind.LOCAL)]


def test_concurrent_aggregate_reports_every_failure_in_flight() -> None:
    source = FakePeerSource(
        local={
            PEERS[0]: TransportError("connection refused"),
            PEERS[1]: ["10.1.0.1"],
            PEERS[2]: server_error(PEERS[2]),
        },
        pause=True,
    )
    errors: list[tuple[str, FetchKind]] = []

    with pytest.raises(TransportError):
        asyncio.run(_aggregator(source, errors, max_concurrency=3).aggregate(PEERS))

    assert errors == [(PEERS[0], FetchKind.LOCAL), (PEERS[2], FetchKind.LOCAL)]


def test_validate_consensus_passes_for_permutations() -> None:
    source = FakePeerSource(
        aggregate={
            PEERS[0]: ["A", "B", "C"],
            PEERS[1]: ["C", "B", "A"],
            PEERS[2]: ["A", "B", "C"],
        }
    )

    asyncio.run(_aggregator(source, []).validate_consensus(PEERS))

    assert [kind for kind, _ in source.calls] == ["all", "all", "all"]


def test_validate_consensus_rejects_disagreement() -> None:
    source = FakePeerSource(aggregate={PEERS[0]: ["A", "B"], PEERS[1]: ["A", "C"]})

    with pytest.raises(ConsensusMismatchError, match=PEERS[1]):
        asyncio.run(_aggregator(source, []).validate_consensus(PEERS[:2]))


def test_validate_consensus_counts_fetch_errors_as_all_kind() -> None:
    source = FakePeerSource(aggregate={PEERS[0]: ["A"], PEERS[1]: server_error(PEERS[1])})
    errors: list[tuple[str, FetchKind]] = []

    with pytest.raises(StatusError):
        asyncio.run(_aggregator(source, errors).validate_consensus(PEERS[:2]))

    assert errors == [(PEERS[1], FetchKind.ALL)]
