"""Aggregate peer views and check that every peer agrees on the result.

Both operations are all-or-nothing: one unreachable, failing or empty peer
fails the whole call, so a partial membership view can never reach the
certificate.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from pd_cert_assistant.domain.errors import (
    ConsensusMismatchError,
    EmptyResultError,
    PdAssistantError,
)
from pd_cert_assistant.domain.ipset import set_equal

if TYPE_CHECKING:
    from collections.abc import Awaitable, Sequence

    from pd_cert_assistant.domain.ports import PeerViewSource

log = getLogger(__name__)


class FetchKind(StrEnum):
    LOCAL = "local"
    ALL = "all"


FetchErrorHook = Callable[[str, FetchKind], None]


def _ignore_fetch_error(_peer: str, _kind: FetchKind) -> None:
    return None


def views_agree(views: Sequence[Sequence[str]]) -> bool:
    """True when every view is ``set_equal`` to the first one."""

    if not views:
        return True
    reference = views[0]
    return all(set_equal(reference, view) for view in views[1:])


@dataclass(slots=True)
class PeerAggregator:
    source: PeerViewSource
    max_concurrency: int = 1
    on_fetch_error: FetchErrorHook = field(default=_ignore_fetch_error)

    async def aggregate(self, peers: Sequence[str]) -> list[str]:
        """Concatenate every peer's local addresses, in peer order, duplicates kept."""

        views = await self._fetch_all(peers, self.source.fetch_local, FetchKind.LOCAL)
        addresses: list[str] = []
        for peer, ips in zip(peers, views, strict=True):
            log.debug("Fetched local IPs from pd-assistant %s: %s", peer, ips)
            addresses.extend(ips)
        return addresses

    async def validate_consensus(self, peers: Sequence[str]) -> None:
        """Raise ``ConsensusMismatchError`` unless all peers report the same aggregate."""

        views = await self._fetch_all(peers, self.source.fetch_aggregate, FetchKind.ALL)
        if views_agree(views):
            return
        reference = views[0]
        for peer, view in zip(peers[1:], views[1:], strict=True):
            if not set_equal(reference, view):
                log.debug("Sample all IPs from %s: %s", peers[0], reference)
                log.debug("Fetched all IPs from %s: %s", peer, view)
                raise ConsensusMismatchError(
                    f"All IPs are not equal between pd-assistants {peers[0]} and {peer}"
                )

    async def _fetch_all(
        self,
        peers: Sequence[str],
        fetch: Callable[[str], Awaitable[list[str]]],
        kind: FetchKind,
    ) -> list[list[str]]:
        semaphore = asyncio.Semaphore(self.max_concurrency)
        # set on the first failure; peers not yet started are not polled
        failed = asyncio.Event()

        async def fetch_one(peer: str) -> list[str] | None:
            async with semaphore:
                if failed.is_set():
                    log.debug("Not polling pd-assistant %s after an earlier failure", peer)
                    return None
                log.debug("Fetching %s IPs from pd-assistant %s", kind, peer)
                try:
                    ips = await fetch(peer)
                    if not ips:
                        raise EmptyResultError(f"No {kind} IPs found in pd-assistant {peer}")
                except PdAssistantError:
                    failed.set()
                    raise
            return ips

        results = await asyncio.gather(*(fetch_one(peer) for peer in peers), return_exceptions=True)

        views: list[list[str]] = []
        first_error: PdAssistantError | None = None
        for peer, result in zip(peers, results, strict=True):
            if isinstance(result, PdAssistantError):
                self.on_fetch_error(peer, kind)
                log.error("Failed to fetch %s IPs from pd-assistant %s: %s", kind, peer, result)
                first_error = first_error or result
                continue
            if isinstance(result, BaseException):
                raise result
            if result is not None:
                views.append(result)

        if first_error is not None:
            raise first_error
        return views


__all__ = ["FetchErrorHook", "FetchKind", "PeerAggregator", "views_agree"]
