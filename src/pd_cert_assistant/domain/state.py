"""Process-wide address snapshots shared between the loops and the HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(slots=True, frozen=True)
class AddressSnapshot:
    addresses: tuple[str, ...] = ()
    updated_at: datetime | None = None

    def __len__(self) -> int:
        return len(self.addresses)


class SnapshotHolder:
    """Single-writer holder of an immutable :class:`AddressSnapshot`.

    ``replace`` swaps the whole snapshot with one attribute assignment, so readers
    calling ``get`` always see either the old or the new value, never a mix.
    """

    __slots__ = ("_snapshot",)

    def __init__(self) -> None:
        self._snapshot = AddressSnapshot()

    def get(self) -> AddressSnapshot:
        return self._snapshot

    def replace(self, addresses: Iterable[str]) -> AddressSnapshot:
        snapshot = AddressSnapshot(addresses=tuple(addresses), updated_at=datetime.now(UTC))
        self._snapshot = snapshot
        return snapshot


@dataclass(slots=True)
class SharedState:
    # written by the inventory loop only
    local: SnapshotHolder = field(default_factory=SnapshotHolder)
    # written by the reconciliation cycle only
    aggregate: SnapshotHolder = field(default_factory=SnapshotHolder)


__all__ = ["AddressSnapshot", "SharedState", "SnapshotHolder"]
