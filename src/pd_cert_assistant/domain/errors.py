"""Errors raised while reconciling the certificate.

Every per-cycle failure derives from :class:`PdAssistantError` so the loops can
log, count and skip without catching unrelated exceptions.
"""

from __future__ import annotations


class PdAssistantError(RuntimeError):
    """Base class for recoverable, per-cycle failures."""


class TransportError(PdAssistantError):
    """The remote endpoint could not be reached (DNS, connect, TLS, timeout)."""


class StatusError(PdAssistantError):
    """The remote endpoint answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(PdAssistantError):
    """The response body could not be decoded into the expected shape."""


class EmptyResultError(PdAssistantError):
    """An inventory or peer view was unexpectedly empty."""


class DiscoveryError(PdAssistantError):
    """Peer endpoints could not be determined for this cycle."""


class ConsensusMismatchError(PdAssistantError):
    """Peers disagree about the aggregate address set."""


class ResourceNotFoundError(PdAssistantError):
    """The certificate resource does not exist yet."""


class CommitError(PdAssistantError):
    """The resource store rejected a get, create or update."""


__all__ = [
    "CommitError",
    "ConsensusMismatchError",
    "DecodeError",
    "DiscoveryError",
    "EmptyResultError",
    "PdAssistantError",
    "ResourceNotFoundError",
    "StatusError",
    "TransportError",
]
