"""Bearer-token authentication for the peer API."""

from __future__ import annotations

import secrets
from logging import getLogger
from typing import TYPE_CHECKING, Annotated

from fastapi import Header, Request
from fastapi.responses import JSONResponse

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)

UNAUTHORIZED_BODY = {"error": "Unauthorized"}


class UnauthorizedError(Exception):
    """Raised by the auth dependency; rendered as a 401 with a JSON error body."""


def bearer_auth(token: str) -> Callable[..., Awaitable[None]]:
    """Build a dependency that only admits ``Authorization: Bearer <token>``."""

    expected = token.encode("utf-8")

    async def verify_bearer_token(
        authorization: Annotated[str | None, Header()] = None,
    ) -> None:
        parts = (authorization or "").split(" ")
        if len(parts) != 2 or parts[0] != "Bearer":
            log.warning("Missing or invalid Authorization header")
            raise UnauthorizedError
        if not secrets.compare_digest(parts[1].encode("utf-8"), expected):
            log.warning("Invalid bearer token")
            raise UnauthorizedError

    return verify_bearer_token


async def unauthorized_handler(_request: Request, _exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=401, content=UNAUTHORIZED_BODY)
