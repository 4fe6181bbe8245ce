"""HTTP exposition layer."""

from __future__ import annotations

from .api import create_app
from .auth import UNAUTHORIZED_BODY, UnauthorizedError, bearer_auth

__all__ = ["UNAUTHORIZED_BODY", "UnauthorizedError", "bearer_auth", "create_app"]
