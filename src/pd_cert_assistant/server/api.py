"""HTTP surface of a replica: liveness, metrics and the authenticated IP API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, FastAPI
from fastapi.responses import PlainTextResponse, Response

from pd_cert_assistant.adapters.peers.schema import API_ALL_IPS_PATH, API_IPS_PATH

from .auth import UnauthorizedError, bearer_auth, unauthorized_handler

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractAsyncContextManager

    from pd_cert_assistant.common.metrics import AssistantMetrics
    from pd_cert_assistant.domain.state import SharedState


def create_app(
    *,
    state: SharedState,
    metrics: AssistantMetrics,
    bearer_token: str,
    version: str = "unknown",
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
) -> FastAPI:
    """Build the FastAPI app; liveness never depends on reconciliation health."""

    app = FastAPI(title="pd-cert-assistant", version=version, lifespan=lifespan)
    app.add_exception_handler(UnauthorizedError, unauthorized_handler)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return f"Up and running. Version: {version}"

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> str:
        return "Health is OK"

    @app.get("/metrics")
    async def prometheus_metrics() -> Response:
        body, content_type = metrics.render()
        return Response(content=body, media_type=content_type)

    router = APIRouter(dependencies=[Depends(bearer_auth(bearer_token))])

    @router.get(API_IPS_PATH)
    async def local_ips() -> list[str]:
        return list(state.local.get().addresses)

    @router.get(API_ALL_IPS_PATH)
    async def all_ips() -> list[str]:
        return list(state.aggregate.get().addresses)

    app.include_router(router)
    return app
