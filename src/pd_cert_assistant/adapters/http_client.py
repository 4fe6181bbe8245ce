"""Async HTTP client shared by the peer and discovery adapters.

No retries and no caching: a failed call fails the current cycle and the
polling interval takes care of trying again.
"""

from __future__ import annotations

import ssl
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx

from pd_cert_assistant.domain.errors import DecodeError, StatusError, TransportError

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes, URLTypes

    from pd_cert_assistant.config.http_client import ClientConfig, TLSConfig


class RequestOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    headers: HeaderTypes | None


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    verify: ssl.SSLContext | bool
    transport: httpx.AsyncBaseTransport


def build_ssl_context(tls: TLSConfig) -> ssl.SSLContext | bool:
    """Translate TLS settings into what ``httpx`` expects for ``verify``."""

    if tls.ca_path is None and tls.client_cert is None:
        return not tls.insecure

    try:
        context = ssl.create_default_context(cafile=tls.ca_path)
        if tls.client_cert is not None:
            cert_path, key_path = tls.client_cert
            context.load_cert_chain(certfile=cert_path, keyfile=key_path)
    except OSError as exc:
        raise TransportError(f"Failed to load TLS files: {exc}") from exc
    if tls.insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class HttpClient:
    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config

        headers = dict(config.default_headers) if config.default_headers else {}
        if config.bearer_token:
            headers["Authorization"] = f"Bearer {config.bearer_token}"

        client_kwargs: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "verify": build_ssl_context(config.tls),
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if headers:
            client_kwargs["headers"] = headers
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        """GET ``url`` and return the response, which is guaranteed to be a 200."""

        try:
            response = await self._client.get(url, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to make HTTP request to {url}: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise StatusError(
                f"Received non-OK HTTP status from {url}: "
                f"{response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        return response

    async def get_text(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> str:
        response = await self.get(url, **kwargs)
        try:
            return response.text
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Failed to read response body from {url}: {exc}") from exc

    async def get_json(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> object:
        response = await self.get(url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"Failed to parse JSON response from {url}: {exc}") from exc


def default_client_factory(config: ClientConfig) -> HttpClient:
    return HttpClient(config)


__all__ = ["HttpClient", "RequestOptions", "build_ssl_context", "default_client_factory"]
