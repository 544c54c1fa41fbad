from __future__ import annotations

import logging
from typing import Optional

import httpx

from core.domain.entities.http_outcome_entity import HttpOutcomeEntity
from core.domain.entities.transport_config_entity import HttpClientConfigEntity
from core.repositories.http_client import HttpClient


class SharedTransport(httpx.AsyncBaseTransport):
    """
    Delegates to a caller-owned transport and leaves it open on aclose().

    Lets every HttpxHttpClient built on an injected transport close its own
    AsyncClient without tearing down the transport other clients still use.
    """

    def __init__(self, inner: httpx.AsyncBaseTransport) -> None:
        self._inner = inner

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._inner.handle_async_request(request)

    async def aclose(self) -> None:
        return None


class HttpxHttpClient(HttpClient):
    """
    HttpClient backed by httpx.AsyncClient.

    Transport failures (httpx.RequestError: connect errors, timeouts, ...) are
    returned in the outcome instead of raised.

    transport:
      optional httpx.AsyncBaseTransport (e.g. httpx.MockTransport, httpx.ASGITransport).
      An injected transport is shared with forked clients and stays open when
      they are closed; its owner closes it.
    """

    def __init__(
        self,
        *,
        config: Optional[HttpClientConfigEntity] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config or HttpClientConfigEntity()
        self._transport = transport
        self._logger = logger or logging.getLogger(self.__class__.__name__)
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout(),
            follow_redirects=self._config.follow_redirects,
            transport=SharedTransport(transport) if transport is not None else None,
        )

    @property
    def config(self) -> HttpClientConfigEntity:
        return self._config

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def send(self, request: httpx.Request) -> HttpOutcomeEntity:
        try:
            response = await self._client.send(request)
        except httpx.RequestError as exc:
            self._logger.debug("HTTP %s %s failed: %s", request.method, request.url, exc)
            return HttpOutcomeEntity.failure(exc)

        self._logger.debug(
            "HTTP %s %s -> %s (%s bytes)",
            request.method,
            request.url,
            response.status_code,
            len(response.content),
        )
        return HttpOutcomeEntity(body=response.content, response=response)

    def fork(self) -> "HttpxHttpClient":
        return HttpxHttpClient(config=self._config, transport=self._transport, logger=self._logger)

    async def aclose(self) -> None:
        await self._client.aclose()
