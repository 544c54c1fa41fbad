from __future__ import annotations

from abc import ABC, abstractmethod

import httpx

from core.domain.entities.http_outcome_entity import HttpOutcomeEntity


class HttpClient(ABC):
    """
    Abstraction over the HTTP stack used by the GraphQL transport.

    Implementations must not raise for transport-level failures: those are
    reported through HttpOutcomeEntity.error. Cancellation (asyncio.CancelledError)
    is the only exception expected to escape send().
    """

    @abstractmethod
    async def send(self, request: httpx.Request) -> HttpOutcomeEntity:
        """
        Issue one request and return its raw outcome.
        """
        raise NotImplementedError

    @abstractmethod
    def fork(self) -> "HttpClient":
        """
        Build a fresh client sharing this client's configuration (no shared per-call state).
        """
        raise NotImplementedError

    @abstractmethod
    async def aclose(self) -> None:
        """
        Release connections held by this client.
        """
        raise NotImplementedError
