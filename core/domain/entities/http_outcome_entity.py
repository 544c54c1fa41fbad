from __future__ import annotations

from typing import Any, Optional

from core.domain.entities.base_entity import DomainEntity


class HttpOutcomeEntity(DomainEntity):
    """
    Raw result of one HTTP round trip, as reported by an HttpClient.

    - error: transport-level failure (connection refused, timeout, ...)
    - response: response metadata; an httpx.Response for HTTP clients
    - body: raw response bytes, None when nothing was read
    """

    body: Optional[bytes] = None
    response: Optional[Any] = None
    error: Optional[BaseException] = None

    @classmethod
    def failure(cls, error: BaseException) -> "HttpOutcomeEntity":
        return cls(error=error)
