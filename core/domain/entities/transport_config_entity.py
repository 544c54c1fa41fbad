from __future__ import annotations

from typing import Dict, Optional

import httpx
from pydantic import Field, field_validator

from core.domain.entities.base_entity import DomainEntity
from core.domain.errors import TransportConfigurationError


class HttpClientConfigEntity(DomainEntity):
    """
    Configuration shared by every HTTP client the transport builds.

    The retry path constructs a fresh client from this same value.
    """

    timeout_s: float = Field(20.0, gt=0)
    connect_timeout_s: float = Field(5.0, gt=0)
    follow_redirects: bool = False

    # Sent with every request; None values are not set
    extra_headers: Dict[str, Optional[str]] = Field(default_factory=dict)

    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s)


class TransportConfigEntity(DomainEntity):
    """
    Transport configuration, fixed at construction.

    enable_auto_persisted_queries:
      send the operation identifier instead of the full text for queries.
    use_get_for_persisted_queries:
      send the hash-only first attempt as a GET request.
    """

    url: str
    http: HttpClientConfigEntity = Field(default_factory=HttpClientConfigEntity)
    enable_auto_persisted_queries: bool = False
    use_get_for_persisted_queries: bool = False

    @field_validator("url")
    @classmethod
    def _validate_url(cls, v: str) -> str:
        v = (v or "").strip()
        try:
            parsed = httpx.URL(v)
        except (httpx.InvalidURL, TypeError) as exc:
            raise TransportConfigurationError(f"Invalid GraphQL endpoint url: {v!r}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise TransportConfigurationError(
                f"Invalid GraphQL endpoint url: {v!r}. Must be an absolute http(s) URL."
            )
        return v
