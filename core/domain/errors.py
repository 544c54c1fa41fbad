from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class GraphQLTransportError(Exception):
    """Base class for errors raised or delivered by the GraphQL transport."""


class TransportConfigurationError(GraphQLTransportError):
    """
    The transport was configured with values it cannot work with
    (e.g. a malformed target URL).
    """


class PersistedQueryConfigurationError(GraphQLTransportError, ValueError):
    """
    Persisted queries were requested for an operation without an operation identifier.

    This is a caller configuration error: it is raised while building the request
    and never delivered through the completion callback.
    """


class ProtocolViolationError(GraphQLTransportError):
    """
    The HTTP client returned response metadata that is not an HTTP response.
    """

    def __init__(self, message: str, *, response: Any = None) -> None:
        super().__init__(message)
        self.response = response


class ResponseErrorKind(str, Enum):
    ERROR_RESPONSE = "errorResponse"
    INVALID_RESPONSE = "invalidResponse"

    @property
    def description(self) -> str:
        if self is ResponseErrorKind.ERROR_RESPONSE:
            return "Received error response"
        return "Received invalid response"


class GraphQLHTTPResponseError(GraphQLTransportError):
    """
    A transport-level, HTTP-specific error.

    Carries the raw body and the httpx response for diagnostics.
    """

    def __init__(self, *, kind: ResponseErrorKind, response: Any, body: Optional[bytes] = None) -> None:
        self.kind = kind
        self.response = response
        self.body = body
        super().__init__(self.error_description)

    @property
    def status_code(self) -> int:
        return int(self.response.status_code)

    @property
    def body_description(self) -> str:
        if self.body is None:
            return "Empty response body"
        encoding = getattr(self.response, "charset_encoding", None) or "utf-8"
        try:
            return self.body.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            return "Unreadable response body"

    @property
    def error_description(self) -> str:
        reason = getattr(self.response, "reason_phrase", "") or ""
        return f"{self.kind.description} ({self.response.status_code} {reason}): {self.body_description}"
