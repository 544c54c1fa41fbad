from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Union

import httpx

from core.domain.entities.graphql_operation_entity import GraphQLOperationEntity
from core.domain.entities.graphql_response_entity import GraphQLResponseEntity
from core.domain.entities.http_outcome_entity import HttpOutcomeEntity
from core.domain.errors import (
    GraphQLHTTPResponseError,
    ProtocolViolationError,
    ResponseErrorKind,
)

PERSISTED_QUERY_NOT_FOUND = "PersistedQueryNotFound"
PERSISTED_QUERY_NOT_SUPPORTED = "PersistedQueryNotSupported"
PERSISTED_QUERY_RETRY_MESSAGES = frozenset({PERSISTED_QUERY_NOT_FOUND, PERSISTED_QUERY_NOT_SUPPORTED})

InterpretedOutcome = Union[GraphQLResponseEntity, BaseException]


def interpret_outcome(operation: GraphQLOperationEntity, outcome: HttpOutcomeEntity) -> InterpretedOutcome:
    """
    Turn a raw HTTP outcome into either a structured response or a terminal error.

    Order matters: transport error, non-HTTP metadata, status, empty body, JSON shape.
    """
    if outcome.error is not None:
        return outcome.error

    response = outcome.response
    if not isinstance(response, httpx.Response):
        return ProtocolViolationError(
            f"Expected an HTTP response, got {type(response).__name__}",
            response=response,
        )

    if not response.is_success:
        return GraphQLHTTPResponseError(
            kind=ResponseErrorKind.ERROR_RESPONSE,
            response=response,
            body=outcome.body,
        )

    if not outcome.body:
        return GraphQLHTTPResponseError(kind=ResponseErrorKind.INVALID_RESPONSE, response=response)

    try:
        body = json.loads(outcome.body)
    except (ValueError, RecursionError):
        body = None

    if not isinstance(body, dict):
        return GraphQLHTTPResponseError(
            kind=ResponseErrorKind.INVALID_RESPONSE,
            response=response,
            body=outcome.body,
        )

    return GraphQLResponseEntity(operation=operation, body=body)


def first_error_message(body: Mapping[str, Any]) -> Optional[str]:
    """
    Return the message of the first entry of `errors` that carries a string message.
    """
    errors = body.get("errors")
    if not isinstance(errors, list):
        return None
    for entry in errors:
        if isinstance(entry, Mapping) and isinstance(entry.get("message"), str):
            return entry["message"]
    return None


def find_persisted_query_error(body: Mapping[str, Any]) -> Optional[str]:
    """
    Return the APQ sentinel message if the server asks for the full query, else None.

    Only the first message-bearing error is considered.
    """
    message = first_error_message(body)
    if message in PERSISTED_QUERY_RETRY_MESSAGES:
        return message
    return None
