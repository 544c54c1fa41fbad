"""
Builds the HTTP requests sent for a GraphQL operation.

Wire format (GraphQL over HTTP):
  POST body   { "query": "...", "variables": {...}, "extensions": {"persistedQuery": {...}} }
  GET params  same fields, nested objects JSON-encoded as strings

Automatic Persisted Queries:
  - first attempt for queries: hash only (extensions.persistedQuery), GET or POST
  - retry after PersistedQueryNotFound/NotSupported: POST with hash AND query
  - mutations/subscriptions, or APQ disabled: POST with the full query
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from core.domain.entities.graphql_operation_entity import GraphQLOperationEntity
from core.domain.entities.transport_config_entity import TransportConfigEntity
from core.domain.errors import PersistedQueryConfigurationError
from core.services.query_document_service import QueryDocumentService

logger = logging.getLogger(__name__)

OPERATION_ID_HEADER = "X-APOLLO-OPERATION-ID"
PERSISTED_QUERY_VERSION = 1

# Header values may be absent; absent values are never set on the request
OptionalHeaders = Mapping[str, Optional[str]]


def request_headers(
    operation: GraphQLOperationEntity,
    extra_headers: Optional[OptionalHeaders] = None,
) -> Dict[str, Optional[str]]:
    headers: Dict[str, Optional[str]] = dict(extra_headers or {})
    headers.update(
        {
            "Accept": "application/json",
            "Content-Type": "application/json",
            OPERATION_ID_HEADER: operation.operation_identifier,
        }
    )
    return headers


def request_body(
    operation: GraphQLOperationEntity,
    *,
    send_query_document: bool,
    auto_persist_queries: bool,
) -> Dict[str, Any]:
    """
    Build the GraphQL payload for one attempt.

    Raises:
        PersistedQueryConfigurationError: auto_persist_queries without an operation identifier.
    """
    payload: Dict[str, Any] = {}

    if auto_persist_queries:
        if not operation.operation_identifier:
            raise PersistedQueryConfigurationError(
                "Automatic persisted queries require an operation_identifier on the operation"
            )
        payload["extensions"] = {
            "persistedQuery": {
                "sha256Hash": operation.operation_identifier,
                "version": PERSISTED_QUERY_VERSION,
            }
        }

    variables = {k: v for k, v in (operation.variables or {}).items() if v is not None}
    if variables:
        payload["variables"] = variables

    if send_query_document:
        payload["query"] = QueryDocumentService.normalize(operation.query_document)

    return payload


def request_query_params(payload: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """
    Flatten a payload into URL query items.

    Mappings are JSON-encoded, strings pass through, anything else is skipped.
    A field that cannot be encoded is logged and left out.
    """
    params: List[Tuple[str, str]] = []
    for key, value in payload.items():
        if isinstance(value, Mapping):
            try:
                params.append((key, json.dumps(value, separators=(",", ":"))))
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping GET parameter %s: not JSON serializable (%s)", key, exc)
        elif isinstance(value, str):
            params.append((key, value))
    return params


def _set_headers(headers: OptionalHeaders) -> Dict[str, str]:
    return {k: v for k, v in headers.items() if v is not None}


def build_request(
    url: str,
    operation: GraphQLOperationEntity,
    headers: OptionalHeaders,
    *,
    send_query_document: bool,
    auto_persist_queries: bool,
    use_get: bool,
) -> httpx.Request:
    payload = request_body(
        operation,
        send_query_document=send_query_document,
        auto_persist_queries=auto_persist_queries,
    )

    if use_get:
        return httpx.Request(
            "GET",
            url,
            params=request_query_params(payload),
            headers=_set_headers(headers),
        )

    return httpx.Request(
        "POST",
        url,
        content=json.dumps(payload).encode("utf-8"),
        headers=_set_headers(headers),
    )


def first_attempt_request(
    config: TransportConfigEntity,
    operation: GraphQLOperationEntity,
    headers: OptionalHeaders,
) -> httpx.Request:
    if not operation.is_query or not config.enable_auto_persisted_queries:
        return build_request(
            config.url,
            operation,
            headers,
            send_query_document=True,
            auto_persist_queries=False,
            use_get=False,
        )

    return build_request(
        config.url,
        operation,
        headers,
        send_query_document=False,
        auto_persist_queries=True,
        use_get=config.use_get_for_persisted_queries,
    )


def retry_request(
    config: TransportConfigEntity,
    operation: GraphQLOperationEntity,
    headers: OptionalHeaders,
) -> httpx.Request:
    """
    Request sent after the server reported an unknown/unsupported persisted query.

    Sends the hash together with the document so the server can register it.
    """
    return build_request(
        config.url,
        operation,
        headers,
        send_query_document=True,
        auto_persist_queries=operation.is_query and config.enable_auto_persisted_queries,
        use_get=False,
    )
