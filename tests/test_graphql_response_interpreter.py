from __future__ import annotations

import httpx
import pytest

from adapters.external.graphql.graphql_response_interpreter import (
    find_persisted_query_error,
    interpret_outcome,
)
from core.domain.entities.graphql_response_entity import GraphQLResponseEntity
from core.domain.entities.http_outcome_entity import HttpOutcomeEntity
from core.domain.errors import GraphQLHTTPResponseError, ProtocolViolationError, ResponseErrorKind
from tests.helpers import http_outcome


def test_transport_error_is_returned_as_is(hero_query):
    error = httpx.ConnectError("connection refused")

    assert interpret_outcome(hero_query, HttpOutcomeEntity.failure(error)) is error


@pytest.mark.parametrize("response", [None, object(), "HTTP/1.1 200 OK"])
def test_non_http_metadata_is_a_protocol_violation(hero_query, response):
    result = interpret_outcome(hero_query, HttpOutcomeEntity(body=b"{}", response=response))

    assert isinstance(result, ProtocolViolationError)


def test_server_error_status_is_error_response(hero_query):
    result = interpret_outcome(hero_query, http_outcome(500, raw=b"upstream exploded"))

    assert isinstance(result, GraphQLHTTPResponseError)
    assert result.kind is ResponseErrorKind.ERROR_RESPONSE
    assert result.status_code == 500
    assert result.body == b"upstream exploded"
    assert str(result) == "Received error response (500 Internal Server Error): upstream exploded"


def test_error_status_wins_over_graphql_body(hero_query):
    result = interpret_outcome(hero_query, http_outcome(400, {"errors": [{"message": "PersistedQueryNotFound"}]}))

    assert isinstance(result, GraphQLHTTPResponseError)
    assert result.kind is ResponseErrorKind.ERROR_RESPONSE


def test_empty_body_is_invalid_response(hero_query):
    result = interpret_outcome(hero_query, http_outcome(200, raw=b""))

    assert isinstance(result, GraphQLHTTPResponseError)
    assert result.kind is ResponseErrorKind.INVALID_RESPONSE
    assert result.body is None
    assert result.body_description == "Empty response body"


@pytest.mark.parametrize("raw", [b"<html>nope</html>", b"[1, 2, 3]", b'"data"', b"\xc3\x28"])
def test_non_object_body_is_invalid_response(hero_query, raw):
    result = interpret_outcome(hero_query, http_outcome(200, raw=raw))

    assert isinstance(result, GraphQLHTTPResponseError)
    assert result.kind is ResponseErrorKind.INVALID_RESPONSE
    assert result.body == raw


def test_undecodable_body_description(hero_query):
    result = interpret_outcome(hero_query, http_outcome(502, raw=b"\xff\xfe\xfa"))

    assert result.body_description == "Unreadable response body"


def test_json_object_becomes_structured_response(hero_query):
    body = {"data": {"hero": {"name": "R2-D2"}}, "errors": [{"message": "partial"}]}
    result = interpret_outcome(hero_query, http_outcome(200, body))

    assert isinstance(result, GraphQLResponseEntity)
    assert result.body == body
    assert result.data == {"hero": {"name": "R2-D2"}}
    assert result.errors == [{"message": "partial"}]
    assert result.operation is hero_query


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"errors": [{"message": "PersistedQueryNotFound"}]}, "PersistedQueryNotFound"),
        ({"errors": [{"message": "PersistedQueryNotSupported"}]}, "PersistedQueryNotSupported"),
        ({"errors": [{"extensions": {}}, {"message": "PersistedQueryNotFound"}]}, "PersistedQueryNotFound"),
        ({"errors": [{"message": "SomeOtherError"}, {"message": "PersistedQueryNotFound"}]}, None),
        ({"errors": [{"message": "persistedquerynotfound"}]}, None),
        ({"errors": [{"code": 1}]}, None),
        ({"errors": "PersistedQueryNotFound"}, None),
        ({"data": {}}, None),
    ],
)
def test_find_persisted_query_error(body, expected):
    assert find_persisted_query_error(body) == expected


def test_deeply_nested_body_is_invalid_response(hero_query):
    raw = b"[" * 200000
    result = interpret_outcome(hero_query, http_outcome(200, raw=raw))

    assert isinstance(result, GraphQLHTTPResponseError)
    assert result.kind is ResponseErrorKind.INVALID_RESPONSE
    assert result.body == raw
