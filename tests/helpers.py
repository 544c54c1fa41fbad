"""Fakes and builders shared by the transport tests."""
from __future__ import annotations

import asyncio
import json
from typing import Any, List, Optional

import httpx

from core.domain.entities.http_outcome_entity import HttpOutcomeEntity
from core.repositories.http_client import HttpClient

GRAPHQL_URL = "https://api.example.com/graphql"
HERO_HASH = "0f2d8e2c1a7e3b9c5d4f6a8b0c2e4f6a8b0c2e4f6a8b0c2e4f6a8b0c2e4f6a8b"


def http_outcome(status_code: int = 200, body: Any = None, *, raw: Optional[bytes] = None) -> HttpOutcomeEntity:
    """
    Build the outcome an httpx-backed client would report for one response.
    """
    content = raw if raw is not None else (json.dumps(body).encode("utf-8") if body is not None else b"")
    response = httpx.Response(
        status_code,
        content=content,
        request=httpx.Request("POST", GRAPHQL_URL),
    )
    return HttpOutcomeEntity(body=content, response=response)


class ScriptedHttpClient(HttpClient):
    """
    HttpClient returning pre-scripted outcomes in order.

    Forked clients consume the same script and record into the same `sent` log,
    while keeping their own `requests` list.
    """

    def __init__(self, outcomes: List[HttpOutcomeEntity], *, sent: Optional[list] = None) -> None:
        self._outcomes = outcomes
        self.sent: List[httpx.Request] = sent if sent is not None else []
        self.requests: List[httpx.Request] = []
        self.forks: List["ScriptedHttpClient"] = []
        self.gate: Optional[asyncio.Event] = None
        self.closed = False

    async def send(self, request: httpx.Request) -> HttpOutcomeEntity:
        self.requests.append(request)
        self.sent.append(request)
        if self.gate is not None:
            await self.gate.wait()
        return self._outcomes.pop(0)

    def fork(self) -> "ScriptedHttpClient":
        child = ScriptedHttpClient(self._outcomes, sent=self.sent)
        self.forks.append(child)
        return child

    async def aclose(self) -> None:
        self.closed = True


class CompletionRecorder:
    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def __call__(self, response, error) -> None:
        self.calls.append((response, error))

    @property
    def response(self):
        assert len(self.calls) == 1
        return self.calls[0][0]

    @property
    def error(self):
        assert len(self.calls) == 1
        return self.calls[0][1]


def payload_of(request: httpx.Request) -> dict:
    if request.method == "GET":
        params = request.url.params
        payload: dict = {}
        for key in ("extensions", "variables"):
            if key in params:
                payload[key] = json.loads(params[key])
        if "query" in params:
            payload["query"] = params["query"]
        return payload
    return json.loads(request.content)
