from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional, Union

import httpx

from adapters.external.graphql.graphql_request_builder import (
    OptionalHeaders,
    first_attempt_request,
    request_headers,
    retry_request,
)
from adapters.external.graphql.graphql_response_interpreter import (
    find_persisted_query_error,
    interpret_outcome,
)
from adapters.external.http.httpx_http_client import HttpxHttpClient
from core.domain.entities.graphql_operation_entity import GraphQLOperationEntity
from core.domain.entities.graphql_response_entity import GraphQLResponseEntity
from core.domain.entities.transport_config_entity import TransportConfigEntity
from core.repositories.http_client import HttpClient

CompletionHandler = Callable[[Optional[GraphQLResponseEntity], Optional[BaseException]], None]


class SendState(str, Enum):
    IDLE = "idle"
    ATTEMPT_SENT = "attempt_sent"
    RETRY_PENDING = "retry_pending"
    RETRY_SENT = "retry_sent"
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


class OperationHandle:
    """
    Returned by HttpNetworkTransport.send() before any network activity resolves.

    cancel() only stops the first attempt. Once the persisted-query retry has
    started the call runs to completion and cancel() returns False.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task | None = None
        self._state = SendState.IDLE

    @property
    def state(self) -> SendState:
        return self._state

    def bind(self, task: asyncio.Task) -> None:
        """Attach the task running this call. A handle is bound once."""
        if self._task is not None:
            raise RuntimeError("OperationHandle is already bound to a task")
        self._task = task

    def transition(self, state: SendState) -> None:
        self._state = state

    def cancel(self) -> bool:
        if self._task is None or self._task.done():
            return False
        if self._state not in (SendState.IDLE, SendState.ATTEMPT_SENT):
            return False
        return self._task.cancel()

    def cancelled(self) -> bool:
        return self._state == SendState.CANCELLED or (self._task is not None and self._task.cancelled())

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    async def wait(self) -> None:
        """Wait until the call has finished (delivered, failed or cancelled)."""
        if self._task is not None:
            await asyncio.wait({self._task})


class HttpNetworkTransport:
    """
    Sends GraphQL operations over HTTP, with Automatic Persisted Queries support.

    Protocol for queries when APQ is enabled:
      1. send only the operation hash (GET or POST)
      2. if the server answers PersistedQueryNotFound / PersistedQueryNotSupported,
         send hash + full query once, through a fresh client with the same config
      3. deliver exactly one of (response, error) to the completion handler

    The retry is awaited inside the completion path of the first attempt, so a
    call holds its task until the retry resolves. Under high retry volume this
    costs one pending task per in-flight retry.
    """

    def __init__(
        self,
        config: TransportConfigEntity,
        *,
        http_client: Optional[HttpClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._owns_http_client = http_client is None
        self._http = http_client or HttpxHttpClient(config=config.http, transport=transport)
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def config(self) -> TransportConfigEntity:
        return self._config

    async def __aenter__(self) -> "HttpNetworkTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    def send(self, operation: GraphQLOperationEntity, completion: CompletionHandler) -> OperationHandle:
        """
        Start sending `operation` and return a cancellation handle immediately.

        Must be called from a running event loop. Configuration errors (persisted
        queries without an operation identifier) are raised here, not delivered.
        """
        headers = request_headers(operation, self._config.http.extra_headers)
        request = first_attempt_request(self._config, operation, headers)

        handle = OperationHandle()
        handle.bind(asyncio.get_running_loop().create_task(
            self._run(operation, headers, request, completion, handle)
        ))
        return handle

    async def fetch(self, operation: GraphQLOperationEntity) -> GraphQLResponseEntity:
        """
        Awaitable form of send(): return the response or raise the delivered error.
        """
        future: asyncio.Future = asyncio.get_running_loop().create_future()

        def _complete(response: Optional[GraphQLResponseEntity], error: Optional[BaseException]) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(response)

        handle = self.send(operation, _complete)
        try:
            return await future
        except asyncio.CancelledError:
            handle.cancel()
            raise

    async def _run(
        self,
        operation: GraphQLOperationEntity,
        headers: OptionalHeaders,
        request: httpx.Request,
        completion: CompletionHandler,
        handle: OperationHandle,
    ) -> None:
        handle.transition(SendState.ATTEMPT_SENT)
        self._logger.debug(
            "Sending %s %s (%s) %s",
            operation.kind.value,
            operation.operation_name or "<anonymous>",
            operation.operation_identifier,
            request.method,
        )
        try:
            result = await self._exchange(operation, headers, request, handle)
        except asyncio.CancelledError:
            handle.transition(SendState.CANCELLED)
            self._logger.debug("Send cancelled for %s", operation.operation_name or "<anonymous>")
            raise
        except Exception as exc:
            # Nobody awaits this task: the handler is the only way out
            self._logger.exception("Unexpected error while sending %s: %s", operation.operation_identifier, exc)
            result = exc

        if isinstance(result, BaseException):
            self._deliver(completion, handle, None, result)
        else:
            self._deliver(completion, handle, result, None)

    async def _exchange(
        self,
        operation: GraphQLOperationEntity,
        headers: OptionalHeaders,
        request: httpx.Request,
        handle: OperationHandle,
    ) -> Union[GraphQLResponseEntity, BaseException]:
        outcome = await self._http.send(request)

        result = interpret_outcome(operation, outcome)
        if isinstance(result, BaseException):
            return result

        message = find_persisted_query_error(result.body)
        if message is None:
            return result

        handle.transition(SendState.RETRY_PENDING)
        self._logger.info(
            "Server answered %s for %s; retrying with the full query document",
            message,
            operation.operation_identifier,
        )
        retry = retry_request(self._config, operation, headers)

        handle.transition(SendState.RETRY_SENT)
        return await self._send_retry(operation, retry)

    async def _send_retry(
        self,
        operation: GraphQLOperationEntity,
        request: httpx.Request,
    ) -> Union[GraphQLResponseEntity, BaseException]:
        client = self._http.fork()
        try:
            outcome = await client.send(request)
        finally:
            await client.aclose()
        # Always the retry's own body, never the first attempt's
        return interpret_outcome(operation, outcome)

    def _deliver(
        self,
        completion: CompletionHandler,
        handle: OperationHandle,
        response: Optional[GraphQLResponseEntity],
        error: Optional[BaseException],
    ) -> None:
        if error is not None:
            handle.transition(SendState.FAILURE)
            self._logger.warning("GraphQL request failed: %s", error)
        else:
            handle.transition(SendState.SUCCESS)

        try:
            completion(response, error)
        except Exception as exc:
            self._logger.exception("Completion handler raised: %s", exc)
