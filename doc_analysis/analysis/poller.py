from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from doc_analysis.analysis.backoff import Backoff
from doc_analysis.errors import (
    AnalysisCancelled,
    AnalysisStep,
    PollingTimeout,
    PollingTransportFailed,
    ProtocolViolation,
    ServerReportedFailure,
)
from doc_analysis.events import AnalysisEventSink
from doc_analysis.models import OperationStatus

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]

_MAX_ERROR_BODY_CHARS = 4000


@dataclass(frozen=True)
class CompletedOperation:
    payload: dict[str, Any]
    attempts: int


class OperationPoller:
    """Polls an operation-location URI until the operation is terminal.

    One GET per attempt, a backoff wait between non-terminal attempts and no
    wait after the last one.  HTTP errors are not retried: only a non-terminal
    status (``running``, ``notStarted``, anything unrecognized or missing)
    leads to another attempt.
    """

    def __init__(self, http: httpx.AsyncClient, *, events: AnalysisEventSink, sleep: Sleep = asyncio.sleep) -> None:
        self._http = http
        self._events = events
        self._sleep = sleep

    async def poll(
        self,
        operation_location: str,
        access_token: str,
        *,
        max_attempts: int,
        backoff: Backoff,
        document_name: str = "",
        cancel_event: asyncio.Event | None = None,
    ) -> CompletedOperation:
        """Return the terminal ``succeeded`` payload and the attempts it took.

        Raises:
            PollingTransportFailed: non-2xx response or transport error.
            ProtocolViolation: response body is not a JSON object.
            ServerReportedFailure: the operation reported ``failed``.
            PollingTimeout: ``max_attempts`` used without a terminal status.
            AnalysisCancelled: ``cancel_event`` was set, either between attempts
                or while a status request or wait was in progress.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        headers = {"Authorization": f"Bearer {access_token}"}
        for attempt in range(1, max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise AnalysisCancelled(attempts_made=attempt - 1)

            cancelled, payload = await self._race(self._fetch(operation_location, headers, attempt), cancel_event)
            if cancelled:
                raise AnalysisCancelled(attempts_made=attempt - 1)
            status = OperationStatus.parse(payload.get("status"))
            self._events.on_poll_attempt(
                document_name=document_name,
                attempt=attempt,
                max_attempts=max_attempts,
                status=status,
            )

            if status is OperationStatus.SUCCEEDED:
                return CompletedOperation(payload=payload, attempts=attempt)
            if status is OperationStatus.FAILED:
                raise ServerReportedFailure(payload.get("error") or payload, attempt=attempt)

            if status is OperationStatus.UNKNOWN and "status" in payload:
                logger.debug("Unrecognized operation status %r; still polling", payload.get("status"))

            if attempt < max_attempts:
                cancelled, _ = await self._race(self._sleep(backoff(attempt)), cancel_event)
                if cancelled:
                    raise AnalysisCancelled(attempts_made=attempt)

        raise PollingTimeout(attempts_made=max_attempts, max_attempts=max_attempts)

    async def _fetch(self, url: str, headers: dict[str, str], attempt: int) -> dict[str, Any]:
        try:
            resp = await self._http.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise PollingTransportFailed(status=None, attempt=attempt, reason=f"{type(e).__name__}: {e}") from e

        if not resp.is_success:
            raise PollingTransportFailed(
                status=resp.status_code,
                attempt=attempt,
                response_body=resp.text[:_MAX_ERROR_BODY_CHARS],
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise ProtocolViolation(
                f"Operation status response is not JSON (attempt {attempt})", step=AnalysisStep.POLL
            ) from e
        if not isinstance(body, dict):
            raise ProtocolViolation(
                f"Operation status response is not a JSON object (attempt {attempt})", step=AnalysisStep.POLL
            )
        return body

    async def _race(self, aw: Awaitable[Any], cancel_event: asyncio.Event | None) -> tuple[bool, Any]:
        """Await ``aw`` unless ``cancel_event`` fires first.

        Returns ``(cancelled, result)``; ``aw`` is cancelled when the event wins.
        """
        if cancel_event is None:
            return False, await aw

        task = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for t in (task, waiter):
                if not t.done():
                    t.cancel()

        if task.done():
            return False, task.result()
        return True, None
