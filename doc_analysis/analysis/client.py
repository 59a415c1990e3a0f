"""Async client for Document Intelligence analyze operations.

``analyze`` runs one document through the long-running-operation protocol:

    resolve content type -> get token -> POST :analyze -> poll operation-location -> extract

Nothing is retried across the whole sequence; only polling repeats, bounded by
``AnalysisConfig.max_attempts``.  Failures surface as ``AnalysisError``
subclasses tagged with the step that produced them.
"""

from __future__ import annotations

import asyncio
from types import TracebackType

import httpx

from doc_analysis import content_types
from doc_analysis.analysis.backoff import Backoff, backoff_for
from doc_analysis.analysis.extractor import extract
from doc_analysis.analysis.poller import OperationPoller, Sleep
from doc_analysis.analysis.submitter import OperationSubmitter
from doc_analysis.config import AnalysisConfig
from doc_analysis.credentials import TokenProvider
from doc_analysis.errors import AnalysisError
from doc_analysis.events import AnalysisEventSink, LoggingEventSink
from doc_analysis.models import AnalysisResult, Document


class AnalysisClient:
    def __init__(
        self,
        *,
        cfg: AnalysisConfig,
        tokens: TokenProvider,
        events: AnalysisEventSink | None = None,
        http: httpx.AsyncClient | None = None,
        backoff: Backoff | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._cfg = cfg
        self._tokens = tokens
        self._events = events or LoggingEventSink()
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=cfg.request_timeout_s)
        self._backoff = backoff or backoff_for(
            cfg.backoff, interval_s=cfg.poll_interval_s, max_s=cfg.backoff_max_s
        )
        self._submitter = OperationSubmitter(self._http)
        self._poller = OperationPoller(self._http, events=self._events, sleep=sleep)

    async def __aenter__(self) -> AnalysisClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def analyze(
        self,
        document: Document,
        model_name: str | None = None,
        *,
        cancel_event: asyncio.Event | None = None,
        timeout_s: float | None = None,
    ) -> AnalysisResult:
        """Analyze ``document`` with ``model_name`` (default: the configured project).

        ``cancel_event`` aborts polling as soon as it is set, including an
        in-flight status request; ``timeout_s`` sets it after that many
        seconds.  Either way the call fails with ``AnalysisCancelled``.  The
        initial submission is not interrupted, and the remote operation is
        left running.
        """
        model = model_name or self._cfg.project_name

        timer: asyncio.TimerHandle | None = None
        if timeout_s is not None:
            cancel_event = cancel_event or asyncio.Event()
            timer = asyncio.get_running_loop().call_later(timeout_s, cancel_event.set)

        try:
            return await self._run(document, model, cancel_event)
        except AnalysisError as e:
            self._events.on_failed(document_name=document.name, error=e)
            raise
        finally:
            if timer is not None:
                timer.cancel()

    async def _run(
        self, document: Document, model: str, cancel_event: asyncio.Event | None
    ) -> AnalysisResult:
        content_type = content_types.resolve(document.name)

        access_token = await self._tokens.get_token()

        self._events.on_submission_started(
            document_name=document.name,
            size=document.size,
            model=model,
            content_type=content_type,
        )
        operation_location = await self._submitter.submit(
            analyze_url=self._cfg.analyze_url(model),
            document=document,
            content_type=content_type,
            access_token=access_token,
        )
        self._events.on_submitted(document_name=document.name, operation_location=operation_location)

        completed = await self._poller.poll(
            operation_location,
            access_token,
            max_attempts=self._cfg.max_attempts,
            backoff=self._backoff,
            document_name=document.name,
            cancel_event=cancel_event,
        )

        result = extract(completed.payload)
        self._events.on_succeeded(document_name=document.name, attempts=completed.attempts)
        return result
