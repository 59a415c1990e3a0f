"""Lifecycle event sink for the analysis client.

The client reports what happens (submission, each poll, outcome) through an
``AnalysisEventSink``; formatting and destination are the sink's business.
``LoggingEventSink`` is the default and writes through stdlib logging.
"""

from __future__ import annotations

import logging
from typing import Protocol

from doc_analysis.errors import AnalysisError
from doc_analysis.models import ContentType, OperationStatus

logger = logging.getLogger(__name__)


class AnalysisEventSink(Protocol):
    def on_submission_started(
        self, *, document_name: str, size: int, model: str, content_type: ContentType
    ) -> None: ...

    def on_submitted(self, *, document_name: str, operation_location: str) -> None: ...

    def on_poll_attempt(
        self, *, document_name: str, attempt: int, max_attempts: int, status: OperationStatus
    ) -> None: ...

    def on_succeeded(self, *, document_name: str, attempts: int) -> None: ...

    def on_failed(self, *, document_name: str, error: AnalysisError) -> None: ...


class LoggingEventSink:
    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def on_submission_started(
        self, *, document_name: str, size: int, model: str, content_type: ContentType
    ) -> None:
        self._log.info(
            "Analyzing %s (%d bytes, %s) with model: %s",
            document_name,
            size,
            content_type,
            model,
        )

    def on_submitted(self, *, document_name: str, operation_location: str) -> None:
        self._log.info(
            "Analysis started for %s. Operation location: %s",
            document_name,
            operation_location,
        )

    def on_poll_attempt(
        self, *, document_name: str, attempt: int, max_attempts: int, status: OperationStatus
    ) -> None:
        self._log.info(
            "Analysis status for %s (attempt %d/%d): %s",
            document_name,
            attempt,
            max_attempts,
            status,
        )

    def on_succeeded(self, *, document_name: str, attempts: int) -> None:
        self._log.info("Analysis succeeded for %s after %d poll(s)", document_name, attempts)

    def on_failed(self, *, document_name: str, error: AnalysisError) -> None:
        self._log.error(
            "Analysis failed for %s: kind=%s step=%s %s",
            document_name,
            error.kind,
            error.step,
            error.message,
        )
