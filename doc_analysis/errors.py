"""Error taxonomy for the analysis pipeline.

Every failure raised by ``AnalysisClient.analyze`` is an ``AnalysisError``
subclass carrying the pipeline step that produced it and enough detail to
diagnose the failure without re-running.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any


class AnalysisStep(StrEnum):
    RESOLVE = "resolve"
    SUBMIT = "submit"
    POLL = "poll"
    EXTRACT = "extract"


class AnalysisError(Exception):
    kind: str = "analysis_error"
    default_step: AnalysisStep | None = None

    def __init__(self, message: str, *, step: AnalysisStep | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.step = step or self.default_step

    def __str__(self) -> str:
        if self.step is None:
            return self.message
        return f"[{self.step}] {self.message}"

    def detail(self) -> dict[str, Any]:
        """Structured diagnostic fields, suitable for logging or persisting."""
        return {"kind": self.kind, "step": str(self.step) if self.step else None, "message": self.message}


class UnsupportedDocumentType(AnalysisError):
    kind = "unsupported_document_type"
    default_step = AnalysisStep.RESOLVE

    def __init__(self, file_name: str) -> None:
        super().__init__(f"Unsupported document type for file {file_name!r}")
        self.file_name = file_name

    def detail(self) -> dict[str, Any]:
        return {**super().detail(), "file_name": self.file_name}


class SubmissionFailed(AnalysisError):
    kind = "submission_failed"
    default_step = AnalysisStep.SUBMIT

    def __init__(self, *, status: int | None, response_body: str | None, reason: str | None = None) -> None:
        if status is None:
            msg = f"Analyze request failed: {reason or 'transport error'}"
        else:
            msg = f"Analyze request returned HTTP {status}"
            if response_body:
                msg += f"\n{response_body}"
        super().__init__(msg)
        self.status = status
        self.response_body = response_body

    def detail(self) -> dict[str, Any]:
        return {**super().detail(), "status": self.status, "response_body": self.response_body}


class ProtocolViolation(AnalysisError):
    """The service answered, but not in a shape the LRO protocol allows."""

    kind = "protocol_violation"


class PollingTransportFailed(AnalysisError):
    kind = "polling_transport_failed"
    default_step = AnalysisStep.POLL

    def __init__(
        self,
        *,
        status: int | None,
        attempt: int,
        response_body: str | None = None,
        reason: str | None = None,
    ) -> None:
        if status is None:
            msg = f"Failed to get analysis results (attempt {attempt}): {reason or 'transport error'}"
        else:
            msg = f"Failed to get analysis results (attempt {attempt}): HTTP {status}"
        super().__init__(msg)
        self.status = status
        self.attempt = attempt
        self.response_body = response_body

    def detail(self) -> dict[str, Any]:
        return {
            **super().detail(),
            "status": self.status,
            "attempt": self.attempt,
            "response_body": self.response_body,
        }


class ServerReportedFailure(AnalysisError):
    kind = "server_reported_failure"
    default_step = AnalysisStep.POLL

    def __init__(self, error_detail: Any, *, attempt: int) -> None:
        super().__init__(f"Analysis failed: {json.dumps(error_detail, default=str)}")
        self.error_detail = error_detail
        self.attempt = attempt

    def detail(self) -> dict[str, Any]:
        return {**super().detail(), "error_detail": self.error_detail, "attempt": self.attempt}


class PollingTimeout(AnalysisError):
    kind = "polling_timeout"
    default_step = AnalysisStep.POLL

    def __init__(self, *, attempts_made: int, max_attempts: int) -> None:
        super().__init__(
            f"Analysis timed out after {attempts_made}/{max_attempts} polling attempts"
        )
        self.attempts_made = attempts_made
        self.max_attempts = max_attempts

    def detail(self) -> dict[str, Any]:
        return {**super().detail(), "attempts_made": self.attempts_made, "max_attempts": self.max_attempts}


class AnalysisCancelled(AnalysisError):
    kind = "cancelled"
    default_step = AnalysisStep.POLL

    def __init__(self, *, attempts_made: int) -> None:
        super().__init__(f"Analysis cancelled after {attempts_made} polling attempts")
        self.attempts_made = attempts_made

    def detail(self) -> dict[str, Any]:
        return {**super().detail(), "attempts_made": self.attempts_made}
