"""Unit test conftest: no network, Azure or GCS required.

``FakeDocIntel`` stands in for the Document Intelligence REST API behind an
``httpx.MockTransport``: each POST starts a new operation whose GET responses
follow the scripted ``poll_script`` (the last entry repeats once exhausted).
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from doc_analysis.analysis.client import AnalysisClient
from doc_analysis.config import AnalysisConfig
from doc_analysis.credentials import StaticTokenProvider
from doc_analysis.errors import AnalysisError
from doc_analysis.models import ContentType, OperationStatus

ENDPOINT = "https://docintel.example.com/"
TOKEN = "test-access-token"

PollStep = dict[str, Any] | httpx.Response


def running() -> dict[str, Any]:
    return {"status": "running"}


def succeeded(result: dict[str, Any]) -> dict[str, Any]:
    return {"status": "succeeded", "analyzeResult": result}


def failed(error: dict[str, Any] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"status": "failed"}
    if error is not None:
        body["error"] = error
    return body


class FakeDocIntel:
    def __init__(
        self,
        *,
        poll_script: list[PollStep] | None = None,
        submit_status: int = 202,
        submit_body: str = "",
        operation_location: bool = True,
    ) -> None:
        self.poll_script = poll_script or [succeeded({"content": ""})]
        self.submit_status = submit_status
        self.submit_body = submit_body
        self.operation_location = operation_location

        self.requests: list[httpx.Request] = []
        self._polls: dict[str, int] = {}

    @property
    def submits(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    @property
    def polls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "POST":
            if self.submit_status >= 300:
                return httpx.Response(self.submit_status, text=self.submit_body)
            op_id = f"op-{len(self._polls) + 1}"
            self._polls[op_id] = 0
            headers = {}
            if self.operation_location:
                headers["Operation-Location"] = (
                    f"{ENDPOINT}documentintelligence/documentModels/m/analyzeResults/{op_id}"
                )
            return httpx.Response(self.submit_status, headers=headers)

        op_id = request.url.path.rsplit("/", 1)[-1]
        n = self._polls[op_id]
        self._polls[op_id] = n + 1
        step = self.poll_script[min(n, len(self.poll_script) - 1)]
        if isinstance(step, httpx.Response):
            return step
        return httpx.Response(200, content=json.dumps(step).encode(), headers={"Content-Type": "application/json"})

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class RecordingSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def on_submission_started(
        self, *, document_name: str, size: int, model: str, content_type: ContentType
    ) -> None:
        self.events.append(
            ("submission_started", {"document_name": document_name, "size": size, "model": model, "content_type": content_type})
        )

    def on_submitted(self, *, document_name: str, operation_location: str) -> None:
        self.events.append(("submitted", {"document_name": document_name, "operation_location": operation_location}))

    def on_poll_attempt(
        self, *, document_name: str, attempt: int, max_attempts: int, status: OperationStatus
    ) -> None:
        self.events.append(("poll_attempt", {"attempt": attempt, "max_attempts": max_attempts, "status": status}))

    def on_succeeded(self, *, document_name: str, attempts: int) -> None:
        self.events.append(("succeeded", {"document_name": document_name, "attempts": attempts}))

    def on_failed(self, *, document_name: str, error: AnalysisError) -> None:
        self.events.append(("failed", {"document_name": document_name, "error": error}))


@pytest.fixture
def analysis_cfg() -> AnalysisConfig:
    return AnalysisConfig(
        endpoint=ENDPOINT,
        project_name="invoices",
        poll_interval_s=2.0,
        max_attempts=5,
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock(return_value=None)


@pytest.fixture
def make_client(
    analysis_cfg: AnalysisConfig, sink: RecordingSink, sleep: AsyncMock
) -> Callable[..., AnalysisClient]:
    def _make(fake: FakeDocIntel, **overrides: Any) -> AnalysisClient:
        kwargs: dict[str, Any] = {
            "cfg": analysis_cfg,
            "tokens": StaticTokenProvider(TOKEN),
            "events": sink,
            "http": fake.http_client(),
            "sleep": sleep,
        }
        kwargs.update(overrides)
        return AnalysisClient(**kwargs)

    return _make

