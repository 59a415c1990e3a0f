"""Unit tests for OperationSubmitter: request shape and failure classification."""

from __future__ import annotations

import httpx
import pytest

from doc_analysis.analysis.submitter import OperationSubmitter
from doc_analysis.errors import AnalysisStep, ProtocolViolation, SubmissionFailed
from doc_analysis.models import ContentType, Document

ANALYZE_URL = (
    "https://docintel.example.com/documentintelligence/documentModels/invoices:analyze"
    "?api-version=2024-07-31-preview"
)
OP_URL = "https://docintel.example.com/documentintelligence/documentModels/invoices/analyzeResults/abc"


def _submitter(handler) -> OperationSubmitter:
    return OperationSubmitter(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


async def _submit(submitter: OperationSubmitter, content_type: ContentType = ContentType.PDF) -> str:
    return await submitter.submit(
        analyze_url=ANALYZE_URL,
        document=Document(name="invoice.pdf", data=b"%PDF-1.7 fake"),
        content_type=content_type,
        access_token="tok",
    )


class TestRequest:
    async def test_posts_raw_bytes_with_bearer_and_content_type(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202, headers={"Operation-Location": OP_URL})

        result = await _submit(_submitter(handler), ContentType.DOCX)

        assert result == OP_URL
        assert len(seen) == 1
        req = seen[0]
        assert req.method == "POST"
        assert req.url.host == "docintel.example.com"
        assert req.url.path == "/documentintelligence/documentModels/invoices:analyze"
        assert req.url.params["api-version"] == "2024-07-31-preview"
        assert req.headers["Authorization"] == "Bearer tok"
        assert req.headers["Content-Type"] == str(ContentType.DOCX)
        assert req.content == b"%PDF-1.7 fake"

    async def test_any_2xx_is_accepted(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"operation-location": OP_URL})

        assert await _submit(_submitter(handler)) == OP_URL


class TestFailures:
    @pytest.mark.parametrize("status", [400, 401, 404, 429, 500, 503])
    async def test_non_success_raises_submission_failed(self, status: int):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(status, text='{"error":{"code":"InvalidRequest"}}')

        with pytest.raises(SubmissionFailed) as exc_info:
            await _submit(_submitter(handler))

        err = exc_info.value
        assert err.status == status
        assert "InvalidRequest" in (err.response_body or "")
        assert err.step is AnalysisStep.SUBMIT
        assert calls == 1  # never retried

    async def test_missing_operation_location_is_protocol_violation(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(202)

        with pytest.raises(ProtocolViolation) as exc_info:
            await _submit(_submitter(handler))
        assert exc_info.value.step is AnalysisStep.SUBMIT
        assert "operation-location" in str(exc_info.value)

    async def test_transport_error_is_submission_failed_without_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SubmissionFailed) as exc_info:
            await _submit(_submitter(handler))
        assert exc_info.value.status is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_error_body_is_truncated(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="x" * 10_000)

        with pytest.raises(SubmissionFailed) as exc_info:
            await _submit(_submitter(handler))
        assert len(exc_info.value.response_body or "") == 4000
