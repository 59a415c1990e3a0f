from __future__ import annotations

import logging

import httpx

from doc_analysis.errors import AnalysisStep, ProtocolViolation, SubmissionFailed
from doc_analysis.models import ContentType, Document

logger = logging.getLogger(__name__)

OPERATION_LOCATION_HEADER = "operation-location"

# Service error bodies can be large HTML pages; keep what fits in a log line.
_MAX_ERROR_BODY_CHARS = 4000


class OperationSubmitter:
    """Starts an analyze operation and returns its polling URI."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def submit(
        self,
        *,
        analyze_url: str,
        document: Document,
        content_type: ContentType,
        access_token: str,
    ) -> str:
        try:
            resp = await self._http.post(
                analyze_url,
                content=document.data,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": str(content_type),
                },
            )
        except httpx.HTTPError as e:
            raise SubmissionFailed(status=None, response_body=None, reason=f"{type(e).__name__}: {e}") from e

        if not resp.is_success:
            raise SubmissionFailed(status=resp.status_code, response_body=resp.text[:_MAX_ERROR_BODY_CHARS])

        operation_location = resp.headers.get(OPERATION_LOCATION_HEADER)
        if not operation_location:
            raise ProtocolViolation(
                f"No {OPERATION_LOCATION_HEADER} header in response (HTTP {resp.status_code})",
                step=AnalysisStep.SUBMIT,
            )

        logger.debug("Submitted %s -> %s", document.name, operation_location)
        return operation_location
