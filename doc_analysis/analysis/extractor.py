from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from doc_analysis.errors import AnalysisStep, ProtocolViolation
from doc_analysis.models import AnalysisResult

RESULT_FIELD = "analyzeResult"


def extract(terminal_payload: dict[str, Any]) -> AnalysisResult:
    """Wrap the ``analyzeResult`` of a succeeded operation without interpreting it."""
    raw = terminal_payload.get(RESULT_FIELD)
    if not isinstance(raw, dict):
        raise ProtocolViolation(
            f"Succeeded operation has no {RESULT_FIELD} object", step=AnalysisStep.EXTRACT
        )
    try:
        return AnalysisResult.model_validate(raw)
    except ValidationError as e:
        raise ProtocolViolation(
            f"{RESULT_FIELD} does not match the expected shape: {e.error_count()} error(s)",
            step=AnalysisStep.EXTRACT,
        ) from e
