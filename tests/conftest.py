"""Shared test fixtures for the doc-analysis test suite."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def sample_result() -> dict[str, Any]:
    """A trimmed ``analyzeResult`` as returned by a custom extraction model."""
    return {
        "apiVersion": "2024-07-31-preview",
        "modelId": "invoices",
        "content": "Invoice 1234\nTotal: 42.00",
        "pages": [{"pageNumber": 1, "width": 8.5, "height": 11, "unit": "inch"}],
        "tables": [],
        "keyValuePairs": [{"key": {"content": "Total"}, "value": {"content": "42.00"}}],
        "documents": [{"docType": "invoices", "fields": {"Total": {"type": "number", "valueNumber": 42.0}}}],
        "contentFormat": "text",
    }
