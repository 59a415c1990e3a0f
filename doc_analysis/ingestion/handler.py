"""Per-document entrypoint for newly arrived files.

Whatever delivers the file (bucket listing, storage trigger, queue message)
hands over the bytes and the object name; unsupported files are skipped here
before the analysis client ever sees them.
"""

from __future__ import annotations

import logging

from doc_analysis.analysis.client import AnalysisClient
from doc_analysis.content_types import is_supported
from doc_analysis.errors import AnalysisError
from doc_analysis.models import AnalysisResult, Document

logger = logging.getLogger(__name__)


async def process_document(
    client: AnalysisClient,
    data: bytes,
    name: str,
    *,
    model_name: str | None = None,
) -> AnalysisResult | None:
    """Analyze one PDF/DOCX file; return None for any other file type."""
    logger.info("Processing blob: %s, size: %d bytes", name, len(data))

    if not is_supported(name):
        logger.info("Skipping file %s - not a PDF or DOCX file", name)
        return None

    try:
        result = await client.analyze(Document(name=name, data=data), model_name)
    except AnalysisError as e:
        logger.error("Error processing %s: %s", name, e)
        raise

    logger.debug("Analysis result for %s: %s", name, result.model_dump_json(by_alias=True, exclude_unset=True))
    logger.info("Successfully processed %s (%d pages)", name, len(result.pages))
    return result
