from __future__ import annotations

import asyncio
import json
import logging

from google.cloud.storage import Client

from doc_analysis.analysis.client import AnalysisClient
from doc_analysis.errors import AnalysisError
from doc_analysis.ingestion.config import IngestConfig
from doc_analysis.ingestion.gcs import blob_exists, download_bytes, gs_uri, upload_text
from doc_analysis.ingestion.handler import process_document
from doc_analysis.ingestion.planner import discover_work_items, result_key
from doc_analysis.ingestion.types import ProcessResult, WorkItem

logger = logging.getLogger(__name__)


class IngestionRunner:
    def __init__(self, *, cfg: IngestConfig, storage_client: Client, analysis: AnalysisClient) -> None:
        self._cfg = cfg
        self._gcs = storage_client
        self._analysis = analysis

    async def run(
        self,
        *,
        prefix: str,
        max_files: int,
        concurrency: int,
        force: bool,
        dry_run: bool,
        model_name: str | None = None,
    ) -> dict[str, int]:
        items = await asyncio.to_thread(
            discover_work_items,
            self._gcs,
            bucket=self._cfg.input_bucket,
            prefix=prefix,
            max_files=max_files,
        )
        logger.info("Discovered %d candidate objects under gs://%s/%s", len(items), self._cfg.input_bucket, prefix)

        if dry_run:
            for it in items:
                logger.info("[DRY-RUN] %s", it.source_uri)
            return {"total": len(items), "completed": 0, "skipped": 0, "failed": 0}

        sem = asyncio.Semaphore(max(1, concurrency))

        async def worker(it: WorkItem) -> ProcessResult:
            async with sem:
                return await self._process_item(it, force=force, model_name=model_name)

        results = await asyncio.gather(*[worker(it) for it in items])

        return {
            "total": len(items),
            "completed": sum(1 for r in results if r.status == "completed"),
            "skipped": sum(1 for r in results if r.status == "skipped"),
            "failed": sum(1 for r in results if r.status == "failed"),
        }

    async def _process_item(self, item: WorkItem, *, force: bool, model_name: str | None) -> ProcessResult:
        out_key = result_key(self._cfg.output_prefix, item.name)
        out_uri = gs_uri(self._cfg.output_bucket, out_key) if self._cfg.output_bucket else None

        try:
            # Blocking GCS I/O runs in a thread to keep other pipelines polling.
            if self._cfg.output_bucket and self._cfg.incremental and not force:
                exists = await asyncio.to_thread(blob_exists, self._gcs, self._cfg.output_bucket, out_key)
                if exists:
                    logger.info("Skipping %s - result already exists", item.source_uri)
                    return ProcessResult(item=item, status="skipped", result_uri=out_uri, error=None)

            data = await asyncio.to_thread(download_bytes, self._gcs, item.bucket, item.name)
            result = await process_document(self._analysis, data, item.name, model_name=model_name)
            if result is None:
                return ProcessResult(item=item, status="skipped", result_uri=None, error=None)

            body = json.dumps(result.to_payload(), indent=2, ensure_ascii=False)
            if not self._cfg.output_bucket:
                logger.info("Content Understanding Result for %s:\n%s", item.name, body)
                return ProcessResult(item=item, status="completed", result_uri=None, error=None)

            await asyncio.to_thread(
                upload_text,
                self._gcs,
                self._cfg.output_bucket,
                out_key,
                body,
                content_type="application/json",
            )
        except AnalysisError as e:
            # Already logged by process_document.
            return ProcessResult(item=item, status="failed", result_uri=None, error=e.detail())
        except Exception as e:
            logger.warning("Item failed: %s :: %s: %s", item.source_uri, type(e).__name__, e, exc_info=True)
            return ProcessResult(
                item=item,
                status="failed",
                result_uri=None,
                error={"kind": type(e).__name__, "step": None, "message": str(e)},
            )

        return ProcessResult(item=item, status="completed", result_uri=out_uri, error=None)
