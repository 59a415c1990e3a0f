from __future__ import annotations

import asyncio
import logging

from google.cloud.storage import Client

from doc_analysis.analysis.client import AnalysisClient
from doc_analysis.config import AnalysisConfig
from doc_analysis.credentials import token_provider_from_env
from doc_analysis.ingestion.cli import build_parser
from doc_analysis.ingestion.config import IngestConfig
from doc_analysis.ingestion.runner import IngestionRunner
from doc_analysis.logging_config import setup_logging


async def _amain() -> int:
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(level=args.log_level.upper())
    logger = logging.getLogger("doc_analysis.ingestion")

    analysis_cfg = AnalysisConfig.from_env()
    analysis_cfg.validate()
    cfg = IngestConfig.from_env()
    cfg.validate()

    # CLI overrides
    concurrency = args.concurrency if args.concurrency and args.concurrency > 0 else cfg.max_file_workers
    prefix = args.prefix if args.prefix is not None else cfg.input_prefix

    tokens = token_provider_from_env()
    try:
        async with AnalysisClient(cfg=analysis_cfg, tokens=tokens) as analysis:
            runner = IngestionRunner(cfg=cfg, storage_client=Client(), analysis=analysis)
            totals = await runner.run(
                prefix=prefix,
                max_files=int(args.max_files or 0),
                concurrency=concurrency,
                force=bool(args.force),
                dry_run=bool(args.dry_run),
                model_name=args.model,
            )
    finally:
        await tokens.close()

    logger.info("DONE totals=%s", totals)
    return 0 if totals["failed"] == 0 else 2


def main() -> None:
    raise SystemExit(asyncio.run(_amain()))


if __name__ == "__main__":
    main()
