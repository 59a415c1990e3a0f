from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="doc-analysis",
        description="Analyze PDF/DOCX files from GCS with Azure Document Intelligence",
    )

    p.add_argument(
        "--prefix",
        default=None,
        help="Object prefix to scan (default from env DOCANALYSIS_INPUT_PREFIX)",
    )
    p.add_argument("--model", default=None, help="Model/project name (default from env DOCINTEL_PROJECT)")
    p.add_argument("--max-files", type=int, default=0, help="Max files to process (0 = no cap)")
    p.add_argument(
        "--concurrency",
        type=int,
        default=0,
        help="Override DOCANALYSIS_MAX_FILE_WORKERS",
    )
    p.add_argument("--force", action="store_true", help="Re-analyze even if a result already exists")
    p.add_argument("--dry-run", action="store_true", help="List work and exit (no analysis calls)")
    p.add_argument("--log-level", default="INFO", help="Python logging level (INFO, DEBUG, ...)")
    return p
