"""Structured JSON logging for hosted runs, plain text locally.

Hosted environments (Azure Functions, Cloud Run) get python-json-logger output
with a ``severity`` field so log collectors can filter by level.
"""

from __future__ import annotations

import logging
import os

from pythonjsonlogger.json import JsonFormatter


class SeverityJsonFormatter(JsonFormatter):
    """JSON formatter that replaces ``levelname`` with ``severity``."""

    def add_fields(
        self,
        log_record: dict[str, object],
        record: logging.LogRecord,
        message_dict: dict[str, object],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["severity"] = record.levelname
        log_record.pop("levelname", None)


def _is_hosted() -> bool:
    return bool(os.getenv("FUNCTIONS_WORKER_RUNTIME") or os.getenv("K_SERVICE"))


def setup_logging(*, level: str = "INFO") -> None:
    """Configure root logging: JSON when hosted, human-readable text locally."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler()
    if _is_hosted():
        handler.setFormatter(SeverityJsonFormatter(
            fmt="%(message)s %(name)s %(funcName)s %(lineno)d",
            rename_fields={"message": "message", "name": "logger"},
        ))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d  %(message)s",
            datefmt="%H:%M:%S",
        ))

    root.addHandler(handler)

    # httpx logs every request at INFO; poll loops make that noisy.
    logging.getLogger("httpx").setLevel(logging.WARNING)
