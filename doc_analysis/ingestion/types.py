from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class WorkItem:
    source_uri: str  # gs://bucket/name
    bucket: str
    name: str  # object name in bucket
    size: int | None
    generation: str | None


@dataclass(frozen=True)
class ProcessResult:
    item: WorkItem
    status: str  # completed|skipped|failed
    result_uri: str | None
    error: dict[str, Any] | None
