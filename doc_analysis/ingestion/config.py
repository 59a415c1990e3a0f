from __future__ import annotations

import os
from dataclasses import dataclass

from doc_analysis.config import _env_bool, _env_int


@dataclass(frozen=True)
class IngestConfig:
    # GCS
    input_bucket: str
    input_prefix: str  # e.g. "incoming/"

    # Output artifacts; results are only logged when output_bucket is unset
    output_bucket: str | None
    output_prefix: str  # e.g. "analysis/"

    # Skip objects whose result artifact already exists
    incremental: bool

    # Concurrency
    max_file_workers: int

    @classmethod
    def from_env(cls) -> IngestConfig:
        input_bucket = os.getenv("DOCANALYSIS_INPUT_BUCKET")
        if not input_bucket:
            raise ValueError("DOCANALYSIS_INPUT_BUCKET is required")

        input_prefix = os.getenv("DOCANALYSIS_INPUT_PREFIX", "incoming/")
        if input_prefix and not input_prefix.endswith("/"):
            input_prefix += "/"

        output_prefix = os.getenv("DOCANALYSIS_OUTPUT_PREFIX", "analysis/")
        if output_prefix and not output_prefix.endswith("/"):
            output_prefix += "/"

        return cls(
            input_bucket=input_bucket,
            input_prefix=input_prefix,
            output_bucket=os.getenv("DOCANALYSIS_OUTPUT_BUCKET") or None,
            output_prefix=output_prefix,
            incremental=_env_bool("DOCANALYSIS_INCREMENTAL", True),
            max_file_workers=_env_int("DOCANALYSIS_MAX_FILE_WORKERS", 3),
        )

    def validate(self) -> None:
        if self.max_file_workers < 1:
            raise ValueError("DOCANALYSIS_MAX_FILE_WORKERS must be >= 1")
