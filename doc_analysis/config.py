"""Environment-variable-driven configuration for the document analysis client.

Only the edges (CLI, ingestion entrypoint) read the environment; the analysis
client itself receives an explicit ``AnalysisConfig``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


# -- Document Intelligence ----------------------------------------------------
DOCINTEL_API_VERSION: str = os.getenv("DOCINTEL_API_VERSION", "2024-07-31-preview")
DOCINTEL_TOKEN_SCOPE: str = os.getenv(
    "DOCINTEL_TOKEN_SCOPE", "https://cognitiveservices.azure.com/.default"
)
DOCINTEL_DEFAULT_PROJECT: str = "function-to-content"

BACKOFF_STRATEGIES = ("fixed", "exponential")


@dataclass(frozen=True)
class AnalysisConfig:
    endpoint: str
    project_name: str = DOCINTEL_DEFAULT_PROJECT
    poll_interval_s: float = 2.0
    max_attempts: int = 60

    api_version: str = DOCINTEL_API_VERSION
    request_timeout_s: float = 30.0

    # Poll wait strategy: "fixed" waits poll_interval_s between attempts,
    # "exponential" doubles from poll_interval_s up to backoff_max_s with jitter.
    backoff: str = "fixed"
    backoff_max_s: float = 30.0

    @property
    def base_url(self) -> str:
        return self.endpoint.rstrip("/")

    def analyze_url(self, model_name: str | None = None) -> str:
        model = model_name or self.project_name
        return (
            f"{self.base_url}/documentintelligence/documentModels/{model}:analyze"
            f"?api-version={self.api_version}"
        )

    @classmethod
    def from_env(cls) -> AnalysisConfig:
        endpoint = os.getenv("DOCINTEL_ENDPOINT")
        if not endpoint:
            raise ValueError("DOCINTEL_ENDPOINT environment variable is not set")

        return cls(
            endpoint=endpoint,
            project_name=os.getenv("DOCINTEL_PROJECT") or DOCINTEL_DEFAULT_PROJECT,
            poll_interval_s=_env_float("DOCINTEL_POLL_INTERVAL_SECONDS", 2.0),
            max_attempts=_env_int("DOCINTEL_MAX_POLL_ATTEMPTS", 60),
            api_version=DOCINTEL_API_VERSION,
            request_timeout_s=_env_float("DOCINTEL_REQUEST_TIMEOUT_SECONDS", 30.0),
            backoff=os.getenv("DOCINTEL_BACKOFF", "fixed").strip().lower(),
            backoff_max_s=_env_float("DOCINTEL_BACKOFF_MAX_SECONDS", 30.0),
        )

    def validate(self) -> None:
        if not self.endpoint.startswith(("https://", "http://")):
            raise ValueError("DOCINTEL_ENDPOINT must be an absolute http(s) URL")
        if not self.project_name:
            raise ValueError("DOCINTEL_PROJECT must not be empty")
        if self.max_attempts < 1:
            raise ValueError("DOCINTEL_MAX_POLL_ATTEMPTS must be >= 1")
        if self.poll_interval_s < 0:
            raise ValueError("DOCINTEL_POLL_INTERVAL_SECONDS must be >= 0")
        if self.request_timeout_s <= 0:
            raise ValueError("DOCINTEL_REQUEST_TIMEOUT_SECONDS must be > 0")
        if self.backoff not in BACKOFF_STRATEGIES:
            raise ValueError(
                f"DOCINTEL_BACKOFF must be one of {', '.join(BACKOFF_STRATEGIES)}"
            )
        if self.backoff_max_s < self.poll_interval_s:
            raise ValueError(
                "DOCINTEL_BACKOFF_MAX_SECONDS must be >= DOCINTEL_POLL_INTERVAL_SECONDS"
            )
