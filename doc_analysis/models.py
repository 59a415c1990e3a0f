"""Domain types for document analysis.

``AnalysisResult`` is a pydantic schema over the service's ``analyzeResult``
object: well-known fields are typed, anything else is kept verbatim in the
model's extras so newer service payloads pass through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContentType(StrEnum):
    PDF = "application/pdf"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class OperationStatus(StrEnum):
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Any) -> OperationStatus:
        """Map a raw ``status`` value to a known status; anything else is UNKNOWN."""
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in (OperationStatus.SUCCEEDED, OperationStatus.FAILED)


@dataclass(frozen=True)
class Document:
    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str | None = Field(None, alias="apiVersion")
    model_id: str | None = Field(None, alias="modelId")
    content: str = ""
    pages: list[dict[str, Any]] = Field(default_factory=list)
    tables: list[dict[str, Any]] = Field(default_factory=list)
    key_value_pairs: list[dict[str, Any]] = Field(default_factory=list, alias="keyValuePairs")
    documents: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def extra_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def to_payload(self) -> dict[str, Any]:
        """Return the payload as the service sent it (wire names, no defaults added)."""
        return self.model_dump(by_alias=True, exclude_unset=True)
