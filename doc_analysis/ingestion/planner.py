from __future__ import annotations

from google.cloud import storage

from doc_analysis.content_types import is_supported
from doc_analysis.ingestion.gcs import gs_uri, list_objects
from doc_analysis.ingestion.types import WorkItem


def result_key(output_prefix: str, name: str) -> str:
    """Object name of the JSON result written for input object ``name``."""
    p = output_prefix or ""
    if p and not p.endswith("/"):
        p += "/"
    return f"{p}{name}.json"


def discover_work_items(
    client: storage.Client,
    *,
    bucket: str,
    prefix: str,
    max_files: int = 0,
) -> list[WorkItem]:
    items: list[WorkItem] = []
    for blob in list_objects(client, bucket, prefix):
        if blob.name.endswith("/"):
            continue
        if not is_supported(blob.name):
            continue

        items.append(
            WorkItem(
                source_uri=gs_uri(bucket, blob.name),
                bucket=bucket,
                name=blob.name,
                size=int(getattr(blob, "size", 0) or 0) or None,
                generation=str(getattr(blob, "generation", "") or "") or None,
            )
        )
        if max_files and len(items) >= max_files:
            break

    return items
