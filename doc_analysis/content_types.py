from __future__ import annotations

from doc_analysis.errors import UnsupportedDocumentType
from doc_analysis.models import ContentType

_SUPPORTED_EXTS: dict[str, ContentType] = {
    ".pdf": ContentType.PDF,
    ".docx": ContentType.DOCX,
}

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(_SUPPORTED_EXTS)


def _ext(name: str) -> str:
    base = name.rsplit("/", 1)[-1].lower()
    for e in _SUPPORTED_EXTS:
        if base.endswith(e) and len(base) > len(e):
            return e
    return ""


def is_supported(name: str) -> bool:
    return bool(_ext(name))


def resolve(file_name: str) -> ContentType:
    """Return the MIME type to submit ``file_name`` with.

    Raises:
        UnsupportedDocumentType: empty name, no extension, or an extension
            other than ``.pdf`` / ``.docx``.
    """
    e = _ext(file_name or "")
    if not e:
        raise UnsupportedDocumentType(file_name)
    return _SUPPORTED_EXTS[e]
