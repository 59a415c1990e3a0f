"""Unit tests for file name -> MIME type resolution."""

from __future__ import annotations

import pytest

from doc_analysis.content_types import SUPPORTED_EXTENSIONS, is_supported, resolve
from doc_analysis.errors import AnalysisStep, UnsupportedDocumentType
from doc_analysis.models import ContentType


class TestResolve:
    @pytest.mark.parametrize("name", ["report.pdf", "REPORT.PDF", "scans/2026/q1.Pdf", "a.b.c.pdf"])
    def test_pdf_names(self, name: str):
        assert resolve(name) is ContentType.PDF

    @pytest.mark.parametrize("name", ["contract.docx", "Contract.DOCX", "legal/nda.DocX"])
    def test_docx_names(self, name: str):
        assert resolve(name) is ContentType.DOCX

    def test_mime_strings(self):
        assert str(ContentType.PDF) == "application/pdf"
        assert str(ContentType.DOCX) == (
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        )

    @pytest.mark.parametrize(
        "name",
        ["", "README", "notes.txt", "slides.pptx", "legacy.doc", "image.png", "pdf", "archive.pdf.zip", ".pdf"],
    )
    def test_unsupported_names_raise(self, name: str):
        with pytest.raises(UnsupportedDocumentType) as exc_info:
            resolve(name)
        assert exc_info.value.step is AnalysisStep.RESOLVE
        assert exc_info.value.file_name == name

    def test_directory_component_does_not_count_as_extension(self):
        with pytest.raises(UnsupportedDocumentType):
            resolve("exports.pdf/README")


class TestIsSupported:
    def test_supported_set(self):
        assert SUPPORTED_EXTENSIONS == {".pdf", ".docx"}

    def test_filtering(self):
        assert is_supported("incoming/a.pdf")
        assert is_supported("incoming/b.docx")
        assert not is_supported("incoming/c.xlsx")
        assert not is_supported("incoming/")
