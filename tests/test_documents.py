"""Tests for document text extraction.

WHY: Whatever a document looks like, the reader must receive one flat,
whitespace-normalized string, and a bad document must fail with the
single error type the UI knows how to show.

HOW: Plain-text files are written to tmp_path. PDFs are produced with
pypdf's own PdfWriter so no binary fixtures are checked in.
"""

from __future__ import annotations

import io
from unittest.mock import MagicMock, patch

import pytest
from pypdf import PdfWriter

from focusread.sources.documents import (
    DocumentExtractionError,
    extract_pdf_text,
    load_document,
    normalize_whitespace,
)


def _blank_pdf_bytes(pages: int = 1) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# TestNormalizeWhitespace
# ---------------------------------------------------------------------------


class TestNormalizeWhitespace:

    def test_collapses_runs(self):
        assert normalize_whitespace("a  b\t\tc\n\nd") == "a b c d"

    def test_trims_ends(self):
        assert normalize_whitespace("  \n padded \t ") == "padded"

    def test_whitespace_only_is_empty(self):
        assert normalize_whitespace(" \n\t ") == ""


# ---------------------------------------------------------------------------
# TestPdf
# ---------------------------------------------------------------------------


class TestPdf:

    def test_blank_pdf_yields_empty_text(self):
        assert extract_pdf_text(_blank_pdf_bytes(pages=3)) == ""

    def test_reads_pdf_from_path(self, tmp_path):
        path = tmp_path / "blank.pdf"
        path.write_bytes(_blank_pdf_bytes())
        assert load_document(path) == ""

    def test_corrupt_bytes_raise(self):
        with pytest.raises(DocumentExtractionError, match="Error reading PDF"):
            extract_pdf_text(b"definitely not a pdf")

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"%PDF-1.4 truncated")
        with pytest.raises(DocumentExtractionError):
            load_document(path)

    def test_malformed_page_content_raises(self):
        page = MagicMock()
        page.extract_text.side_effect = KeyError("/Widths")
        reader = MagicMock(is_encrypted=False, pages=[page])
        with patch("focusread.sources.documents.PdfReader", return_value=reader):
            with pytest.raises(DocumentExtractionError, match="Error reading PDF"):
                extract_pdf_text(b"%PDF-1.4")

    def test_encrypted_pdf_keeps_its_message(self):
        reader = MagicMock(is_encrypted=True, pages=[])
        with patch("focusread.sources.documents.PdfReader", return_value=reader):
            with pytest.raises(DocumentExtractionError, match="encrypted"):
                extract_pdf_text(b"%PDF-1.4")


# ---------------------------------------------------------------------------
# TestLoadDocument
# ---------------------------------------------------------------------------


class TestLoadDocument:

    def test_text_file_is_normalized(self, tmp_path):
        path = tmp_path / "chapter.txt"
        path.write_text("First line.\n\n  Second\tline.\n", encoding="utf-8")
        assert load_document(path) == "First line. Second line."

    def test_extension_is_case_insensitive(self, tmp_path):
        path = tmp_path / "NOTES.TXT"
        path.write_text("upper case", encoding="utf-8")
        assert load_document(str(path)) == "upper case"

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "book.docx"
        path.write_bytes(b"PK")
        with pytest.raises(DocumentExtractionError, match="Unsupported file type '.docx'"):
            load_document(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentExtractionError, match="File not found"):
            load_document(tmp_path / "missing.txt")

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.txt"
        path.write_bytes("caf\xe9".encode("latin-1"))
        with pytest.raises(DocumentExtractionError, match="Error reading text file"):
            load_document(path)
