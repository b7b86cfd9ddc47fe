"""Document text extraction for the reader (PDF and plain text).

WHY: Readers load books and papers, not just pasted text. The segmenter
only understands plain strings, so documents are flattened to a single
whitespace-normalized string before they reach it.

HOW: pypdf reads each page's text; page texts are joined with a space and
every whitespace run is collapsed to one space. Plain .txt files go
through the same normalization.

RULES:
- Output never contains newlines, tabs, or repeated spaces
- A PDF with no extractable text yields "" (not an error)
- Unreadable or unsupported documents raise DocumentExtractionError
- Accepts a filesystem path or the raw bytes of an upload
"""

from __future__ import annotations

import io
import logging
import re
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from focusread.config import SUPPORTED_DOCUMENT_FORMATS

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")


class DocumentExtractionError(Exception):
    """Raised when a document cannot be turned into text.

    WHY: Callers show a short status message on failure and keep the
    previously loaded text; they need one exception type to catch.

    RULES:
    - message is human-readable and safe to show in the UI
    """


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim the ends."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def extract_pdf_text(source: str | Path | bytes) -> str:
    """Extract all page text from a PDF as one normalized string.

    WHY: The reader consumes a flat word stream; page boundaries carry no
    meaning for RSVP playback.

    HOW: Opens the PDF with pypdf (from a path or an in-memory buffer),
    extracts each page in order, joins pages with a space, and normalizes
    whitespace.

    RULES:
    - Pages are read in document order
    - Encrypted or corrupt files raise DocumentExtractionError, including
      malformed content that pypdf reports with non-PdfReadError exceptions

    Args:
        source: Path to a .pdf file, or the PDF's bytes.

    Returns:
        The document's text, whitespace-normalized.
    """
    try:
        if isinstance(source, (bytes, bytearray)):
            reader = PdfReader(io.BytesIO(source))
        else:
            reader = PdfReader(str(source))
        if reader.is_encrypted:
            raise DocumentExtractionError("PDF is encrypted and cannot be read.")
        pages = [page.extract_text() or "" for page in reader.pages]
    except DocumentExtractionError:
        raise
    except (PdfReadError, OSError, ValueError) as exc:
        logger.warning("PDF extraction failed: %s", exc)
        raise DocumentExtractionError("Error reading PDF.") from exc
    except Exception as exc:
        # pypdf surfaces malformed objects (fonts, streams) as KeyError,
        # TypeError and friends rather than PdfReadError
        logger.exception("Unexpected error while extracting PDF text")
        raise DocumentExtractionError("Error reading PDF.") from exc

    text = normalize_whitespace(" ".join(pages))
    logger.info("Extracted %d characters from %d page(s)", len(text), len(pages))
    return text


def load_document(path: str | Path) -> str:
    """Load a supported document from disk and return normalized text.

    RULES:
    - Extension is matched case-insensitively against SUPPORTED_DOCUMENT_FORMATS
    - .txt files are decoded as UTF-8
    - Missing files raise DocumentExtractionError
    """
    path = Path(path)
    ext = path.suffix.lower()
    if ext not in SUPPORTED_DOCUMENT_FORMATS:
        raise DocumentExtractionError(
            "Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_DOCUMENT_FORMATS))
            )
        )
    if not path.is_file():
        raise DocumentExtractionError("File not found: {}".format(path))

    if ext == ".pdf":
        return extract_pdf_text(path)

    try:
        return normalize_whitespace(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentExtractionError("Error reading text file.") from exc
