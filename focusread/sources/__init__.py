"""Text sources that feed the segmenter (document extraction).

RULES:
- Every source returns plain, whitespace-normalized text
- Failures raise DocumentExtractionError, never return partial garbage
"""

from focusread.sources.documents import (
    DocumentExtractionError,
    extract_pdf_text,
    load_document,
    normalize_whitespace,
)

__all__ = [
    "DocumentExtractionError",
    "extract_pdf_text",
    "load_document",
    "normalize_whitespace",
]
