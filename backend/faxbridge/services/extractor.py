"""
PDF text extraction service.

Treats the PDF library as an opaque bytes -> text step. Any failure to read
or parse the document surfaces as ExtractionError so the pipeline can mark
just that file as failed.
"""

import base64
import logging
import re

import pdfplumber

from faxbridge.exceptions import ExtractionError

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def extract_text_from_pdf(pdf_path: str) -> str:
    """
    Extract text from a PDF using pdfplumber.

    Pages are joined with newlines. Does NOT support scanned PDFs without a
    text layer (no OCR): those raise ExtractionError.
    """
    logger.debug("Reading PDF file: %s", pdf_path)
    text_parts = []

    try:
        with pdfplumber.open(pdf_path) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text_parts.append(page_text)
    except Exception as e:
        raise ExtractionError(f"Error parsing PDF ({pdf_path}): {e}") from e

    full_text = "\n".join(text_parts)

    if not full_text.strip():
        raise ExtractionError(
            f"No text extracted from PDF ({pdf_path}). "
            "The PDF may be scanned/image-based (OCR not supported)."
        )

    logger.debug("Successfully extracted text from: %s", pdf_path)
    return full_text


def normalize_text(text: str) -> str:
    """Collapse every whitespace run (newlines included) to a single space."""
    return _WHITESPACE_RE.sub(" ", text)


def encode_attachment(pdf_path: str) -> str:
    """Return the file's bytes base64-encoded, as the upload endpoint expects."""
    try:
        with open(pdf_path, "rb") as fh:
            content = fh.read()
    except OSError as e:
        raise ExtractionError(f"Could not read {pdf_path}: {e}") from e
    return base64.b64encode(content).decode("ascii")
