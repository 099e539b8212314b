# app/pdf_utils.py

import io
import logging

import fitz  # PyMuPDF
import pdfplumber

logger = logging.getLogger(__name__)


class PdfExtractionError(Exception):
    """The document could not be opened as a PDF."""


def _extract_with_pdfplumber(pdf_bytes: bytes) -> str:
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages)


def _extract_with_pymupdf(pdf_bytes: bytes) -> str:
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    try:
        pages = [page.get_text() for page in doc]
    finally:
        doc.close()
    return "\n".join(pages)


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    """
    Return the text of every page, joined by newlines and stripped.

    pdfplumber is tried first; PyMuPDF is the fallback when pdfplumber fails
    or finds no text. Raises PdfExtractionError if neither can open the file.
    An empty string means the PDF opened but holds no extractable text
    (e.g. a scanned image).
    """
    try:
        text = _extract_with_pdfplumber(pdf_bytes).strip()
        if text:
            return text
    except Exception as e:
        logger.info("pdfplumber could not read PDF (%s); trying PyMuPDF", e)

    try:
        return _extract_with_pymupdf(pdf_bytes).strip()
    except Exception as e:
        logger.warning("PyMuPDF could not read PDF: %s", e)
        raise PdfExtractionError(str(e)) from e


def looks_like_transcript(text: str) -> bool:
    return "transcript" in (text or "").lower()
