"""PDF processing utilities using pdfplumber and PyMuPDF."""

from __future__ import annotations

import io

import fitz  # PyMuPDF
import pdfplumber


def extract_text_pdfplumber(file_bytes: bytes) -> list[str]:
    """Extract text with layout preservation using pdfplumber.

    Returns a list of text strings, one per page.
    """
    texts: list[str] = []
    with pdfplumber.open(io.BytesIO(file_bytes)) as pdf:
        for page in pdf.pages:
            texts.append(page.extract_text() or "")
    return texts


def extract_text_pymupdf(file_bytes: bytes) -> list[str]:
    """Extract text from each page using PyMuPDF.

    Returns a list of text strings, one per page.
    """
    doc = fitz.open(stream=file_bytes, filetype="pdf")
    texts = [page.get_text() for page in doc]
    doc.close()
    return texts


def detect_file_type(file_bytes: bytes) -> str:
    """Detect file type from magic bytes.

    Returns one of ``"pdf"``, ``"png"``, ``"jpeg"``, ``"tiff"``, or ``"unknown"``.
    """
    if file_bytes[:4] == b"%PDF":
        return "pdf"
    if file_bytes[:8] == b"\x89PNG\r\n\x1a\n":
        return "png"
    if file_bytes[:2] == b"\xff\xd8":
        return "jpeg"
    if file_bytes[:4] in (b"II*\x00", b"MM\x00*"):
        return "tiff"
    return "unknown"


def extract_document_text(file_bytes: bytes) -> str:
    """Return the full text of a bill document.

    PDFs go through pdfplumber first and PyMuPDF when pdfplumber finds no
    text. Anything that is not a recognised binary format is read as a UTF-8
    text export. Raises ``ValueError`` when no text layer is available.
    """
    file_type = detect_file_type(file_bytes)

    if file_type == "pdf":
        pages = extract_text_pdfplumber(file_bytes)
        if not any(p.strip() for p in pages):
            pages = extract_text_pymupdf(file_bytes)
        text = "\n".join(pages)
    elif file_type == "unknown":
        try:
            text = file_bytes.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueError(f"Document is neither PDF nor UTF-8 text: {exc}") from exc
    else:
        raise ValueError(f"Document has no text layer (file type: {file_type})")

    if not text.strip():
        raise ValueError("Document contains no extractable text")
    return text
