"""
Uploaded file ➜ plain text for the résumé parser.
PDF goes through pypdf first and pdfminer when pypdf comes back thin.
"""
import io
import unicodedata
from pathlib import Path
from typing import Optional

import structlog
from docx import Document
from pdfminer.high_level import extract_text as pdfminer_extract_text
from pypdf import PdfReader

import config
from parsing.normalizers import strip_cid_artifacts
from services.exceptions import (
    FileTooLargeError,
    NoTextExtractedError,
    UnsupportedFileTypeError,
)

logger = structlog.get_logger()


def extract_text(data: bytes, filename: str, max_bytes: Optional[int] = None) -> str:
    """Extract and clean text from an uploaded PDF, DOCX or TXT file."""
    suffix = Path(filename or "").suffix.lower()
    if suffix not in config.ALLOWED_EXTENSIONS:
        logger.warning("unsupported_file_type", filename=filename)
        raise UnsupportedFileTypeError(filename)

    limit = max_bytes if max_bytes is not None else config.MAX_UPLOAD_MB * 1024 * 1024
    if len(data) > limit:
        logger.warning("file_too_large", filename=filename, size=len(data), limit=limit)
        raise FileTooLargeError(len(data), limit)

    if suffix == ".pdf":
        text = _extract_pdf(data)
    elif suffix == ".docx":
        text = _extract_docx(data, filename)
    else:
        text = _decode_txt(data)

    text = clean_text(text)
    if not text.strip():
        logger.warning("no_text_extracted", filename=filename)
        raise NoTextExtractedError(filename)

    logger.info("text_extracted", filename=filename, chars=len(text))
    return text


def clean_text(text: str) -> str:
    return unicodedata.normalize("NFC", strip_cid_artifacts(text))


def looks_scanned(text: str, size: int) -> bool:
    """Big file, almost no text: probably an image-only PDF."""
    return len((text or "").strip()) < config.SCANNED_PDF_MAX_CHARS and size > config.SCANNED_PDF_MIN_BYTES


def _extract_pdf(data: bytes) -> str:
    text = ""
    try:
        reader = PdfReader(io.BytesIO(data))
        text = "\n".join(p.extract_text() or "" for p in reader.pages)
    except Exception as e:
        logger.info("pypdf_failed_switching_to_pdfminer", error=str(e))
        return _extract_pdfminer(data)

    if len(text.strip()) < config.PDF_MIN_TEXT_CHARS:
        alt = _extract_pdfminer(data)
        if len(alt.strip()) > len(text.strip()):
            logger.info("pdfminer_richer_text", pypdf_chars=len(text), pdfminer_chars=len(alt))
            text = alt
    return text


def _extract_pdfminer(data: bytes) -> str:
    try:
        return pdfminer_extract_text(io.BytesIO(data)) or ""
    except Exception as e:
        logger.error("pdfminer_failed", error=str(e))
        return ""


def _extract_docx(data: bytes, filename: str) -> str:
    try:
        doc = Document(io.BytesIO(data))
    except Exception as e:
        logger.error("docx_parse_failed", filename=filename, error=str(e))
        raise NoTextExtractedError(filename, reason=str(e)) from e
    return "\n".join(p.text for p in doc.paragraphs)


def _decode_txt(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1", errors="ignore")
