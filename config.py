"""Settings loaded from the environment (and a local .env when present)."""

import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON: bool = _flag("LOG_JSON")

# Uploads
MAX_UPLOAD_MB: int = int(os.getenv("MAX_UPLOAD_MB", "10"))
ALLOWED_EXTENSIONS = (".pdf", ".docx", ".txt")

# PDF heuristics: below this much text pypdf output is retried with pdfminer
PDF_MIN_TEXT_CHARS: int = int(os.getenv("PDF_MIN_TEXT_CHARS", "500"))
# Large files with almost no text are most likely scanned images
SCANNED_PDF_MIN_BYTES: int = int(os.getenv("SCANNED_PDF_MIN_BYTES", "200000"))
SCANNED_PDF_MAX_CHARS: int = 200
