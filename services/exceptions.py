"""
Errors raised while turning an uploaded file into text.
"""
from typing import Optional, Dict, Any


class ResumeExtractionError(Exception):
    """Base error for the upload/extraction boundary"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UnsupportedFileTypeError(ResumeExtractionError):
    """File extension is not one we can read"""

    def __init__(self, filename: str):
        super().__init__(
            "Only PDF, DOCX and TXT files are allowed",
            details={"filename": filename},
        )


class FileTooLargeError(ResumeExtractionError):
    """Upload exceeds the configured size limit"""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"File is larger than {limit // (1024 * 1024)} MB",
            details={"size": size, "limit": limit},
        )


class NoTextExtractedError(ResumeExtractionError):
    """Nothing readable came out of the document"""

    def __init__(self, filename: str, reason: Optional[str] = None):
        details = {"filename": filename}
        if reason:
            details["reason"] = reason
        super().__init__("No text content could be extracted from the file", details=details)
