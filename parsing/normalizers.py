import re
from typing import List, Optional

BULLET_CHARS = ["•", "▪", "◦", "‣", "·", "*", "–", "-"]
BULLET_RE = re.compile(r"^[" + "".join(re.escape(b) for b in BULLET_CHARS) + r"]\s*")
SEPARATOR_RE = re.compile(r"[,;|•▪◦‣·]")
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
CID_RE = re.compile(r"\(cid:\d+\)")


def split_lines(text: Optional[str]) -> List[str]:
    """Trimmed, non-empty lines in document order."""
    if not text:
        return []
    return [l.strip() for l in text.splitlines() if l.strip()]


def find_years(line: str) -> List[str]:
    return YEAR_RE.findall(line or "")


def is_bullet(line: str) -> bool:
    return bool(BULLET_RE.match(line or ""))


def strip_bullet(line: str) -> str:
    return BULLET_RE.sub("", line, count=1).strip()


def split_tokens(text: str) -> List[str]:
    # Hyphens are not separators here: "problem-solving", "CI-CD" stay whole
    return [t.strip() for t in SEPARATOR_RE.split(text or "") if t.strip()]


def strip_cid_artifacts(text: str) -> str:
    return CID_RE.sub("", text or "")
