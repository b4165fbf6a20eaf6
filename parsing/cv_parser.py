import re
from typing import Dict, List, Optional

import structlog

from .classifiers import (
    classify_certifications,
    classify_education,
    classify_experience,
    classify_projects,
    classify_skills,
)
from .models import ContactInfo, Document, ResumeRecord
from .normalizers import split_lines

logger = structlog.get_logger()

NAME_SCAN_LINES = 3

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"(?<!\d)(?:\+\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[A-Za-z0-9_-]+", re.IGNORECASE)
# Deliberately broad: also hits the linkedin line or an email's domain
PORTFOLIO_RE = re.compile(r"(?:https?://)?[A-Za-z0-9.-]+\.[A-Za-z]{2,}(?:/[A-Za-z0-9-]+)*")

CONTACT_PATTERNS = [
    ("email", EMAIL_RE),
    ("phone", PHONE_RE),
    ("linkedin", LINKEDIN_RE),
    ("portfolio", PORTFOLIO_RE),
]

_WORD = r"[A-Z][a-z][A-Za-z'\-]*"
NAME_RE = re.compile(
    rf"^(?P<name>[A-Z]+(?:[ \t]+[A-Z]+)+|{_WORD}(?:[ \t]+{_WORD})+)"
    r"(?:[ \t]*[-–—|,][ \t]*[A-Z][A-Za-z&/ \t]+)?$"
)

# Processing order matters: each consumed span is cut from the working text
SECTION_HEADERS = {
    "education": r"education(?:al[ \t]+background)?",
    "skills": r"skills",
    "experience": r"experience",
    "projects": r"projects",
    "certifications": r"certifications?",
}
# Qualifiers allowed around a header keyword ("TECHNICAL SKILLS", "Skills Summary",
# "EDUCATION & TRAINING"). A header stays a short line of its own or ends in a colon.
HEADER_LEAD_WORDS = (
    "technical", "relevant", "professional", "work", "employment", "industry",
    "key", "core", "personal", "academic", "selected", "additional", "other",
)
HEADER_TRAIL_WORDS = ("summary", "history", "highlights", "overview")
_LEAD = r"(?:(?:" + "|".join(HEADER_LEAD_WORDS) + r")[ \t]+){0,2}"
_TRAIL = (
    r"(?:[ \t]+(?:" + "|".join(HEADER_TRAIL_WORDS) + r"))?"
    r"(?:(?:[ \t]*&[ \t]*|[ \t]+and[ \t]+)[A-Za-z]+)?"
)


def _header_line(keyword: str) -> str:
    return r"^[ \t]*" + _LEAD + r"(?:" + keyword + r")" + _TRAIL + r"[ \t]*(?::|$)"


_ANY_HEADER = _header_line("|".join(SECTION_HEADERS.values()))
SECTION_PATTERNS = {
    name: re.compile(
        _header_line(kw) + r"(?P<body>.*?)(?=" + _ANY_HEADER + r"|\Z)",
        re.IGNORECASE | re.MULTILINE | re.DOTALL,
    )
    for name, kw in SECTION_HEADERS.items()
}


def parse_resume_text(raw_text: Optional[str]) -> ResumeRecord:
    """
    Turn extracted résumé text into a ResumeRecord.

    Never raises on text input; anything that cannot be recognized is left
    empty. Each call builds its own buffers, so concurrent calls are safe.
    """
    doc = Document.from_text(raw_text)
    record = ResumeRecord(
        name=detect_name(doc.lines),
        contact=extract_contact(doc.lines),
    )

    sections = segment_sections(doc.text)
    if "education" in sections:
        record.education = classify_education(sections["education"])
    if "skills" in sections:
        record.skills = classify_skills(sections["skills"])
    if "experience" in sections:
        record.experience = classify_experience(sections["experience"])
    if "projects" in sections:
        record.projects = classify_projects(sections["projects"])
    if "certifications" in sections:
        record.certifications = classify_certifications(sections["certifications"])

    logger.info(
        "resume_parsed",
        lines=len(doc.lines),
        sections=list(sections),
        has_name=bool(record.name),
        education=len(record.education),
        experience=len(record.experience),
        projects=len(record.projects),
        certifications=len(record.certifications),
    )
    return record


def extract_contact(lines: List[str]) -> ContactInfo:
    contact = ContactInfo()
    for line in lines:
        for field, rx in CONTACT_PATTERNS:
            if getattr(contact, field):
                continue
            m = rx.search(line)
            if m:
                setattr(contact, field, m.group())
        if contact.is_complete():
            break
    return contact


def detect_name(lines: List[str]) -> str:
    for line in lines[:NAME_SCAN_LINES]:
        m = NAME_RE.match(line)
        if m:
            return m.group("name").strip()
    return ""


def segment_sections(text: str) -> Dict[str, List[str]]:
    """
    Map section name -> body lines for every header found.

    A body runs from its header to the next recognized header (any kind) or
    the end of the text; the first header of a kind with a non-empty body
    wins. Matched spans are cut out of the working copy so a later header
    pattern can never capture them again.
    """
    working = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    sections: Dict[str, List[str]] = {}
    for name, rx in SECTION_PATTERNS.items():
        m = next((m for m in rx.finditer(working) if m.group("body").strip()), None)
        if not m:
            continue
        sections[name] = split_lines(m.group("body"))
        logger.debug("section_found", section=name, lines=len(sections[name]))
        working = working[: m.start()] + working[m.end():]
    return sections
