import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from .models import (
    SKILL_CATEGORIES,
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    SkillSet,
)
from .normalizers import find_years, is_bullet, split_tokens, strip_bullet

Buffer = Dict[str, Any]
# (matches, apply, consumes_line)
Rule = Tuple[Callable[[Buffer, str], bool], Callable[[Buffer, str], None], bool]

INSTITUTION_RE = re.compile(r"university|college|institute|school", re.IGNORECASE)
# One-letter abbreviations are case-sensitive so "be"/"me" in prose never count
DEGREE_RE = re.compile(
    r"(?i:\b(?:bachelor|master|doctor)|\b(?:ph\.?\s?d|mba)\.?(?!\w))"
    r"|\b(?:[BM]\.?\s?(?:Sc|S|Tech)|B\.?E|M\.E|[BM]\.A)\.?(?!\w)"
)
FIELD_RE = re.compile(r"computer science|engineering|mathematics|physics|chemistry|biology", re.IGNORECASE)
GPA_KEY_RE = re.compile(r"\b(?:c?gpa|grade point average)\b", re.IGNORECASE)
GPA_RE = re.compile(r"\d\.\d{1,2}")
LOC_LINE_RE = re.compile(r"^[A-Z][a-zA-Z\-\' ]+,\s*[A-Z][a-zA-Z\-\' ]+$")

COMPANY_RE = re.compile(r"\b(?:inc|ltd|llc|corp|corporation|company)\b\.?", re.IGNORECASE)
POSITION_RE = re.compile(r"\b(?:engineer|developer|analyst|manager|director|lead|architect)", re.IGNORECASE)

TECH_MARKERS = ("Technologies:", "Tech Stack:")

ISSUER_RE = re.compile(r"\b(?:issued by|from|by)\b", re.IGNORECASE)
CREDENTIAL_KEY_RE = re.compile(r"\b(?:credential|id|number)\b", re.IGNORECASE)
CREDENTIAL_TOKEN_RE = re.compile(r"^(?=[A-Z0-9-]*\d)[A-Z0-9][A-Z0-9-]*$")
TOKEN_SPLIT_RE = re.compile(r"[\s,;:()\[\]]+")

SKILL_CATEGORY_PATTERNS = [
    ("technical", re.compile(
        r"\b(?:programming|development|technical|frameworks?|libraries|databases?|cloud|devops"
        r"|ai|ml|machine learning|data science|frontend|backend)\b", re.IGNORECASE)),
    ("soft", re.compile(
        r"\b(?:communication|leadership|teamwork|problem[- ]solving|management|soft skills|interpersonal)\b",
        re.IGNORECASE)),
    ("tools", re.compile(
        r"\b(?:tools|software|platforms|environments|ides?|version control|git|github)\b", re.IGNORECASE)),
    ("languages", re.compile(r"\b(?:languages|spoken|fluent|proficient|native|bilingual)\b", re.IGNORECASE)),
]


def _unset(field: str) -> Callable[[Buffer, str], bool]:
    return lambda cur, line: field not in cur


def _set_line(field: str) -> Callable[[Buffer, str], None]:
    def apply(cur: Buffer, line: str) -> None:
        cur[field] = line
    return apply


def _set_years(cur: Buffer, line: str) -> None:
    years = find_years(line)
    cur["start_date"] = years[0]
    if len(years) > 1:
        cur["end_date"] = years[1]


def _append_bullet(field: str) -> Callable[[Buffer, str], None]:
    def apply(cur: Buffer, line: str) -> None:
        cur.setdefault(field, []).append(strip_bullet(line))
    return apply


def _run_entries(
    lines: List[str],
    starts_entry: Callable[[str], bool],
    start_field: str,
    rules: List[Rule],
    build: Callable[..., Any],
) -> List[Any]:
    """
    Buffer one entry at a time. A line matching ``starts_entry`` while a new
    entry is awaited flushes the buffer and opens the next entry. A line no
    rule claims for the buffered entry re-arms that wait and is itself
    re-tested as an entry start. Lines before the first entry start are
    ignored.
    """
    entries: List[Any] = []
    current: Buffer = {}
    awaiting = True

    def flush() -> None:
        if current:
            entries.append(build(**current))

    for line in lines:
        if awaiting and starts_entry(line):
            flush()
            current = {start_field: line}
            awaiting = False
            continue
        if not current:
            continue

        claimed = False
        for matches, apply, consumes in rules:
            if matches(current, line):
                apply(current, line)
                claimed = True
                if consumes:
                    break
        if claimed:
            continue

        awaiting = True
        if starts_entry(line):
            flush()
            current = {start_field: line}
            awaiting = False

    flush()
    return entries


# ───────────────────────────────────────── education ──
def _is_institution(line: str) -> bool:
    return not is_bullet(line) and bool(INSTITUTION_RE.search(line))


def _set_gpa(cur: Buffer, line: str) -> None:
    m = GPA_RE.search(line)
    if m:
        cur["gpa"] = m.group()


EDUCATION_RULES: List[Rule] = [
    (lambda cur, line: "degree" not in cur and bool(DEGREE_RE.search(line)), _set_line("degree"), True),
    (lambda cur, line: "field_of_study" not in cur and bool(FIELD_RE.search(line)), _set_line("field_of_study"), True),
    (lambda cur, line: "start_date" not in cur and bool(find_years(line)), _set_years, True),
    (lambda cur, line: "gpa" not in cur and bool(GPA_KEY_RE.search(line)), _set_gpa, True),
    (lambda cur, line: "location" not in cur and bool(LOC_LINE_RE.match(line)), _set_line("location"), True),
]


def classify_education(lines: List[str]) -> List[EducationEntry]:
    return _run_entries(lines, _is_institution, "institution", EDUCATION_RULES, EducationEntry)


# ───────────────────────────────────────── experience ──
def _is_company(line: str) -> bool:
    return not is_bullet(line) and bool(COMPANY_RE.search(line))


EXPERIENCE_RULES: List[Rule] = [
    (lambda cur, line: "position" not in cur and bool(POSITION_RE.search(line)), _set_line("position"), True),
    (lambda cur, line: "start_date" not in cur and bool(find_years(line)), _set_years, True),
    (lambda cur, line: is_bullet(line), _append_bullet("description"), True),
    (lambda cur, line: "location" not in cur and bool(LOC_LINE_RE.match(line)), _set_line("location"), True),
]


def classify_experience(lines: List[str]) -> List[ExperienceEntry]:
    return _run_entries(lines, _is_company, "company", EXPERIENCE_RULES, ExperienceEntry)


# ───────────────────────────────────────── projects ──
def _is_tech_line(line: str) -> bool:
    return any(marker in line for marker in TECH_MARKERS)


def _set_technologies(cur: Buffer, line: str) -> None:
    _, _, tail = line.partition(":")
    cur["technologies"] = split_tokens(tail)


PROJECT_RULES: List[Rule] = [
    (_unset("description"), _set_line("description"), True),
    (lambda cur, line: _is_tech_line(line), _set_technologies, True),
    (lambda cur, line: is_bullet(line), _append_bullet("achievements"), True),
    (lambda cur, line: "start_date" not in cur and bool(find_years(line)), _set_years, True),
]


def classify_projects(lines: List[str]) -> List[ProjectEntry]:
    return _run_entries(lines, lambda line: not is_bullet(line), "name", PROJECT_RULES, ProjectEntry)


# ───────────────────────────────────────── certifications ──
def _set_issuer(cur: Buffer, line: str) -> None:
    cur["issuer"] = ISSUER_RE.sub("", line, count=1).strip(" :-–")


def _set_cert_date(cur: Buffer, line: str) -> None:
    cur["date"] = find_years(line)[0]


def credential_token(line: str) -> Optional[str]:
    """First uppercase/digit/hyphen token carrying at least one digit."""
    for tok in TOKEN_SPLIT_RE.split(line):
        if CREDENTIAL_TOKEN_RE.match(tok):
            return tok
    return None


def _set_credential(cur: Buffer, line: str) -> None:
    tok = credential_token(line)
    if tok:
        cur["credential_id"] = tok


CERTIFICATION_RULES: List[Rule] = [
    (lambda cur, line: "issuer" not in cur and bool(ISSUER_RE.search(line)), _set_issuer, True),
    # a date line may also carry the credential id
    (lambda cur, line: "date" not in cur and bool(find_years(line)), _set_cert_date, False),
    (lambda cur, line: "credential_id" not in cur and bool(CREDENTIAL_KEY_RE.search(line)), _set_credential, True),
]


def classify_certifications(lines: List[str]) -> List[CertificationEntry]:
    return _run_entries(lines, lambda line: not is_bullet(line), "name", CERTIFICATION_RULES, CertificationEntry)


# ───────────────────────────────────────── skills ──
def skill_category(line: str) -> Optional[str]:
    for category, rx in SKILL_CATEGORY_PATTERNS:
        if rx.search(line):
            return category
    return None


def classify_skills(lines: List[str]) -> SkillSet:
    skills = SkillSet()
    current = SKILL_CATEGORIES[0]
    for line in lines:
        category = skill_category(line)
        if category:
            current = category
        for token in split_tokens(line):
            skills.add(current, token)
    return skills
