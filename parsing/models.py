"""
Structured résumé record produced by the rule-based parser.

Field names are snake_case in Python; ``model_dump(by_alias=True)`` emits the
camelCase keys consumers of the JSON export expect (``startDate``,
``fieldOfStudy``, ``credentialId``...).
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .normalizers import split_lines

SKILL_CATEGORIES = ("technical", "soft", "tools", "languages")


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Document(_Record):
    """Raw extracted text plus its normalized lines. Lives for one parse call."""

    text: str = ""
    lines: List[str] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: Optional[str]) -> "Document":
        text = text or ""
        return cls(text=text, lines=split_lines(text))


class ContactInfo(_Record):
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    portfolio: Optional[str] = None

    def is_complete(self) -> bool:
        return all([self.email, self.phone, self.linkedin, self.portfolio])


class EducationEntry(_Record):
    institution: str
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    gpa: Optional[str] = None
    location: Optional[str] = None


class ExperienceEntry(_Record):
    company: str
    position: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: List[str] = Field(default_factory=list)
    location: Optional[str] = None


class ProjectEntry(_Record):
    name: str
    description: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    achievements: List[str] = Field(default_factory=list)
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class CertificationEntry(_Record):
    name: str
    issuer: Optional[str] = None
    date: Optional[str] = None
    credential_id: Optional[str] = None


class SkillSet(_Record):
    """Four skill buckets; each keeps unique tokens in first-seen order."""

    technical: List[str] = Field(default_factory=list)
    soft: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)

    def add(self, category: str, token: str) -> bool:
        bucket: List[str] = getattr(self, category)
        if token in bucket:
            return False
        bucket.append(token)
        return True

    def is_empty(self) -> bool:
        return not any(getattr(self, c) for c in SKILL_CATEGORIES)


class ResumeRecord(_Record):
    name: str = ""
    contact: ContactInfo = Field(default_factory=ContactInfo)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: SkillSet = Field(default_factory=SkillSet)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    certifications: List[CertificationEntry] = Field(default_factory=list)
