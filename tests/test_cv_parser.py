from parsing.cv_parser import detect_name, extract_contact, parse_resume_text, segment_sections

SAMPLE = (
    "Jane Doe\n"
    "jane@x.com 555-123-4567\n"
    "EDUCATION\n"
    "ABC University\n"
    "Bachelor of Science\n"
    "2018 2022\n"
    "GPA: 3.75\n"
    "SKILLS\n"
    "Python, React\n"
    "EXPERIENCE\n"
    "Acme Inc.\n"
    "Software Engineer\n"
    "2020 2022\n"
    "- Built things"
)

FULL = """
ALEX MORGAN - BACKEND ENGINEER
alex.morgan@mail.com | +1 415-555-0199
linkedin.com/in/alex-morgan

EDUCATION
Northfield University
Master of Science
Computer Science
2019 2021
GPA: 3.9/4.0
Lakeside College
B.S. Mathematics
2015 2019

SKILLS
Python, Go, PostgreSQL
Soft Skills: Communication, Mentoring
Tools: Docker, Git
Languages: English, Spanish

EXPERIENCE
Initech LLC
Senior Backend Engineer
Austin, TX
2021 2024
- Designed billing APIs
- Cut p95 latency by 40%
Globex Corp.
Software Developer
2019 2021
• Maintained ETL jobs

PROJECTS
Ledger
Double-entry bookkeeping library
Technologies: Python, SQLAlchemy
- 2k GitHub stars
Tracer
Distributed tracing demo
Tech Stack: Go | gRPC

CERTIFICATIONS
AWS Certified Developer
Issued by Amazon Web Services
2022
Credential ID AWS-DEV-0042
CKA
from The Linux Foundation
2023
"""


def test_parser_core():
    r = parse_resume_text(SAMPLE)
    assert r.name == "Jane Doe"
    assert r.contact.email == "jane@x.com"
    assert r.contact.phone == "555-123-4567"

    assert len(r.education) == 1
    edu = r.education[0]
    assert edu.institution == "ABC University"
    assert edu.degree == "Bachelor of Science"
    assert (edu.start_date, edu.end_date) == ("2018", "2022")
    assert edu.gpa == "3.75"

    assert "Python" in r.skills.technical
    assert "React" in r.skills.technical

    assert len(r.experience) == 1
    job = r.experience[0]
    assert job.company == "Acme Inc."
    assert job.position == "Software Engineer"
    assert (job.start_date, job.end_date) == ("2020", "2022")
    assert job.description == ["Built things"]


def test_empty_text_gives_empty_record():
    for raw in ("", None, "   \n\n  "):
        r = parse_resume_text(raw)
        assert r.name == ""
        assert r.contact.email is None and r.contact.phone is None
        assert r.contact.linkedin is None and r.contact.portfolio is None
        assert r.education == [] and r.experience == []
        assert r.projects == [] and r.certifications == []
        assert r.skills.is_empty()


def test_full_resume_multiple_entries():
    r = parse_resume_text(FULL)
    assert r.name == "ALEX MORGAN"
    assert r.contact.email == "alex.morgan@mail.com"
    assert r.contact.phone == "+1 415-555-0199"
    assert r.contact.linkedin == "linkedin.com/in/alex-morgan"

    assert [e.institution for e in r.education] == ["Northfield University", "Lakeside College"]
    assert r.education[0].degree == "Master of Science"
    assert r.education[0].field_of_study == "Computer Science"
    assert r.education[0].gpa == "3.9"
    assert r.education[1].degree == "B.S. Mathematics"
    assert r.education[1].start_date == "2015"

    assert r.skills.technical == ["Python", "Go", "PostgreSQL"]
    assert r.skills.soft == ["Soft Skills: Communication", "Mentoring"]
    assert r.skills.tools == ["Tools: Docker", "Git"]
    assert r.skills.languages == ["Languages: English", "Spanish"]

    assert [e.company for e in r.experience] == ["Initech LLC", "Globex Corp."]
    initech, globex = r.experience
    assert initech.position == "Senior Backend Engineer"
    assert initech.location == "Austin, TX"
    assert initech.description == ["Designed billing APIs", "Cut p95 latency by 40%"]
    assert globex.position == "Software Developer"
    assert globex.description == ["Maintained ETL jobs"]

    assert [p.name for p in r.projects] == ["Ledger", "Tracer"]
    assert r.projects[0].description == "Double-entry bookkeeping library"
    assert r.projects[0].technologies == ["Python", "SQLAlchemy"]
    assert r.projects[0].achievements == ["2k GitHub stars"]
    assert r.projects[1].technologies == ["Go", "gRPC"]

    aws, cka = r.certifications
    assert aws.name == "AWS Certified Developer"
    assert aws.issuer == "Amazon Web Services"
    assert aws.date == "2022"
    assert aws.credential_id == "AWS-DEV-0042"
    assert cka.name == "CKA"
    assert cka.issuer == "The Linux Foundation"
    assert cka.date == "2023"


def test_education_span_never_reaches_experience():
    text = (
        "EDUCATION\n"
        "State University\n"
        "Bachelor of Science\n"
        "Teaching assistant for Widget Company labs\n"
        "2015 2019\n"
        "EXPERIENCE\n"
        "Globex Corp\n"
        "Data Analyst\n"
        "2019 2021\n"
    )
    sections = segment_sections(text)
    assert "Teaching assistant for Widget Company labs" in sections["education"]
    assert "Teaching assistant for Widget Company labs" not in sections["experience"]

    r = parse_resume_text(text)
    assert [e.company for e in r.experience] == ["Globex Corp"]
    assert r.experience[0].position == "Data Analyst"


def test_section_headers_are_case_insensitive_and_crlf_safe():
    text = "Jane Doe\r\nWork Experience:\r\nAcme Inc.\r\nLead Developer\r\nSkills: Go, Rust\r\n"
    sections = segment_sections(text)
    assert sections["experience"] == ["Acme Inc.", "Lead Developer"]
    assert sections["skills"] == ["Go, Rust"]


def test_missing_sections_are_skipped():
    sections = segment_sections("Jane Doe\nSKILLS\nPython\n")
    assert list(sections) == ["skills"]


def test_header_without_body_is_ignored():
    sections = segment_sections("SKILLS\nEXPERIENCE\nAcme Inc.\n")
    assert "skills" not in sections
    assert sections["experience"] == ["Acme Inc."]


def test_certifications_and_achievements_header():
    r = parse_resume_text("CERTIFICATIONS & ACHIEVEMENTS\nGoogle Data Analytics\nIssued by Google\n2022\n")
    assert len(r.certifications) == 1
    cert = r.certifications[0]
    assert cert.name == "Google Data Analytics"
    assert cert.issuer == "Google"
    assert cert.date == "2022"


def test_qualified_section_headers():
    text = (
        "Jane Doe\n"
        "TECHNICAL SKILLS\n"
        "Python, Go\n"
        "RELEVANT EXPERIENCE\n"
        "Acme Inc.\n"
        "Software Engineer\n"
        "Experience with Kubernetes clusters\n"
        "EDUCATION & TRAINING\n"
        "State University\n"
    )
    sections = segment_sections(text)
    assert sections["skills"] == ["Python, Go"]
    # a prose line opening with a header word stays in the body
    assert sections["experience"] == ["Acme Inc.", "Software Engineer", "Experience with Kubernetes clusters"]
    assert sections["education"] == ["State University"]

    r = parse_resume_text(text)
    assert r.skills.technical == ["Python", "Go"]
    assert [e.company for e in r.experience] == ["Acme Inc."]
    assert [e.institution for e in r.education] == ["State University"]


def test_trailing_qualifier_and_first_non_empty_header():
    sections = segment_sections("Skills Summary\nGo\nProfessional Experience:\nGlobex Corp\n")
    assert sections["skills"] == ["Go"]
    assert sections["experience"] == ["Globex Corp"]

    assert segment_sections("SKILLS\nTechnical Skills\nRust\n")["skills"] == ["Rust"]


def test_certification_line_sets_date_and_credential():
    r = parse_resume_text("CERTIFICATIONS\nAWS Certified Developer\nCredential ID AB-1234 2021\n")
    cert = r.certifications[0]
    assert cert.date == "2021"
    assert cert.credential_id == "AB-1234"


def test_single_start_line_section_yields_one_entry():
    r = parse_resume_text("PROJECTS\nPortfolio Site\n")
    assert len(r.projects) == 1
    assert r.projects[0].name == "Portfolio Site"
    assert r.projects[0].description is None
    assert r.projects[0].technologies == []


def test_name_detection():
    assert detect_name(["JANE DOE - SOFTWARE ENGINEER"]) == "JANE DOE"
    assert detect_name(["Curriculum vitae", "Mary-Ann Smith | Data Analyst"]) == "Mary-Ann Smith"
    # only the first three lines are inspected
    assert detect_name(["resume", "jane@x.com", "2024", "John Smith"]) == ""
    assert detect_name(["EDUCATION"]) == ""
    assert detect_name([]) == ""


def test_contact_first_match_wins():
    contact = extract_contact(["Email: a@one.com", "Backup: b@two.com  +44 207-555-0101"])
    assert contact.email == "a@one.com"
    assert contact.phone == "+44 207-555-0101"


def test_contact_stops_once_complete():
    def lines():
        yield "a@one.com 555-123-4567"
        yield "linkedin.com/in/jane-doe"
        raise AssertionError("read past a complete contact block")

    contact = extract_contact(lines())
    assert contact.is_complete()
    assert contact.email == "a@one.com"

    contact = extract_contact([
        "a@one.com 555-123-4567",
        "linkedin.com/in/jane-doe",
        "x",
        "y",
        "Other: b@two.com 555-999-0000",
    ])
    assert contact.email == "a@one.com"
    assert contact.phone == "555-123-4567"


def test_contact_site_pattern_is_broad():
    contact = extract_contact(["linkedin.com/in/jane-doe", "Portfolio: https://janedoe.dev/work"])
    assert contact.linkedin == "linkedin.com/in/jane-doe"
    # the generic site pattern already fired on the linkedin line
    assert contact.portfolio == "linkedin.com/in/jane-doe"

    contact = extract_contact(["Portfolio: https://janedoe.dev/work"])
    assert contact.portfolio == "https://janedoe.dev/work"


def test_json_export_uses_camel_case():
    data = parse_resume_text(SAMPLE).model_dump(by_alias=True)
    assert set(data) == {"name", "contact", "education", "skills", "experience", "projects", "certifications"}
    edu = data["education"][0]
    assert edu["startDate"] == "2018"
    assert "fieldOfStudy" in edu and edu["fieldOfStudy"] is None
    assert data["experience"][0]["endDate"] == "2022"
    assert data["skills"]["technical"] == ["Python", "React"]


def test_calls_do_not_share_state():
    first = parse_resume_text(SAMPLE)
    second = parse_resume_text(SAMPLE)
    assert first.model_dump() == second.model_dump()
    assert first.experience[0].description is not second.experience[0].description
