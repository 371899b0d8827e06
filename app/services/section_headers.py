# app/services/section_headers.py
"""
Static table of resume section headers.

Entries are scanned in table order and the first key with any variant
contained in a line wins. Overlapping phrases are therefore resolved by
position in this table, not by the longest match. `contact` comes last so
that phrases like "email" only claim a line when nothing else does.
"""
from dataclasses import dataclass
from typing import Tuple

SECTION_KEYS: Tuple[str, ...] = (
    "contact", "summary", "education", "experience", "skills", "projects",
    "certifications", "achievements", "languages", "publications",
    "interests", "other",
)


@dataclass(frozen=True)
class SectionHeaderEntry:
    key: str
    variants: Tuple[str, ...]


SECTION_HEADERS: Tuple[SectionHeaderEntry, ...] = (
    SectionHeaderEntry("summary", (
        "summary", "profile", "objective", "career summary",
    )),
    SectionHeaderEntry("education", (
        "education", "academic qualifications", "education background",
    )),
    SectionHeaderEntry("experience", (
        "experience", "professional experience", "work history", "employment",
    )),
    SectionHeaderEntry("skills", (
        "skills", "technical skills", "core competencies",
    )),
    SectionHeaderEntry("projects", (
        "projects", "key projects", "academic projects",
    )),
    SectionHeaderEntry("certifications", (
        "certifications", "professional certifications", "licenses",
        "courses & certifications",
    )),
    SectionHeaderEntry("achievements", (
        "achievements", "achivements", "awards", "honors", "accomplishments",
    )),
    SectionHeaderEntry("languages", (
        "languages", "spoken languages",
    )),
    SectionHeaderEntry("publications", (
        "publications", "research", "papers published",
    )),
    SectionHeaderEntry("interests", (
        "interests", "hobbies", "personal interests",
    )),
    SectionHeaderEntry("contact", (
        "contact", "contact information", "email", "phone", "mobile",
    )),
)


def empty_sections() -> dict:
    """Fresh bucket mapping with every section key set to ''."""
    return {key: "" for key in SECTION_KEYS}
