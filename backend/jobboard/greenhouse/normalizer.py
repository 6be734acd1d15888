"""
Greenhouse record normalization

Pure functions that derive the canonical job fields from a raw board record.
Everything here is deterministic for a given record and `now`; nothing here
touches the network or the database, so the sync and the preview paths share
it and cannot drift apart.
"""
import html
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union

from jobboard.core.config import settings
from jobboard.core.dates import as_utc, utcnow
from jobboard.greenhouse.schemas import (
    GREENHOUSE_SOURCE,
    DisplayJob,
    GreenhouseJob,
    NormalizedJob,
    SourceMetadata,
)
from jobboard.jobs.schemas import EmploymentType, ExperienceLevel

UNKNOWN = "Unknown"

# Matched as case-insensitive substrings, so a term also hits longer words
# ("Java" in "JavaScript", "React" in "reactive", "Redis" in "redistribute").
# Results keep this order.
SKILL_VOCABULARY = [
    "JavaScript",
    "TypeScript",
    "React",
    "Angular",
    "Vue.js",
    "Node.js",
    "Express.js",
    "Python",
    "Django",
    "Flask",
    "Java",
    "Kotlin",
    "Ruby",
    "PHP",
    "Golang",
    "PostgreSQL",
    "MySQL",
    "MongoDB",
    "Redis",
    "GraphQL",
    "Azure",
    "Google Cloud",
    "Docker",
    "Kubernetes",
    "Terraform",
]

ENTRY_PATTERN = re.compile(r"\b(intern|internship|junior|jr\.?|entry|graduate|new grad)\b")
SENIOR_PATTERN = re.compile(r"\b(senior|sr\.?|lead|principal|staff)\b")

BLOCK_TAG_PATTERN = re.compile(r"<\s*(br|/p|/li|/h[1-6]|/div|/ul|/ol)\b[^>]*>", re.IGNORECASE)
TAG_PATTERN = re.compile(r"<[^>]+>")


def derive_employment_type(title: Optional[str], location: Optional[str]) -> EmploymentType:
    """First matching rule wins; a remote location beats every title rule"""
    t = (title or "").lower()
    loc = (location or "").lower()

    if "remote" in loc:
        return EmploymentType.REMOTE
    if "intern" in t:
        return EmploymentType.INTERNSHIP
    if "contract" in t or "consultant" in t:
        return EmploymentType.CONTRACT
    if "part-time" in t or "part time" in t:
        return EmploymentType.PART_TIME
    return EmploymentType.FULL_TIME


def derive_salary(record: GreenhouseJob) -> str:
    # Board API has no structured compensation field
    return settings.SALARY_PLACEHOLDER


def extract_skills(text: Optional[str]) -> List[str]:
    """Vocabulary terms found in the text, in vocabulary order"""
    if not text:
        return []
    haystack = text.lower()
    return [skill for skill in SKILL_VOCABULARY if skill.lower() in haystack]


def derive_experience_level(title: Optional[str]) -> ExperienceLevel:
    t = (title or "").lower()
    if ENTRY_PATTERN.search(t):
        return ExperienceLevel.ENTRY
    if SENIOR_PATTERN.search(t):
        return ExperienceLevel.SENIOR
    return ExperienceLevel.MID


def clean_content(content: Optional[str]) -> str:
    """Turn Greenhouse's entity-escaped HTML into plain text, one line per block"""
    if not content:
        return ""
    text = html.unescape(content)
    text = BLOCK_TAG_PATTERN.sub("\n", text)
    text = TAG_PATTERN.sub("", text)
    # Inner entities (&nbsp;, &amp;) were escaped twice
    text = html.unescape(text)
    lines = (" ".join(line.split()) for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def derive_company(record: GreenhouseJob) -> str:
    if record.departments:
        name = (record.departments[0].name or "").strip()
        if name:
            return name
    return UNKNOWN


def derive_location(record: GreenhouseJob) -> str:
    if record.location and record.location.name:
        name = record.location.name.strip()
        if name:
            return name
    return UNKNOWN


def display_id(external_id: Union[int, str]) -> str:
    return f"gh_{external_id}"


def normalize_job(
    record: Union[GreenhouseJob, Dict[str, Any]],
    board_token: str,
    now: Optional[datetime] = None,
) -> NormalizedJob:
    """
    Map one Greenhouse record to the full canonical job shape.

    `now` is only read when the record has no updated_at and to decide
    whether the posting is still within its validity window.
    """
    if not isinstance(record, GreenhouseJob):
        record = GreenhouseJob.model_validate(record)
    now = as_utc(now) if now else utcnow()

    title = record.title.strip()
    location_name = record.location.name if record.location else None
    description = clean_content(record.content)

    posted_date = as_utc(record.updated_at) if record.updated_at else now
    expiry_date = posted_date + timedelta(days=settings.JOB_EXPIRY_DAYS)

    return NormalizedJob(
        source=GREENHOUSE_SOURCE,
        external_id=str(record.id),
        source_board=board_token,
        title=title,
        company=derive_company(record),
        location=derive_location(record),
        employment_type=derive_employment_type(title, location_name),
        salary=derive_salary(record),
        description=description,
        requirements=description,
        experience_level=derive_experience_level(title),
        skills=extract_skills(description),
        active=now <= expiry_date,
        posted_date=posted_date,
        expiry_date=expiry_date,
        source_metadata=SourceMetadata(
            source_url=record.absolute_url,
            internal_job_id=record.internal_job_id,
            metadata=record.metadata,
        ),
    )


def to_display_job(job: NormalizedJob) -> DisplayJob:
    return DisplayJob(id=display_id(job.external_id), **job.model_dump())
