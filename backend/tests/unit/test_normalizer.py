"""
Unit tests for Greenhouse record normalization
"""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from conftest import BOARD_TOKEN, greenhouse_record
from jobboard.core.dates import utcnow
from jobboard.greenhouse.normalizer import (
    clean_content,
    derive_employment_type,
    derive_experience_level,
    display_id,
    extract_skills,
    normalize_job,
    to_display_job,
)
from jobboard.jobs.schemas import EmploymentType, ExperienceLevel

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "title, location, expected",
    [
        ("Software Engineering Intern", "Remote, US", EmploymentType.REMOTE),
        ("Backend Developer", "Austin, TX", EmploymentType.FULL_TIME),
        ("Part-time Web Developer", "Chicago", EmploymentType.PART_TIME),
        ("Contract Consultant", "", EmploymentType.CONTRACT),
        ("Contract Designer", "Remote - EMEA", EmploymentType.REMOTE),
        ("Marketing Intern", "Berlin", EmploymentType.INTERNSHIP),
        ("Internship, Contract Research", "Berlin", EmploymentType.INTERNSHIP),
        ("Contract Developer", "NYC", EmploymentType.CONTRACT),
        ("Security Consultant", "NYC", EmploymentType.CONTRACT),
        ("Part-time Barista", "Austin", EmploymentType.PART_TIME),
        ("Support Agent (part time)", None, EmploymentType.PART_TIME),
        ("Backend Engineer", "Austin", EmploymentType.FULL_TIME),
        ("", None, EmploymentType.FULL_TIME),
    ],
)
def test_employment_type_first_rule_wins(title, location, expected):
    assert derive_employment_type(title, location) == expected


def test_remote_in_title_only_is_not_remote():
    assert derive_employment_type("Remote Support Engineer", "Austin") == EmploymentType.FULL_TIME


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Junior Data Analyst", ExperienceLevel.ENTRY),
        ("Engineering Intern", ExperienceLevel.ENTRY),
        ("Senior Backend Engineer", ExperienceLevel.SENIOR),
        ("Staff Engineer", ExperienceLevel.SENIOR),
        ("Backend Engineer", ExperienceLevel.MID),
        ("Internal Tools Engineer", ExperienceLevel.MID),
    ],
)
def test_experience_level(title, expected):
    assert derive_experience_level(title) == expected


def test_extract_skills_keeps_vocabulary_order():
    text = "We use PostgreSQL, node.js and REACT every day."
    assert extract_skills(text) == ["React", "Node.js", "PostgreSQL"]
    text = "Experience with React, Node.js and PostgreSQL required"
    assert extract_skills(text) == ["React", "Node.js", "PostgreSQL"]


def test_extract_skills_substring_matches():
    # "Java" is found inside "JavaScript"
    assert extract_skills("Strong JavaScript skills") == ["JavaScript", "Java"]


def test_extract_skills_empty():
    assert extract_skills("") == []
    assert extract_skills(None) == []
    assert extract_skills("Friendly team, great coffee") == []


def test_extract_skills_matches_inside_longer_words():
    assert extract_skills("Reactive pipelines that redistribute load") == ["React", "Redis"]


def test_clean_content_unescapes_and_strips_tags():
    content = "&lt;p&gt;Python &amp;amp; Django&lt;/p&gt;&lt;ul&gt;&lt;li&gt;Docker&lt;/li&gt;&lt;/ul&gt;"
    assert clean_content(content) == "Python & Django\nDocker"


def test_clean_content_empty():
    assert clean_content(None) == ""
    assert clean_content("") == ""


def test_normalize_job_maps_all_fields():
    record = greenhouse_record(
        4002,
        "Senior Backend Engineer",
        department="Platform",
        location="Austin, TX",
        content="&lt;p&gt;Python and Docker&lt;/p&gt;",
    )
    record["updated_at"] = "2026-10-10T09:30:00-04:00"

    job = normalize_job(record, BOARD_TOKEN, now=NOW)

    assert job.source == "greenhouse"
    assert job.external_id == "4002"
    assert job.source_board == BOARD_TOKEN
    assert job.title == "Senior Backend Engineer"
    assert job.company == "Platform"
    assert job.location == "Austin, TX"
    assert job.employment_type == EmploymentType.FULL_TIME
    assert job.experience_level == ExperienceLevel.SENIOR
    assert job.salary == "Competitive"
    assert job.description == "Python and Docker"
    assert job.requirements == job.description
    assert job.skills == ["Python", "Docker"]
    assert job.posted_date == datetime(2026, 10, 10, 13, 30, tzinfo=timezone.utc)
    assert job.expiry_date == job.posted_date + timedelta(days=30)
    assert job.active is True
    assert job.source_metadata.source_url == f"https://boards.greenhouse.io/{BOARD_TOKEN}/jobs/4002"
    assert job.source_metadata.internal_job_id == 5002


def test_normalize_job_fallbacks():
    record = {"id": 77, "title": "  Data Consultant  "}

    job = normalize_job(record, BOARD_TOKEN, now=NOW)

    assert job.title == "Data Consultant"
    assert job.company == "Unknown"
    assert job.location == "Unknown"
    assert job.description == ""
    assert job.skills == []
    assert job.employment_type == EmploymentType.CONTRACT
    assert job.posted_date == NOW
    assert job.expiry_date == NOW + timedelta(days=30)
    assert job.active is True


def test_missing_updated_at_defaults_to_now():
    before = utcnow()
    job = normalize_job({"id": 78, "title": "Backend Developer"}, BOARD_TOKEN)
    after = utcnow()

    assert before <= job.posted_date <= after
    assert job.expiry_date - job.posted_date == timedelta(days=30)
    assert job.active is True


def test_normalize_job_expired_posting_is_inactive():
    record = greenhouse_record(1, "Backend Engineer")
    record["updated_at"] = (NOW - timedelta(days=31)).isoformat()

    job = normalize_job(record, BOARD_TOKEN, now=NOW)

    assert job.active is False


def test_normalize_job_is_deterministic():
    record = greenhouse_record(
        4001,
        "Software Engineering Intern",
        department="Engineering",
        location="Remote - US",
        content="&lt;p&gt;React&lt;/p&gt;",
    )

    assert normalize_job(record, BOARD_TOKEN, now=NOW) == normalize_job(record, BOARD_TOKEN, now=NOW)


def test_normalize_job_rejects_record_without_id():
    with pytest.raises(PydanticValidationError):
        normalize_job({"title": "No id"}, BOARD_TOKEN, now=NOW)


def test_display_job_wire_shape():
    record = greenhouse_record(4001, "Software Engineering Intern", location="Remote - US")

    display = to_display_job(normalize_job(record, BOARD_TOKEN, now=NOW))
    payload = display.model_dump(mode="json", by_alias=True)

    assert display_id(4001) == "gh_4001"
    assert payload["id"] == "gh_4001"
    assert payload["type"] == "REMOTE"
    assert payload["externalId"] == "4001"
    assert payload["experienceLevel"] == "ENTRY"
    assert "postedDate" in payload and "expiryDate" in payload
    assert payload["sourceMetadata"]["sourceUrl"].endswith("/jobs/4001")
