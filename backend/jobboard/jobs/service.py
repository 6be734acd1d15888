"""
Job posting service layer
"""
from datetime import timedelta
from typing import List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, Query
import structlog

from jobboard.core.config import settings
from jobboard.core.dates import as_utc, utcnow
from jobboard.core.exceptions import NotFoundError, ValidationError
from jobboard.jobs.schemas import JobCreate, JobUpdate
from jobboard.models.job import Job

logger = structlog.get_logger()


def _column_values(values: dict) -> dict:
    out = {}
    for key, value in values.items():
        # Enums are stored by value
        out[key] = getattr(value, "value", value)
    return out


def _paginate(query: Query, page: int, size: int) -> Tuple[List[Job], int]:
    total = query.count()
    jobs = (
        query.order_by(Job.posted_date.desc(), Job.id.desc())
        .offset(page * size)
        .limit(size)
        .all()
    )
    return jobs, total


def create_job(db: Session, job_data: JobCreate) -> Job:
    """Create a manually posted job"""
    posted_date = as_utc(job_data.posted_date) if job_data.posted_date else utcnow()
    if job_data.expiry_date:
        expiry_date = as_utc(job_data.expiry_date)
    else:
        expiry_date = posted_date + timedelta(days=settings.JOB_EXPIRY_DAYS)
    if expiry_date < posted_date:
        raise ValidationError(
            "expiryDate must not be before postedDate",
            details={"field": "expiryDate"},
        )

    values = _column_values(
        job_data.model_dump(exclude={"posted_date", "expiry_date"})
    )
    job = Job(
        **values,
        posted_date=posted_date,
        expiry_date=expiry_date,
        applicants=[],
    )

    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info("job_created", job_id=job.id, title=job.title)
    return job


def get_job(db: Session, job_id: int) -> Job:
    """Get a job by id or raise NotFoundError"""
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job", str(job_id))
    return job


def list_jobs(db: Session, page: int = 0, size: int = 10) -> Tuple[List[Job], int]:
    """One page of all jobs, newest first"""
    return _paginate(db.query(Job), page, size)


def search_jobs(
    db: Session,
    keyword: Optional[str] = None,
    location: Optional[str] = None,
    employment_type: Optional[str] = None,
    page: int = 0,
    size: int = 10,
) -> Tuple[List[Job], int]:
    """
    Filter jobs and return one page of the result.

    keyword matches title, description or company and location matches the
    location, both as case-insensitive substrings; employment_type must match
    exactly.
    """
    query = db.query(Job)

    if location:
        query = query.filter(
            func.lower(Job.location).contains(location.lower(), autoescape=True)
        )

    if employment_type:
        query = query.filter(Job.employment_type == employment_type)

    if keyword:
        needle = keyword.lower()
        query = query.filter(
            or_(
                func.lower(Job.title).contains(needle, autoescape=True),
                func.lower(Job.description).contains(needle, autoescape=True),
                func.lower(Job.company).contains(needle, autoescape=True),
            )
        )

    jobs, total = _paginate(query, page, size)
    logger.info(
        "jobs_searched",
        keyword=keyword,
        location=location,
        employment_type=employment_type,
        total=total,
    )
    return jobs, total


def update_job(db: Session, job_id: int, job_data: JobUpdate) -> Job:
    """Merge the supplied fields into an existing job"""
    job = get_job(db, job_id)

    values = _column_values(job_data.model_dump(exclude_unset=True, exclude_none=True))
    for key in ("posted_date", "expiry_date"):
        if key in values:
            values[key] = as_utc(values[key])
    posted_date = values.get("posted_date", job.posted_date)
    expiry_date = values.get("expiry_date", job.expiry_date)
    if as_utc(expiry_date) < as_utc(posted_date):
        raise ValidationError(
            "expiryDate must not be before postedDate",
            details={"field": "expiryDate"},
        )

    for key, value in values.items():
        setattr(job, key, value)

    db.commit()
    db.refresh(job)

    logger.info("job_updated", job_id=job.id, fields=sorted(values))
    return job


def delete_job(db: Session, job_id: int) -> None:
    """Delete a job"""
    job = get_job(db, job_id)
    db.delete(job)
    db.commit()

    logger.info("job_deleted", job_id=job_id)


def apply_to_job(db: Session, job_id: int, user_id: Optional[str]) -> Job:
    """Record that a user applied; applying twice is a no-op"""
    if not user_id:
        raise ValidationError("Missing userId", details={"field": "userId"})

    # Row lock plus a fresh read so concurrent applies append instead of overwrite
    job = (
        db.query(Job)
        .filter(Job.id == job_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not job:
        raise NotFoundError("Job", str(job_id))

    applicants = list(job.applicants or [])
    if user_id not in applicants:
        applicants.append(user_id)
        # Reassign so the JSON column is flagged dirty
        job.applicants = applicants
        db.commit()
        db.refresh(job)
        logger.info("job_application_recorded", job_id=job_id, user_id=user_id)
    else:
        logger.info("job_application_duplicate", job_id=job_id, user_id=user_id)

    return job
