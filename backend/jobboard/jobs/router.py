"""
Job posting routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
import structlog

from jobboard.core.database import get_db
from jobboard.auth.dependencies import require_api_key
from jobboard.jobs import service
from jobboard.jobs.schemas import (
    ApplyRequest,
    EmploymentType,
    JobCreate,
    JobUpdate,
    JobResponse,
    MessageResponse,
    PaginatedJobs,
)

router = APIRouter(prefix="/api/v1/jobs", tags=["Jobs"])
logger = structlog.get_logger()


def _page(jobs, total: int, page: int, size: int) -> PaginatedJobs:
    return PaginatedJobs(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        total=total,
        page=page,
        size=size,
    )


@router.post(
    "/",
    response_model=JobResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_api_key)],
)
def create_job(
    job_data: JobCreate,
    db: Session = Depends(get_db),
):
    """Create a new job posting"""
    job = service.create_job(db, job_data)
    return JobResponse.model_validate(job)


@router.get("/", response_model=PaginatedJobs)
def list_jobs(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """List jobs, newest first"""
    jobs, total = service.list_jobs(db, page=page, size=size)
    return _page(jobs, total, page, size)


@router.get("/search", response_model=PaginatedJobs)
def search_jobs(
    keyword: Optional[str] = None,
    location: Optional[str] = None,
    type: Optional[EmploymentType] = None,
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Search jobs by keyword, location and employment type"""
    jobs, total = service.search_jobs(
        db,
        keyword=keyword,
        location=location,
        employment_type=type.value if type else None,
        page=page,
        size=size,
    )
    return _page(jobs, total, page, size)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: int,
    db: Session = Depends(get_db),
):
    """Get job details"""
    return JobResponse.model_validate(service.get_job(db, job_id))


@router.put(
    "/{job_id}",
    response_model=JobResponse,
    dependencies=[Depends(require_api_key)],
)
def update_job(
    job_id: int,
    job_data: JobUpdate,
    db: Session = Depends(get_db),
):
    """Update a job; fields left out of the body are kept"""
    job = service.update_job(db, job_id, job_data)
    return JobResponse.model_validate(job)


@router.delete(
    "/{job_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_api_key)],
)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
):
    """Delete a job"""
    service.delete_job(db, job_id)
    return MessageResponse(message="Job deleted")


@router.post("/{job_id}/apply", response_model=MessageResponse)
def apply_to_job(
    job_id: int,
    application: ApplyRequest,
    db: Session = Depends(get_db),
):
    """Apply to a job"""
    service.apply_to_job(db, job_id, application.user_id)
    return MessageResponse(message="Application successful")
