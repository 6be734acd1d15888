"""
Greenhouse board records and the normalized job shape derived from them
"""
from typing import Any, List, Optional, Union
from pydantic import BaseModel, Field
from datetime import datetime

from jobboard.jobs.schemas import CamelModel, EmploymentType, ExperienceLevel

GREENHOUSE_SOURCE = "greenhouse"


class GreenhouseDepartment(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None

    class Config:
        extra = "ignore"


class GreenhouseLocation(BaseModel):
    name: Optional[str] = None

    class Config:
        extra = "ignore"


class GreenhouseJob(BaseModel):
    """One entry of GET /boards/{token}/jobs?content=true"""
    id: Union[int, str]
    title: str = ""
    departments: List[GreenhouseDepartment] = Field(default_factory=list)
    location: Optional[GreenhouseLocation] = None
    content: Optional[str] = None  # HTML, entity-escaped
    updated_at: Optional[datetime] = None
    absolute_url: Optional[str] = None
    metadata: Optional[Any] = None
    internal_job_id: Optional[int] = None

    class Config:
        extra = "ignore"


class SourceMetadata(CamelModel):
    source_url: Optional[str] = None
    internal_job_id: Optional[int] = None
    metadata: Optional[Any] = None


class NormalizedJob(CamelModel):
    """Canonical job derived from an external record, minus the storage id"""
    source: str = GREENHOUSE_SOURCE
    external_id: str
    source_board: str
    title: str
    company: str
    location: str
    employment_type: EmploymentType = Field(..., alias="type")
    salary: str
    description: str
    requirements: str
    experience_level: ExperienceLevel
    skills: List[str]
    active: bool
    posted_date: datetime
    expiry_date: datetime
    source_metadata: SourceMetadata


class DisplayJob(NormalizedJob):
    """A normalized job with a synthesized id, for rendering without a stored row"""
    id: str


class PreviewResult(CamelModel):
    jobs: List[DisplayJob]
    total: int  # Records on the board, including skipped ones
    skipped: int = 0


class SyncRequest(CamelModel):
    board_token: Optional[str] = None


class SyncSummary(CamelModel):
    board_token: str
    total: int = 0
    synced: int = 0
    created: int = 0
    updated: int = 0
    errors: int = 0
    deactivated: int = 0
    failed_ids: List[str] = Field(default_factory=list)
    message: str = ""


class AsyncSyncResponse(CamelModel):
    task_id: str
    board_token: str
