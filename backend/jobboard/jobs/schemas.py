"""
Job posting Pydantic schemas
"""
from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel
from datetime import datetime

from jobboard.core.dates import as_utc


class EmploymentType(str, Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERNSHIP = "INTERNSHIP"
    REMOTE = "REMOTE"


class ExperienceLevel(str, Enum):
    ENTRY = "ENTRY"
    MID = "MID"
    SENIOR = "SENIOR"


class CamelModel(BaseModel):
    """Base for schemas exchanged with the frontend (camelCase on the wire)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class JobCreate(CamelModel):
    """Job creation schema"""
    title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    employment_type: EmploymentType = Field(EmploymentType.FULL_TIME, alias="type")
    salary: Optional[str] = None
    description: str = Field(..., min_length=1)
    requirements: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    skills: List[str] = Field(default_factory=list)
    active: bool = True
    posted_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    company_id: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.posted_date and self.expiry_date and as_utc(self.expiry_date) < as_utc(self.posted_date):
            raise ValueError("expiryDate must not be before postedDate")
        return self


class JobUpdate(CamelModel):
    """Job update schema; only supplied fields are merged"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = None
    employment_type: Optional[EmploymentType] = Field(None, alias="type")
    salary: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    skills: Optional[List[str]] = None
    active: Optional[bool] = None
    posted_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    company_id: Optional[str] = None


class JobResponse(CamelModel):
    """Job response schema"""
    id: int
    title: str
    company: str
    location: Optional[str]
    employment_type: EmploymentType = Field(..., alias="type")
    salary: Optional[str]
    description: Optional[str]
    requirements: Optional[str]
    experience_level: Optional[ExperienceLevel]
    skills: List[str] = Field(default_factory=list)
    active: bool
    posted_date: datetime
    expiry_date: datetime
    applicants: List[str] = Field(default_factory=list)
    company_id: Optional[str] = None
    source: Optional[str] = None
    external_id: Optional[str] = None
    source_metadata: Optional[Dict[str, Any]] = None


class PaginatedJobs(CamelModel):
    """One page of jobs plus the size of the full result"""
    jobs: List[JobResponse]
    total: int
    page: int
    size: int


class ApplyRequest(CamelModel):
    user_id: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
