"""
Job posting model
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Boolean, UniqueConstraint
from sqlalchemy.sql import func
from jobboard.core.database import Base


class Job(Base):
    """A job posting, either created by an employer or synced from an external board"""

    __tablename__ = "jobs"
    __table_args__ = (
        UniqueConstraint("source", "external_id", name="uq_jobs_source_external_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    company = Column(String(255), nullable=False, index=True)
    company_id = Column(String(255))
    location = Column(String(255), index=True)

    employment_type = Column(String(50), nullable=False, default="FULL_TIME", index=True)
    salary = Column(String(255))
    description = Column(Text)
    requirements = Column(Text)
    experience_level = Column(String(50))  # ENTRY, MID, SENIOR
    skills = Column(JSON, default=list)

    # Status
    active = Column(Boolean, default=True, index=True)
    posted_date = Column(DateTime(timezone=True), nullable=False)
    expiry_date = Column(DateTime(timezone=True), nullable=False)

    # User ids; only the apply flow writes this
    applicants = Column(JSON, default=list)

    # External source tracking (NULL for manually created postings)
    source = Column(String(50), index=True)
    external_id = Column(String(255))
    source_board = Column(String(255), index=True)
    source_metadata = Column(JSON)
    last_synced_at = Column(DateTime(timezone=True))

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
