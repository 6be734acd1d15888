"""
Greenhouse synchronization - fetch, normalize and upsert a whole board
"""
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from jobboard.core.config import settings
from jobboard.core.dates import utcnow
from jobboard.core.redis_client import get_cache, get_cache_key, set_cache
from jobboard.greenhouse.client import GreenhouseClient, require_board_token
from jobboard.greenhouse.normalizer import normalize_job, to_display_job
from jobboard.greenhouse.schemas import (
    GREENHOUSE_SOURCE,
    NormalizedJob,
    PreviewResult,
    SyncSummary,
)
from jobboard.models.job import Job

logger = structlog.get_logger()


def find_synced_job(db: Session, source: str, external_id: str) -> Optional[Job]:
    return (
        db.query(Job)
        .filter(Job.source == source, Job.external_id == external_id)
        .first()
    )


def _apply_synced_fields(job: Job, normalized: NormalizedJob, synced_at: datetime):
    # Derived fields only: id, applicants, company_id and created_at belong to other flows
    job.title = normalized.title
    job.company = normalized.company
    job.location = normalized.location
    job.employment_type = normalized.employment_type.value
    job.salary = normalized.salary
    job.description = normalized.description
    job.requirements = normalized.requirements
    job.experience_level = normalized.experience_level.value
    job.skills = list(normalized.skills)
    job.active = normalized.active
    job.posted_date = normalized.posted_date
    job.expiry_date = normalized.expiry_date
    job.source_board = normalized.source_board
    job.source_metadata = normalized.source_metadata.model_dump(mode="json", by_alias=True)
    job.last_synced_at = synced_at


def upsert_job(db: Session, normalized: NormalizedJob) -> Tuple[Job, bool]:
    """
    Insert or update the row for (source, external_id).

    Returns the persisted job and whether it was created. The unique
    constraint on (source, external_id) is the real guard: if a concurrent
    sync inserts the same posting between our lookup and our commit, the
    insert is rolled back and retried as an update.
    """
    synced_at = utcnow()
    job = find_synced_job(db, normalized.source, normalized.external_id)
    created = job is None
    if created:
        job = Job(
            source=normalized.source,
            external_id=normalized.external_id,
            applicants=[],
        )
        db.add(job)

    _apply_synced_fields(job, normalized, synced_at)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not created:
            raise
        job = find_synced_job(db, normalized.source, normalized.external_id)
        if job is None:
            raise
        logger.info(
            "job_upsert_race_resolved",
            source=normalized.source,
            external_id=normalized.external_id,
        )
        _apply_synced_fields(job, normalized, synced_at)
        db.commit()
        created = False

    db.refresh(job)
    return job, created


def _raw_id(record: Any, index: int) -> str:
    value = record.get("id") if isinstance(record, dict) else getattr(record, "id", None)
    if value is None or value == "":
        return f"#{index}"
    return str(value)


def deactivate_missing_jobs(db: Session, board_token: str, seen_ids: Iterable[str]) -> int:
    """Mark active postings of the board that are no longer listed as inactive"""
    stale = (
        db.query(Job)
        .filter(
            Job.source == GREENHOUSE_SOURCE,
            Job.source_board == board_token,
            Job.active == True,  # noqa: E712
            Job.external_id.notin_(list(seen_ids)),
        )
        .all()
    )
    for job in stale:
        job.active = False
    db.commit()

    if stale:
        logger.info(
            "greenhouse_stale_jobs_deactivated",
            board_token=board_token,
            job_ids=[job.id for job in stale],
        )
    return len(stale)


def sync_board(
    db: Session,
    client: GreenhouseClient,
    board_token: str,
    deactivate_missing: Optional[bool] = None,
    now: Optional[datetime] = None,
) -> SyncSummary:
    """
    Synchronize one Greenhouse board into the jobs table.

    A failed fetch raises SourceUnavailableError and nothing is written.
    After that the run is best effort: each record is normalized and
    upserted on its own, and a record that fails is rolled back, logged and
    counted without stopping the others.
    """
    token = require_board_token(board_token)
    if deactivate_missing is None:
        deactivate_missing = settings.SYNC_DEACTIVATE_MISSING

    logger.info("greenhouse_sync_started", board_token=token)
    records = client.fetch_jobs(token)

    summary = SyncSummary(board_token=token, total=len(records))
    seen_ids = set()

    for index, record in enumerate(records):
        external_id = _raw_id(record, index)
        # Listed on the board even if it fails below, so it must not be deactivated
        seen_ids.add(external_id)
        try:
            normalized = normalize_job(record, token, now=now)
            _, created = upsert_job(db, normalized)
        except Exception as e:
            db.rollback()
            summary.errors += 1
            summary.failed_ids.append(external_id)
            logger.warning(
                "job_sync_record_failed",
                board_token=token,
                external_id=external_id,
                error=str(e),
            )
            continue

        summary.synced += 1
        if created:
            summary.created += 1
        else:
            summary.updated += 1

    # An empty listing is more likely an upstream glitch than a closed board
    if deactivate_missing and records:
        try:
            summary.deactivated = deactivate_missing_jobs(db, token, seen_ids)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("greenhouse_deactivation_failed", board_token=token, error=str(e))

    summary.message = f"Synced {summary.synced} of {summary.total} jobs from Greenhouse board {token}"
    if summary.errors:
        summary.message += f" ({summary.errors} failed)"

    logger.info(
        "greenhouse_sync_completed",
        board_token=token,
        total=summary.total,
        synced=summary.synced,
        created=summary.created,
        updated=summary.updated,
        errors=summary.errors,
        deactivated=summary.deactivated,
    )
    return summary


def preview_board(
    client: GreenhouseClient,
    board_token: str,
    now: Optional[datetime] = None,
) -> PreviewResult:
    """Fetch and normalize a board for display; nothing is written"""
    token = require_board_token(board_token)
    records = client.fetch_jobs(token)

    jobs = []
    for index, record in enumerate(records):
        try:
            jobs.append(to_display_job(normalize_job(record, token, now=now)))
        except PydanticValidationError as e:
            logger.warning(
                "greenhouse_preview_record_skipped",
                board_token=token,
                external_id=_raw_id(record, index),
                error=str(e),
            )

    return PreviewResult(jobs=jobs, total=len(records), skipped=len(records) - len(jobs))


def cached_preview_board(client: GreenhouseClient, board_token: str) -> PreviewResult:
    """preview_board behind the Redis cache, when the cache is enabled"""
    token = require_board_token(board_token)
    if not settings.PREVIEW_CACHE_ENABLED:
        return preview_board(client, token)

    cache_key = get_cache_key("greenhouse_preview", token)
    cached: Optional[Dict[str, Any]] = get_cache(cache_key)
    if cached is not None:
        logger.info("greenhouse_preview_cache_hit", board_token=token)
        return PreviewResult.model_validate(cached)

    result = preview_board(client, token)
    set_cache(cache_key, result.model_dump(mode="json", by_alias=True), ttl=settings.PREVIEW_CACHE_TTL)
    return result
