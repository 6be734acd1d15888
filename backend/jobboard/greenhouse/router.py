"""
Greenhouse import routes
"""
from typing import Generator
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import structlog

from jobboard.auth.dependencies import require_api_key
from jobboard.core.database import get_db
from jobboard.greenhouse.client import GreenhouseClient, require_board_token
from jobboard.greenhouse.schemas import (
    AsyncSyncResponse,
    PreviewResult,
    SyncRequest,
    SyncSummary,
)
from jobboard.greenhouse.sync import cached_preview_board, sync_board
from jobboard.tasks.sync_tasks import sync_greenhouse_board_task

router = APIRouter(prefix="/api/v1/greenhouse", tags=["Greenhouse"])
logger = structlog.get_logger()


def get_greenhouse_client() -> Generator[GreenhouseClient, None, None]:
    """Dependency yielding a Greenhouse client that is closed after the request"""
    with GreenhouseClient() as client:
        yield client


@router.post(
    "/sync",
    response_model=SyncSummary,
    dependencies=[Depends(require_api_key)],
)
def sync_greenhouse_jobs(
    request: SyncRequest,
    db: Session = Depends(get_db),
    client: GreenhouseClient = Depends(get_greenhouse_client),
):
    """
    Import every job of a Greenhouse board into the jobs collection.

    A 502 means nothing was synced; a 200 with errors > 0 means some
    postings were synced and the ones listed in failedIds were not.
    """
    token = require_board_token(request.board_token)
    return sync_board(db, client, token)


@router.post(
    "/sync/async",
    response_model=AsyncSyncResponse,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(require_api_key)],
)
def sync_greenhouse_jobs_async(request: SyncRequest):
    """Queue a board sync on the Celery worker"""
    token = require_board_token(request.board_token)
    result = sync_greenhouse_board_task.delay(token)
    logger.info("greenhouse_sync_queued", board_token=token, task_id=result.id)
    return AsyncSyncResponse(task_id=result.id, board_token=token)


@router.get("/boards/{board_token}/jobs", response_model=PreviewResult)
def preview_greenhouse_jobs(
    board_token: str,
    client: GreenhouseClient = Depends(get_greenhouse_client),
):
    """Fetch and normalize a board's jobs for display without storing them"""
    return cached_preview_board(client, board_token)
