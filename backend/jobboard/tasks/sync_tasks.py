"""
Greenhouse sync tasks
"""
from celery import Task
import structlog

from jobboard.core.celery_app import celery_app
from jobboard.core.config import settings
from jobboard.core.database import Database
from jobboard.core.exceptions import SourceUnavailableError
from jobboard.greenhouse.client import GreenhouseClient
from jobboard.greenhouse.sync import sync_board

logger = structlog.get_logger()


def create_database() -> Database:
    return Database.from_settings()


@celery_app.task(bind=True, max_retries=3, name="jobboard.tasks.sync_tasks.sync_greenhouse_board_task")
def sync_greenhouse_board_task(self: Task, board_token: str):
    """Sync one board; retried when Greenhouse is unreachable"""
    database = create_database()
    db = database.session()
    try:
        with GreenhouseClient() as client:
            summary = sync_board(db, client, board_token)
        return summary.model_dump(by_alias=True)
    except SourceUnavailableError as e:
        logger.warning(
            "greenhouse_sync_task_retry",
            board_token=board_token,
            attempt=self.request.retries,
            error=e.message,
        )
        raise self.retry(exc=e, countdown=60)
    finally:
        db.close()
        database.dispose()


@celery_app.task(name="jobboard.tasks.sync_tasks.sync_all_boards_task")
def sync_all_boards_task():
    """Queue a sync for every configured board"""
    task_ids = {}
    for board_token in settings.GREENHOUSE_BOARD_TOKENS:
        result = sync_greenhouse_board_task.delay(board_token)
        task_ids[board_token] = result.id

    logger.info("greenhouse_boards_queued", count=len(task_ids))
    return task_ids
