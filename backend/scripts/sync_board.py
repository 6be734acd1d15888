"""
Sync one Greenhouse board from the command line

Usage: python scripts/sync_board.py BOARD_TOKEN [--keep-missing]
"""
import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from jobboard.core.database import Database
from jobboard.core.exceptions import JobBoardException
from jobboard.core.logging_config import configure_logging
from jobboard.greenhouse.client import GreenhouseClient
from jobboard.greenhouse.sync import sync_board
import structlog

logger = structlog.get_logger()


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Import the jobs of a Greenhouse board.")
    p.add_argument("board_token", help="Board token, as in boards.greenhouse.io/<token>")
    p.add_argument(
        "--keep-missing",
        action="store_true",
        help="Do not deactivate postings that are no longer on the board.",
    )
    return p.parse_args()


def main() -> int:
    args = parse_args()
    configure_logging()

    database = Database.from_settings()
    database.create_all()
    db = database.session()
    try:
        with GreenhouseClient() as client:
            summary = sync_board(
                db,
                client,
                args.board_token,
                deactivate_missing=False if args.keep_missing else None,
            )
    except JobBoardException as e:
        logger.error("greenhouse_sync_failed", board_token=args.board_token, error=e.message)
        print(json.dumps({"error": e.message, "details": e.details}, indent=2))
        return 1
    finally:
        db.close()
        database.dispose()

    print(json.dumps(summary.model_dump(by_alias=True), indent=2))
    return 0 if summary.errors == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
