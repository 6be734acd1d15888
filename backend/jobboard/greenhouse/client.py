"""
HTTP client for the public Greenhouse job board API
"""
from typing import Any, Dict, List, Optional

import httpx
import structlog

from jobboard.core.config import settings
from jobboard.core.exceptions import SourceUnavailableError, ValidationError

logger = structlog.get_logger()


def require_board_token(board_token: Optional[str]) -> str:
    """Reject a missing board token before any I/O"""
    token = (board_token or "").strip()
    if not token:
        raise ValidationError("Missing boardToken", details={"field": "boardToken"})
    return token


class GreenhouseClient:
    """
    Fetches the full job list of a Greenhouse board.

    Pass `http_client` to reuse or stub the transport; otherwise the client
    owns an httpx.Client and closes it in close() / on context exit.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or settings.GREENHOUSE_API_BASE_URL).rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=timeout or settings.GREENHOUSE_TIMEOUT_SECONDS,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        if self._owns_client:
            self._client.close()

    def jobs_url(self, board_token: str) -> str:
        return f"{self.base_url}/boards/{board_token}/jobs"

    def fetch_jobs(self, board_token: str) -> List[Dict[str, Any]]:
        """
        Return every job on the board as the raw records Greenhouse sent.

        Records are parsed into GreenhouseJob one at a time by the normalizer,
        so a single malformed record cannot fail the whole board. Any network,
        HTTP status or payload-shape problem raises SourceUnavailableError.
        """
        token = require_board_token(board_token)
        url = self.jobs_url(token)
        details = {"board_token": token, "url": url}

        try:
            resp = self._client.get(url, params={"content": "true"})
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            logger.error("greenhouse_fetch_failed", board_token=token, status_code=code)
            if code == 404:
                message = f"Greenhouse board not found: {token}"
            else:
                message = f"Greenhouse returned HTTP {code} for board {token}"
            raise SourceUnavailableError(message, details={**details, "status_code": code}) from e
        except httpx.HTTPError as e:
            logger.error("greenhouse_fetch_failed", board_token=token, error=str(e))
            raise SourceUnavailableError(
                f"Could not reach Greenhouse for board {token}: {e}",
                details=details,
            ) from e
        except ValueError as e:
            # Body was not JSON
            logger.error("greenhouse_bad_payload", board_token=token, error=str(e))
            raise SourceUnavailableError(
                f"Greenhouse sent an unreadable response for board {token}",
                details=details,
            ) from e

        jobs = payload.get("jobs") if isinstance(payload, dict) else None
        if not isinstance(jobs, list):
            raise SourceUnavailableError(
                f"Greenhouse response for board {token} has no jobs list",
                details=details,
            )

        logger.info("greenhouse_jobs_fetched", board_token=token, count=len(jobs))
        return jobs
