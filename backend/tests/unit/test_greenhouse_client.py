"""
Unit tests for the Greenhouse board client
"""
import httpx
import pytest

from conftest import BOARD_TOKEN, GREENHOUSE_BASE_URL, StubBoard
from jobboard.core.exceptions import SourceUnavailableError, ValidationError
from jobboard.greenhouse.client import GreenhouseClient, require_board_token


def _client(handler) -> GreenhouseClient:
    return GreenhouseClient(
        base_url=GREENHOUSE_BASE_URL,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_fetch_jobs_returns_raw_records():
    board = StubBoard()

    jobs = board.client().fetch_jobs(BOARD_TOKEN)

    assert [job["id"] for job in jobs] == [4001, 4002, 4003]
    request = board.requests[0]
    assert request.method == "GET"
    assert request.url.path == f"/v1/boards/{BOARD_TOKEN}/jobs"
    assert request.url.params["content"] == "true"


def test_fetch_jobs_empty_board():
    board = StubBoard(jobs=[])
    assert board.client().fetch_jobs(BOARD_TOKEN) == []


def test_unknown_board_is_source_error():
    board = StubBoard()

    with pytest.raises(SourceUnavailableError) as exc_info:
        board.client().fetch_jobs("no-such-board")

    assert exc_info.value.status_code == 502
    assert "not found" in exc_info.value.message
    assert exc_info.value.details["status_code"] == 404


def test_server_error_is_source_error():
    board = StubBoard()
    board.status_code = 503

    with pytest.raises(SourceUnavailableError) as exc_info:
        board.client().fetch_jobs(BOARD_TOKEN)

    assert "HTTP 503" in exc_info.value.message


def test_network_error_is_source_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SourceUnavailableError) as exc_info:
        _client(handler).fetch_jobs(BOARD_TOKEN)

    assert "Could not reach Greenhouse" in exc_info.value.message


def test_non_json_body_is_source_error():
    client = _client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(SourceUnavailableError):
        client.fetch_jobs(BOARD_TOKEN)


def test_payload_without_jobs_list_is_source_error():
    client = _client(lambda request: httpx.Response(200, json={"jobs": None}))

    with pytest.raises(SourceUnavailableError) as exc_info:
        client.fetch_jobs(BOARD_TOKEN)

    assert "no jobs list" in exc_info.value.message


@pytest.mark.parametrize("token", [None, "", "   "])
def test_missing_board_token_fails_before_any_request(token):
    board = StubBoard()

    with pytest.raises(ValidationError) as exc_info:
        board.client().fetch_jobs(token)

    assert exc_info.value.message == "Missing boardToken"
    assert board.requests == []


def test_require_board_token_strips_whitespace():
    assert require_board_token("  acme ") == "acme"


def test_client_closes_only_its_own_transport():
    http_client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

    with GreenhouseClient(http_client=http_client):
        pass

    assert not http_client.is_closed

    owned = GreenhouseClient()
    owned.close()
    assert owned._client.is_closed
