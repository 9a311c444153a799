from datetime import UTC, datetime

import pytest
import requests

from domains.asana.asana_api_client import PAGE_LIMIT, AsanaApiClient
from domains.asana.errors import AsanaApiRequestError, AsanaAuthenticationError

BASE_URL = "https://asana.test/api/1.0"


class FakeHttpClient:
    """Replays queued responses and records the requests made."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []
        self.requests_made = 0

    def get_json(self, url, params=None):
        self.calls.append((url, params))
        self.requests_made += 1
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(*responses):
    http = FakeHttpClient(responses)
    return AsanaApiClient(BASE_URL, "token", http_client=http), http


def test_missing_token_is_rejected():
    with pytest.raises(AsanaAuthenticationError):
        AsanaApiClient(BASE_URL, None)


def test_get_project():
    client, http = _client({"data": {"gid": "p1", "name": "Board", "created_at": "2023-01-01T00:00:00.000Z"}})

    project = client.get_project("p1")

    assert project == {"gid": "p1", "name": "Board", "created_at": "2023-01-01T00:00:00.000Z"}
    assert http.calls[0][0] == f"{BASE_URL}/projects/p1"


def test_missing_project_raises():
    client, _ = _client(None)
    with pytest.raises(AsanaApiRequestError):
        client.get_project("p1")


def test_pages_are_followed_until_exhausted():
    client, http = _client(
        {"data": [{"gid": "t1"}, {"gid": "t2"}], "next_page": {"offset": "abc"}},
        {"data": [{"gid": "t3"}], "next_page": None},
    )

    result = client.get_project_task_gids("p1", datetime(2024, 1, 1, tzinfo=UTC))

    assert result == {"project_gid": "p1", "task_gids": ["t1", "t2", "t3"]}
    first_params, second_params = http.calls[0][1], http.calls[1][1]
    assert first_params["limit"] == PAGE_LIMIT
    assert first_params["completed_since"] == "2024-01-01T00:00:00+00:00"
    assert "offset" not in first_params
    assert second_params["offset"] == "abc"


def test_get_project_sections():
    client, _ = _client({"data": [{"gid": "s1", "name": "Backlog", "resource_type": "section"}]})

    assert client.get_project_sections("p1") == {
        "project_gid": "p1",
        "sections": [{"gid": "s1", "name": "Backlog"}],
    }


def test_get_task_stories():
    story = {"gid": "st1", "created_at": "2024-01-02T00:00:00Z", "resource_subtype": "comment_added", "text": "hi"}
    client, _ = _client({"data": [story]})

    assert client.get_task_stories("t1") == {"task_gid": "t1", "stories": [story]}


def test_deleted_task_returns_none():
    client, _ = _client(None)
    assert client.get_task("t1") is None


def test_stories_of_deleted_task_return_none():
    client, _ = _client(None)
    assert client.get_task_stories("t1") is None


def test_stories_page_vanishing_midway_raises():
    client, _ = _client({"data": [{"gid": "st1"}], "next_page": {"offset": "abc"}}, None)
    with pytest.raises(AsanaApiRequestError):
        client.get_task_stories("t1")


def test_missing_user_gets_placeholder():
    client, _ = _client(None)
    assert client.get_user("u1") == {"gid": "u1", "name": "MissingUser(u1)", "email": "u1@nowhere.com"}


def test_transport_errors_are_wrapped():
    client, _ = _client(requests.ConnectionError("boom"))
    with pytest.raises(AsanaApiRequestError) as exc_info:
        client.get_task("t1")
    assert exc_info.value.metadata["endpoint"] == "tasks/t1"


def test_body_without_data_is_rejected():
    client, _ = _client({"errors": [{"message": "nope"}]})
    with pytest.raises(AsanaApiRequestError):
        client.get_task("t1")
