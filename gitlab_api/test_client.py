"""
Pytest tests for GitLabAPIClient (request building, status classification, decoding).

HTTP is served by FakeSession (gitlab_test_support.py); nothing touches the network.
"""

from urllib.parse import parse_qs, unquote, urlsplit

import pytest
import requests

from gitlab_api import (
    GitLabAPIClient,
    GitLabAuthError,
    GitLabConfig,
    GitLabDecodeError,
    GitLabForbiddenError,
    GitLabNotFoundError,
    GitLabRequestError,
    ListGroupEpicsOptions,
    RequestConstructionError,
    with_header,
    with_sudo,
    with_token,
)
from gitlab_test_support import BASE_URL


# ============================================================================
# new_request()
# ============================================================================

def test_new_request_builds_url_headers_and_query(client):
    req = client.new_request("get", "groups/my%2Fgroup/epics", ListGroupEpicsOptions(labels=["a", "b"], page=2))
    parts = urlsplit(req.url)
    assert req.method == "GET"
    assert f"{parts.scheme}://{parts.netloc}" == BASE_URL
    # Pre-encoded path segment must survive untouched.
    assert parts.path == "/api/v4/groups/my%2Fgroup/epics"
    assert parse_qs(parts.query) == {"labels": ["a,b"], "page": ["2"]}
    assert "labels=a,b" in unquote(parts.query)
    assert req.headers["PRIVATE-TOKEN"] == "glpat-test"
    assert req.headers["Accept"] == "application/json"


def test_new_request_without_options_has_no_query(client):
    req = client.new_request("GET", "/groups/1/epics", ListGroupEpicsOptions())
    assert urlsplit(req.url).query == ""


def test_new_request_applies_request_options_in_order(client):
    req = client.new_request(
        "GET",
        "groups/1/epics",
        options=[with_sudo("alice"), with_header("X-Trace", "t1"), with_token("other"), with_header("X-Trace", "t2")],
    )
    assert req.headers["Sudo"] == "alice"
    assert req.headers["PRIVATE-TOKEN"] == "other"
    assert req.headers["X-Trace"] == "t2"


def test_new_request_rejects_bad_method_and_options(client):
    with pytest.raises(RequestConstructionError):
        client.new_request("FETCH", "groups/1/epics")
    with pytest.raises(RequestConstructionError):
        client.new_request("GET", "groups/1/epics", opt=["not", "options"])


def test_client_without_token_sends_no_private_token(fake_session):
    api = GitLabAPIClient(config=GitLabConfig(base_url=BASE_URL, token=None), session=fake_session)
    assert not api.has_token()
    req = api.new_request("GET", "groups/1/epics")
    assert "PRIVATE-TOKEN" not in req.headers


# ============================================================================
# do()
# ============================================================================

def test_do_returns_decoded_body_and_envelope(client, fake_session):
    fake_session.respond(200, [{"id": 1}, {"id": 2}], headers={"X-Page": "1", "X-Total": "2"})
    req = client.new_request("GET", "groups/1/epics")
    data, resp = client.do(req, lambda d: [x["id"] for x in d])
    assert data == [1, 2]
    assert resp.status_code == 200
    assert resp.current_page == 1
    assert resp.total_items == 2
    assert fake_session.timeouts == [5.0]


@pytest.mark.parametrize(
    "status, exc_type",
    [
        (401, GitLabAuthError),
        (403, GitLabForbiddenError),
        (404, GitLabNotFoundError),
        (500, GitLabRequestError),
        (429, GitLabRequestError),
    ],
)
def test_do_classifies_error_status(client, fake_session, status, exc_type):
    fake_session.respond(status, {"message": "nope"})
    req = client.new_request("GET", "groups/1/epics")
    with pytest.raises(exc_type) as ei:
        client.do(req)
    assert ei.value.status_code == status
    assert ei.value.endpoint == "/api/v4/groups/1/epics"
    assert ei.value.response is not None
    assert ei.value.response.status_code == status


def test_do_wraps_network_errors(client, fake_session):
    fake_session.fail(requests.exceptions.ConnectionError("connection refused"))
    req = client.new_request("GET", "groups/1/epics")
    with pytest.raises(GitLabRequestError) as ei:
        client.do(req)
    assert ei.value.status_code == 0
    assert ei.value.response is None
    assert isinstance(ei.value.__cause__, requests.exceptions.ConnectionError)


def test_do_invalid_json_is_decode_error(client, fake_session):
    fake_session.respond(200, b"<html>not json</html>")
    req = client.new_request("GET", "groups/1/epics")
    with pytest.raises(GitLabDecodeError) as ei:
        client.do(req)
    assert ei.value.status_code == 200


def test_do_decoder_failure_is_decode_error(client, fake_session):
    fake_session.respond(200, {"not": "a list"})
    req = client.new_request("GET", "groups/1/epics")

    def _decode(d):
        raise TypeError("expected a JSON array")

    with pytest.raises(GitLabDecodeError):
        client.do(req, _decode)


def test_do_empty_body_decodes_to_none(client, fake_session):
    fake_session.respond(204, None)
    req = client.new_request("DELETE", "groups/1/epics/3")
    data, resp = client.do(req)
    assert data is None
    assert resp.status_code == 204


def test_get_convenience_wrapper(client, fake_session):
    fake_session.respond(200, {"id": 9})
    assert client.get("groups/9", params={"with_projects": False}) == {"id": 9}
    assert parse_qs(urlsplit(fake_session.sent[0].url).query) == {"with_projects": ["false"]}


# ============================================================================
# REST stats
# ============================================================================

def test_rest_call_stats(client, fake_session):
    fake_session.respond(200, [])
    fake_session.respond(404, {"message": "404 Group Not Found"})
    client.do(client.new_request("GET", "groups/1/epics"), label="group_epics")
    with pytest.raises(GitLabNotFoundError):
        client.do(client.new_request("GET", "groups/2/epics"), label="group_epics")

    stats = client.get_rest_call_stats()
    assert stats["total"] == 2
    assert stats["success_total"] == 1
    assert stats["error_total"] == 1
    assert stats["by_label"] == {"group_epics": 2}
    assert stats["errors_by_status"] == {404: 1}
