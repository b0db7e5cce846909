"""Tests for the requests based transport."""

import pytest
import requests

from game_scraper.exceptions import TransportError
from game_scraper.http_client import HttpClient


def make_response(status_code=200, body="<html></html>", url="https://itch.io/"):
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.url = url
    return response


@pytest.fixture
def recorded(monkeypatch):
    """Patch Session.request and record (method, url, kwargs) of each call"""
    calls = []
    state = {"response": make_response()}

    def fake_request(session, method, url, **kwargs):
        calls.append((method, url, kwargs, dict(session.headers)))
        outcome = state["response"]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(requests.Session, "request", fake_request)
    return calls, state


def test_get_returns_body_text_and_uses_defaults(recorded):
    calls, state = recorded
    state["response"] = make_response(body="<p>ok</p>")
    client = HttpClient("https://itch.io/", timeout=7, headers={"User-Agent": "test-agent"})

    assert client.get("/games/newest") == "<p>ok</p>"

    method, url, kwargs, session_headers = calls[0]
    assert method == "GET"
    assert url == "https://itch.io/games/newest"
    assert kwargs["timeout"] == 7
    assert session_headers["User-Agent"] == "test-agent"


def test_absolute_urls_are_not_rebased(recorded):
    calls, _ = recorded
    client = HttpClient("https://itch.io")
    client.get("https://alpha.itch.io/first-game")
    assert calls[0][1] == "https://alpha.itch.io/first-game"


def test_overrides_are_merged_over_defaults(recorded):
    calls, _ = recorded
    client = HttpClient("https://itch.io", timeout=10, headers={"User-Agent": "ua", "Accept": "text/html"})
    client.get("/search", timeout=3, headers={"Accept": "application/json"}, params={"q": "x"})

    kwargs = calls[0][2]
    assert kwargs["timeout"] == 3
    assert kwargs["params"] == {"q": "x"}
    assert kwargs["headers"]["Accept"] == "application/json"
    assert kwargs["headers"]["User-Agent"] == "ua"


def test_post_sends_dicts_as_json(recorded):
    calls, _ = recorded
    client = HttpClient("https://itch.io")
    client.post("/api/thing", {"a": 1})
    client.post("/api/raw", "a=1")

    assert calls[0][0] == "POST"
    assert calls[0][2]["json"] == {"a": 1}
    assert calls[1][2]["data"] == "a=1"


def test_http_error_status_becomes_transport_error(recorded):
    _, state = recorded
    state["response"] = make_response(status_code=503, url="https://itch.io/games/newest")
    client = HttpClient("https://itch.io")

    with pytest.raises(TransportError) as excinfo:
        client.get("/games/newest")

    assert excinfo.value.status_code == 503
    assert excinfo.value.url == "https://itch.io/games/newest"
    assert isinstance(excinfo.value.__cause__, requests.HTTPError)


@pytest.mark.parametrize("error", [
    requests.Timeout("timed out"),
    requests.ConnectionError("name resolution failed"),
])
def test_network_failures_become_transport_error(recorded, error):
    _, state = recorded
    state["response"] = error
    client = HttpClient("https://itch.io")

    with pytest.raises(TransportError) as excinfo:
        client.get("/games/newest")

    assert excinfo.value.status_code is None
    assert excinfo.value.__cause__ is error


@pytest.mark.parametrize("status_code", [101, 300, 304])
def test_non_success_status_becomes_transport_error(recorded, status_code):
    _, state = recorded
    state["response"] = make_response(status_code=status_code, body="stale", url="https://itch.io/games/newest")
    client = HttpClient("https://itch.io")

    with pytest.raises(TransportError) as excinfo:
        client.get("/games/newest")

    assert excinfo.value.status_code == status_code
    assert excinfo.value.url == "https://itch.io/games/newest"
