import httpx
import pytest
import respx

from releaser.httpclient import (
    ErrorResponse,
    default_headers,
    get,
    github_token,
    internal_server_error,
    post,
    put,
)

URL = "https://api.github.com/repos/o/r/releases"


@pytest.fixture
def token(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "token")


def test_error_response_str():
    error = ErrorResponse("boom", 404)
    assert str(error) == "Status: 404, Message: boom"
    assert error.status == 404


def test_internal_server_error_default_message():
    error = internal_server_error(None)
    assert error.status == 500
    assert error.message == "Internal server error"


def test_internal_server_error_keeps_message():
    assert internal_server_error("failed").message == "failed"


def test_github_token_missing(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    with pytest.raises(RuntimeError, match="GITHUB_TOKEN must be set"):
        github_token()


def test_github_token_read(token):
    assert github_token() == "token"


def test_default_headers():
    headers = default_headers("token")
    assert headers["Authorization"] == "Bearer token"
    assert headers["Accept"] == "application/vnd.github.VERSION.sha"
    assert headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_get_returns_body(token):
    with respx.mock:
        route = respx.get(URL).mock(return_value=httpx.Response(200, text="ok"))
        assert get(URL) == "ok"
        assert route.calls.last.request.headers["Authorization"] == "Bearer token"


def test_get_returns_body_on_error_status(token):
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(404, text="missing"))
        assert get(URL) == "missing"


def test_post_sends_body(token):
    with respx.mock:
        route = respx.post(URL).mock(return_value=httpx.Response(201, text="created"))
        assert post(URL, '{"a": 1}') == "created"
        assert route.calls.last.request.content == b'{"a": 1}'


def test_post_bytes_body_carries_auth(token):
    with respx.mock:
        route = respx.post(URL).mock(return_value=httpx.Response(201, text=""))
        post(URL, b"data")
        request = route.calls.last.request
        assert request.content == b"data"
        assert request.headers["Authorization"] == "Bearer token"


def test_put_uses_put(token):
    with respx.mock:
        route = respx.put(URL).mock(return_value=httpx.Response(200, text="done"))
        assert put(URL, "body") == "done"
        assert route.calls.last.request.method == "PUT"


def test_transport_error_raises_error_response(token):
    with respx.mock:
        respx.get(URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(ErrorResponse) as info:
            get(URL)
    assert info.value.status == 500
    assert info.value.message == "refused"