"""HTTP requests to the GitHub API."""

from __future__ import annotations

import logging
import os

import httpx

log = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
ACCEPT = "application/vnd.github.VERSION.sha"
USER_AGENT = "releaser"


class ErrorResponse(Exception):
    """A request that failed before a response could be read."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message, status)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return f"Status: {self.status}, Message: {self.message}"


def internal_server_error(message: str | None) -> ErrorResponse:
    """Return a status 500 error, with a generic message if none is given."""
    return ErrorResponse(message or "Internal server error", 500)


def github_token() -> str:
    """Return the token from the ``GITHUB_TOKEN`` environment variable."""
    try:
        return os.environ["GITHUB_TOKEN"]
    except KeyError:
        raise RuntimeError("GITHUB_TOKEN must be set") from None


def default_headers(token: str | None = None) -> dict[str, str]:
    """Return the headers sent with every GitHub request."""
    if token is None:
        token = github_token()
    return {
        "Authorization": f"Bearer {token}",
        "Accept": ACCEPT,
        "X-GitHub-Api-Version": API_VERSION,
        "User-Agent": USER_AGENT,
    }


def _request(
    method: str,
    url: str,
    body: str | bytes | None = None,
    headers: dict[str, str] | None = None,
) -> str:
    merged = default_headers()
    if headers:
        merged.update(headers)
    try:
        response = httpx.request(method, url, headers=merged, content=body, timeout=None)
        text = response.text
    except httpx.HTTPError as error:
        raise internal_server_error(str(error) or None) from error
    log.debug("Response status: %s", response.status_code)
    if not response.is_success:
        log.warning("Response message: %s", text)
    return text


def get(url: str) -> str:
    """Send a GET request and return the response body, whatever its status."""
    return _request("GET", url)


def post(url: str, body: str | bytes) -> str:
    """Send a POST request and return the response body, whatever its status."""
    return _request("POST", url, body)


def put(url: str, body: str | bytes) -> str:
    """Send a PUT request and return the response body, whatever its status."""
    return _request("PUT", url, body)