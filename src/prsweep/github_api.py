"""GitHub REST client for notifications and pull requests, built on httpx.

One :class:`GitHubClient` is created per run from the :class:`SweepConfig`
and shared by every worker. Use it as an async context manager so the
underlying connection pool is closed when the sweep finishes.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Self, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from prsweep.models import Notification, PullRequest

if TYPE_CHECKING:
    from types import TracebackType

    from prsweep.config import SweepConfig

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

TOKEN_CREATE_URL = "https://github.com/settings/tokens/new?scopes=notifications,repo&description=prsweep"  # noqa: S105

# ---------------------------------------------------------------------------
# Error types
# ---------------------------------------------------------------------------


class GitHubError(Exception):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthError(GitHubError):
    """Raised when GitHub authentication fails."""

    def __init__(self, detail: str = "") -> None:
        msg = f"GitHub authentication failed. Check GITHUB_TOKEN.\nCreate a token (permissions pre-filled): {TOKEN_CREATE_URL}"
        if detail:
            msg = f"{detail}\n{msg}"
        super().__init__(msg, status_code=401)


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------

_HTTP_UNAUTHORIZED = 401
_HTTP_FORBIDDEN = 403


def _raise_for_status(response: httpx.Response) -> None:
    """Raise appropriate :exc:`GitHubError` subclass for non-2xx responses."""
    if response.is_success:
        return

    if response.status_code == _HTTP_UNAUTHORIZED:
        raise GitHubAuthError

    try:
        body = response.json()
        msg = body.get("message", response.text)
    except ValueError:
        msg = response.text

    if response.status_code == _HTTP_FORBIDDEN:
        if "rate limit" in msg.lower():
            msg = f"GitHub API rate limit exceeded: {msg}"
            raise GitHubError(msg, status_code=_HTTP_FORBIDDEN)
        msg = f"GitHub API access forbidden: {msg}"
        raise GitHubAuthError(msg)

    msg = f"GitHub API error {response.status_code}: {msg}"
    raise GitHubError(msg, status_code=response.status_code)


def _parse_next_link(link_header: str) -> str | None:
    """Parse a ``Link:`` header and return the ``next`` URL if present."""
    if not link_header:
        return None
    match = re.search(r'<([^>]+)>;\s*rel="next"', link_header)
    return match.group(1) if match else None


def _parse(model: type[ModelT], data: Any, what: str) -> ModelT:
    """Validate one API payload, raising :exc:`GitHubError` for an unexpected shape."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        msg = f"Unexpected {what} payload from GitHub: {exc.error_count()} validation error(s)"
        raise GitHubError(msg) from exc


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        msg = f"GitHub returned a non-JSON body for {response.request.method} {response.request.url.path}"
        raise GitHubError(msg, status_code=response.status_code) from exc


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class GitHubClient:
    """Thin async wrapper around the GitHub endpoints prsweep needs."""

    def __init__(self, config: SweepConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._config = config
        self._http = httpx.AsyncClient(
            base_url=config.api_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            msg = f"{method} {path} failed: {exc}"
            raise GitHubError(msg) from exc
        _raise_for_status(response)
        return response

    async def list_notifications(self, page: int, per_page: int) -> tuple[list[Notification], bool]:
        """Fetch one page of unread notifications.

        Returns:
            (notifications, has_next_page)
        """
        params = {"all": "false", "per_page": per_page, "page": page}
        response = await self._request("GET", "/notifications", params=params)
        notifications = [_parse(Notification, item, "notification") for item in _json(response)]
        has_next = _parse_next_link(response.headers.get("link", "")) is not None
        return notifications, has_next

    async def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        response = await self._request("GET", f"/repos/{owner}/{repo}/pulls/{number}")
        return _parse(PullRequest, _json(response), "pull request")

    async def mark_thread_read(self, thread_id: str) -> None:
        """Mark a notification thread as read (``PATCH``; thread ID is opaque)."""
        await self._request("PATCH", f"/notifications/threads/{thread_id}")

    async def mark_thread_done(self, thread_id: int) -> None:
        """Mark a notification thread as done (``DELETE``)."""
        await self._request("DELETE", f"/notifications/threads/{thread_id}")

    async def get_authenticated_user(self) -> str:
        """Return the login of the token's owner."""
        response = await self._request("GET", "/user")
        return _json(response).get("login", "")
