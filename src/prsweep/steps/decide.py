"""Decide what to do with a notification once its PR state is known."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prsweep.models import Outcome

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prsweep.models import Notification, PullRequest, PullRequestRef

_API_REPOS_PREFIX = "https://api.github.com/repos/"
_WEB_PREFIX = "https://github.com/"
_ENTERPRISE_API_REPOS = "/api/v3/repos/"


def decide(pull_request: PullRequest, notification: Notification) -> Outcome:
    """Map (merged, closed, unread) to an :class:`Outcome`.

    - merged or closed, already read: ``SKIP``
    - merged or closed, unread: ``PROPOSE_MARK``
    - open and unmerged: ``REPORT_PENDING``
    """
    if pull_request.merged or pull_request.is_closed:
        return Outcome.PROPOSE_MARK if notification.unread else Outcome.SKIP
    return Outcome.REPORT_PENDING


def find_thread_id(notifications: Iterable[Notification], ref: PullRequestRef) -> str:
    """Return the ID of the first notification whose subject URL contains the ref's path, or ``""``."""
    fragment = ref.path
    for notification in notifications:
        if fragment in (notification.subject.url or ""):
            return notification.id
    return ""


def api_to_web_url(api_url: str) -> str:
    """Convert ``https://api.github.com/repos/o/r/pulls/5`` to ``https://github.com/o/r/pull/5``.

    GitHub Enterprise URLs (``https://ghe.host/api/v3/repos/o/r/pulls/5``) keep
    their host and lose the API prefix: ``https://ghe.host/o/r/pull/5``.
    """
    if _API_REPOS_PREFIX in api_url:
        url = api_url.replace(_API_REPOS_PREFIX, _WEB_PREFIX, 1)
    else:
        url = api_url.replace(_ENTERPRISE_API_REPOS, "/", 1)
    return url.replace("/pulls/", "/pull/", 1)
