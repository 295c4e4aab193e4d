"""Resolve a notification to the current state of its pull request."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from prsweep.github_api import GitHubError
from prsweep.models import Notification, PullRequest, PullRequestRef, SubjectURLError

if TYPE_CHECKING:
    from prsweep.github_api import GitHubClient

logger = logging.getLogger(__name__)


class ResolvedPR(BaseModel):
    """A notification together with the PR it points at."""

    model_config = ConfigDict(frozen=True)

    notification: Notification
    ref: PullRequestRef
    pull_request: PullRequest


def fetch_coordinates(notification: Notification) -> tuple[str, str]:
    """Return the ``(owner, repo)`` used for the PR fetch, taken from the repository full name."""
    owner, _, repo = notification.repo_full_name.partition("/")
    return owner, repo


async def resolve_pull_request(client: GitHubClient, notification: Notification) -> ResolvedPR | None:
    """Fetch the PR behind *notification*.

    The subject URL gives the ref used for display and thread matching; the
    repository full name gives the owner/repo the PR is fetched from.

    Returns:
        The resolved PR, or ``None`` if the URL is malformed or the fetch failed
        (the error is logged and the notification is abandoned).
    """
    try:
        ref = PullRequestRef.from_api_url(notification.subject.url)
    except SubjectURLError as exc:
        logger.error("Skipping notification %s: %s", notification.id, exc)
        return None

    owner, repo = fetch_coordinates(notification)
    try:
        pull_request = await client.get_pull_request(owner, repo, ref.number)
    except GitHubError as exc:
        logger.error("Error fetching PR %s: %s", notification.subject.url, exc)
        return None

    return ResolvedPR(notification=notification, ref=ref, pull_request=pull_request)
