"""Pydantic models for prsweep."""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

PULL_REQUEST_SUBJECT = "PullRequest"


class MarkAction(StrEnum):
    """How a notification thread is marked once its PR is merged or closed."""

    READ = "read"
    DONE = "done"


class Outcome(StrEnum):
    """What happens to a notification after its PR state is known."""

    SKIP = "skip"
    REPORT_PENDING = "report-pending"
    PROPOSE_MARK = "propose-mark"


class SubjectURLError(ValueError):
    """Raised when a notification subject URL is not a pull request API URL."""


class Subject(BaseModel):
    """The object a notification is about."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: str = Field(description="Subject type, e.g. 'PullRequest' or 'Issue'")
    url: str | None = Field(default=None, description="Canonical API URL of the subject")
    title: str = Field(default="", description="Subject title")


class Repository(BaseModel):
    """The repository a notification belongs to."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    full_name: str = Field(description="Repository in 'owner/repo' format")


class Notification(BaseModel):
    """A single notification thread as returned by the GitHub API."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(description="Thread ID")
    unread: bool = Field(default=True, description="Whether the thread is still unread")
    subject: Subject = Field(description="What the notification is about")
    repository: Repository = Field(description="Owning repository")

    @property
    def is_pull_request(self) -> bool:
        return self.subject.type == PULL_REQUEST_SUBJECT

    @property
    def repo_full_name(self) -> str:
        """Repository full name with any leading ``repos/`` stripped."""
        return self.repository.full_name.removeprefix("repos/")


class PullRequest(BaseModel):
    """Current state of a pull request."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    number: int = Field(description="PR number")
    title: str = Field(default="", description="PR title")
    state: str = Field(description="Lifecycle state: 'open' or 'closed'")
    merged: bool = Field(default=False, description="Whether the PR has been merged")
    html_url: str = Field(default="", description="PR web URL")

    @property
    def is_closed(self) -> bool:
        return self.state == "closed"


# https://host[/api/v3]/repos/{owner}/{repo}/pulls/{number}
_PULL_URL_RE = re.compile(r"^https?://[^/]+(?:/[^/]+)*?/repos/(?P<owner>[^/]+)/(?P<repo>[^/]+)/pulls/(?P<number>\d+)$")


class PullRequestRef(BaseModel):
    """A pull request located by owner, repo and number."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int
    number_text: str = Field(default="", repr=False, description="Number exactly as written in the subject URL")

    @classmethod
    def from_api_url(cls, url: str | None) -> PullRequestRef:
        """Parse a subject URL ending in ``/repos/{owner}/{repo}/pulls/{number}``.

        Works for ``https://api.github.com/repos/...`` and for GitHub Enterprise
        hosts that put the API under a prefix such as ``/api/v3``.

        Raises:
            SubjectURLError: If the URL does not have that shape.
        """
        match = _PULL_URL_RE.match(url) if url else None
        if match is None:
            msg = f"Unexpected pull request URL: {url!r}"
            raise SubjectURLError(msg)
        number = match["number"]
        return cls(owner=match["owner"], repo=match["repo"], number=int(number), number_text=number)

    @property
    def path(self) -> str:
        """The ``/repos/{owner}/{repo}/pulls/{number}`` fragment used for thread matching."""
        return f"/repos/{self.owner}/{self.repo}/pulls/{self.number_text or self.number}"


class SweepReport(BaseModel):
    """Counters for a single sweep run."""

    fetched: int = Field(default=0, description="Unread notifications fetched")
    candidates: int = Field(default=0, description="Pull request notifications that passed the repo filter")
    pending: int = Field(default=0, description="Open PRs still waiting for review")
    proposed: int = Field(default=0, description="Merged/closed PRs with an unread notification")
    marked: int = Field(default=0, description="Threads successfully marked")
    declined: int = Field(default=0, description="Threads the user chose not to mark")
    unmatched: int = Field(default=0, description="Proposed threads with no matching thread ID")
    skipped: int = Field(default=0, description="Merged/closed PRs whose notification was already read")
    failed: int = Field(default=0, description="Notifications abandoned because of an error")
