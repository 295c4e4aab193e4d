"""Global test fixtures for prsweep."""

from __future__ import annotations

import io
from typing import Any

import pytest
from rich.console import Console

from prsweep.config import SweepConfig
from prsweep.models import Notification
from prsweep.output import Reporter

API = "https://api.github.com"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Run every test from an empty directory with a known token.

    Keeps a developer's own ``.prsweep.toml`` or ``PRSWEEP_*`` variables out of the tests.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GITHUB_TOKEN", "tok_test")
    monkeypatch.delenv("PRSWEEP_API_URL", raising=False)


@pytest.fixture
def config() -> SweepConfig:
    return SweepConfig(token="tok_test", no_prompt=True)


@pytest.fixture
def reporter() -> Reporter:
    return Reporter(Console(file=io.StringIO(), highlight=False, width=200))


@pytest.fixture
def notification_payload():
    """Build a notification dict shaped like the GitHub API response."""

    def _build(
        thread_id: str = "1",
        *,
        owner: str = "octo",
        repo: str = "app",
        number: int = 1,
        subject_type: str = "PullRequest",
        unread: bool = True,
        full_name: str | None = None,
        url: str | None = None,
    ) -> dict[str, Any]:
        kind = "pulls" if subject_type == "PullRequest" else "issues"
        return {
            "id": thread_id,
            "unread": unread,
            "reason": "review_requested",
            "subject": {
                "title": f"Change #{number}",
                "type": subject_type,
                "url": url or f"{API}/repos/{owner}/{repo}/{kind}/{number}",
            },
            "repository": {"full_name": full_name or f"{owner}/{repo}"},
        }

    return _build


@pytest.fixture
def make_notification(notification_payload):
    def _build(thread_id: str = "1", **kwargs: Any) -> Notification:
        return Notification.model_validate(notification_payload(thread_id, **kwargs))

    return _build


@pytest.fixture
def pr_payload():
    """Build a pull request dict shaped like the GitHub API response."""

    def _build(number: int = 1, *, state: str = "open", merged: bool = False, title: str | None = None) -> dict[str, Any]:
        return {
            "number": number,
            "title": title or f"Change #{number}",
            "state": state,
            "merged": merged,
            "html_url": f"https://github.com/octo/app/pull/{number}",
        }

    return _build
