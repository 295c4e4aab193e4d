"""Select pull request notifications from allowed repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prsweep.config import SweepConfig
    from prsweep.models import Notification


class RepoFilter(BaseModel):
    """Allow/deny lists of ``owner/repo`` names.

    An empty allow-list admits every repository. The deny-list is checked
    after the allow-list and always wins.
    """

    model_config = ConfigDict(frozen=True)

    allow: frozenset[str] = Field(default_factory=frozenset)
    deny: frozenset[str] = Field(default_factory=frozenset)

    @classmethod
    def from_config(cls, config: SweepConfig) -> RepoFilter:
        return cls(allow=config.only_repos, deny=config.exclude_repos)

    def admits(self, repo: str) -> bool:
        if self.allow and repo not in self.allow:
            return False
        return not (self.deny and repo in self.deny)


def filter_notifications(notifications: Iterable[Notification], repo_filter: RepoFilter) -> list[Notification]:
    """Return pull request notifications whose repository passes *repo_filter*, in input order."""
    return [n for n in notifications if n.is_pull_request and repo_filter.admits(n.repo_full_name)]
