"""Tests for the repository filter."""

from __future__ import annotations

from prsweep.config import SweepConfig
from prsweep.steps.filters import RepoFilter, filter_notifications


class TestRepoFilter:
    def test_empty_filter_admits_everything(self):
        assert RepoFilter().admits("octo/app") is True

    def test_allow_list_is_strict(self):
        repo_filter = RepoFilter(allow=frozenset({"octo/app"}))
        assert repo_filter.admits("octo/app") is True
        assert repo_filter.admits("octo/lib") is False

    def test_deny_list_excludes(self):
        repo_filter = RepoFilter(deny=frozenset({"octo/lib"}))
        assert repo_filter.admits("octo/app") is True
        assert repo_filter.admits("octo/lib") is False

    def test_deny_wins_over_allow(self):
        repo_filter = RepoFilter(allow=frozenset({"octo/app"}), deny=frozenset({"octo/app"}))
        assert repo_filter.admits("octo/app") is False

    def test_from_config(self):
        config = SweepConfig(token="t", only_repos=" octo/app ,octo/lib", exclude_repos="octo/lib")
        repo_filter = RepoFilter.from_config(config)
        assert repo_filter.allow == frozenset({"octo/app", "octo/lib"})
        assert repo_filter.deny == frozenset({"octo/lib"})


class TestFilterNotifications:
    def test_drops_non_pull_requests_regardless_of_lists(self, make_notification):
        notifications = [
            make_notification("1", subject_type="Issue"),
            make_notification("2", subject_type="Release"),
            make_notification("3", subject_type="PullRequest"),
        ]
        for repo_filter in (RepoFilter(), RepoFilter(allow=frozenset({"octo/app"})), RepoFilter(deny=frozenset({"x/y"}))):
            assert [n.id for n in filter_notifications(notifications, repo_filter)] == ["3"]

    def test_allow_list_excludes_repos_not_listed(self, make_notification):
        notifications = [make_notification("1", repo="app"), make_notification("2", repo="lib")]
        result = filter_notifications(notifications, RepoFilter(allow=frozenset({"octo/app"})))
        assert [n.id for n in result] == ["1"]

    def test_deny_list(self, make_notification):
        notifications = [make_notification("1", repo="app"), make_notification("2", repo="lib")]
        result = filter_notifications(notifications, RepoFilter(deny=frozenset({"octo/app"})))
        assert [n.id for n in result] == ["2"]

    def test_preserves_order_and_input(self, make_notification):
        notifications = [make_notification(str(i), number=i) for i in range(5, 0, -1)]
        original = list(notifications)
        result = filter_notifications(notifications, RepoFilter())
        assert [n.id for n in result] == ["5", "4", "3", "2", "1"]
        assert notifications == original

    def test_repos_prefix_is_ignored(self, make_notification):
        notifications = [make_notification("1", full_name="repos/octo/app")]
        assert len(filter_notifications(notifications, RepoFilter(allow=frozenset({"octo/app"})))) == 1
