"""Tests for the httpx-based GitHub client."""

from __future__ import annotations

import httpx
import pytest
import respx
from httpx import Response

from prsweep.github_api import (
    _HTTP_FORBIDDEN,
    _HTTP_UNAUTHORIZED,
    GitHubAuthError,
    GitHubClient,
    GitHubError,
    _parse_next_link,
    _raise_for_status,
)

API = "https://api.github.com"

# ---------------------------------------------------------------------------
# Error types
# ---------------------------------------------------------------------------


class TestGitHubAuthError:
    def test_default_message_mentions_token(self):
        err = GitHubAuthError()
        assert "GITHUB_TOKEN" in str(err)
        assert "github.com/settings/tokens" in str(err)

    def test_detail_prepended(self):
        err = GitHubAuthError("Access denied")
        assert str(err).startswith("Access denied")

    def test_status_code_is_401(self):
        assert GitHubAuthError().status_code == _HTTP_UNAUTHORIZED


# ---------------------------------------------------------------------------
# _raise_for_status
# ---------------------------------------------------------------------------


class TestRaiseForStatus:
    def test_success_does_not_raise(self):
        _raise_for_status(Response(200))

    def test_205_does_not_raise(self):
        _raise_for_status(Response(205))

    def test_401_raises_auth_error(self):
        with pytest.raises(GitHubAuthError):
            _raise_for_status(Response(401))

    def test_403_rate_limit_raises_github_error(self):
        with pytest.raises(GitHubError, match="rate limit") as excinfo:
            _raise_for_status(Response(403, json={"message": "API rate limit exceeded for ..."}))
        assert not isinstance(excinfo.value, GitHubAuthError)
        assert excinfo.value.status_code == _HTTP_FORBIDDEN

    def test_403_forbidden_raises_auth_error(self):
        with pytest.raises(GitHubAuthError, match="forbidden"):
            _raise_for_status(Response(403, json={"message": "Forbidden"}))

    def test_404_raises_github_error(self):
        with pytest.raises(GitHubError, match="404: Not Found") as excinfo:
            _raise_for_status(Response(404, json={"message": "Not Found"}))
        assert excinfo.value.status_code == 404

    def test_non_json_body_uses_text(self):
        with pytest.raises(GitHubError, match="Unprocessable"):
            _raise_for_status(Response(422, text="Unprocessable"))


# ---------------------------------------------------------------------------
# _parse_next_link
# ---------------------------------------------------------------------------


class TestParseNextLink:
    def test_parses_next_link(self):
        header = f'<{API}/notifications?page=2>; rel="next", <{API}/notifications?page=5>; rel="last"'
        assert _parse_next_link(header) == f"{API}/notifications?page=2"

    def test_returns_none_when_no_next(self):
        assert _parse_next_link(f'<{API}/notifications?page=1>; rel="prev"') is None

    def test_returns_none_for_empty_string(self):
        assert _parse_next_link("") is None


# ---------------------------------------------------------------------------
# GitHubClient
# ---------------------------------------------------------------------------


class TestListNotifications:
    async def test_returns_page_and_next_flag(self, config, notification_payload):
        with respx.mock:
            route = respx.get(f"{API}/notifications").mock(
                return_value=Response(
                    200,
                    json=[notification_payload("1"), notification_payload("2", number=2)],
                    headers={"link": f'<{API}/notifications?page=2>; rel="next"'},
                ),
            )
            async with GitHubClient(config) as client:
                notifications, has_next = await client.list_notifications(page=1, per_page=50)

        assert [n.id for n in notifications] == ["1", "2"]
        assert has_next is True
        params = route.calls.last.request.url.params
        assert params["all"] == "false"
        assert params["per_page"] == "50"
        assert params["page"] == "1"

    async def test_last_page(self, config):
        with respx.mock:
            respx.get(f"{API}/notifications").mock(return_value=Response(200, json=[]))
            async with GitHubClient(config) as client:
                notifications, has_next = await client.list_notifications(page=3, per_page=50)

        assert notifications == []
        assert has_next is False

    async def test_sends_auth_headers(self, config):
        with respx.mock:
            route = respx.get(f"{API}/notifications").mock(return_value=Response(200, json=[]))
            async with GitHubClient(config) as client:
                await client.list_notifications(page=1, per_page=50)

        headers = route.calls.last.request.headers
        assert headers["authorization"] == "Bearer tok_test"
        assert headers["accept"] == "application/vnd.github+json"

    async def test_error_raises(self, config):
        with respx.mock:
            respx.get(f"{API}/notifications").mock(return_value=Response(500, json={"message": "boom"}))
            async with GitHubClient(config) as client:
                with pytest.raises(GitHubError, match="boom"):
                    await client.list_notifications(page=1, per_page=50)

    async def test_transport_error_wrapped(self, config):
        with respx.mock:
            respx.get(f"{API}/notifications").mock(side_effect=httpx.ConnectError("refused"))
            async with GitHubClient(config) as client:
                with pytest.raises(GitHubError, match="refused"):
                    await client.list_notifications(page=1, per_page=50)

    async def test_unexpected_item_raises_github_error(self, config):
        with respx.mock:
            respx.get(f"{API}/notifications").mock(return_value=Response(200, json=[{"unread": True}]))
            async with GitHubClient(config) as client:
                with pytest.raises(GitHubError, match="Unexpected notification payload"):
                    await client.list_notifications(page=1, per_page=50)


class TestGetPullRequest:
    async def test_returns_model(self, config, pr_payload):
        with respx.mock:
            respx.get(f"{API}/repos/octo/app/pulls/7").mock(
                return_value=Response(200, json=pr_payload(7, state="closed", merged=True) | {"body": "ignored"}),
            )
            async with GitHubClient(config) as client:
                pr = await client.get_pull_request("octo", "app", 7)

        assert pr.number == 7
        assert pr.merged is True
        assert pr.is_closed is True

    async def test_not_found(self, config):
        with respx.mock:
            respx.get(f"{API}/repos/octo/app/pulls/7").mock(return_value=Response(404, json={"message": "Not Found"}))
            async with GitHubClient(config) as client:
                with pytest.raises(GitHubError, match="404"):
                    await client.get_pull_request("octo", "app", 7)

    async def test_unexpected_shape_raises_github_error(self, config):
        with respx.mock:
            respx.get(f"{API}/repos/octo/app/pulls/7").mock(return_value=Response(200, json={"message": "odd"}))
            async with GitHubClient(config) as client:
                with pytest.raises(GitHubError, match="Unexpected pull request payload"):
                    await client.get_pull_request("octo", "app", 7)

    async def test_non_json_body_raises_github_error(self, config):
        with respx.mock:
            respx.get(f"{API}/repos/octo/app/pulls/7").mock(return_value=Response(200, text="<html>oops</html>"))
            async with GitHubClient(config) as client:
                with pytest.raises(GitHubError, match="non-JSON"):
                    await client.get_pull_request("octo", "app", 7)


class TestMarkThread:
    async def test_mark_read_patches_thread(self, config):
        with respx.mock:
            route = respx.patch(f"{API}/notifications/threads/abc123").mock(return_value=Response(205))
            async with GitHubClient(config) as client:
                await client.mark_thread_read("abc123")

        assert route.call_count == 1

    async def test_mark_done_deletes_thread(self, config):
        with respx.mock:
            route = respx.delete(f"{API}/notifications/threads/42").mock(return_value=Response(204))
            async with GitHubClient(config) as client:
                await client.mark_thread_done(42)

        assert route.call_count == 1

    async def test_mark_read_failure(self, config):
        with respx.mock:
            respx.patch(f"{API}/notifications/threads/1").mock(return_value=Response(403, json={"message": "Forbidden"}))
            async with GitHubClient(config) as client:
                with pytest.raises(GitHubAuthError):
                    await client.mark_thread_read("1")


class TestAuthenticatedUser:
    async def test_returns_login(self, config):
        with respx.mock:
            respx.get(f"{API}/user").mock(return_value=Response(200, json={"login": "octocat"}))
            async with GitHubClient(config) as client:
                assert await client.get_authenticated_user() == "octocat"

    async def test_custom_api_url(self):
        from prsweep.config import SweepConfig

        config = SweepConfig(token="t", api_url="https://ghe.example.com/api/v3")
        with respx.mock:
            respx.get("https://ghe.example.com/api/v3/user").mock(return_value=Response(200, json={"login": "me"}))
            async with GitHubClient(config) as client:
                assert await client.get_authenticated_user() == "me"
