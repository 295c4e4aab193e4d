"""CLI for prsweep, built on cyclopts."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import TYPE_CHECKING, Annotated

import cyclopts

from prsweep.config import API_URL_ENV_VAR, TOKEN_ENV_VAR, ConfigError, SweepConfig, build_config
from prsweep.github_api import GitHubClient, GitHubError
from prsweep.output import Reporter
from prsweep.sweep import run_sweep

if TYPE_CHECKING:
    from prsweep.models import SweepReport

logger = logging.getLogger(__name__)

app = cyclopts.App(
    name="prsweep",
    help="Mark GitHub notifications for merged or closed pull requests as read (or done).",
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=_LOG_FORMAT, stream=sys.stderr)
    # httpx logs each request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.default
def sweep(
    *,
    no_prompt: Annotated[bool, cyclopts.Parameter(negative="", help="Skip confirmation prompts")] = False,
    mark_done: Annotated[bool, cyclopts.Parameter(negative="", help="Mark threads as done instead of read")] = False,
    only_repos: Annotated[str, cyclopts.Parameter(help="Comma-separated owner/repo names to include")] = "",
    exclude_repos: Annotated[str, cyclopts.Parameter(help="Comma-separated owner/repo names to skip")] = "",
    concurrency: Annotated[int | None, cyclopts.Parameter(help="Notifications processed at once (default 1)")] = None,
    verbose: Annotated[bool, cyclopts.Parameter(negative="", help="Enable debug logging")] = False,
) -> None:
    """Sweep unread PR notifications (default command)."""
    _configure_logging(verbose=verbose)
    try:
        config = build_config(
            no_prompt=no_prompt or None,
            mark_done=mark_done or None,
            only_repos=only_repos or None,
            exclude_repos=exclude_repos or None,
            concurrency=concurrency,
        )
    except ConfigError as exc:
        logger.critical("%s", exc)
        sys.exit(1)

    try:
        report = asyncio.run(_run(config))
    except GitHubError as exc:
        logger.critical("Error fetching GH notifications: %s", exc)
        sys.exit(1)
    logger.info("Sweep finished: %s", report.model_dump())


async def _run(config: SweepConfig) -> SweepReport:
    reporter = Reporter()
    async with GitHubClient(config) as client:
        report = await run_sweep(config, client, reporter)
    reporter.summary(report)
    return report


@app.command(name="check-env")
def check_env() -> None:
    """Show the prsweep environment and verify the GitHub token.

    Lists GITHUB_TOKEN and any PRSWEEP_* variables (masking the token),
    warns about unrecognized PRSWEEP_* names, validates the config and
    calls ``GET /user`` with the token.
    """
    print("prsweep check-env")
    print("=" * 40)

    env_vars = {k: v for k, v in sorted(os.environ.items()) if k == TOKEN_ENV_VAR or k.startswith("PRSWEEP_")}
    if not env_vars:
        print(f"\nNo {TOKEN_ENV_VAR} or PRSWEEP_* environment variables set.")
    else:
        print(f"\nFound {len(env_vars)} variable(s):\n")
        for key, value in env_vars.items():
            marker = "" if _is_known_var(key) else "  ⚠️  UNRECOGNIZED"
            print(f"  {key} = {_mask_value(key, value)}{marker}")

    print("\n" + "-" * 40)
    print("Validating configuration...\n")
    try:
        config = build_config()
    except ConfigError as exc:
        print(f"❌ Configuration error: {exc}")
        sys.exit(1)

    _print_config_summary(config)

    print("-" * 40)
    print("Checking GitHub token...\n")
    try:
        username = asyncio.run(_whoami(config))
        print(f"  ✅ Authenticated as: {username}")
    except GitHubError as exc:
        print(f"  ❌ GitHub error: {exc}")

    print()


async def _whoami(config: SweepConfig) -> str:
    async with GitHubClient(config) as client:
        return await client.get_authenticated_user()


def main() -> None:
    app()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_MASK_MIN_LENGTH = 4
_TRUNCATE_LENGTH = 80

_KNOWN_ENV_VARS = frozenset({TOKEN_ENV_VAR, API_URL_ENV_VAR})


def _is_known_var(key: str) -> bool:
    return key in _KNOWN_ENV_VARS


def _mask_value(key: str, value: str) -> str:
    """Mask sensitive values."""
    sensitive_keywords = ("token", "secret", "key", "password")
    if any(kw in key.lower() for kw in sensitive_keywords):
        if len(value) > _MASK_MIN_LENGTH:
            return value[:2] + "*" * (len(value) - _MASK_MIN_LENGTH) + value[-2:]
        return "****"
    if len(value) > _TRUNCATE_LENGTH:
        return value[: _TRUNCATE_LENGTH - 3] + "..."
    return value


def _print_config_summary(config: SweepConfig) -> None:
    """Print a human-readable config summary."""
    print(f"  API URL: {config.api_url}")
    print(f"  Prompt before marking: {'no' if config.no_prompt else 'yes'}")
    print(f"  Mark threads as: {config.mark_action}")
    print(f"  Only repos: {', '.join(sorted(config.only_repos)) or 'all'}")
    print(f"  Exclude repos: {', '.join(sorted(config.exclude_repos)) or 'none'}")
    print(f"  Concurrency: {config.concurrency}")
    print()
