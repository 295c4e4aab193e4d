"""Run configuration for prsweep.

Defaults can come from ``.prsweep.toml`` (found by walking up from the current
directory to the ``.git`` root). Command-line flags override the file, and the
token always comes from ``GITHUB_TOKEN``.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from prsweep.models import MarkAction

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".prsweep.toml"
TOKEN_ENV_VAR = "GITHUB_TOKEN"  # noqa: S105
API_URL_ENV_VAR = "PRSWEEP_API_URL"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_PAGE_SIZE = 50


class ConfigError(ValueError):
    """Raised when the configuration is missing or invalid."""


def parse_repo_list(value: str | list[str] | tuple[str, ...] | frozenset[str] | set[str] | None) -> frozenset[str]:
    """Turn ``"a/b, c/d"`` (or a list of names) into a set of trimmed repo names."""
    if value is None:
        return frozenset()
    items = value.split(",") if isinstance(value, str) else value
    return frozenset(item.strip() for item in items if item.strip())


class FileSettings(BaseModel):
    """Keys accepted in ``.prsweep.toml``."""

    model_config = ConfigDict(extra="ignore")

    no_prompt: bool | None = None
    mark_done: bool | None = None
    only_repos: str | list[str] | None = None
    exclude_repos: str | list[str] | None = None
    concurrency: int | None = Field(default=None, ge=1)


class SweepConfig(BaseModel):
    """Read-only configuration shared by every component of a sweep."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    token: str = Field(min_length=1, repr=False, description="GitHub token used for every API call")
    api_url: str = Field(default=DEFAULT_API_URL, description="GitHub REST API base URL")
    no_prompt: bool = Field(default=False, description="Skip the confirmation prompt before marking")
    mark_action: MarkAction = Field(default=MarkAction.READ, description="Mark threads as read or as done")
    only_repos: frozenset[str] = Field(default_factory=frozenset, description="Allow-list of 'owner/repo' names")
    exclude_repos: frozenset[str] = Field(default_factory=frozenset, description="Deny-list of 'owner/repo' names")
    concurrency: int = Field(default=1, ge=1, description="Maximum notifications processed at once")
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=100, description="Notifications per page")

    @field_validator("only_repos", "exclude_repos", mode="before")
    @classmethod
    def _split_repos(cls, value: Any) -> frozenset[str]:
        return parse_repo_list(value)

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def _find_config_file(start: Path) -> Path | None:
    """Walk up from *start* looking for ``.prsweep.toml``, stopping at the ``.git`` root."""
    current = start.resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        if (current / ".git").exists():
            return None
        current = current.parent


def load_file_settings(cwd: str | Path | None = None) -> tuple[FileSettings, Path | None]:
    """Load ``.prsweep.toml`` if there is one.

    Returns:
        (settings, path) where path is ``None`` when no file was found.

    Raises:
        ConfigError: On invalid TOML or invalid values.
    """
    start = Path(cwd) if cwd else Path.cwd()
    config_path = _find_config_file(start)
    if config_path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILENAME)
        return FileSettings(), None

    logger.info("Loading config from %s", config_path)
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {config_path}: {exc}"
        raise ConfigError(msg) from exc

    try:
        settings = FileSettings.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid config in {config_path}: {exc}"
        raise ConfigError(msg) from exc

    for key in sorted(set(data) - set(FileSettings.model_fields)):
        logger.warning("Unknown config key '%s' in %s", key, config_path)

    return settings, config_path


def build_config(
    *,
    no_prompt: bool | None = None,
    mark_done: bool | None = None,
    only_repos: str | None = None,
    exclude_repos: str | None = None,
    concurrency: int | None = None,
    cwd: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> SweepConfig:
    """Merge file settings, command-line values and the environment into a ``SweepConfig``.

    ``None`` means "not given on the command line" so the file value (or the
    built-in default) is used.

    Raises:
        ConfigError: If the token is missing or any value is invalid.
    """
    env = os.environ if environ is None else environ
    token = env.get(TOKEN_ENV_VAR, "")
    if not token:
        msg = f"Please set the {TOKEN_ENV_VAR} environment variable."
        raise ConfigError(msg)

    settings, _ = load_file_settings(cwd)

    def pick(cli_value: Any, file_value: Any, default: Any) -> Any:
        if cli_value is not None:
            return cli_value
        if file_value is not None:
            return file_value
        return default

    use_done = pick(mark_done, settings.mark_done, False)  # noqa: FBT003
    try:
        return SweepConfig(
            token=token,
            api_url=env.get(API_URL_ENV_VAR) or DEFAULT_API_URL,
            no_prompt=pick(no_prompt, settings.no_prompt, False),  # noqa: FBT003
            mark_action=MarkAction.DONE if use_done else MarkAction.READ,
            only_repos=pick(only_repos, settings.only_repos, None),
            exclude_repos=pick(exclude_repos, settings.exclude_repos, None),
            concurrency=pick(concurrency, settings.concurrency, 1),
        )
    except ValidationError as exc:
        msg = f"Invalid configuration: {exc}"
        raise ConfigError(msg) from exc
