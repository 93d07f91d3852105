"""Configuration loading for projsync runs."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from projsync.exceptions import ConfigurationError

CONFIG_FILENAME = "projsync.yaml"

DEFAULT_SYNCED_FIELDS = ("Starts", "Due", "Type", "Phase", "Sprint")


@dataclass
class RetryConfig:
    """Backoff settings for secondary rate limits."""

    initial_delay: float = 60.0
    increment: float = 60.0
    max_attempts: int | None = None


@dataclass
class SyncConfig:
    """Settings shared by every projsync component.

    The token is the only required value. Everything else has defaults that
    match a personal-account GitHub setup with `update.tsv` and `parents.tsv`
    in the working directory.
    """

    token: str
    owner: str | None = None
    template_repo: str = "Template"
    graphql_url: str = "https://api.github.com/graphql"
    api_url: str = "https://api.github.com"
    source_prefix: str = "https://github.com/"
    strict_titles: bool = False
    synced_fields: tuple[str, ...] = DEFAULT_SYNCED_FIELDS
    update_file: Path = field(default_factory=lambda: Path("update.tsv"))
    parents_file: Path = field(default_factory=lambda: Path("parents.tsv"))
    retry: RetryConfig = field(default_factory=RetryConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any], env: Mapping[str, str]) -> SyncConfig:
        """Create config from a YAML mapping plus environment overrides.

        Raises:
            ConfigurationError: If no token is available or a value is malformed.
        """
        token = env.get("GITHUB_TOKEN") or data.get("token")
        if not token:
            raise ConfigurationError("Missing GITHUB_TOKEN (set it in the environment or config file)")

        retry_data = data.get("retry") or {}
        try:
            retry = RetryConfig(
                initial_delay=float(retry_data.get("initial_delay", 60)),
                increment=float(retry_data.get("increment", 60)),
                max_attempts=(
                    int(retry_data["max_attempts"])
                    if retry_data.get("max_attempts") is not None
                    else None
                ),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid retry settings: {e}") from e

        synced = data.get("synced_fields") or DEFAULT_SYNCED_FIELDS
        if isinstance(synced, str) or not isinstance(synced, (list, tuple)):
            raise ConfigurationError("synced_fields must be a list of field names")

        return cls(
            token=token,
            owner=env.get("PROJSYNC_OWNER") or data.get("owner"),
            template_repo=data.get("template_repo", "Template"),
            graphql_url=data.get("graphql_url", "https://api.github.com/graphql"),
            api_url=data.get("api_url", "https://api.github.com"),
            source_prefix=data.get("source_prefix", "https://github.com/"),
            strict_titles=bool(data.get("strict_titles", False)),
            synced_fields=tuple(synced),
            update_file=Path(data.get("update_file", "update.tsv")),
            parents_file=Path(data.get("parents_file", "parents.tsv")),
            retry=retry,
        )


def load_config(
    config_path: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> SyncConfig:
    """Load configuration from an optional YAML file and the environment.

    Args:
        config_path: Path to projsync.yaml. When None, the file is looked up
            from the current directory upwards and skipped if absent.
        env: Environment mapping. Defaults to os.environ.

    Returns:
        Parsed configuration object.

    Raises:
        ConfigurationError: If the token is missing or the file is invalid.
    """
    if env is None:
        env = os.environ

    if config_path is None:
        config_path = find_config()
    elif not Path(config_path).exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    data: Any = {}
    if config_path is not None:
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    return SyncConfig.from_dict(data, env)


def find_config(start_path: Path | str | None = None) -> Path | None:
    """Find projsync.yaml by walking up the directory tree.

    Returns:
        Path to the config file, or None if there is none.
    """
    current = Path(start_path or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        if current == current.parent:
            return None
        current = current.parent
