"""Unit tests for configuration loading."""

from pathlib import Path
from textwrap import dedent

import pytest

from projsync.config import find_config, load_config
from projsync.exceptions import ConfigurationError


@pytest.fixture
def temp_config(tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_content = dedent("""
        token: file-token
        owner: octo
        template_repo: Starter
        strict_titles: true
        synced_fields:
          - Starts
          - Due
        retry:
          initial_delay: 5
          increment: 10
          max_attempts: 3
    """).strip()

    config_path = tmp_path / "projsync.yaml"
    config_path.write_text(config_content)
    return config_path


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_valid_config(self, temp_config: Path) -> None:
        config = load_config(temp_config, env={})

        assert config.token == "file-token"
        assert config.owner == "octo"
        assert config.template_repo == "Starter"
        assert config.strict_titles is True
        assert config.synced_fields == ("Starts", "Due")

    def test_load_retry_config(self, temp_config: Path) -> None:
        config = load_config(temp_config, env={})

        assert config.retry.initial_delay == 5
        assert config.retry.increment == 10
        assert config.retry.max_attempts == 3

    def test_environment_overrides_file(self, temp_config: Path) -> None:
        config = load_config(temp_config, env={"GITHUB_TOKEN": "env-token", "PROJSYNC_OWNER": "me"})

        assert config.token == "env-token"
        assert config.owner == "me"

    def test_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        config = load_config(env={"GITHUB_TOKEN": "t"})

        assert config.owner is None
        assert config.synced_fields == ("Starts", "Due", "Type", "Phase", "Sprint")
        assert config.retry.initial_delay == 60
        assert config.retry.increment == 60
        assert config.retry.max_attempts is None
        assert config.update_file == Path("update.tsv")
        assert config.parents_file == Path("parents.tsv")

    def test_missing_token_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(env={})

        assert "GITHUB_TOKEN" in str(exc_info.value)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "missing.yaml", env={"GITHUB_TOKEN": "t"})

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "projsync.yaml"
        path.write_text("token: [unclosed")

        with pytest.raises(ConfigurationError):
            load_config(path, env={})

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "projsync.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(path, env={"GITHUB_TOKEN": "t"})

    def test_bad_retry_value_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "projsync.yaml"
        path.write_text("retry:\n  initial_delay: soon\n")

        with pytest.raises(ConfigurationError):
            load_config(path, env={"GITHUB_TOKEN": "t"})


@pytest.mark.unit
class TestFindConfig:
    """Tests for find_config function."""

    def test_finds_in_parent(self, temp_config: Path) -> None:
        nested = temp_config.parent / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config(nested) == temp_config

    def test_returns_none_when_absent(self, tmp_path: Path) -> None:
        # tmp_path parents are outside the repository and hold no projsync.yaml
        assert find_config(tmp_path) is None
