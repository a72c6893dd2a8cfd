"""Tests for gitwright configuration."""

from pathlib import Path

import pytest
import yaml

from gitwright.config import GitwrightConfig, LoggingConfig
from gitwright.exceptions import ConfigurationError
from gitwright.git.config import GitConfig


class TestGitConfig:
    """Tests for GitConfig model."""

    def test_defaults(self) -> None:
        config = GitConfig()
        assert config.binary == "git"
        assert config.timeout_seconds == 300
        assert config.terminate_grace_seconds == 5.0
        assert config.env == {}
        assert config.commit.sign is False

    @pytest.mark.parametrize(
        "field,value",
        [
            ("timeout_seconds", 0),
            ("timeout_seconds", 3601),
            ("terminate_grace_seconds", -1.0),
            ("binary", ""),
        ],
    )
    def test_validation_rejects_invalid(self, field: str, value) -> None:
        with pytest.raises(ValueError):
            GitConfig(**{field: value})


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "info"
        assert config.structured_output is False

    def test_rejects_unknown_level(self) -> None:
        with pytest.raises(ValueError):
            LoggingConfig(level="verbose")


class TestGitwrightConfigLoad:
    """Tests for loading configuration files."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = GitwrightConfig.load(tmp_path / "absent.yaml")
        assert config.git.binary == "git"

    def test_load_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GIT_SIGN_COMMITS", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.dump(
                {
                    "git": {"timeout_seconds": 30, "commit": {"sign": True}, "env": {"LC_ALL": "C"}},
                    "logging": {"level": "debug"},
                }
            )
        )

        config = GitwrightConfig.load(path)

        assert config.git.timeout_seconds == 30
        assert config.git.commit.sign is True
        assert config.git.env == {"LC_ALL": "C"}
        assert config.logging.level == "debug"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert GitwrightConfig.load(path).git.timeout_seconds == 300

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("git: [unclosed\n")
        with pytest.raises(ConfigurationError):
            GitwrightConfig.load(path)

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            GitwrightConfig.load(path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"git": {"timeout_seconds": -5}}))
        with pytest.raises(ConfigurationError) as exc_info:
            GitwrightConfig.load(path)
        assert "errors" in exc_info.value.details

    def test_save_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        config = GitwrightConfig.from_dict({"git": {"timeout_seconds": 90}})

        config.save(path)

        assert yaml.safe_load(path.read_text())["git"]["timeout_seconds"] == 90


class TestEnvOverrides:
    """Tests for GIT_SIGN_COMMITS."""

    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_truthy_enables_signing(self, value: str) -> None:
        config = GitwrightConfig()
        config.apply_env_overrides({"GIT_SIGN_COMMITS": value})
        assert config.git.commit.sign is True

    @pytest.mark.parametrize("value", ["0", "false", "no", "off"])
    def test_falsy_disables_signing(self, value: str) -> None:
        config = GitwrightConfig.from_dict({"git": {"commit": {"sign": True}}})
        config.apply_env_overrides({"GIT_SIGN_COMMITS": value})
        assert config.git.commit.sign is False

    def test_unrecognized_value_ignored(self) -> None:
        config = GitwrightConfig.from_dict({"git": {"commit": {"sign": True}}})
        config.apply_env_overrides({"GIT_SIGN_COMMITS": "maybe"})
        assert config.git.commit.sign is True

    def test_load_applies_process_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GIT_SIGN_COMMITS", "true")
        assert GitwrightConfig.load(tmp_path / "absent.yaml").git.commit.sign is True
