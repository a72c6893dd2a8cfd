"""gitwright configuration management using Pydantic."""

import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from gitwright.constants import CONFIG_FILE, LOGS_DIR, SIGN_COMMITS_ENV
from gitwright.exceptions import ConfigurationError
from gitwright.git.config import GitConfig

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="info", pattern="^(debug|info|warn|error)$")
    directory: str = LOGS_DIR
    max_log_size_mb: int = Field(default=10, ge=1, le=1000)
    structured_output: bool = False


class GitwrightConfig(BaseModel):
    """Complete gitwright configuration."""

    git: GitConfig = Field(default_factory=GitConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "GitwrightConfig":
        """Load configuration from YAML file, then apply environment overrides.

        Args:
            config_path: Path to config file. Defaults to .gitwright/config.yaml

        Returns:
            GitwrightConfig instance

        Raises:
            ConfigurationError: If the file is not valid YAML or fails validation
        """
        config_path = Path(CONFIG_FILE) if config_path is None else Path(config_path)

        data: dict[str, Any] = {}
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Invalid YAML in {config_path}", details={"error": str(e)}
                ) from e
            if not isinstance(data, dict):
                raise ConfigurationError(f"Config root must be a mapping: {config_path}")

        config = cls.from_dict(data)
        config.apply_env_overrides()
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GitwrightConfig":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            GitwrightConfig instance
        """
        try:
            return cls(**data)
        except PydanticValidationError as e:
            raise ConfigurationError("Invalid gitwright configuration", details={"errors": e.errors()}) from e

    def apply_env_overrides(self, environ: dict[str, str] | None = None) -> None:
        """Apply environment variable overrides.

        GIT_SIGN_COMMITS sets the default signing policy for commits.
        Unrecognized values are ignored.
        """
        environ = dict(os.environ) if environ is None else environ
        raw = environ.get(SIGN_COMMITS_ENV)
        if raw is None:
            return
        value = raw.strip().lower()
        if value in _TRUTHY:
            self.git.commit.sign = True
        elif value in _FALSY:
            self.git.commit.sign = False

    def save(self, config_path: str | Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Defaults to .gitwright/config.yaml
        """
        config_path = Path(CONFIG_FILE) if config_path is None else Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration as dictionary
        """
        return self.model_dump()
