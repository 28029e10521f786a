"""Configuration for koshi.

Two layers:
- Settings: process level settings loaded from environment variables / .env
- KoshiConfig: the user's JSON config file with per-project settings,
  exposed to the sync engine through FileConfigStore
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from koshi.exceptions import ConfigurationError
from koshi.logging import get_logger
from koshi.sync.sets import validate_logins

logger = get_logger(__name__)

HOME_PLACEHOLDER = "$HOME"
DEFAULT_CONFIG_PATH = f"{HOME_PLACEHOLDER}/.config/koshi/config.json"


def expand_home(path: str, home: Path | None = None) -> Path:
    """Replace the $HOME placeholder with the user's home directory."""
    home = home if home is not None else Path.home()
    return Path(path.replace(HOME_PLACEHOLDER, str(home), 1))


def normalize_project_path(path: Path | str, home: Path | None = None) -> str:
    """Replace a leading home directory with the $HOME placeholder.

    Project settings are keyed by this form so the same config file works on
    machines with different home paths.

    Examples:
        >>> normalize_project_path("/home/ann/src/app", home=Path("/home/ann"))
        '$HOME/src/app'
        >>> normalize_project_path("/srv/app", home=Path("/home/ann"))
        '/srv/app'
    """
    home_str = str(home if home is not None else Path.home())
    path_str = str(path)
    if path_str == home_str or path_str.startswith(home_str + "/"):
        return HOME_PLACEHOLDER + path_str[len(home_str) :]
    return path_str


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )

    # --------------------------------------------------------------------------
    # External tools
    # --------------------------------------------------------------------------
    jj_executable: str = Field(default="jj", description="Jujutsu executable")
    aichat_executable: str = Field(default="aichat", description="aichat executable")
    remote: str = Field(default="origin", description="Git remote that hosts the PRs")

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    config_path: str = Field(
        default=DEFAULT_CONFIG_PATH,
        description="Path to the koshi JSON config file ($HOME is expanded)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class ProjectSettings(BaseModel):
    """Settings for a single project directory."""

    reviewers: list[str] = Field(
        default_factory=list,
        description="GitHub logins offered when picking PR reviewers",
    )
    ai_description_role: str | None = Field(
        default=None,
        description="aichat role used to write descriptions for this project",
    )

    @field_validator("reviewers")
    @classmethod
    def _reviewers_are_logins(cls, value: list[str]) -> list[str]:
        validate_logins(value)
        return value


class KoshiConfig(BaseModel):
    """Contents of the koshi JSON config file.

    Example:
        {
          "ai_description_role": "commit",
          "project_settings": {
            "$HOME/src/app": {"reviewers": ["alice", "bob"]}
          }
        }
    """

    ai_description_role: str | None = None
    project_settings: dict[str, ProjectSettings] = Field(default_factory=dict)

    def project(self, project_path: str) -> ProjectSettings | None:
        """Get settings for an already normalized project path."""
        return self.project_settings.get(project_path)


def load_config(path: Path) -> KoshiConfig:
    """Read and validate the JSON config file.

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    if not path.is_file():
        raise ConfigurationError(f"Config file '{path}' is not found")
    try:
        return KoshiConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(f"Config file '{path}' is invalid: {e}") from e


class FileConfigStore:
    """ConfigStore backed by the JSON config file.

    The file is read lazily on first lookup and cached for the rest of the
    invocation.
    """

    def __init__(self, path: Path | str | None = None, home: Path | None = None) -> None:
        self._home = home if home is not None else Path.home()
        raw = str(path) if path is not None else get_settings().config_path
        self._path = expand_home(raw, self._home)
        self._config: KoshiConfig | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def config(self) -> KoshiConfig:
        if self._config is None:
            self._config = load_config(self._path)
            logger.debug("Loaded config from {path}", path=str(self._path))
        return self._config

    def _project(self, project_path: Path | str) -> ProjectSettings | None:
        return self.config.project(normalize_project_path(project_path, self._home))

    def reviewers_for(self, project_path: Path | str) -> frozenset[str]:
        project = self._project(project_path)
        if project is None:
            return frozenset()
        return frozenset(project.reviewers)

    def role_for(self, project_path: Path | str) -> str | None:
        """Project specific role, falling back to the top-level role."""
        project = self._project(project_path)
        if project is not None and project.ai_description_role:
            return project.ai_description_role
        return self.config.ai_description_role or None
