"""Configuration management for Calendar Mirror application."""

from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.source import SourceConfig
from .utils.exceptions import ConfigurationError

load_dotenv()


class AppConfig(BaseSettings):
    """Application configuration."""

    # Google auth
    google_client_secrets_file: Path = Field(
        default=Path("credentials.json"), validation_alias="GOOGLE_CLIENT_SECRETS_FILE"
    )
    google_token_file: Path = Field(
        default=Path(".google_token.json"), validation_alias="GOOGLE_TOKEN_FILE"
    )
    google_service_account_file: Optional[Path] = Field(
        default=None, validation_alias="GOOGLE_SERVICE_ACCOUNT_FILE"
    )
    google_delegated_user: Optional[str] = Field(
        default=None, validation_alias="GOOGLE_DELEGATED_USER"
    )

    # State and per-source settings
    cursor_store_path: Path = Field(
        default=Path(".sync_cursors.json"), validation_alias="CURSOR_STORE_PATH"
    )
    mirror_config_path: Path = Field(
        default=Path("mirror_config.yaml"), validation_alias="MIRROR_CONFIG_PATH"
    )

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[Path] = Field(default=None, validation_alias="LOG_FILE")

    use_native_truststore: bool = Field(
        default=True, validation_alias="USE_NATIVE_TRUSTSTORE"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_parse_none_str="",  # Treat empty string as None
    )


class MirrorConfig(BaseModel):
    """Mirroring settings loaded once per run from YAML. Immutable."""

    primary_calendar_id: str = "primary"
    lookback_days: int = Field(default=30, ge=0)
    page_size: int = Field(default=100, gt=0, le=2500)
    timezone: Optional[str] = None
    sources: dict[str, SourceConfig] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MirrorConfig":
        """
        Build a config from parsed YAML.

        Args:
            data: Mapping with optional ``primary_calendar``, ``lookback_days``,
                ``page_size``, ``timezone`` and a ``sources`` mapping of
                calendar id to source settings

        Returns:
            Validated MirrorConfig

        Raises:
            ConfigurationError: If the data does not validate
        """
        sources = {}
        try:
            for calendar_id, settings in (data.get("sources") or {}).items():
                settings = dict(settings or {})
                settings["calendar_id"] = calendar_id
                sources[calendar_id] = SourceConfig.model_validate(settings)

            return cls(
                primary_calendar_id=data.get("primary_calendar", "primary"),
                lookback_days=data.get("lookback_days", 30),
                page_size=data.get("page_size", 100),
                timezone=data.get("timezone"),
                sources=sources,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid mirror configuration: {e}") from e

    @classmethod
    def load(cls, config_path: Path = Path("mirror_config.yaml")) -> "MirrorConfig":
        """Load the mirror configuration from a YAML file."""
        if not config_path.exists():
            raise ConfigurationError(f"Mirror configuration not found: {config_path}")

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping")
        return cls.from_dict(data)

    @property
    def calendar_ids(self) -> list[str]:
        return list(self.sources)

    def source_config(self, calendar_id: str) -> SourceConfig:
        """Look up the settings for one source calendar."""
        try:
            return self.sources[calendar_id]
        except KeyError:
            raise ConfigurationError(
                f"Calendar {calendar_id} is not a configured source"
            ) from None
