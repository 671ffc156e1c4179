"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import FormatError
from .domain.time_format import to_minutes


class DefaultsConfig(BaseModel):
    """Default settings for slot generation."""
    duration_minutes: int = 30
    start_time: str = "09:00"
    end_time: str = "17:00"

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Validate times are HH:MM."""
        try:
            to_minutes(value)
        except FormatError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @model_validator(mode="after")
    def validate_window_order(self) -> "DefaultsConfig":
        """Ensure the default window opens before it closes."""
        if to_minutes(self.end_time) <= to_minutes(self.start_time):
            raise ValueError("end_time must be later than start_time")
        return self

    def get_start_minute(self) -> int:
        return to_minutes(self.start_time)

    def get_end_minute(self) -> int:
        return to_minutes(self.end_time)


class StoreConfig(BaseModel):
    """Where availability is persisted."""
    backend: Literal["file", "http"] = "file"
    path: Path = Path("availability.json")
    base_url: Optional[str] = None
    api_token: Optional[str] = None
    timeout_seconds: float = 30

    @model_validator(mode="after")
    def validate_backend_settings(self) -> "StoreConfig":
        """The HTTP backend needs a base URL."""
        if self.backend == "http" and not self.base_url:
            raise ValueError("store.base_url is required when store.backend is 'http'")
        return self


class Provider(BaseModel):
    """Provider (doctor) configuration."""
    name: str  # Used as alias
    provider_id: str


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    providers: List[Provider] = Field(default_factory=list)

    @field_validator("providers")
    @classmethod
    def validate_providers(cls, value: List[Provider]) -> List[Provider]:
        """Ensure provider aliases and ids are unique."""
        seen_names: set[str] = set()
        seen_ids: set[str] = set()
        for provider in value:
            name_key = provider.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate provider name detected: {provider.name}")
            if provider.provider_id in seen_ids:
                raise ValueError(f"Duplicate provider id detected: {provider.provider_id}")
            seen_names.add(name_key)
            seen_ids.add(provider.provider_id)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative store paths are relative to the config file
        if not config.store.path.is_absolute():
            config.store.path = config_path.parent / config.store.path

        return config

    def find_provider_by_name(self, name: str) -> Provider | None:
        """Find a provider by their name (alias)."""
        for provider in self.providers:
            if provider.name.lower() == name.lower():
                return provider
        return None

    def resolve_provider(self, identifier: str) -> str:
        """
        Resolve a provider alias or id to a provider id.

        Unknown identifiers are passed through as raw ids so providers do not
        have to be configured to be edited.
        """
        provider = self.find_provider_by_name(identifier)
        if provider:
            return provider.provider_id
        return identifier.strip()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
