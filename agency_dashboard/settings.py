"""Environment settings and the bundled dashboard configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigLoadError

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "dashboard.yaml"


class Settings(BaseSettings):
    # Unknown env vars are ignored so a shared .env can carry other services' keys.
    model_config = SettingsConfigDict(
        env_prefix="AGENCY_DASHBOARD_",
        env_file=".env",
        extra="ignore",
    )

    API_BASE_URL: str = "http://localhost:3377"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Client-local persisted session (token + agency id)
    SESSION_PATH: Path = Field(
        default_factory=lambda: Path.home() / ".agency_dashboard" / "session.json"
    )

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    CONFIG_PATH: Path = DEFAULT_CONFIG_PATH


@lru_cache
def get_settings() -> Settings:
    return Settings()


class RouteConfig(BaseModel):
    """Page paths the access gate redirects between."""

    login: str = "/auth/login"
    auth_prefix: str = "/auth"
    onboarding: str = "/agency/onboarding"
    pending_approval: str = "/agency/pending-approval"
    dashboard: str = "/agency/dashboard"
    analytics: str = "/agency/analytics"


class DisplayConfig(BaseModel):
    """Currency and number presentation."""

    currency_symbol: str = "₹"
    number_locale: Literal["en_IN", "en_US"] = "en_IN"
    listing_id_length: int = Field(default=8, gt=0)


class DashboardConfig(BaseModel):
    """Validated contents of dashboard.yaml."""

    routes: RouteConfig = Field(default_factory=RouteConfig)
    range_presets: dict[str, int] = Field(
        default_factory=lambda: {"7days": 7, "30days": 30, "90days": 90}
    )
    default_range: str = "30days"
    approval_poll_interval_seconds: float = Field(default=15, gt=0)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    @model_validator(mode="after")
    def _check_presets(self):
        for kind, days in self.range_presets.items():
            if days < 0:
                raise ValueError(f"range preset {kind!r} must be >= 0 days, got {days}")
        if self.default_range not in {"today", "custom", *self.range_presets}:
            raise ValueError(f"default_range {self.default_range!r} is not a known range")
        return self


def load_dashboard_config(path: Path | None = None) -> DashboardConfig:
    """Load and validate dashboard configuration from YAML.

    Args:
        path: YAML file to read. Defaults to the bundled dashboard.yaml.

    Raises:
        ConfigLoadError: If the file cannot be read or fails validation.
    """
    path = path or DEFAULT_CONFIG_PATH
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Failed to load config from {path}: {e}") from e

    try:
        return DashboardConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid config in {path}: {e}") from e
