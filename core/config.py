from pathlib import Path
from typing import Literal, Optional, Tuple
from pydantic_settings import BaseSettings
from pydantic import ConfigDict, ValidationError, field_validator
from core.errors import FeedsConfigError

PROJECT_ROOT = Path(__file__).resolve().parent.parent

SUPPORTED_LOCALES = ("fr", "de")


class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", env_file_encoding='utf-8', extra='ignore')

    # Core
    CMS_BASE_URL: str = "https://cms.tchoukball.ch"
    WEBSITE_BASE_URL: str = "https://tchoukball.ch"
    USER_AGENT: str = "TchoukballFeeds/1.0 (info@tchoukball.ch)"
    CMS_TOKEN: Optional[str] = None
    HTTP_TIMEOUT: float = 30.0

    # Output
    OUTPUT_DIR: Path = PROJECT_ROOT / "public"
    LOCALES: str = ",".join(SUPPORTED_LOCALES)
    TIMEZONE: str = "Europe/Zurich"

    # Queries
    EVENTS_LOOKBACK_YEARS: int = 10
    EVENTS_LIMIT: int = 10000
    NEWS_LIMIT: int = 25

    # Translations
    TRANSLATION_FALLBACK: Literal["first", "default_locale", "skip"] = "first"
    DEFAULT_LOCALE: str = "fr"

    LOG_LEVEL: str = "INFO"

    @field_validator("CMS_BASE_URL", "WEBSITE_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """URLs are joined with '/<path>', so a trailing slash would double it."""
        return v.rstrip("/")

    @field_validator("LOCALES")
    @classmethod
    def check_locales(cls, v: str) -> str:
        """
        LOCALES comes in as "fr,de". Every entry must have labels in engine.locales.
        """
        parts = [part.strip() for part in v.split(",") if part.strip()]
        if not parts:
            raise ValueError("LOCALES must name at least one locale")
        for locale in parts:
            if locale not in SUPPORTED_LOCALES:
                raise ValueError(f"Unsupported locale '{locale}', expected one of {SUPPORTED_LOCALES}")
        return ",".join(parts)

    @field_validator("DEFAULT_LOCALE")
    @classmethod
    def check_default_locale(cls, v: str) -> str:
        if v not in SUPPORTED_LOCALES:
            raise ValueError(f"Unsupported default locale '{v}'")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def locales(self) -> Tuple[str, ...]:
        return tuple(self.LOCALES.split(","))


def load_settings(**overrides) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise FeedsConfigError(f"Invalid configuration: {e}") from e


config = load_settings()
