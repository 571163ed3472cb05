"""Configuration using pydantic-settings.

Values come from ``DOCGEN_*`` environment variables or a ``.env`` file.
The access token is only needed to talk to Google; compiling offline works
with an empty configuration.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gdocgen.theme import CONTENT_WIDTH_PT, FONT_FAMILY, PAGE_MARGIN_PT


class Settings(BaseSettings):
    """Generator settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DOCGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google API
    access_token: str = ""
    timeout: float = 60.0

    # Identity text used by templates
    organization: str = ""
    author: str = ""
    date_format: str = "%B %d, %Y"

    # Layout
    font_family: str = FONT_FAMILY
    page_margin_pt: float = PAGE_MARGIN_PT
    content_width_pt: float = CONTENT_WIDTH_PT

    @field_validator("timeout", "content_width_pt")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("page_margin_pt")
    @classmethod
    def validate_margin(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must not be negative")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
