"""Application settings loaded from environment variables via pydantic-settings.

Values are read from (highest priority first):

  1. Environment variables, e.g. ``MATRIX_SOURCE=https://example.org/m.csv``
  2. A ``.env`` file in the working directory
  3. The defaults below

Field ``matrix_source`` maps to env var ``MATRIX_SOURCE`` and so on;
pydantic-settings matches case-insensitively.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """refgraph application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Data sources ===
    # Local path or http(s) URL.  URLs are fetched with httpx.
    matrix_source: str = "data/test_matrix.csv"
    authors_source: str = "data/authors.csv"

    # === Interaction defaults ===
    default_threshold: int = Field(default=20, ge=0)
    max_threshold: int = Field(default=40, ge=0)
    initial_active_count: int = Field(default=10, ge=0)

    # === Birth-year policy ===
    # Estimated birth year = death year - offset when no birth year is recorded.
    death_year_offset: int = 50

    # === Chart layout ===
    min_node_radius: float = Field(default=4.0, gt=0)
    max_node_radius: float = Field(default=20.0, gt=0)

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if self.default_threshold > self.max_threshold:
            raise ValueError(
                f"default_threshold ({self.default_threshold}) exceeds "
                f"max_threshold ({self.max_threshold})"
            )
        if self.min_node_radius > self.max_node_radius:
            raise ValueError("min_node_radius must not exceed max_node_radius")
        return self
