"""Application settings and configuration management."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.options import SearchOptions


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = Field(default="Aimai Search")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    workers: int = Field(default=1)

    # Corpus: a JSON array of raw records or a pre-built index
    data_file: Optional[str] = Field(default=None)
    index_keys: List[str] = Field(default=[])
    eager_build: bool = Field(default=False)

    # Search Configuration
    fuzzy_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    max_results: Optional[int] = Field(default=None, ge=0)
    max_query_length: int = Field(default=100)
    include_score: bool = Field(default=True)
    use_kana_normalization: bool = Field(default=True)
    use_romaji_search: bool = Field(default=True)
    normalize_long_vowel: bool = Field(default=True)
    expand_iteration_mark: bool = Field(default=True)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080", "http://localhost:8000"]
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra environment variables
    )

    def search_options(self) -> SearchOptions:
        """Engine options derived from these settings."""
        return SearchOptions(
            threshold=self.fuzzy_threshold,
            limit=self.max_results,
            include_score=self.include_score,
            use_kana_normalization=self.use_kana_normalization,
            use_romaji_search=self.use_romaji_search,
            normalize_long_vowel=self.normalize_long_vowel,
            expand_iteration_mark=self.expand_iteration_mark,
            keys=tuple(self.index_keys),
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
