"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Bankr API"
    app_version: str = "3.0.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        """Normalize environment value, mapping short aliases to standard ones."""
        if isinstance(v, str):
            v = v.strip().strip('"').strip("'").lower()
            if v in ("prod", "prd"):
                return "production"
            if v in ("dev", "local", "debug"):
                return "development"
            if v in ("stage", "stg"):
                return "staging"
        return v

    @field_validator("debug", mode="before")
    @classmethod
    def normalize_debug(cls, v) -> bool:
        """Normalize debug value, handling quoted strings."""
        if isinstance(v, str):
            v = v.strip().strip('"').strip("'").lower()
            return v in ("true", "1", "yes", "on")
        return bool(v)

    @field_validator("api_prefix", mode="before")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """Strip quotes and any trailing slash from the API prefix."""
        if isinstance(v, str):
            return v.strip().strip('"').strip("'").rstrip("/")
        return v

    # Server
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    api_prefix: str = "/api"
    allowed_origins: str = Field(default="http://localhost:3000,http://localhost:8080")
    static_dir: Path = Field(default=Path("frontend/dist"))

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as list."""
        if self.allowed_origins == "*":
            return ["*"]
        return [o.strip() for o in self.allowed_origins.split(",")]

    # Search engine
    elasticsearch_url: str = Field(default="http://localhost:9200")
    elasticsearch_timeout: int = Field(default=10, ge=1)
    index_name: str = Field(default="banks")
    search_explain: bool = False
    enable_phonetic_profile: bool = False

    # Data sources
    data_path: Path = Field(default=Path("data.csv"), description="RBI branch CSV")
    banks_list_path: Path = Field(
        default=Path("banks.json"),
        description="Curated list of bank abbreviations",
    )

    # Indexing
    batch_size: int = Field(default=100, ge=1)
    re_index: bool = False

    # Querying
    page_size: int = Field(default=10, ge=1, le=100)
    min_query_length: int = Field(default=3, ge=1)

    # Reverse geocoding proxy
    geocode_api_uri: str = Field(
        default="https://maps.googleapis.com/maps/api/geocode/json"
    )
    geocode_api_key: str | None = Field(default=None)
    geocode_timeout: float = Field(default=5.0, gt=0)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
