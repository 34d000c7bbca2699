"""
Pydantic settings for the persona chat backend.
Centralizes all environment variable configuration with validation.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Django
    django_secret_key: str = Field(
        default="django-insecure-dev-key-change-in-production",
        description="Django secret key",
    )
    django_debug: bool = Field(default=True, description="Debug mode")
    django_allowed_hosts: str = Field(
        default="localhost,127.0.0.1",
        description="Comma-separated allowed hosts",
    )

    # Gemini (Google AI)
    google_api_key: Optional[str] = Field(default=None, description="Google API key for Gemini")
    chat_model: str = Field(default="gemini-2.0-flash", description="Chat model name")
    embedding_model: str = Field(
        default="models/text-embedding-004",
        description="Embedding model name",
    )
    decision_temperature: float = Field(default=0.4, description="Temperature for the decision stage")
    response_temperature: float = Field(default=0.2, description="Temperature for the persona reply")

    # Indexing
    index_batch_size: int = Field(default=10, ge=1, description="Documents per embedding batch")
    index_concurrency: int = Field(default=1, ge=1, description="Batches in flight per session")
    index_batch_delay: float = Field(default=2.0, ge=0, description="Pause after each batch (seconds)")
    index_max_attempts: int = Field(default=7, ge=1, description="Attempts per batch")
    index_retry_base_delay: float = Field(default=5.0, ge=0, description="First retry wait (seconds)")
    index_retry_factor: float = Field(default=2.0, ge=1, description="Backoff multiplier")

    # Conversation
    history_window: int = Field(default=30, ge=1, description="Messages passed to the model")
    retrieval_k: int = Field(default=30, ge=1, description="Matches fetched from chat history")

    # Sessions
    orphan_session_timeout: float = Field(
        default=900.0,
        description="Seconds before a never-joined session is evicted",
    )
    max_upload_mb: int = Field(default=50, description="Maximum upload body size in MB")

    # CORS
    cors_allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Comma-separated CORS allowed origins",
    )

    @property
    def allowed_hosts_list(self) -> List[str]:
        """Parse allowed hosts into a list."""
        return [h.strip() for h in self.django_allowed_hosts.split(",") if h.strip()]

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS allowed origins into a list."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
