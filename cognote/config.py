"""Application configuration using Pydantic Settings."""

import logging
import warnings

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    app_name: str = "Cognote"
    debug: bool = True
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./cognote.db"

    # Embeddings (local sentence-transformers model)
    embedding_model: str = "all-MiniLM-L6-v2"
    embedding_dimension: int = 384
    embedding_device: str | None = None

    # Completion provider (any OpenAI-compatible API)
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_api_key: str | None = None
    llm_model: str = "llama-3.1-8b-instant"
    llm_max_tokens: int = 700
    llm_temperature: float = 0.5
    llm_timeout: float = 60.0

    # Search
    search_default_limit: int = 10
    search_default_threshold: float = 0.7

    # Assistant
    assistant_candidate_limit: int = 15
    assistant_source_limit: int = 5
    assistant_similarity_threshold: float = 0.4
    context_excerpt_chars: int = 300
    context_history_turns: int = 6
    review_window_days: int = 7

    # CORS
    cors_origins: list[str] = ["*"]

    def __init__(self, **kwargs):
        """Initialize settings and validate production configuration."""
        super().__init__(**kwargs)
        self._validate_production_settings()

    def _validate_production_settings(self) -> None:
        """Validate and warn about insecure production settings."""
        if not self.debug:
            if not self.llm_api_key:
                warnings.warn(
                    "LLM_API_KEY is not set. Chat answers will fall back to an apology.",
                    UserWarning,
                    stacklevel=2,
                )
                logger.warning(
                    "LLM_API_KEY is not set. Chat answers will fall back to an apology."
                )

            if "*" in self.cors_origins:
                warnings.warn(
                    "CORS is configured to allow all origins (*). Restrict this in production!",
                    UserWarning,
                    stacklevel=2,
                )
                logger.warning(
                    "CORS is configured to allow all origins (*). Restrict this in production!"
                )


settings = Settings()
