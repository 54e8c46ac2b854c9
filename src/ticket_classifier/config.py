"""
Configuration settings for the ticket classification engine.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Ticket Classifier"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # === OpenRouter ===
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_APP_URL: str = "http://localhost"
    OPENROUTER_APP_TITLE: str = "AI Ticket Classifier"

    # === Model Roster & Fallback ===
    AI_DEFAULT_MODELS: list[str] = [
        "google/gemini-2.0-flash-exp:free",
        "qwen/qwen3-coder:free",
        "meta-llama/llama-3.2-3b-instruct:free",
    ]
    AI_MAX_RETRIES: int = 2  # Transport retries per model call (3 attempts total)
    AI_RETRY_BACKOFF_BASE: float = 1.0  # seconds, doubled per attempt
    AI_TIMEOUT_PER_MODEL: float = 10.0  # seconds
    AI_TOTAL_TIMEOUT: float = 30.0  # seconds for one record's roster walk
    AI_USE_DISCOVERY_ON_FAILURE: bool = True

    # === LLM Generation Parameters ===
    LLM_TEMPERATURE: float = 0.1
    LLM_MAX_TOKENS: int = 1000

    # === Auto-Discovery ===
    AI_AUTO_DISCOVERY: bool = True
    AI_DISCOVERY_CACHE_TTL: int = 21600  # 6 hours
    AI_DISCOVERY_MAX_MODELS: int = 10
    AI_DISCOVERY_MIN_RANKING: int = 50
    AI_DISCOVERY_CACHE_KEY: str = "ai_models_discovered_free"

    # === Concurrency & Rate Limiting ===
    AI_CONCURRENT_REQUESTS: int = 4
    AI_RPM_LIMIT: int = 20
    AI_DELAY_BETWEEN_WAVES_MS: int = 0
    AI_MAX_THROTTLE_DELAY_MS: int = 5000
    AI_BATCH_TIMEOUT: Optional[float] = None  # seconds, None = no deadline

    # === Prompt ===
    AI_PROMPT_VERSION: str = "optimized"  # "optimized" | "verbose"
    PROMPT_MAX_FIELD_LENGTH: int = 10000

    # === Cache ===
    CACHE_BACKEND: str = "memory"  # "memory" | "redis"
    CACHE_TTL_SECONDS: int = 1800  # 30 minutes
    REDIS_URL: str = "redis://redis:6379/0"
    REDIS_MAX_CONNECTIONS: int = 50

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
