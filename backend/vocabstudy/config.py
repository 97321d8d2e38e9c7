"""
Configuration settings for the vocabulary study service.
All environment variables and app settings are centralized here.
"""
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Vocabulary Study Service"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # API Settings
    API_V1_PREFIX: str = "/api/v1"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173"
    ]

    # Azure OpenAI (generative lookup and grading)
    AZURE_OPENAI_API_KEY: Optional[str] = None
    AZURE_OPENAI_ENDPOINT: Optional[str] = None
    AZURE_OPENAI_DEPLOYMENT_NAME: str = "gpt-4o-mini"
    AZURE_OPENAI_API_VERSION: str = "2024-02-15-preview"
    AZURE_OPENAI_MAX_TOKENS: int = 800
    AZURE_OPENAI_TEMPERATURE: float = 0.3

    # Azure Cosmos DB
    COSMOS_DB_ENDPOINT: Optional[str] = None
    COSMOS_DB_KEY: Optional[str] = None
    COSMOS_DB_DATABASE_NAME: str = "vocabstudy_db"
    # Container names
    COSMOS_DB_REVIEW_STATES_CONTAINER: str = "review_states"
    COSMOS_DB_ATTEMPTS_CONTAINER: str = "attempts"
    COSMOS_DB_DAILY_STATS_CONTAINER: str = "daily_stats"
    COSMOS_DB_DEFINITIONS_CONTAINER: str = "definitions"

    # Review scheduler
    SR_MAX_INTERVAL_DAYS: int = 21
    SR_ALMOST_FACTOR: float = 0.5
    SR_DEFAULT_DUE_LIMIT: int = 20

    # Definition resolver
    DICTIONARY_CACHE_TTL_DAYS: int = 7
    DICTIONARY_MEMORY_CACHE_MAX_ENTRIES: int = 2048
    # Tried in this order, cheapest first
    DICTIONARY_PROVIDERS: list[str] = [
        "free_dictionary",
        "wiktionary",
        "llm"
    ]
    DICTIONARY_PROVIDER_TIMEOUT_SECONDS: float = 10.0
    DICTIONARY_PROVIDER_BACKOFF_SECONDS: float = 0.25
    DICTIONARY_HTTP_USER_AGENT: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    EXA_API_KEY: Optional[str] = None

    # Grading
    GRADER_TEMPERATURE: float = 0.3
    GRADER_VERBOSE: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Singleton instance
settings = get_settings()
