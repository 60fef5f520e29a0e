"""Application configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Anthropic
    anthropic_api_key: str = ""

    # LLM
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 1024

    # Redis (only used when history_backend == "redis")
    redis_url: str = "redis://localhost:6379/0"

    # History
    history_backend: str = "file"  # file | redis | memory
    history_file: str = "data/history.json"
    history_key: str = "phoneAnalysisHistory"
    max_history_items: int = Field(20, ge=1)

    # Model-number lookup heuristics
    lookup_max_length: int = 100
    lookup_suspect_phrases: list[str] = [
        "nemohu",
        "chyba",
        "omlouvám",
        "bohužel",
        "sorry",
        "cannot",
        "unable",
    ]
    lookup_temperature: float = 0.2

    # App
    log_level: str = "INFO"
    environment: str = "development"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
