"""
Application settings loaded from environment variables.

This module uses Pydantic Settings to manage configuration from:
1. Environment variables
2. .env file
3. Default values
"""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with type validation.

    All settings can be overridden via environment variables or .env file.
    For example, to change the chat model, set OLLAMA_MODEL=llama3.1
    """

    # Ollama runtime
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    ollama_embedding_model: str = "nomic-embed-text"
    ollama_vision_model: str = "llava"
    ollama_temperature: float = 0.0
    pull_models: bool = True

    # Data paths
    data_dir: Path = Path("data")
    faq_path: Path = Path("data/faq.json")

    # FAQ vector store
    faq_collection: str = "faq"
    embedding_dimensions: int = 768
    seed_workers: int = 4

    # FAQ matching: question pass, then response pass
    faq_question_threshold: float = 0.3
    faq_question_top_k: int = 3
    faq_response_threshold: float = 0.5
    faq_response_top_k: int = 5

    # Image tool
    image_fetch_timeout: float = 30.0

    # Agent configuration
    max_iterations: int = 3
    save_transcripts: bool = True

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: The application settings
    """
    return Settings()
