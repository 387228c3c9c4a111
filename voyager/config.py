"""
Configuration management for the trip planner.
Supports multiple lookup providers: OpenAI, Mistral, OpenRouter, Ollama, or an offline mock.
"""
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = True

    # Persistence
    storage_path: str = "voyager_plan.json"

    # Shopping list
    default_local_currency: str = "JPY"

    # Lookup (LLM) Configuration
    llm_provider: Literal["openai", "mistral", "openrouter", "ollama", "mock"] = "mock"
    llm_api_key: str = "ollama"  # Not needed for Ollama or mock
    llm_base_url: str = ""
    llm_model: str = "gpt-4o-mini"

    # LLM Parameters
    llm_temperature: float = 0.2
    llm_max_tokens: int = 300

    # Lookup behaviour
    lookup_timeout_seconds: float = 20.0
    osm_fallback: bool = True
    user_agent: str = "VoyagerTripPlanner/1.0"

    class Config:
        env_prefix = "VOYAGER_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()


def get_llm_config(config: Settings = settings) -> dict:
    """Get LLM configuration based on provider."""
    llm_config = {
        "api_key": config.llm_api_key,
        "model": config.llm_model,
        "temperature": config.llm_temperature,
        "max_tokens": config.llm_max_tokens,
        "timeout": config.lookup_timeout_seconds,
    }

    # Set base URL based on provider
    if config.llm_provider == "ollama":
        llm_config["base_url"] = config.llm_base_url or "http://localhost:11434/v1"
    elif config.llm_provider == "mistral":
        llm_config["base_url"] = config.llm_base_url or "https://api.mistral.ai/v1"
    elif config.llm_provider == "openrouter":
        llm_config["base_url"] = config.llm_base_url or "https://openrouter.ai/api/v1"
    else:  # openai
        llm_config["base_url"] = config.llm_base_url or "https://api.openai.com/v1"

    return llm_config
