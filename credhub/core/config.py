"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "credential_hub"

    # Hugging Face (chat router is OpenAI-compatible)
    hf_api_key: str = ""
    hf_chat_base_url: str = "https://router.huggingface.co/v1"
    hf_inference_url: str = "https://api-inference.huggingface.co/models"
    ai_timeout_seconds: float = 30.0

    # Models per task
    skill_extraction_model: str = "mistralai/Mistral-7B-Instruct-v0.2"
    nsqf_prediction_model: str = "google/flan-t5-large"
    text_generation_model: str = "mistralai/Mistral-7B-Instruct-v0.2"
    classification_model: str = "facebook/bart-large-mnli"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_refresh_secret_key: str = "change-this-refresh-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60
    jwt_refresh_expire_days: int = 7

    # File storage (local disk, served under /uploads)
    upload_dir: str = "uploads"
    uploads_base_url: str = "/uploads"
    max_file_size_mb: int = 5

    # Portfolio
    frontend_url: str = "http://localhost:3000"
    portfolio_view_history_limit: int = 1000

    # App
    cors_origins: str = "*"
    log_level: str = "INFO"
    debug: bool = False

    @property
    def cors_origin_list(self) -> list[str]:
        """Comma-separated CORS origins as a list"""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
