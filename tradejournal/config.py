"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'journal.db'}"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    # Gemini
    gemini_api_key: str = ""
    critique_model: str = "gemini-3-pro-preview"
    fast_model: str = "gemini-3-flash-preview"  # patterns + market search
    critique_thinking_budget: int = 8000

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}


settings = Settings()
