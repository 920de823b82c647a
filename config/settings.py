"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: Optional[str] = None        # HMAC secret for auth tokens
    jwt_expiry_seconds: int = 86400         # 24 hours
    bcrypt_rounds: int = 10

    # ── Database ─────────────────────────────────────────────────────────
    database_url: Optional[str] = None      # e.g. postgresql+asyncpg://user:pw@host/db

    # ── AI proxy ─────────────────────────────────────────────────────────
    llm_provider: str = "openai"
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.2
    openai_api_key: str = ""
    anthropic_api_key: Optional[str] = None

    # ── Server ───────────────────────────────────────────────────────────
    environment: str = "production"         # "development" makes startup failures fatal
    port: int = 5000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = [
        "http://localhost:5173",
        "http://localhost:5174",
        "https://ai-code-t1sb.vercel.app",
    ]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def llm_api_key(self) -> str:
        """Return the API key for the configured AI provider ("" when unset)."""
        if self.llm_provider == "anthropic":
            return self.anthropic_api_key or ""
        return self.openai_api_key


config = Settings()
