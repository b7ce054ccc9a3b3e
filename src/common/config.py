"""
Configuration loader for the CTC estimator.

Loads all settings from environment variables (.env file).
Nothing here is required at import time: a missing Gemini key degrades to the
fallback estimate and a missing MongoDB URI disables persistence.
"""

import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """
    Centralized configuration for all estimator components.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== MongoDB (optional) =====
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    MONGO_DB_NAME: str = os.getenv("MONGO_DB_NAME", "ctc_estimator")
    MONGO_COLLECTION: str = os.getenv("MONGO_COLLECTION", "analyses")
    MONGO_TIMEOUT_MS: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

    # ===== Gemini =====
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    CTC_TEMPERATURE: float = float(os.getenv("CTC_TEMPERATURE", "0.7"))
    LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

    # ===== GitHub REST API =====
    GITHUB_API_BASE_URL: str = os.getenv("GITHUB_API_BASE_URL", "https://api.github.com")
    GITHUB_API_VERSION: str = "2022-11-28"
    # Unauthenticated by default (60 req/hour); a token only raises the limit
    GITHUB_TOKEN: str = os.getenv("GITHUB_TOKEN", "")
    GITHUB_TIMEOUT_SECONDS: float = float(os.getenv("GITHUB_TIMEOUT_SECONDS", "30"))
    GITHUB_REPOS_PER_PAGE: int = 100

    @classmethod
    def is_mongodb_configured(cls) -> bool:
        """MongoDB is optional; absence means analyses are not stored."""
        return bool(cls.MONGODB_URI)

    @classmethod
    def get_llm_api_key(cls) -> str:
        """Get the API key for the estimation model."""
        return cls.GEMINI_API_KEY

    @classmethod
    def get_github_token(cls) -> Optional[str]:
        """GitHub token or None for unauthenticated access."""
        return cls.GITHUB_TOKEN or None

    @classmethod
    def summary(cls) -> str:
        """Return a summary of the current configuration (safe for logging)."""
        return f"""
Configuration Summary:
  MongoDB: {'✓ Configured' if cls.MONGODB_URI else '✗ Disabled (analyses not stored)'}
  MongoDB target: {cls.MONGO_DB_NAME}.{cls.MONGO_COLLECTION}
  Gemini: {'✓ Configured' if cls.GEMINI_API_KEY else '✗ Missing (fallback estimates only)'}
  Gemini model: {cls.GEMINI_MODEL} (temperature={cls.CTC_TEMPERATURE})
  GitHub API: {cls.GITHUB_API_BASE_URL} ({'token' if cls.GITHUB_TOKEN else 'unauthenticated'})
  Timeouts: github={cls.GITHUB_TIMEOUT_SECONDS}s llm={cls.LLM_TIMEOUT_SECONDS}s mongo={cls.MONGO_TIMEOUT_MS}ms
        """.strip()
