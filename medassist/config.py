from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
if os.path.exists(".env"):
    load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Database (optional; patient and history routes answer 503 without it)
    DATABASE_URL: Optional[str] = None

    # Application
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # API
    API_V1_STR: str = "/api"
    PROJECT_NAME: str = "MedAssist Diagnosis API"
    CORS_ORIGINS: List[str] = ["*"]

    # LLM (any OpenAI-compatible endpoint, Gemini by default)
    LLM_API_KEY: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LLM_API_KEY", "GEMINI_API_KEY")
    )
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    LLM_MODEL: str = "gemini-2.0-flash"
    LLM_TEMPERATURE: float = 0.3
    LLM_TOP_P: float = 0.95
    LLM_MAX_TOKENS: int = 2048

    # Diagnosis
    DIAGNOSIS_HISTORY_LIMIT: int = 50

    def is_test_environment(self) -> bool:
        """Check if we're in the test environment."""
        return self.ENVIRONMENT.lower() == "test"

    def is_llm_configured(self) -> bool:
        """Check if the LLM API key is configured."""
        return bool(self.LLM_API_KEY)

    def is_database_configured(self) -> bool:
        """Check if a database URL is configured."""
        return bool(self.DATABASE_URL)


# Create a single instance of settings
settings = Settings()
