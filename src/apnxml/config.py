"""Runtime settings for document ingestion.

Values come from APNXML_* environment variables or an optional .env file;
loader functions default to the module-level ``settings`` instance.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__


class Settings(BaseSettings):
    """Runtime settings loaded from environment (APNXML_* variables)."""

    model_config = SettingsConfigDict(env_prefix="APNXML_", env_file=".env", extra="ignore")

    http_timeout: float = 30.0

    user_agent: str = f"apnxml/{__version__}"

    follow_redirects: bool = True


settings = Settings()
