"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed application configuration using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- `extra="ignore"`: unknown env vars are ignored (not an error).
- `OPENAI_API_KEY` is optional at import time. The intake pipeline checks it
  on every request so that a missing key surfaces as a request error instead
  of an import failure.

Usage
-----
from legal_intake.database.config.config import settings

# Example
db_host = settings.DB_HOST
openai_model = settings.OPEN_AI_MODEL

Security
--------
- Never commit secrets or the `.env` file to source control.
- The database credentials are service-role credentials: the service writes
  conversations, messages and draft cases on behalf of anonymous visitors.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM provider
    OPENAI_API_KEY: Optional[str] = Field(None, description="OpenAI API key used for chat completions.")
    OPEN_AI_MODEL: str = Field("gpt-4o-mini", description="OpenAI chat model name.")
    CHAT_MAX_TOKENS: int = Field(300, description="max_tokens for the intake / Q&A reply.")
    CHAT_TEMPERATURE: float = Field(0.9, description="Sampling temperature for the intake / Q&A reply.")
    SUMMARY_MAX_TOKENS: int = Field(500, description="max_tokens for summary generation calls.")
    SUMMARY_TEMPERATURE: float = Field(0.3, description="Sampling temperature for summary generation calls.")

    # Database (service role)
    DATABASE_URL: Optional[str] = Field(None, description="Full SQLAlchemy URL; overrides the DB_* parts when set.")
    DB_DRIVER_NAME: str = Field("postgresql+psycopg2", description="Database driver (e.g., `postgresql+psycopg2`).")
    DB_USERNAME: str = Field("postgres", description="Database username credential.")
    DB_PASSWORD: str = Field("postgres", description="Database password credential.")
    DB_HOST: str = Field("localhost", description="Hostname or IP address of the database server.")
    DB_PORT: Optional[int] = Field(None, description="Database port.")
    DB_DATABASE_NAME: str = Field("postgres", description="Name of the application's database.")

    # HTTP
    FRONTEND_URL: str = Field("*", description="Allowed CORS origin.")

    # Intake policy
    SERVED_JURISDICTION: str = Field("egypt", description="Jurisdiction recorded on new draft cases.")
    ENFORCE_JURISDICTION: bool = Field(True, description="Decline extractions whose location is outside the served jurisdiction.")

    LOG_LEVEL: str = Field("INFO", description="Root logging level.")


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the environment / .env file"""
