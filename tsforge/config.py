"""Configuration management for tsforge."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional, List, Dict


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.tsforge/.env
    3. Package directory (where this file is located)
    """
    # Current directory
    if os.path.exists(".env"):
        return ".env"

    # User config directory
    user_env = Path.home() / ".tsforge" / ".env"
    if user_env.exists():
        return str(user_env)

    # Package directory
    package_dir = Path(__file__).parent.parent
    package_env = package_dir / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from TSFORGE_* environment variables."""

    # Backend API
    base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the database REST API"
    )
    schemas: Optional[List[str]] = Field(
        default=None,
        description="Schemas to load (default: every schema the backend reports)"
    )
    default_headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent with every request"
    )

    # Request behaviour
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )
    max_retries: int = Field(
        default=3,
        description="Maximum number of attempts for transient failures"
    )
    retry_backoff: float = Field(
        default=1.0,
        description="Initial backoff in seconds, doubled after each failed attempt"
    )

    # Code generation
    output_dir: str = Field(
        default="src/gen",
        description="Directory generated TypeScript files are written to"
    )

    class Config:
        env_prefix = "TSFORGE_"
        env_file = _find_env_file()
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
