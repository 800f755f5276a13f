"""
Application Configuration
Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment variables (prefix CIMS_)."""

    # Scraper Configuration
    # More than 15 simultaneous requests slows the FEEC site down for everyone
    max_concurrent_requests: int = Field(default=15, ge=1)
    request_timeout: float = 30.0
    user_agent: Optional[str] = None

    # Endpoint overrides (None = use the site defaults from config.py)
    api_url: Optional[str] = None
    bootstrap_url: Optional[str] = None

    # Output Configuration
    output_file: str = "muntanyesRepte100CimsFEEC.json"

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[Path] = None

    @property
    def output_path(self) -> Path:
        """Get the output file path."""
        return Path(self.output_file)

    class Config:
        # Only load .env if it exists to avoid permission errors
        env_file = ".env" if __import__("pathlib").Path(".env").exists() else None
        env_file_encoding = "utf-8"
        env_prefix = "CIMS_"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables


# Global settings instance
settings = Settings()
