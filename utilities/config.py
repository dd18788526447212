"""
Configuration management using environment variables.
Handles server, logging and store settings with validation and defaults.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class BookshelfConfig(BaseSettings):
    """
    Configuration class for the bookshelf API.
    Uses pydantic BaseSettings for environment variable management.
    """

    # API Settings
    api_title: str = Field(default="Bookshelf API")
    api_version: str = Field(default="1.0.0")
    api_description: str = Field(default="In-memory bookshelf REST API")

    # Server Settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=9000)
    debug: bool = Field(default=False)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Store Configuration
    book_id_length: int = Field(default=16)

    # CORS Settings
    cors_origins: List[str] = Field(default=["*"])

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra fields from .env
    }

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        """Ensure port is a valid TCP port."""
        if v < 1 or v > 65535:
            raise ValueError('port must be between 1 and 65535')
        return v

    @field_validator('book_id_length')
    @classmethod
    def validate_book_id_length(cls, v):
        """Keep generated ids short enough for URLs and long enough to avoid collisions."""
        if v < 8 or v > 64:
            raise ValueError('book_id_length must be between 8 and 64')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None


# Global configuration instance
config = BookshelfConfig()
