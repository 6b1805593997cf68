"""Shared logging configuration."""
from datetime import datetime
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class LogSettings(BaseSettings):
    """Logging configuration with environment variable support."""

    # Console logging is always on; file logging is opt-in
    LOG_TO_FILE: bool = False
    LOG_BASE_DIR: str = "logs"
    LOG_DATE_FORMAT: str = "%Y-%m-%d"  # Format for date directories (e.g., "2025-12-11")

    # Rotation settings (per-file within each date directory)
    LOG_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB per file
    LOG_BACKUP_COUNT: int = 5

    APP_LOG_LEVEL: str = "INFO"

    # Third-party loggers to silence (set to WARNING level)
    NOISY_LOGGERS: str = "pypdf,httpx,httpcore,asyncio,multipart,uvicorn.access"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def noisy_loggers(self) -> List[str]:
        return [name.strip() for name in self.NOISY_LOGGERS.split(",") if name.strip()]


def get_log_directory_for_date(base_dir: str, date: datetime = None) -> Path:
    """
    Get log directory path for a specific date.

    Args:
        base_dir: Base log directory (e.g., "logs")
        date: Date to get directory for (defaults to today)

    Returns:
        Path to date-specific log directory (e.g., "logs/2025-12-11")
    """
    if date is None:
        date = datetime.now()

    settings = LogSettings()
    return Path(base_dir) / date.strftime(settings.LOG_DATE_FORMAT)


def get_log_file_path(base_dir: str, log_type: str, date: datetime = None) -> Path:
    """
    Get full path for a log file.

    Args:
        base_dir: Base log directory
        log_type: Type of log ('app', 'error')
        date: Date for log (defaults to today)

    Returns:
        Full path to log file (e.g., "logs/2025-12-11/app.log")
    """
    return get_log_directory_for_date(base_dir, date) / f"{log_type}.log"
