"""Dependency injection for services."""
from typing import Optional

from zapnote.core.config import Config
from zapnote.extraction import FileExtractionRouter, create_default_router, reset_parsers
from zapnote.minutes import MinutesService


# Singletons
_config: Optional[Config] = None
_extraction_router: Optional[FileExtractionRouter] = None
_minutes_service: Optional[MinutesService] = None


def get_config() -> Config:
    """
    Get application configuration (singleton).

    Returns:
        Config loaded from YAML with environment overrides
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_extraction_router() -> FileExtractionRouter:
    """
    Get the file extraction router (singleton).

    Initializes the parser runtime on first call.

    Returns:
        FileExtractionRouter with TXT, PDF and DOCX extractors registered
    """
    global _extraction_router
    if _extraction_router is None:
        _extraction_router = create_default_router(get_config().extraction)
    return _extraction_router


def get_minutes_service() -> MinutesService:
    """
    Get the minutes service (singleton).

    Returns:
        MinutesService bound to the configured Ollama host and model
    """
    global _minutes_service
    if _minutes_service is None:
        _minutes_service = MinutesService(get_config().minutes)
    return _minutes_service


def reset_dependencies() -> None:
    """Drop all singletons and the parser runtime (used by tests and application shutdown)."""
    global _config, _extraction_router, _minutes_service
    reset_parsers()
    _config = None
    _extraction_router = None
    _minutes_service = None
