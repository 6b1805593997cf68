"""Core configuration for ZapNote."""
from .config import Config, ExtractionConfig, MinutesConfig, ServerConfig, PARSER_MODES

__all__ = [
    "Config",
    "ExtractionConfig",
    "MinutesConfig",
    "ServerConfig",
    "PARSER_MODES",
]
