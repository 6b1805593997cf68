"""Configuration management for ZapNote."""
import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

PARSER_MODES = ("auto", "structural", "heuristic")


# =============================================================================
# Extraction Configuration
# =============================================================================

@dataclass
class ExtractionConfig:
    """Document text extraction configuration."""
    # "auto" = structural parser first, heuristic cascade as fallback
    parser_mode: str = "auto"
    max_pages: Optional[int] = None  # None = all pages

    # Heuristic cascade
    min_ascii_run: int = 15
    min_fallback_chars: int = 50

    # Readability gate
    readability_threshold: float = 0.7
    min_readable_length: int = 10

    # Level applied to third-party parser loggers
    parser_log_level: str = "ERROR"

    def __post_init__(self):
        if self.parser_mode not in PARSER_MODES:
            raise ValueError(
                f"Invalid parser_mode '{self.parser_mode}', expected one of {PARSER_MODES}"
            )

    @classmethod
    def from_dict(cls, data: Dict) -> "ExtractionConfig":
        """Create ExtractionConfig from dictionary (e.g., from YAML)."""
        if not data:
            return cls()

        return cls(
            parser_mode=data.get("parser_mode", "auto"),
            max_pages=data.get("max_pages"),
            min_ascii_run=data.get("min_ascii_run", 15),
            min_fallback_chars=data.get("min_fallback_chars", 50),
            readability_threshold=data.get("readability_threshold", 0.7),
            min_readable_length=data.get("min_readable_length", 10),
            parser_log_level=data.get("parser_log_level", "ERROR"),
        )


# =============================================================================
# Minutes Generation Configuration
# =============================================================================

@dataclass
class MinutesConfig:
    """LLM settings for minutes generation and Q&A."""
    host: str = "http://localhost:11434"
    model: str = "llama3.1:8b"
    temperature: float = 0.7
    max_tokens: int = 4000
    qa_temperature: float = 0.3
    qa_max_tokens: int = 1000
    request_timeout_seconds: int = 300

    @classmethod
    def from_dict(cls, data: Dict) -> "MinutesConfig":
        """Create MinutesConfig from dictionary (e.g., from YAML)."""
        if not data:
            return cls()

        return cls(
            host=data.get("host", "http://localhost:11434"),
            model=data.get("model", "llama3.1:8b"),
            temperature=data.get("temperature", 0.7),
            max_tokens=data.get("max_tokens", 4000),
            qa_temperature=data.get("qa_temperature", 0.3),
            qa_max_tokens=data.get("qa_max_tokens", 1000),
            request_timeout_seconds=data.get("request_timeout_seconds", 300),
        )


# =============================================================================
# Server Configuration
# =============================================================================

@dataclass
class ServerConfig:
    """HTTP server configuration."""
    max_upload_mb: int = 10
    cors_origins: List[str] = field(default_factory=lambda: [
        "http://localhost:5173", "http://localhost:3000"
    ])

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_dict(cls, data: Dict) -> "ServerConfig":
        """Create ServerConfig from dictionary (e.g., from YAML)."""
        if not data:
            return cls()

        return cls(
            max_upload_mb=data.get("max_upload_mb", 10),
            cors_origins=data.get("cors_origins", [
                "http://localhost:5173", "http://localhost:3000"
            ]),
        )


class Config:
    """
    Configuration manager for ZapNote.

    Loads config/config.yaml (or the path in ZAPNOTE_CONFIG) and applies
    environment variable overrides:
    - OLLAMA_HOST overrides minutes.host
    - ZAPNOTE_MINUTES_MODEL overrides minutes.model
    - ZAPNOTE_PARSER_MODE overrides extraction.parser_mode
    """

    def __init__(self, config_path: Optional[str] = None):
        self._config_path = Path(
            config_path or os.getenv("ZAPNOTE_CONFIG", "config/config.yaml")
        )
        self._data: Dict = {}
        self._extraction: ExtractionConfig = None
        self._minutes: MinutesConfig = None
        self._server: ServerConfig = None

        self._load_config()
        self._load_extraction_config()
        self._load_minutes_config()
        self._load_server_config()

    def _load_config(self):
        """Load configuration from YAML file."""
        if self._config_path.exists():
            self._data = yaml.safe_load(self._config_path.read_text()) or {}
        else:
            logger.warning(f"Config file not found: {self._config_path}, using defaults")
            self._data = {}

    def _load_extraction_config(self):
        """Load extraction configuration."""
        extraction_data = dict(self._data.get("extraction") or {})
        mode_override = os.getenv("ZAPNOTE_PARSER_MODE")
        if mode_override:
            extraction_data["parser_mode"] = mode_override
            logger.info(f"Parser mode overridden by env var: {mode_override}")
        self._extraction = ExtractionConfig.from_dict(extraction_data)
        logger.info(
            f"Loaded extraction config: parser_mode={self._extraction.parser_mode}, "
            f"min_fallback_chars={self._extraction.min_fallback_chars}"
        )

    def _load_minutes_config(self):
        """Load minutes generation configuration."""
        minutes_data = dict(self._data.get("minutes") or {})
        host_override = os.getenv("OLLAMA_HOST")
        if host_override:
            minutes_data["host"] = host_override
            logger.info(f"Ollama host overridden by env var: {host_override}")
        model_override = os.getenv("ZAPNOTE_MINUTES_MODEL")
        if model_override:
            minutes_data["model"] = model_override
        self._minutes = MinutesConfig.from_dict(minutes_data)
        logger.info(f"Loaded minutes config: model={self._minutes.model}")

    def _load_server_config(self):
        """Load server configuration."""
        self._server = ServerConfig.from_dict(self._data.get("server") or {})

    @property
    def extraction(self) -> ExtractionConfig:
        """Get extraction configuration."""
        return self._extraction

    @property
    def minutes(self) -> MinutesConfig:
        """Get minutes generation configuration."""
        return self._minutes

    @property
    def server(self) -> ServerConfig:
        """Get server configuration."""
        return self._server
