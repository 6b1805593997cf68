"""Transcript text extraction.

Provides extractors for the supported upload formats:
- TextExtractor: UTF-8 plain text
- PDFExtractor: pypdf with a heuristic byte-scraping fallback
- DOCXExtractor: python-docx with a heuristic byte-scraping fallback

``extract`` and ``is_readable`` are the two public entry points.
"""
from .interface import (
    DocumentFormat,
    ExtractionRequest,
    ExtractionResult,
    FailureKind,
    IContentExtractor,
    Strategy,
)
from .validator import is_readable, readability_ratio
from .parsers import (
    EncryptedDocumentError,
    ParserNotInitializedError,
    ParserRuntime,
    get_parser_runtime,
    initialize_parsers,
    reset_parsers,
)
from .text_extractor import TextExtractor
from .pdf_extractor import PDFExtractor
from .docx_extractor import DOCXExtractor
from .router import FileExtractionRouter, create_default_router, extract

__all__ = [
    "DocumentFormat",
    "ExtractionRequest",
    "ExtractionResult",
    "FailureKind",
    "IContentExtractor",
    "Strategy",
    "is_readable",
    "readability_ratio",
    "EncryptedDocumentError",
    "ParserNotInitializedError",
    "ParserRuntime",
    "get_parser_runtime",
    "initialize_parsers",
    "reset_parsers",
    "TextExtractor",
    "PDFExtractor",
    "DOCXExtractor",
    "FileExtractionRouter",
    "create_default_router",
    "extract",
]
