"""Structural document parsers and their process-wide runtime settings.

The runtime is configured once by an explicit ``initialize_parsers`` call
at application startup (tests call ``reset_parsers`` between cases).
Nothing is configured at import time.
"""
import io
import logging
import re
from dataclasses import dataclass
from typing import Optional

from docx import Document
from pypdf import PasswordType, PdfReader

from zapnote.core.config import ExtractionConfig

logger = logging.getLogger(__name__)

_PARSER_LOGGERS = ("pypdf", "docx")

_INLINE_WHITESPACE = re.compile(r"[ \t\f\v]+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


class ParserNotInitializedError(RuntimeError):
    """Raised when extraction runs before initialize_parsers()."""


class EncryptedDocumentError(Exception):
    """Raised when a document cannot be opened without a password."""


@dataclass(frozen=True)
class ParserRuntime:
    """Process-wide parser settings."""
    mode: str
    max_pages: Optional[int]
    min_ascii_run: int
    min_fallback_chars: int
    readability_threshold: float
    min_readable_length: int

    @property
    def use_structural(self) -> bool:
        return self.mode in ("auto", "structural")

    @property
    def use_heuristics(self) -> bool:
        return self.mode in ("auto", "heuristic")


@dataclass(frozen=True)
class ParsedDocument:
    """Text produced by a structural parser."""
    text: str
    page_count: Optional[int] = None


_runtime: Optional[ParserRuntime] = None


def initialize_parsers(config: Optional[ExtractionConfig] = None) -> ParserRuntime:
    """Configure the parser runtime once; later calls return the existing runtime."""
    global _runtime
    if _runtime is not None:
        logger.debug("Parser runtime already initialized, keeping existing settings")
        return _runtime

    config = config or ExtractionConfig()
    for name in _PARSER_LOGGERS:
        logging.getLogger(name).setLevel(config.parser_log_level.upper())

    _runtime = ParserRuntime(
        mode=config.parser_mode,
        max_pages=config.max_pages,
        min_ascii_run=config.min_ascii_run,
        min_fallback_chars=config.min_fallback_chars,
        readability_threshold=config.readability_threshold,
        min_readable_length=config.min_readable_length,
    )
    logger.info(f"Parser runtime initialized: mode={_runtime.mode}, max_pages={_runtime.max_pages}")
    return _runtime


def get_parser_runtime() -> ParserRuntime:
    """Get the active parser runtime."""
    if _runtime is None:
        raise ParserNotInitializedError("initialize_parsers() must be called before extraction")
    return _runtime


def reset_parsers() -> None:
    """Forget the active runtime so the next initialize_parsers() applies new settings."""
    global _runtime
    _runtime = None


def normalize_whitespace(text: str) -> str:
    """Collapse runs of spaces within lines and blank-line runs between paragraphs."""
    lines = [_INLINE_WHITESPACE.sub(" ", line).strip() for line in text.splitlines()]
    return _EXCESS_NEWLINES.sub("\n\n", "\n".join(lines)).strip()


def parse_pdf(data: bytes, max_pages: Optional[int] = None) -> ParsedDocument:
    """Extract page text with pypdf.

    Raises:
        EncryptedDocumentError: The file needs a password.
        pypdf.errors.PdfReadError: The file is not a readable PDF.
    """
    reader = PdfReader(io.BytesIO(data))

    if reader.is_encrypted:
        try:
            decrypted = reader.decrypt("")
        except Exception as e:
            raise EncryptedDocumentError(f"Cannot decrypt PDF: {e}") from e
        if decrypted == PasswordType.NOT_DECRYPTED:
            raise EncryptedDocumentError("PDF is password-protected")

    page_count = len(reader.pages)
    pages_to_process = min(page_count, max_pages) if max_pages else page_count

    text_parts = []
    for page_num in range(pages_to_process):
        try:
            page_text = reader.pages[page_num].extract_text() or ""
        except Exception as e:
            logger.warning(f"Failed to extract page {page_num + 1}: {e}")
            continue
        if page_text.strip():
            text_parts.append(page_text)

    return ParsedDocument(
        text=normalize_whitespace("\n\n".join(text_parts)),
        page_count=page_count,
    )


def parse_docx(data: bytes) -> ParsedDocument:
    """Extract paragraph and table text with python-docx.

    Raises:
        docx.opc.exceptions.PackageNotFoundError, zipfile.BadZipFile,
        KeyError: The file is not a readable DOCX package.
    """
    document = Document(io.BytesIO(data))

    parts = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append(" | ".join(cells))

    return ParsedDocument(text=normalize_whitespace("\n".join(parts)))
