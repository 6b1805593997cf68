"""Unit tests for the parser runtime and structural parsers."""
import logging

import pytest

from zapnote.core.config import ExtractionConfig
from zapnote.extraction import (
    EncryptedDocumentError,
    ParserNotInitializedError,
    get_parser_runtime,
    initialize_parsers,
    reset_parsers,
)
from zapnote.extraction.parsers import normalize_whitespace, parse_docx, parse_pdf


# =============================================================================
# Runtime Lifecycle
# =============================================================================

def test_runtime_unavailable_before_initialization():
    """Nothing is configured at import time."""
    with pytest.raises(ParserNotInitializedError):
        get_parser_runtime()


def test_initialize_applies_config():
    """Settings come from ExtractionConfig."""
    runtime = initialize_parsers(ExtractionConfig(parser_mode="heuristic", max_pages=3))

    assert runtime.mode == "heuristic"
    assert runtime.max_pages == 3
    assert runtime.use_heuristics is True
    assert runtime.use_structural is False
    assert get_parser_runtime() is runtime


def test_initialize_is_idempotent():
    """A second call keeps the first settings."""
    first = initialize_parsers(ExtractionConfig(parser_mode="structural"))
    second = initialize_parsers(ExtractionConfig(parser_mode="heuristic"))

    assert second is first
    assert get_parser_runtime().mode == "structural"


def test_reset_allows_reinitialization():
    """After reset the next call applies new settings."""
    initialize_parsers(ExtractionConfig(parser_mode="structural"))
    reset_parsers()

    assert initialize_parsers(ExtractionConfig(parser_mode="heuristic")).mode == "heuristic"


def test_initialize_quiets_parser_loggers():
    """Third-party parser loggers are set to the configured level."""
    initialize_parsers(ExtractionConfig(parser_log_level="critical"))

    assert logging.getLogger("pypdf").level == logging.CRITICAL
    assert logging.getLogger("docx").level == logging.CRITICAL


def test_auto_mode_uses_both_paths():
    """Auto mode runs the parser and keeps the fallback."""
    runtime = initialize_parsers()

    assert runtime.mode == "auto"
    assert runtime.use_structural is True
    assert runtime.use_heuristics is True


# =============================================================================
# Structural Parsers
# =============================================================================

def test_normalize_whitespace():
    """Inline whitespace collapses; paragraph breaks survive."""
    text = "  Hello \t  world  \n\n\n\n  Next   para \n"
    assert normalize_whitespace(text) == "Hello world\n\nNext para"


def test_parse_pdf_pages(build_text_pdf):
    """pypdf text and page count are returned."""
    parsed = parse_pdf(build_text_pdf("Hello", pages=2))

    assert parsed.page_count == 2
    assert parsed.text == "Hello\n\nHello"


def test_parse_pdf_rejects_password(encrypted_pdf):
    """A PDF needing a password raises EncryptedDocumentError."""
    with pytest.raises(EncryptedDocumentError):
        parse_pdf(encrypted_pdf)


def test_parse_pdf_opens_empty_user_password(unprotected_encrypted_pdf):
    """Owner-only encryption decrypts with the empty password and parses."""
    parsed = parse_pdf(unprotected_encrypted_pdf)

    assert parsed.page_count == 1
    assert parsed.text == ""


def test_parse_docx_tables(build_docx):
    """Table cells are joined with pipes after the paragraphs."""
    parsed = parse_docx(build_docx(["Decisions"], table=[["Budget", "Approved"]]))

    assert parsed.text == "Decisions\nBudget | Approved"
    assert parsed.page_count is None
