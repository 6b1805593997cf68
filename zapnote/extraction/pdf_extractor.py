"""PDF file extractor."""
from typing import List, Optional

from .document_extractor import DocumentExtractor
from .heuristics import build_pdf_cascade, count_pdf_pages
from .interface import DocumentFormat, Strategy
from .parsers import ParsedDocument, ParserRuntime, parse_pdf

# Writers may put junk before the header; readers accept it within the first KB
_HEADER_WINDOW = 1024


class PDFExtractor(DocumentExtractor):
    """Extract text from PDF documents.

    Uses pypdf for structural extraction and falls back to scraping
    text objects and literal strings out of the raw bytes.
    """

    NAME = "PDFExtractor"
    FORMAT = DocumentFormat.PDF
    LABEL = "PDF"
    PARSER_NAME = "pypdf"
    MIMETYPES = [
        "application/pdf",
        "application/x-pdf",
    ]
    EXTENSIONS = [".pdf"]

    def has_signature(self, data: bytes) -> bool:
        return b"%PDF-" in data[:_HEADER_WINDOW]

    def parse(self, data: bytes, runtime: ParserRuntime) -> ParsedDocument:
        return parse_pdf(data, max_pages=runtime.max_pages)

    def build_cascade(self, runtime: ParserRuntime, document_opened: bool = False) -> List[Strategy]:
        return build_pdf_cascade(runtime.min_ascii_run, runtime.min_fallback_chars, document_opened)

    def count_pages(self, data: bytes) -> Optional[int]:
        return count_pdf_pages(data)

    def no_text_message(self, name: str) -> str:
        return (
            f"Unable to extract readable text from {name}. This PDF might be image-based "
            f"(scanned), encrypted, or corrupted. Try running it through OCR, or convert it "
            f"to a text file and make sure it contains selectable text."
        )
