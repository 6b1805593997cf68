"""DOCX file extractor."""
from typing import List

from .document_extractor import DocumentExtractor
from .heuristics import build_docx_cascade
from .interface import DocumentFormat, Strategy
from .parsers import ParsedDocument, ParserRuntime, parse_docx

_ZIP_SIGNATURE = b"PK\x03\x04"


class DOCXExtractor(DocumentExtractor):
    """Extract text from Word (OOXML) documents.

    Uses python-docx for paragraphs and tables; the fallback scrapes
    WordprocessingML text runs out of the package parts, or out of the raw
    bytes when the ZIP directory itself is damaged.
    """

    NAME = "DOCXExtractor"
    FORMAT = DocumentFormat.DOCX
    LABEL = "DOCX"
    PARSER_NAME = "python-docx"
    MIMETYPES = [
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ]
    EXTENSIONS = [".docx"]

    def has_signature(self, data: bytes) -> bool:
        return data.startswith(_ZIP_SIGNATURE)

    def parse(self, data: bytes, runtime: ParserRuntime) -> ParsedDocument:
        return parse_docx(data)

    def build_cascade(self, runtime: ParserRuntime, document_opened: bool = False) -> List[Strategy]:
        return build_docx_cascade(runtime.min_ascii_run, runtime.min_fallback_chars, document_opened)

    def no_text_message(self, name: str) -> str:
        return (
            f"Unable to extract readable text from {name}. This DOCX file might be corrupted, "
            f"password-protected, or contain mainly images. Please try saving it as a plain "
            f"text file."
        )
