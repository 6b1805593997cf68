"""Content extractor interface and result types."""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Any, Callable, Dict, List, Optional, Protocol


class FailureKind(str, Enum):
    """Why an extraction did not produce usable text."""
    UNSUPPORTED_FORMAT = "unsupported_format"
    DECODE_ERROR = "decode_error"
    NO_EXTRACTABLE_TEXT = "no_extractable_text"
    READABILITY_REJECTED = "readability_rejected"


class DocumentFormat(str, Enum):
    """Formats the extractors understand."""
    TEXT = "text"
    PDF = "pdf"
    DOCX = "docx"


@dataclass(frozen=True)
class ExtractionRequest:
    """An uploaded file: raw bytes plus whatever the client declared about it."""
    data: bytes
    mimetype: Optional[str] = None
    filename: Optional[str] = None

    @property
    def base_mimetype(self) -> str:
        """MIME type without parameters, lowercased ("" when absent)."""
        if not self.mimetype:
            return ""
        return self.mimetype.split(";", 1)[0].strip().lower()

    @property
    def suffix(self) -> str:
        """Lowercased filename extension with leading dot ("" when absent)."""
        if not self.filename:
            return ""
        return PurePath(self.filename).suffix.lower()

    @property
    def display_name(self) -> str:
        return self.filename or "uploaded file"


@dataclass
class ExtractionResult:
    """Result from content extraction.

    A successful result always carries non-empty text. A failed result
    carries empty text, a failure_reason and a user-facing message.
    """
    text: str
    succeeded: bool
    extractor_name: str
    failure_reason: Optional[FailureKind] = None
    message: Optional[str] = None
    page_count: Optional[int] = None
    strategy: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)  # word_count, char_count, filename

    @classmethod
    def success(
        cls,
        text: str,
        extractor_name: str,
        strategy: Optional[str] = None,
        page_count: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ExtractionResult":
        if not text:
            raise ValueError("A successful extraction must carry text")
        return cls(
            text=text,
            succeeded=True,
            extractor_name=extractor_name,
            strategy=strategy,
            page_count=page_count,
            metadata={
                "char_count": len(text),
                "word_count": len(text.split()),
                **(metadata or {}),
            },
        )

    @classmethod
    def failure(
        cls,
        reason: FailureKind,
        message: str,
        extractor_name: str,
        page_count: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ExtractionResult":
        return cls(
            text="",
            succeeded=False,
            extractor_name=extractor_name,
            failure_reason=reason,
            message=message,
            page_count=page_count,
            metadata=dict(metadata or {}),
        )


@dataclass(frozen=True)
class Strategy:
    """One named text-recovery method over raw bytes.

    ``run`` returns the recovered text, or None when the method found nothing.
    """
    name: str
    run: Callable[[bytes], Optional[str]]

    def __call__(self, data: bytes) -> Optional[str]:
        return self.run(data)


class IContentExtractor(Protocol):
    """Protocol for content extractors.

    Extractors turn an ExtractionRequest of one document format into an
    ExtractionResult. They never raise: every failure is a result.
    """

    @property
    def supported_mimetypes(self) -> List[str]:
        """List of MIME types this extractor handles."""
        ...

    @property
    def supported_extensions(self) -> List[str]:
        """List of lowercase filename extensions with leading dot."""
        ...

    async def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """Extract text content from the request payload.

        Args:
            request: Raw bytes plus declared MIME type / filename.

        Returns:
            ExtractionResult with text content and metadata.
        """
        ...
