"""Plain text transcript extractor."""
import codecs
import logging
from typing import List

from .interface import DocumentFormat, ExtractionRequest, ExtractionResult, FailureKind

logger = logging.getLogger(__name__)


class TextExtractor:
    """Extract text content from plain text transcripts.

    Decoding is strict UTF-8. Decoding is the only check made here; whether
    the text is meaningful is left to the readability gate.
    """

    NAME = "TextExtractor"

    MIMETYPES = [
        "text/plain",
        "text/markdown",
        "text/x-markdown",
    ]

    EXTENSIONS = [".txt", ".text", ".md"]

    @property
    def supported_mimetypes(self) -> List[str]:
        return self.MIMETYPES

    @property
    def supported_extensions(self) -> List[str]:
        return self.EXTENSIONS

    async def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """Decode the transcript bytes.

        Args:
            request: Raw bytes plus declared MIME type / filename.

        Returns:
            ExtractionResult with the trimmed text.
        """
        name = request.display_name
        data = request.data
        if data.startswith(codecs.BOM_UTF8):
            data = data[len(codecs.BOM_UTF8):]

        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.info(f"TextExtractor: {name} is not valid UTF-8: {e}")
            return ExtractionResult.failure(
                FailureKind.DECODE_ERROR,
                f"Could not read {name} as UTF-8 text. Please save the transcript "
                f"with UTF-8 encoding and try again.",
                extractor_name=self.NAME,
                metadata={"filename": request.filename, "error": str(e)},
            )

        text = content.strip()
        if not text:
            return ExtractionResult.failure(
                FailureKind.NO_EXTRACTABLE_TEXT,
                f"{name} is empty. Please upload a transcript that contains text.",
                extractor_name=self.NAME,
                metadata={"filename": request.filename},
            )

        return ExtractionResult.success(
            text,
            extractor_name=self.NAME,
            strategy="utf-8",
            metadata={
                "filename": request.filename,
                "format": DocumentFormat.TEXT.value,
                "lines": text.count("\n") + 1,
            },
        )
