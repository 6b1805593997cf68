"""Shared extraction flow for binary container formats (PDF, DOCX)."""
import asyncio
import logging
from typing import List, Optional

from .heuristics import run_cascade
from .interface import DocumentFormat, ExtractionRequest, ExtractionResult, FailureKind, Strategy
from .parsers import EncryptedDocumentError, ParsedDocument, ParserRuntime, get_parser_runtime
from .validator import is_readable

logger = logging.getLogger(__name__)


class DocumentExtractor:
    """Structural parser first, heuristic cascade as fallback.

    Subclasses supply the format label, signature check, parser and
    cascade. Which of the two paths run is decided by the parser runtime
    mode ("auto", "structural" or "heuristic").
    """

    NAME = "DocumentExtractor"
    FORMAT: DocumentFormat = None
    LABEL = "document"
    PARSER_NAME = "parser"
    MIMETYPES: List[str] = []
    EXTENSIONS: List[str] = []

    def __init__(self, runtime: Optional[ParserRuntime] = None):
        self._runtime = runtime

    @property
    def supported_mimetypes(self) -> List[str]:
        return self.MIMETYPES

    @property
    def supported_extensions(self) -> List[str]:
        return self.EXTENSIONS

    @property
    def runtime(self) -> ParserRuntime:
        return self._runtime or get_parser_runtime()

    # -- format hooks -------------------------------------------------------

    def has_signature(self, data: bytes) -> bool:
        raise NotImplementedError

    def parse(self, data: bytes, runtime: ParserRuntime) -> ParsedDocument:
        raise NotImplementedError

    def build_cascade(self, runtime: ParserRuntime, document_opened: bool = False) -> List[Strategy]:
        raise NotImplementedError

    def count_pages(self, data: bytes) -> Optional[int]:
        return None

    def no_text_message(self, name: str) -> str:
        raise NotImplementedError

    def encrypted_message(self, name: str) -> str:
        return (
            f"Unable to extract text from {name}: the {self.LABEL} is password-protected "
            f"or encrypted. Remove the protection or save it as a plain text file."
        )

    def decode_error_message(self, name: str) -> str:
        return (
            f"Could not read {name} as a {self.LABEL} file. It may be corrupted or have the "
            f"wrong extension; please re-export it and try again."
        )

    # -- extraction ---------------------------------------------------------

    async def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """Extract text from a PDF/DOCX payload.

        Args:
            request: Raw bytes plus declared MIME type / filename.

        Returns:
            ExtractionResult; failures are results, never exceptions.
        """
        runtime = self.runtime
        name = request.display_name
        metadata = {
            "filename": request.filename,
            "format": self.FORMAT.value,
            "size_bytes": len(request.data),
        }

        if not self.has_signature(request.data):
            logger.info(f"{self.NAME}: {name} lacks a {self.LABEL} signature")
            return ExtractionResult.failure(
                FailureKind.DECODE_ERROR,
                self.decode_error_message(name),
                extractor_name=self.NAME,
                metadata=metadata,
            )

        try:
            return await self._extract(request, runtime, metadata)
        except Exception as e:
            logger.error(f"{self.NAME}: extraction failed for {name}: {e}")
            return ExtractionResult.failure(
                FailureKind.DECODE_ERROR,
                self.decode_error_message(name),
                extractor_name=self.NAME,
                metadata={**metadata, "error": str(e)},
            )

    async def _extract(
        self,
        request: ExtractionRequest,
        runtime: ParserRuntime,
        metadata: dict,
    ) -> ExtractionResult:
        name = request.display_name
        page_count: Optional[int] = None
        parsed_text = ""
        parse_error: Optional[Exception] = None

        if runtime.use_structural:
            try:
                parsed = await asyncio.to_thread(self.parse, request.data, runtime)
            except EncryptedDocumentError as e:
                logger.info(f"{self.NAME}: {name} is encrypted: {e}")
                return ExtractionResult.failure(
                    FailureKind.NO_EXTRACTABLE_TEXT,
                    self.encrypted_message(name),
                    extractor_name=self.NAME,
                    metadata={**metadata, "cause": "encrypted"},
                )
            except Exception as e:
                logger.warning(f"{self.NAME}: {self.PARSER_NAME} could not parse {name}: {e}")
                parse_error = e
            else:
                page_count = parsed.page_count
                parsed_text = parsed.text
                if is_readable(
                    parsed_text,
                    runtime.readability_threshold,
                    runtime.min_readable_length,
                ):
                    logger.info(
                        f"{self.NAME}: extracted {len(parsed_text)} chars from {name} "
                        f"with {self.PARSER_NAME}"
                    )
                    return ExtractionResult.success(
                        parsed_text,
                        extractor_name=self.NAME,
                        strategy=self.PARSER_NAME,
                        page_count=page_count,
                        metadata=metadata,
                    )

        if runtime.use_heuristics:
            # An opened container only has content stages left worth scraping
            document_opened = runtime.use_structural and parse_error is None
            strategies = self.build_cascade(runtime, document_opened)
            outcome = await asyncio.to_thread(run_cascade, strategies, request.data)
            if page_count is None:
                page_count = await asyncio.to_thread(self.count_pages, request.data)
            if outcome:
                logger.info(
                    f"{self.NAME}: recovered {len(outcome.text)} chars from {name} "
                    f"via {outcome.strategy}"
                )
                return ExtractionResult.success(
                    outcome.text,
                    extractor_name=self.NAME,
                    strategy=outcome.strategy,
                    page_count=page_count,
                    metadata=metadata,
                )

        if parsed_text:
            # Parser produced something; the readability gate decides its fate
            return ExtractionResult.success(
                parsed_text,
                extractor_name=self.NAME,
                strategy=self.PARSER_NAME,
                page_count=page_count,
                metadata=metadata,
            )

        if parse_error is not None:
            return ExtractionResult.failure(
                FailureKind.DECODE_ERROR,
                self.decode_error_message(name),
                extractor_name=self.NAME,
                page_count=page_count,
                metadata={**metadata, "error": str(parse_error)},
            )

        logger.info(f"{self.NAME}: no extractable text in {name}")
        return ExtractionResult.failure(
            FailureKind.NO_EXTRACTABLE_TEXT,
            self.no_text_message(name),
            extractor_name=self.NAME,
            page_count=page_count,
            metadata=metadata,
        )
