"""File extraction router.

Routes an upload to the extractor for its format and applies the
readability gate to whatever comes back. Stateless per request, so
independent uploads can be extracted concurrently.

Example:
    router = create_default_router(config.extraction)
    result = await router.extract(
        ExtractionRequest(data, mimetype="application/pdf", filename="standup.pdf")
    )
    if not result.succeeded:
        show(result.message)
"""
import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from zapnote.core.config import ExtractionConfig

from .docx_extractor import DOCXExtractor
from .interface import ExtractionRequest, ExtractionResult, FailureKind, IContentExtractor
from .parsers import ParserNotInitializedError, ParserRuntime, get_parser_runtime, initialize_parsers
from .pdf_extractor import PDFExtractor
from .text_extractor import TextExtractor
from .validator import is_readable

logger = logging.getLogger(__name__)

# MIME types that say nothing about the format; dispatch falls back to the suffix
GENERIC_MIMETYPES = frozenset({
    "",
    "application/octet-stream",
    "binary/octet-stream",
    "application/zip",
    "application/x-zip-compressed",
})

UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload a TXT, PDF, or DOCX file."


class FileExtractionRouter:
    """Routes uploads to extractors and gates their output on readability.

    Open/Closed: add new formats by registering extractors.
    """

    def __init__(self, runtime: Optional[ParserRuntime] = None):
        self._runtime = runtime
        self._by_mimetype: Dict[str, IContentExtractor] = {}
        self._by_extension: Dict[str, IContentExtractor] = {}

    def register(self, extractor: IContentExtractor) -> None:
        """Register an extractor for its MIME types and extensions.

        Args:
            extractor: Content extractor to register.
        """
        for mimetype in extractor.supported_mimetypes:
            self._by_mimetype[mimetype.lower()] = extractor
        for extension in extractor.supported_extensions:
            self._by_extension[extension.lower()] = extractor
        logger.debug(
            f"Registered {extractor.__class__.__name__} "
            f"(mimetypes: {extractor.supported_mimetypes}, extensions: {extractor.supported_extensions})"
        )

    def resolve(self, request: ExtractionRequest) -> Optional[IContentExtractor]:
        """Pick the extractor for a request.

        The declared MIME type wins; generic or missing types fall back to
        the filename suffix.

        Returns:
            Extractor if the format is supported, None otherwise.
        """
        mimetype = request.base_mimetype
        if mimetype not in GENERIC_MIMETYPES:
            return self._by_mimetype.get(mimetype)
        return self._by_extension.get(request.suffix)

    @property
    def supported_mimetypes(self) -> List[str]:
        return list(self._by_mimetype)

    @property
    def supported_extensions(self) -> List[str]:
        return list(self._by_extension)

    @property
    def runtime(self) -> ParserRuntime:
        return self._runtime or get_parser_runtime()

    async def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """Extract and validate text from an upload.

        Args:
            request: Raw bytes plus declared MIME type / filename.

        Returns:
            ExtractionResult. A successful result always holds readable text.
        """
        name = request.display_name
        extractor = self.resolve(request)
        if extractor is None:
            logger.warning(f"No extractor for {name} ({request.mimetype or 'no mimetype'})")
            return ExtractionResult.failure(
                FailureKind.UNSUPPORTED_FORMAT,
                UNSUPPORTED_MESSAGE,
                extractor_name="none",
                metadata={"filename": request.filename, "mimetype": request.mimetype},
            )

        try:
            result = await extractor.extract(request)
        except ParserNotInitializedError:
            raise
        except Exception as e:
            logger.error(f"Extraction failed for {name}: {e}")
            return ExtractionResult.failure(
                FailureKind.DECODE_ERROR,
                f"Could not read {name}. The file may be corrupted; please try another copy.",
                extractor_name=extractor.__class__.__name__,
                metadata={"filename": request.filename, "error": str(e)},
            )

        if not result.succeeded:
            return result

        runtime = self.runtime
        if not is_readable(result.text, runtime.readability_threshold, runtime.min_readable_length):
            logger.info(
                f"Rejected {len(result.text)} chars from {name} "
                f"({result.strategy}): text is not readable"
            )
            return ExtractionResult.failure(
                FailureKind.READABILITY_REJECTED,
                f"The text recovered from {name} does not look like readable content. "
                f"The file may be scanned, encrypted, or corrupted; please upload a text "
                f"version of the transcript.",
                extractor_name=result.extractor_name,
                page_count=result.page_count,
                metadata={**result.metadata, "rejected_strategy": result.strategy},
            )

        return result

    async def extract_file(self, file_path: str, mimetype: Optional[str] = None) -> ExtractionResult:
        """Read a file from disk and extract it.

        Args:
            file_path: Path to the file.
            mimetype: Declared MIME type, if known.

        Returns:
            ExtractionResult for the file contents.
        """
        path = Path(file_path)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            logger.error(f"Failed to read {file_path}: {e}")
            return ExtractionResult.failure(
                FailureKind.DECODE_ERROR,
                f"Could not open {path.name}: {e.strerror or e}",
                extractor_name="none",
                metadata={"filename": path.name},
            )
        return await self.extract(ExtractionRequest(data=data, mimetype=mimetype, filename=path.name))

    async def extract_many(self, requests: Sequence[ExtractionRequest]) -> List[ExtractionResult]:
        """Extract several independent uploads concurrently, preserving order."""
        return list(await asyncio.gather(*(self.extract(request) for request in requests)))


def create_default_router(config: Optional[ExtractionConfig] = None) -> FileExtractionRouter:
    """Initialize the parser runtime and register the TXT, PDF and DOCX extractors."""
    runtime = initialize_parsers(config)
    router = FileExtractionRouter(runtime)
    router.register(TextExtractor())
    router.register(PDFExtractor(runtime))
    router.register(DOCXExtractor(runtime))
    return router


_default_router: Optional[FileExtractionRouter] = None


async def extract(request: ExtractionRequest) -> ExtractionResult:
    """Extract text with the standard extractors.

    Uses the process-wide parser runtime, so initialize_parsers() must
    have been called first.
    """
    global _default_router
    if _default_router is None:
        _default_router = FileExtractionRouter()
        _default_router.register(TextExtractor())
        _default_router.register(PDFExtractor())
        _default_router.register(DOCXExtractor())
    return await _default_router.extract(request)
