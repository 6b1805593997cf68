"""Shared test fixtures for ZapNote tests."""
import io
import zipfile
from typing import List, Optional

import pytest

from zapnote.core.config import ExtractionConfig
from zapnote.extraction import ParserRuntime, initialize_parsers, reset_parsers


# =============================================================================
# Document Builders
# =============================================================================

def _build_pdf(page_streams: List[bytes], extra_objects: Optional[List[bytes]] = None,
              page_resources: bytes = b"<< /Font << /F1 3 0 R >> >>") -> bytes:
    """Build a minimal uncompressed PDF with one content stream per page.

    Object layout: 1 catalog, 2 page tree, 3 Helvetica font, then any
    extra objects, then a page object followed by its content stream for
    each page. The xref table carries real byte offsets.
    """
    extra_objects = extra_objects or []
    first_page = 4 + len(extra_objects)
    page_ids = [first_page + 2 * i for i in range(len(page_streams))]

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [" + b" ".join(b"%d 0 R" % i for i in page_ids)
        + b"] /Count %d >>" % len(page_ids),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        *extra_objects,
    ]
    for page_id, stream in zip(page_ids, page_streams):
        objects.append(
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792]\n/Resources "
            + page_resources + b"\n/Contents %d 0 R >>" % (page_id + 1)
        )
        objects.append(
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
        )

    out = io.BytesIO()
    out.write(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(b"%d 0 obj\n" % number + body + b"\nendobj\n")

    xref_offset = out.tell()
    out.write(b"xref\n0 %d\n" % (len(objects) + 1))
    out.write(b"0000000000 65535 f \n")
    for offset in offsets:
        out.write(b"%010d 00000 n \n" % offset)
    out.write(b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1))
    out.write(b"startxref\n%d\n%%%%EOF\n" % xref_offset)
    return out.getvalue()


def _build_text_pdf(text: str = "Hello", pages: int = 5) -> bytes:
    """PDF whose every page shows ``text`` with a single Tj operator."""
    stream = b"BT /F1 24 Tf 72 720 Td (" + text.encode("latin-1") + b") Tj ET"
    return _build_pdf([stream] * pages)


def _build_image_pdf(metadata: Optional[bytes] = None) -> bytes:
    """PDF whose single page only paints an embedded JPEG-filtered image."""
    image_data = b"\xff\xd8\xff\xe0" + b"\xff\x00\x81\x07" * 256 + b"\xff\xd9"
    image = (
        b"<< /Type /XObject\n/Subtype /Image\n/Width 64\n/Height 64\n"
        b"/ColorSpace /DeviceRGB\n/BitsPerComponent 8\n/Filter /DCTDecode\n"
        b"/Length %d >>\nstream\n" % len(image_data)
        + image_data
        + b"\nendstream"
    )
    return _build_pdf(
        [b"q 64 0 0 64 0 0 cm /Im0 Do Q"],
        extra_objects=[image] + ([metadata] if metadata else []),
        page_resources=b"<< /XObject << /Im0 4 0 R >> >>",
    )


def _build_encrypted_pdf(user_password: str = "secret", owner_password: Optional[str] = None) -> bytes:
    """Password-protected single-page PDF written by pypdf."""
    from pypdf import PdfWriter

    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    writer.encrypt(user_password, owner_password, algorithm="RC4-128")
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


def _build_docx(paragraphs: List[str], table: Optional[List[List[str]]] = None) -> bytes:
    """Real DOCX package written by python-docx."""
    from docx import Document

    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    if table:
        grid = document.add_table(rows=len(table), cols=len(table[0]))
        for row_index, row in enumerate(table):
            for col_index, value in enumerate(row):
                grid.cell(row_index, col_index).text = value
    out = io.BytesIO()
    document.save(out)
    return out.getvalue()


def _build_stored_docx(document_xml: str) -> bytes:
    """Bare ZIP holding only an uncompressed word/document.xml part.

    python-docx cannot open it (no content types), but its text is
    visible in the raw bytes.
    """
    out = io.BytesIO()
    with zipfile.ZipFile(out, "w", compression=zipfile.ZIP_STORED) as archive:
        archive.writestr("word/document.xml", document_xml.encode("utf-8"))
    return out.getvalue()


def _wordprocessing_xml(*paragraphs: List[str]) -> str:
    """document.xml with one <w:p> per paragraph and one <w:t> per run."""
    body = "".join(
        "<w:p><w:pPr/>" + "".join(f"<w:r><w:t xml:space=\"preserve\">{run}</w:t></w:r>" for run in runs) + "</w:p>"
        for runs in paragraphs
    )
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{body}</w:body></w:document>"
    )


# =============================================================================
# Parser Runtime
# =============================================================================

def _make_runtime(mode: str = "auto", **overrides) -> ParserRuntime:
    """ParserRuntime with default thresholds."""
    values = dict(
        mode=mode,
        max_pages=None,
        min_ascii_run=15,
        min_fallback_chars=50,
        readability_threshold=0.7,
        min_readable_length=10,
    )
    values.update(overrides)
    return ParserRuntime(**values)


@pytest.fixture(autouse=True)
def clean_parser_runtime():
    """Every test starts and ends without a process-wide parser runtime."""
    reset_parsers()
    yield
    reset_parsers()


@pytest.fixture
def init_parsers():
    """Factory fixture: initialize the process-wide runtime in a given mode."""
    def _init(mode: str = "auto") -> ParserRuntime:
        return initialize_parsers(ExtractionConfig(parser_mode=mode))
    return _init


@pytest.fixture
def text_pdf() -> bytes:
    """Five-page PDF showing "Hello" on every page."""
    return _build_text_pdf("Hello", pages=5)


@pytest.fixture
def image_pdf() -> bytes:
    """Scanned-style PDF with no text at all."""
    return _build_image_pdf()


@pytest.fixture
def encrypted_pdf() -> bytes:
    """PDF that needs a password to open."""
    return _build_encrypted_pdf()


@pytest.fixture
def transcript_docx() -> bytes:
    """DOCX with two speaker paragraphs and an action-item table."""
    return _build_docx(
        [
            "Alice: Welcome everyone to the weekly planning meeting.",
            "Bob: The release is on track for Friday.",
        ],
        table=[["Task", "Owner"], ["Write release notes", "Carol"]],
    )


@pytest.fixture
def stored_docx() -> bytes:
    """Parser-unreadable DOCX whose runs are visible in the raw bytes."""
    return _build_stored_docx(_wordprocessing_xml(
        ["Alice: Let us review ", "the budget today."],
        ["Bob: Agreed, the numbers look fine."],
    ))


@pytest.fixture
def scanned_pdf_with_info() -> bytes:
    """Scanned-style PDF whose only literal strings are scanner metadata."""
    return _build_image_pdf(metadata=b"<< /Producer (Scan_0001_A) /Title (Scan_0001_A) >>")


@pytest.fixture
def unprotected_encrypted_pdf() -> bytes:
    """Encrypted PDF with an empty user password (owner password only)."""
    return _build_encrypted_pdf(user_password="", owner_password="owner")


# =============================================================================
# Builder Fixtures
# =============================================================================

@pytest.fixture
def make_runtime():
    """Factory fixture: ParserRuntime in a given mode with default thresholds."""
    return _make_runtime


@pytest.fixture
def build_pdf():
    """Factory fixture: uncompressed PDF from per-page content streams."""
    return _build_pdf


@pytest.fixture
def build_text_pdf():
    """Factory fixture: PDF showing the same text on every page."""
    return _build_text_pdf


@pytest.fixture
def build_docx():
    """Factory fixture: DOCX written by python-docx."""
    return _build_docx


@pytest.fixture
def build_stored_docx():
    """Factory fixture: bare ZIP holding an uncompressed document.xml."""
    return _build_stored_docx


@pytest.fixture
def wordprocessing_xml():
    """Factory fixture: document.xml from lists of runs per paragraph."""
    return _wordprocessing_xml
