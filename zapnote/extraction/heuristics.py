"""Best-effort text recovery from PDF and DOCX bytes without a parser.

Each stage is a Strategy over the raw file bytes. Cascades are ordered
from most to least structurally targeted; ``run_cascade`` stops at the
first stage that recovers any text. The final ``ascii_runs`` stage is a
blind catch-all with the highest false-positive rate and must stay last.
Once a structural parser has opened the document, extractors leave off
the stages that can only see structure (PDF metadata literals and the
blind scan).

Uploads are untrusted, so every scan is linear in the input size: region
openers are paired with the next closer by ``_paired`` rather than by a
lazy ``.*?`` match, and string patterns never rescan after a failed match.
"""
import html
import io
import logging
import re
import zipfile
import zlib
from dataclasses import dataclass
from functools import partial
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .interface import Strategy

logger = logging.getLogger(__name__)

# PDF literal string: escapes allowed, nested parentheses are not.
# The closing parenthesis is optional so an unclosed literal is consumed once.
_LITERAL = re.compile(rb"\(((?:\\.|[^\\()])*)(\))?", re.S)
_TEXT_TOKEN = re.compile(
    rb"\((?P<literal>(?:\\.|[^\\()])*)(?P<close>\))?|(?P<bracket>[\[\]])",
    re.S,
)
_TEXT_OBJECT_START = re.compile(rb"\bBT\b")
_TEXT_OBJECT_END = re.compile(rb"\bET\b")
_STREAM_START = re.compile(rb"(?<!end)stream\r?\n")
_STREAM_END = re.compile(rb"\r?\n?endstream")
_DICTIONARY_START = re.compile(rb"<<")
_DICTIONARY_END = re.compile(rb">>")
_KEYWORD_LITERAL = re.compile(
    rb"/(?:Title|Subject|Author|Keywords|Contents|TU|T|V)\s*\(((?:\\.|[^\\()])*)\)",
    re.S,
)
_PAGE_OBJECT = re.compile(rb"/Type\s*/Page(?![A-Za-z])")
_ESCAPE_SEQUENCE = re.compile(rb"\\([0-7]{1,3}|\r\n|[\s\S])")
_ESCAPES = {
    b"n": b"\n",
    b"r": b"\r",
    b"t": b"\t",
    b"b": b"\b",
    b"f": b"\f",
    b"(": b"(",
    b")": b")",
    b"\\": b"\\",
}

_DOCX_TEXT_PART = re.compile(r"^word/(?:document|header\d*|footer\d*|footnotes|endnotes|comments)\.xml$")
_DOCX_PARAGRAPH_START = re.compile(rb"<w:p[\s>]")
_DOCX_PARAGRAPH_END = re.compile(rb"</w:p>")
_DOCX_TEXT_RUN = re.compile(rb"<w:t(?:\s[^<>]*)?>([^<]*)</w:t>")
_XML_TEXT_NODE = re.compile(rb">([^<>]{3,})</[A-Za-z]")
_XML_ARTIFACTS = ("<?xml", "xmlns", "http://", "https://", "urn:")
_NUMERIC = re.compile(r"^[0-9.]+$")

_NON_PRINTABLE_ASCII = re.compile(rb"[^\x20-\x7e\t\n\r]")
_WHITESPACE = re.compile(r"\s+")
_WORD = re.compile(rb"[A-Za-z]{3}")

BLIND_SCAN = "ascii_runs"


@dataclass(frozen=True)
class CascadeOutcome:
    """Text recovered by a cascade and the stage that found it."""
    strategy: str
    text: str


# =============================================================================
# Cleaning
# =============================================================================

def clean_ascii(raw: bytes) -> str:
    """Strip non-printable bytes, collapse whitespace, trim."""
    printable = _NON_PRINTABLE_ASCII.sub(b"", raw).decode("ascii")
    return _WHITESPACE.sub(" ", printable).strip()


def clean_text(text: str) -> str:
    """Unicode counterpart of clean_ascii for decoded XML text."""
    printable = "".join(char for char in text if char.isprintable() or char.isspace())
    return _WHITESPACE.sub(" ", printable).strip()


def _join(fragments: Iterable[str]) -> Optional[str]:
    text = " ".join(fragment for fragment in fragments if fragment)
    return text or None


def _paired(data: bytes, opener: re.Pattern, closer: re.Pattern) -> Iterator[Tuple[re.Match, re.Match]]:
    """Pair each opener with the first closer after it.

    Openers inside a paired region are skipped. Scanning stops at the first
    opener with no closer after it, since no later opener can have one either.
    """
    position = 0
    while True:
        start = opener.search(data, position)
        if start is None:
            return
        end = closer.search(data, start.end())
        if end is None:
            return
        yield start, end
        position = end.end()


# =============================================================================
# PDF stages
# =============================================================================

def unescape_literal(raw: bytes) -> bytes:
    """Resolve backslash escapes inside a PDF literal string."""
    def replace(match):
        token = match.group(1)
        if token[:1].isdigit():
            return bytes([int(token, 8) & 0xFF])
        if token in (b"\r\n", b"\n", b"\r"):
            return b""  # line continuation
        return _ESCAPES.get(token, token)

    return _ESCAPE_SEQUENCE.sub(replace, raw)


def _literals(region: bytes) -> List[str]:
    return [
        clean_ascii(unescape_literal(m.group(1)))
        for m in _LITERAL.finditer(region)
        if m.group(2)
    ]


def split_pdf(data: bytes) -> Tuple[List[bytes], bytes]:
    """Separate stream payloads from the rest of the file.

    Returns the bodies of unfiltered streams (filtered ones are compressed
    or binary and never searched by targeted stages) and the file with
    every stream payload cut out.
    """
    bodies: List[bytes] = []
    outside: List[bytes] = []
    position = 0
    for start, end in _paired(data, _STREAM_START, _STREAM_END):
        object_start = data.rfind(b"obj", position, start.start())
        head = data[object_start if object_start != -1 else position:start.start()]
        if b"/Filter" not in head:
            bodies.append(data[start.end():end.start()])
        outside.append(data[position:start.end()])
        position = end.start()
    outside.append(data[position:])
    return bodies, b"".join(outside)


def _text_object_fragments(region: bytes) -> List[str]:
    fragments = []
    for start, end in _paired(region, _TEXT_OBJECT_START, _TEXT_OBJECT_END):
        pieces: Optional[List[bytes]] = None
        for token in _TEXT_TOKEN.finditer(region, start.end(), end.start()):
            bracket = token.group("bracket")
            if bracket == b"[":
                pieces = []
            elif bracket == b"]":
                if pieces is not None:
                    # TJ arrays split words for kerning; glue the pieces back together
                    fragments.append(clean_ascii(b"".join(pieces)))
                pieces = None
            elif token.group("close"):
                text = unescape_literal(token.group("literal"))
                if pieces is None:
                    fragments.append(clean_ascii(text))
                else:
                    pieces.append(text)
        if pieces:
            fragments.append(clean_ascii(b"".join(pieces)))
    return fragments
def pdf_text_objects(data: bytes) -> Optional[str]:
    """Literal strings shown inside BT ... ET text objects."""
    bodies, outside = split_pdf(data)
    fragments = []
    for region in [*bodies, outside]:
        fragments.extend(_text_object_fragments(region))
    return _join(fragments)


def pdf_stream_literals(data: bytes) -> Optional[str]:
    """Literal strings anywhere in unfiltered stream payloads."""
    bodies, _ = split_pdf(data)
    fragments = []
    for body in bodies:
        fragments.extend(_literals(body))
    return _join(fragments)


def pdf_dictionary_literals(data: bytes) -> Optional[str]:
    """Literal strings inside << ... >> dictionaries."""
    _, outside = split_pdf(data)
    fragments = []
    for start, end in _paired(outside, _DICTIONARY_START, _DICTIONARY_END):
        fragments.extend(_literals(outside[start.end():end.start()]))
    return _join(fragments)


def pdf_keyword_literals(data: bytes) -> Optional[str]:
    """Literal strings that follow known metadata and annotation keywords."""
    _, outside = split_pdf(data)
    return _join(
        clean_ascii(unescape_literal(m.group(1))) for m in _KEYWORD_LITERAL.finditer(outside)
    )


def count_pdf_pages(data: bytes) -> Optional[int]:
    """Count /Type /Page objects; None when no page objects are visible."""
    count = len(_PAGE_OBJECT.findall(data))
    return count or None


# =============================================================================
# DOCX stages
# =============================================================================

def _decode_xml(raw: bytes) -> str:
    return clean_text(html.unescape(raw.decode("utf-8", errors="ignore")))


def _docx_package_parts(data: bytes) -> Optional[List[bytes]]:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as package:
            names = [name for name in package.namelist() if _DOCX_TEXT_PART.match(name)]
            return [package.read(name) for name in names]
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, ValueError) as e:
        logger.debug(f"Package directory unreadable ({e})")
        return None


def docx_xml_parts(data: bytes) -> List[bytes]:
    """XML parts of a DOCX package that carry document text.

    Parts are read through the ZIP directory when it is intact, so
    deflated parts are searched too. A damaged package is searched as raw
    bytes, where only stored (uncompressed) parts are visible.
    """
    parts = _docx_package_parts(data)
    return [data] if parts is None else parts


def docx_text_runs(data: bytes) -> Optional[str]:
    """Text of <w:t> runs, glued per <w:p> paragraph."""
    paragraphs = []
    for part in docx_xml_parts(data):
        for start, end in _paired(part, _DOCX_PARAGRAPH_START, _DOCX_PARAGRAPH_END):
            runs = b"".join(m.group(1) for m in _DOCX_TEXT_RUN.finditer(part, start.start(), end.end()))
            paragraphs.append(_decode_xml(runs))
    return _join(paragraphs)


def _is_xml_artifact(text: str) -> bool:
    return (
        len(text) <= 2
        or bool(_NUMERIC.match(text))
        or any(marker in text for marker in _XML_ARTIFACTS)
        or not any(char.isalpha() for char in text)
    )


def xml_text_nodes(data: bytes) -> Optional[str]:
    """Any text node between XML tags, minus markup artifacts."""
    nodes = (
        _decode_xml(m.group(1))
        for part in docx_xml_parts(data)
        for m in _XML_TEXT_NODE.finditer(part)
    )
    return _join(node for node in nodes if not _is_xml_artifact(node))


# =============================================================================
# Catch-all
# =============================================================================

def ascii_runs(data: bytes, min_run: int = 15, min_total: int = 50) -> Optional[str]:
    """Blind scan for long runs of printable ASCII letters, digits and punctuation.

    Runs without a three-letter word (xref rows, numeric tables) are
    dropped. A total shorter than ``min_total`` counts as nothing found.
    """
    pattern = re.compile(rb"[A-Za-z0-9 .,!?;:'\"()\-]{%d,}" % min_run)
    runs = [clean_ascii(m.group(0)) for m in pattern.finditer(data) if _WORD.search(m.group(0))]
    text = _join(runs)
    if not text or len(text) < min_total:
        return None
    return text


def docx_ascii_runs(data: bytes, min_run: int = 15, min_total: int = 50) -> Optional[str]:
    """ascii_runs for DOCX packages whose ZIP directory is unreadable.

    The raw bytes of an intact package hold only deflated data and part
    names, and its text parts were already searched by the earlier stages.
    """
    if _docx_package_parts(data) is not None:
        return None
    return ascii_runs(data, min_run=min_run, min_total=min_total)


# =============================================================================
# Cascades
# =============================================================================

def build_pdf_cascade(
    min_ascii_run: int = 15,
    min_fallback_chars: int = 50,
    document_opened: bool = False,
) -> List[Strategy]:
    """PDF stages in their fixed order.

    When pypdf already opened the document, only content-stream stages run:
    dictionary and keyword literals of a parsed file are Info or annotation
    metadata, and its raw bytes are structure.
    """
    strategies = [
        Strategy("pdf_text_objects", pdf_text_objects),
        Strategy("pdf_stream_literals", pdf_stream_literals),
    ]
    if document_opened:
        return strategies
    strategies.extend([
        Strategy("pdf_dictionary_literals", pdf_dictionary_literals),
        Strategy("pdf_keyword_literals", pdf_keyword_literals),
        Strategy(BLIND_SCAN, partial(ascii_runs, min_run=min_ascii_run, min_total=min_fallback_chars)),
    ])
    return strategies


def build_docx_cascade(
    min_ascii_run: int = 15,
    min_fallback_chars: int = 50,
    document_opened: bool = False,
) -> List[Strategy]:
    """DOCX stages in their fixed order; the blind scan is left off for opened packages."""
    strategies = [
        Strategy("docx_text_runs", docx_text_runs),
        Strategy("xml_text_nodes", xml_text_nodes),
    ]
    if not document_opened:
        strategies.append(Strategy(
            BLIND_SCAN, partial(docx_ascii_runs, min_run=min_ascii_run, min_total=min_fallback_chars)
        ))
    return strategies


def run_cascade(strategies: Sequence[Strategy], data: bytes) -> Optional[CascadeOutcome]:
    """Run strategies in order until one recovers text."""
    for strategy in strategies:
        text = strategy(data)
        if text:
            logger.debug(f"Strategy {strategy.name} recovered {len(text)} chars")
            return CascadeOutcome(strategy=strategy.name, text=text)
        logger.debug(f"Strategy {strategy.name} found nothing")
    return None
