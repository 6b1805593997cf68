"""Readability check for extracted text.

Readable characters are Unicode letters and digits (``str.isalpha`` and
``str.isdigit``), whitespace and common punctuation. Counting any script's
letters keeps non-English transcripts readable, so the ratio is higher than
an ASCII-only count (``[A-Za-z0-9]``) for accented or non-Latin text.
"""

READABLE_PUNCTUATION = frozenset(".,!?;:'\"()-")

DEFAULT_MIN_RATIO = 0.7
DEFAULT_MIN_LENGTH = 10


def _is_readable_char(char: str) -> bool:
    return (
        char.isalpha()
        or char.isdigit()
        or char.isspace()
        or char in READABLE_PUNCTUATION
    )


def readability_ratio(text: str) -> float:
    """Fraction of characters that are letters, digits, whitespace or common punctuation."""
    if not text:
        return 0.0
    readable = sum(1 for char in text if _is_readable_char(char))
    return readable / len(text)


def is_readable(
    text: str,
    min_ratio: float = DEFAULT_MIN_RATIO,
    min_length: int = DEFAULT_MIN_LENGTH,
) -> bool:
    """Judge whether text is meaningful content rather than binary noise.

    True iff more than ``min_ratio`` of the characters are readable and the
    text is longer than ``min_length`` characters. Empty or whitespace-only
    text is never readable.
    """
    if not text or not text.strip():
        return False
    return len(text) > min_length and readability_ratio(text) > min_ratio
