"""
Normalization of numeric text as rendered on quote pages.

Handles thousands separators and magnitude suffixes:
- "1,234.5"  -> 1234.5
- "2.5B"     -> 2500000000.0
- "750M"     -> 750000000.0
"""

import logging
from typing import Optional

from .config import MAGNITUDE_MULTIPLIERS, Patterns, ScraperError

logger = logging.getLogger(__name__)


class NumericParseError(ScraperError):
    """Raised when text that must be numeric cannot be parsed."""
    pass


def _clean(text: str) -> str:
    return text.replace(',', '').strip()


def has_magnitude_marker(text: str) -> bool:
    """Check whether text ends in a magnitude suffix (k, M, B, T)."""
    if not isinstance(text, str):
        return False
    cleaned = _clean(text)
    return bool(cleaned) and cleaned[-1] in MAGNITUDE_MULTIPLIERS


def normalize_number(text: str) -> Optional[float]:
    """
    Parse numeric text into a float with the magnitude applied.

    Returns None when the text is neither a plain number nor a number
    followed by a recognized magnitude suffix.
    """
    if not isinstance(text, str):
        return None

    cleaned = _clean(text)
    if not cleaned:
        return None

    match = Patterns.MAGNITUDE.match(cleaned)
    if match:
        mantissa, marker = match.groups()
        return float(mantissa) * MAGNITUDE_MULTIPLIERS[marker]

    if Patterns.PLAIN_NUMBER.match(cleaned):
        return float(cleaned)

    return None


def parse_number(text: str) -> float:
    """Strict variant of ``normalize_number``."""
    value = normalize_number(text)
    if value is None:
        raise NumericParseError(f"Not a number: {text!r}")
    return value
