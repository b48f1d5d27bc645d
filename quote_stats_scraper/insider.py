"""
Insider purchase counts from the screener results summary.
"""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from .config import Patterns
from .table_processor import normalize_text

logger = logging.getLogger(__name__)


def find_results_summary(soup: BeautifulSoup) -> Optional[str]:
    """Locate the 'N results.' text on the screener page."""
    for text in soup.find_all(string=Patterns.RESULTS_TEXT):
        candidate = normalize_text(str(text))
        if Patterns.RESULTS_SUMMARY.match(candidate):
            return candidate
    return None


def count_insider_buys(summary: Optional[str]) -> int:
    """
    Parse the leading count of a results summary.

    Missing or empty summaries count as 0. An unparseable summary is
    logged and also counts as 0.
    """
    if not summary or not summary.strip():
        return 0

    match = Patterns.RESULTS_SUMMARY.match(summary)
    if not match:
        logger.warning(f"Could not parse insider results summary: '{summary}'")
        return 0

    return int(match.group(1).replace(',', ''))
