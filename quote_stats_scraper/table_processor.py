"""
Table processing utilities for extracting label/value pairs from HTML tables.
"""

import logging
from typing import Dict, Iterable, List, Sequence

from bs4 import Tag

from .models import LabeledValue, Magnitude, RawText
from .numeric_text import has_magnitude_marker, normalize_number

logger = logging.getLogger(__name__)


# ============================================================================
# TEXT UTILITIES
# ============================================================================

def normalize_text(text: str) -> str:
    """
    Normalize text by removing extra whitespace and invisible Unicode characters.

    This is the canonical version used throughout the scraper.
    """
    if not text:
        return ""

    # Remove invisible Unicode characters
    invisible_chars = [
        '\u200b',  # Zero-width space
        '\u200c',  # Zero-width non-joiner
        '\u200d',  # Zero-width joiner
        '\ufeff',  # Byte order mark
    ]

    for char in invisible_chars:
        text = text.replace(char, '')

    # Standard whitespace normalization
    return ' '.join(text.split())


def cell_text(cell: Tag) -> str:
    """Visible text of a cell, with hidden elements dropped."""
    for hidden_tag in cell.find_all(
        style=lambda s: s and 'visibility:hidden' in s.lower().replace(' ', '')
    ):
        hidden_tag.decompose()
    return normalize_text(cell.get_text(separator=' ', strip=True))


# ============================================================================
# ROW EXTRACTION
# ============================================================================

def table_rows(table: Tag) -> List[List[str]]:
    """
    Turn a <table> into a list of rows, each a list of <td> texts.

    Header cells (<th>) are not included, so header rows come back empty.
    """
    rows = []
    for row_tag in table.find_all('tr'):
        rows.append([cell_text(td) for td in row_tag.find_all('td')])
    return rows


def to_labeled_value(raw: str) -> LabeledValue:
    """Numeric only when the text carries a magnitude marker and parses."""
    if has_magnitude_marker(raw):
        value = normalize_number(raw)
        if value is not None:
            return Magnitude(value)
        logger.debug(f"Magnitude marker present but not numeric: '{raw}'")
    return RawText(raw)


def extract_key_values(
    rows: Iterable[Sequence[str]],
    into: Dict[str, LabeledValue] = None
) -> Dict[str, LabeledValue]:
    """
    Extract label/value pairs from two-cell rows.

    Args:
        rows: Rows of cell texts
        into: Optional mapping to accumulate into

    Returns:
        Ordered mapping of label -> RawText | Magnitude
    """
    result = into if into is not None else {}

    for row_idx, row in enumerate(rows):
        if len(row) != 2:
            continue

        label = normalize_text(row[0])
        raw = normalize_text(row[1])
        if not label or not raw:
            logger.debug(f"Row {row_idx}: empty label or value, skipping")
            continue

        result[label] = to_labeled_value(raw)

    return result


def extract_statistics(tables: Iterable[Tag]) -> Dict[str, LabeledValue]:
    """
    Extract and merge label/value pairs from every table, in table order.

    Later duplicate labels overwrite earlier ones.
    """
    statistics: Dict[str, LabeledValue] = {}
    for table_idx, table in enumerate(tables):
        before = len(statistics)
        extract_key_values(table_rows(table), into=statistics)
        logger.debug(f"Table {table_idx}: {len(statistics) - before} new labels")
    return statistics
