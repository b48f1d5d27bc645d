"""
Analyst growth estimates from the analysis page.

Which table holds the estimates is decided by a selector, so the
positional lookup can be swapped for a header-based one.
"""

import logging
from typing import Dict, Optional, Sequence

from bs4 import Tag

from .config import GROWTH_TABLE_INDEX
from .table_processor import cell_text, normalize_text

logger = logging.getLogger(__name__)


class PositionalTableSelector:
    """Pick the table at a fixed index on the page."""

    def __init__(self, index: int = GROWTH_TABLE_INDEX):
        self.index = index

    def select(self, tables: Sequence[Tag]) -> Optional[Tag]:
        if not 0 <= self.index < len(tables):
            logger.warning(f"Expected at least {self.index + 1} tables, found {len(tables)}")
            return None
        return tables[self.index]


class CaptionTableSelector:
    """Pick the first table whose header row mentions the given text."""

    def __init__(self, header_text: str = 'Growth Estimates'):
        self.header_text = header_text.lower()

    def select(self, tables: Sequence[Tag]) -> Optional[Tag]:
        for table in tables:
            header = table.find('thead') or table.find('tr')
            if header and self.header_text in normalize_text(header.get_text(' ')).lower():
                return table
        logger.warning(f"No table with header '{self.header_text}'")
        return None


def extract_growth_estimates(
    tables: Sequence[Tag],
    selector=None
) -> Optional[Dict[str, str]]:
    """
    Extract label -> text pairs from the growth estimates table body.

    Returns None when the table is not on the page, and an empty dict when
    the table has no body.
    """
    selector = selector or PositionalTableSelector()
    table = selector.select(tables)
    if table is None:
        return None

    estimates: Dict[str, str] = {}
    tbody = table.find('tbody')
    if tbody is None:
        logger.warning("Growth estimates table has no body")
        return estimates

    for row in tbody.find_all('tr'):
        cells = row.find_all('td')
        if len(cells) <= 1:
            continue
        label = cell_text(cells[0])
        value = cell_text(cells[1])
        if label and value:
            estimates[label] = value

    return estimates
