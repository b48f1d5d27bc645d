"""
Free cash flow analysis from the cash flow statement page.
"""

import logging
import math
from typing import List, Sequence

from bs4 import BeautifulSoup

from .config import CASH_FLOW_UNIT, ScraperError, Selectors
from .models import FreeCashFlowResult
from .numeric_text import NumericParseError, parse_number
from .table_processor import normalize_text

logger = logging.getLogger(__name__)

AVERAGE_PERIODS = 3


class InsufficientDataError(ScraperError):
    """Raised when a cash flow series cannot support the derived metrics."""
    pass


def cash_flow_series(soup: BeautifulSoup) -> List[str]:
    """
    Read the free cash flow row (the last statement row) as column texts.

    The first entry is the TTM column. Returns an empty list when the
    statement rows are missing.
    """
    rows = soup.select(Selectors.FIN_ROW)
    if not rows:
        logger.warning("No cash flow rows found on page")
        return []

    columns = rows[-1].select(Selectors.FIN_COL)
    return [normalize_text(col.get_text(separator=' ', strip=True)) for col in columns]


def format_percent(ratio: float) -> str:
    """Whole percent, halves rounded up: 0.42857 -> '43%'."""
    return f"{math.floor(ratio * 100 + 0.5)}%"


def analyze_free_cash_flow(series: Sequence[str]) -> FreeCashFlowResult:
    """
    Compute the 3-period average and the growth over the full history.

    Args:
        series: Column texts, most recent first, starting with TTM

    Returns:
        FreeCashFlowResult with the average (absolute units), the growth
        string and the three scaled components

    Raises:
        InsufficientDataError: fewer than 3 periods after TTM, an
            unparseable figure, or a zero starting value
    """
    periods = list(series[1:])
    if len(periods) < AVERAGE_PERIODS:
        raise InsufficientDataError(
            f"Need {AVERAGE_PERIODS} periods after TTM, got {len(periods)}"
        )

    try:
        components = [parse_number(text) * CASH_FLOW_UNIT for text in periods[:AVERAGE_PERIODS]]
        ending_value = parse_number(periods[0])
        beginning_value = parse_number(periods[-1])
    except NumericParseError as e:
        raise InsufficientDataError(f"Unusable cash flow figure: {e}") from e

    if beginning_value == 0:
        raise InsufficientDataError("Earliest free cash flow is zero, growth undefined")

    average = sum(components) / len(components)
    growth = ending_value / beginning_value - 1

    logger.debug(f"FCF components={components} average={average} growth={growth:.4f}")
    return FreeCashFlowResult(
        average=average,
        growth_rate=format_percent(growth),
        components=components,
    )
