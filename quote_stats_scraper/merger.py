"""
Assembly of the consolidated per-symbol record.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from .config import ANALYST_GROWTH_KEY, UNAVAILABLE
from .models import FinancialRecord, FreeCashFlowResult, LabeledValue

logger = logging.getLogger(__name__)


def analyst_growth_rate(growth_estimates: Optional[Dict[str, str]]) -> str:
    """Consensus five-year growth, or 'unavailable'."""
    if growth_estimates is None:
        return UNAVAILABLE
    return growth_estimates.get(ANALYST_GROWTH_KEY) or UNAVAILABLE


def merge_record(
    statistics: Dict[str, LabeledValue],
    fcf_result: Optional[FreeCashFlowResult],
    growth_estimates: Optional[Dict[str, str]],
    insider_count: int,
    api_payload: Optional[Dict[str, Any]],
    symbol: str,
    capture_date: date,
    price: Optional[float] = None
) -> FinancialRecord:
    """
    Combine the extracted pieces into one FinancialRecord.

    Precedence when rendered (later wins): price, statistics, free cash
    flow fields, consensus growth, nested API payload, insider count.
    """
    record = FinancialRecord(
        symbol=symbol,
        capture_date=capture_date,
        price=price,
        statistics=dict(statistics),
        free_cash_flow_average=fcf_result.average if fcf_result else None,
        free_cash_flow_series=list(fcf_result.components) if fcf_result else [],
        growth_rate=fcf_result.growth_rate if fcf_result else UNAVAILABLE,
        analyst_growth_rate=analyst_growth_rate(growth_estimates),
        insider_buy_count=max(int(insider_count or 0), 0),
        api_payload=dict(api_payload or {}),
    )
    logger.debug(f"Merged record for {symbol}: {len(record.statistics)} statistics")
    return record
