"""
Data containers for extracted statistics and the consolidated record.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union

from .config import ANALYST_GROWTH_KEY, UNAVAILABLE


@dataclass(frozen=True)
class RawText:
    """A statistic kept verbatim (dates, ratios, percentages)."""
    text: str

    def to_json(self) -> str:
        return self.text


@dataclass(frozen=True)
class Magnitude:
    """A statistic normalized from a magnitude-suffixed figure."""
    value: float

    def to_json(self) -> float:
        return self.value


LabeledValue = Union[RawText, Magnitude]

IDENTITY_KEYS = ('Symbol', 'Date')


@dataclass(frozen=True)
class FreeCashFlowResult:
    """Trailing free cash flow average and growth."""
    average: float
    growth_rate: str
    components: List[float]


@dataclass(frozen=True)
class FinancialRecord:
    """
    Consolidated per-symbol snapshot.

    Built once by ``merge_record`` and never mutated afterwards.
    """
    symbol: str
    capture_date: date
    price: Optional[float] = None
    statistics: Dict[str, LabeledValue] = field(default_factory=dict)
    free_cash_flow_average: Optional[float] = None
    free_cash_flow_series: List[float] = field(default_factory=list)
    growth_rate: str = UNAVAILABLE
    analyst_growth_rate: str = UNAVAILABLE
    insider_buy_count: int = 0
    api_payload: Dict[str, Any] = field(default_factory=dict)

    def to_document(self) -> Dict[str, Any]:
        """
        Render the record as an ordered JSON-ready document.

        Keys are written in precedence order; a later group overwrites an
        earlier one on collision. The API payload stays nested, and
        statistics never replace the record's Symbol or Date.
        """
        document: Dict[str, Any] = {
            'Symbol': self.symbol,
            'Date': self.capture_date.isoformat(),
        }
        if self.price is not None:
            document['Price'] = self.price

        for label, value in self.statistics.items():
            if label in IDENTITY_KEYS:
                continue
            document[label] = value.to_json()

        document['FreeCashFlowAverage'] = self.free_cash_flow_average
        document['FreeCashFlows'] = list(self.free_cash_flow_series)
        document['Growth'] = self.growth_rate

        document[f'Growth {ANALYST_GROWTH_KEY}'] = self.analyst_growth_rate

        document['Overview'] = self.api_payload

        document['InsiderBuys90Days'] = self.insider_buy_count
        return document
