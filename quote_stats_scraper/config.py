"""
Configuration and constants for the quote statistics scraper.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional


class ScraperError(Exception):
    """Base exception for scraper errors."""
    pass


# ============================================================================
# URL TEMPLATES
# ============================================================================

URLS = {
    'statistics': 'https://finance.yahoo.com/quote/{symbol}/key-statistics?p={symbol}',
    'cash_flow': 'https://finance.yahoo.com/quote/{symbol}/cash-flow?p={symbol}',
    'analysis': 'https://finance.yahoo.com/quote/{symbol}/analysis?p={symbol}',
    # 90 day filing window, purchases only, officers and directors, 100 rows max
    'insider': (
        'http://openinsider.com/screener?s={symbol}&o=&pl=&ph=&ll=&lh=&fd=90&fdr=&td=0&tdr='
        '&fdlyl=&fdlyh=&daysago=&xp=1&vl=&vh=&ocl=&och=&sic1=-1&sicl=100&sich=9999'
        '&iscob=1&isceo=1&ispres=1&iscoo=1&iscfo=1&isgc=1&isvp=1&isdirector=1'
        '&istenpercent=0&isother=0&grp=0&nfl=&nfh=&nil=&nih=&nol=&noh=&v2l=&v2h='
        '&oc2l=&oc2h=&sortcol=0&cnt=100&page=1'
    ),
    'overview_api': 'https://www.alphavantage.co/query',
}


# ============================================================================
# PAGE SELECTORS
# ============================================================================

class Selectors:
    """CSS selectors for the rendered quote pages."""

    CONSENT_BUTTON = 'button'
    QUOTE_HEADER = '[data-test="quote-header"]'
    QUOTE_HEADER_SPANS = 'div > div > div > span'
    FIN_ROW = '[data-test="fin-row"]'
    FIN_COL = '[data-test="fin-col"]'


# Position of the price span inside the quote header
PRICE_SPAN_INDEX = 2

# The analyst growth table is the sixth table on the analysis page
GROWTH_TABLE_INDEX = 5

ANALYST_GROWTH_KEY = 'Next 5 Years (per annum)'
UNAVAILABLE = 'unavailable'


# ============================================================================
# REGEX PATTERNS
# ============================================================================

class Patterns:
    """Pre-compiled regex patterns for performance."""

    # "1.25B", "-750M", "3.1T", "512.4k"
    MAGNITUDE = re.compile(r'^([-+]?\d*\.?\d+)\s*([kMBT])$')
    PLAIN_NUMBER = re.compile(r'^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$')

    # Insider screener summary, e.g. "7 results." or "1,204 results"
    RESULTS_SUMMARY = re.compile(r'^\s*([\d,]+)\s+results?\b', re.IGNORECASE)
    RESULTS_TEXT = re.compile(r'\bresults?\b', re.IGNORECASE)

    # Playwright reports refused/unreachable hosts as net::ERR_*
    NETWORK_REFUSED = re.compile(
        r'net::ERR_|ECONNREFUSED|connection refused|NS_ERROR_|name not resolved',
        re.IGNORECASE
    )


# ============================================================================
# MAGNITUDE MARKERS
# ============================================================================

MAGNITUDE_MULTIPLIERS = {
    'k': 1e3,
    'M': 1e6,
    'B': 1e9,
    'T': 1e12,
}

# Cash flow statements on the quote pages are stated in thousands
CASH_FLOW_UNIT = 1000


# ============================================================================
# SCRAPER CONFIGURATION
# ============================================================================

@dataclass
class ScraperConfig:
    """Configuration for the scraper."""

    # Base directory for the per-symbol output files
    output_dir: Path = Path('data')

    # Alpha Vantage API key
    api_key: Optional[str] = None

    # Symbol list used when no symbols are passed explicitly
    symbols_file: Optional[Path] = None

    # Navigation attempts per page load
    max_attempts: int = 4

    # Delay between navigation attempts
    backoff_seconds: float = 0.0

    # Upper bound for the network idle wait
    network_idle_timeout_ms: int = 30000

    # Playwright browser engine: webkit, chromium or firefox
    browser: str = 'webkit'
    headless: bool = True

    # Exchange suffix rewrites for the overview API
    exchange_suffixes: Dict[str, str] = None

    # Enable verbose logging
    verbose: bool = False

    def __post_init__(self):
        if self.exchange_suffixes is None:
            self.exchange_suffixes = {'.SA': '.SAO'}
        self.output_dir = Path(self.output_dir)
        if self.symbols_file is not None:
            self.symbols_file = Path(self.symbols_file)
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    @classmethod
    def from_env(cls, **overrides) -> 'ScraperConfig':
        """
        Build a configuration from environment variables.

        Explicit keyword overrides that are not None win over the environment.
        """
        values = {
            'output_dir': os.environ.get('QUOTE_STATS_OUTPUT_DIR', 'data'),
            'api_key': os.environ.get('ALPHAVANTAGE_API_KEY'),
            'symbols_file': os.environ.get('QUOTE_STATS_SYMBOLS_FILE'),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
