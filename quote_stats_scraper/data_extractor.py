"""
Main orchestration for extracting quote statistics per symbol.
"""

import logging
import traceback
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError

from .api_client import FinancialDataClient, FinancialDataClientError
from .browser import BrowserSession
from .cash_flow import InsufficientDataError, analyze_free_cash_flow, cash_flow_series
from .config import PRICE_SPAN_INDEX, URLS, ScraperConfig, Selectors
from .growth_estimates import PositionalTableSelector, extract_growth_estimates
from .insider import count_insider_buys, find_results_summary
from .merger import merge_record
from .models import FinancialRecord, FreeCashFlowResult, LabeledValue
from .navigator import RetryingNavigator
from .numeric_text import normalize_number
from .storage import PersistenceError, save_record
from .table_processor import extract_statistics

logger = logging.getLogger(__name__)


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass
class ScrapingContext:
    """Container for one symbol's session and collaborators."""
    symbol: str
    config: ScraperConfig
    session: Any
    api_client: Optional[FinancialDataClient] = None
    growth_selector: Any = None
    navigator: RetryingNavigator = field(init=False)

    def __post_init__(self):
        self.navigator = RetryingNavigator(
            self.session.goto,
            max_attempts=self.config.max_attempts,
            backoff_seconds=self.config.backoff_seconds
        )
        if self.growth_selector is None:
            self.growth_selector = PositionalTableSelector()

    def url(self, page: str) -> str:
        return URLS[page].format(symbol=self.symbol)

    def load_page(self, page: str) -> Optional[BeautifulSoup]:
        """
        Navigate to one of the symbol's pages and parse the settled HTML.

        Returns None when navigation was exhausted, so no stale page is read.
        """
        result = self.navigator.navigate(self.url(page))
        if not result.ok:
            logger.error(f"{self.symbol}: skipping {page} page ({result.status.value})")
            return None
        return BeautifulSoup(self.session.content(), 'html.parser')


# ============================================================================
# PAGE PARSING
# ============================================================================

def extract_quote_price(soup: BeautifulSoup) -> Optional[float]:
    """Price from the quote header, or None if the header is missing."""
    header = soup.select_one(Selectors.QUOTE_HEADER)
    if header is None:
        return None
    spans = header.select(Selectors.QUOTE_HEADER_SPANS)
    if len(spans) <= PRICE_SPAN_INDEX:
        logger.warning(f"Quote header has {len(spans)} spans, price not found")
        return None
    return normalize_number(spans[PRICE_SPAN_INDEX].get_text(strip=True))


def parse_statistics_page(soup: BeautifulSoup) -> Tuple[Optional[float], Dict[str, LabeledValue]]:
    return extract_quote_price(soup), extract_statistics(soup.find_all('table'))


def parse_cash_flow_page(soup: BeautifulSoup) -> FreeCashFlowResult:
    return analyze_free_cash_flow(cash_flow_series(soup))


def parse_analysis_page(soup: BeautifulSoup, selector=None) -> Optional[Dict[str, str]]:
    return extract_growth_estimates(soup.find_all('table'), selector)


def parse_insider_page(soup: BeautifulSoup) -> int:
    return count_insider_buys(find_results_summary(soup))


# ============================================================================
# PIPELINE STEPS
# ============================================================================

def scrape_statistics(context: ScrapingContext) -> Tuple[Optional[float], Dict[str, LabeledValue]]:
    logger.info(f"{context.symbol}: loading statistics page")
    result = context.navigator.navigate(context.url('statistics'))
    if not result.ok:
        logger.error(f"{context.symbol}: statistics page unavailable, continuing without it")
        return None, {}

    try:
        # The first button is the consent dialog when one is shown
        context.session.click_first(Selectors.CONSENT_BUTTON)
        html = context.session.content()
    except PlaywrightError as e:
        logger.error(f"{context.symbol}: statistics page did not settle, continuing without it: {e}")
        return None, {}

    soup = BeautifulSoup(html, 'html.parser')
    price, statistics = parse_statistics_page(soup)
    logger.info(f"{context.symbol}: {len(statistics)} statistics, price={price}")
    return price, statistics


def scrape_free_cash_flow(context: ScrapingContext) -> Optional[FreeCashFlowResult]:
    logger.info(f"{context.symbol}: loading cash flow page")
    soup = context.load_page('cash_flow')
    if soup is None:
        return None
    try:
        fcf = parse_cash_flow_page(soup)
    except InsufficientDataError as e:
        logger.warning(f"{context.symbol}: free cash flow unavailable: {e}")
        return None
    logger.info(f"{context.symbol}: FCF average={fcf.average:.0f} growth={fcf.growth_rate}")
    return fcf


def scrape_growth_estimates(context: ScrapingContext) -> Optional[Dict[str, str]]:
    logger.info(f"{context.symbol}: loading analysis page")
    soup = context.load_page('analysis')
    if soup is None:
        return None
    estimates = parse_analysis_page(soup, context.growth_selector)
    if estimates is None:
        logger.warning(f"{context.symbol}: growth estimates table not found")
    return estimates


def scrape_insider_buys(context: ScrapingContext) -> int:
    logger.info(f"{context.symbol}: loading insider screener")
    soup = context.load_page('insider')
    if soup is None:
        return 0
    count = parse_insider_page(soup)
    logger.info(f"{context.symbol}: {count} insider purchases in 90 days")
    return count


def fetch_overview(context: ScrapingContext) -> Dict[str, Any]:
    if context.api_client is None:
        logger.warning(f"{context.symbol}: no API client configured, overview skipped")
        return {}
    try:
        return context.api_client.get_overview(context.symbol)
    except FinancialDataClientError as e:
        logger.error(f"{context.symbol}: {e}")
        return {}


# ============================================================================
# MAIN SCRAPING ORCHESTRATION
# ============================================================================

def process_single_symbol(context: ScrapingContext, capture_date: date) -> FinancialRecord:
    """
    Run every extraction step for one symbol and merge the results.

    Args:
        context: Scraping context holding an open session
        capture_date: Date stamped on the record

    Returns:
        The merged FinancialRecord
    """
    logger.info(f"\n{'='*80}")
    logger.info(f"Processing {context.symbol}")
    logger.info(f"{'='*80}")

    price, statistics = scrape_statistics(context)
    fcf = scrape_free_cash_flow(context)
    growth_estimates = scrape_growth_estimates(context)
    insider_count = scrape_insider_buys(context)
    overview = fetch_overview(context)

    return merge_record(
        statistics, fcf, growth_estimates, insider_count, overview,
        context.symbol, capture_date, price=price
    )


def run_scraping(
    symbols: List[str],
    config: Optional[ScraperConfig] = None,
    capture_date: Optional[date] = None,
    session_factory: Callable[[ScraperConfig], Any] = BrowserSession,
    api_client: Optional[FinancialDataClient] = None
) -> List[FinancialRecord]:
    """
    Main scraping orchestration.

    Symbols are processed one at a time, each in its own browser session.
    A failing symbol is logged and skipped.

    Args:
        symbols: Symbols in processing order
        config: Optional scraper configuration
        capture_date: Date stamped on every record (defaults to today)
        session_factory: Callable returning a session context manager
        api_client: Optional overview client (built from config.api_key if omitted)

    Returns:
        Records that were built, saved or not
    """
    if config is None:
        config = ScraperConfig()
    if capture_date is None:
        capture_date = date.today()
    if api_client is None and config.api_key:
        api_client = FinancialDataClient(config.api_key, config.exchange_suffixes)

    records = []
    failures = []

    for symbol in symbols:
        try:
            with session_factory(config) as session:
                context = ScrapingContext(
                    symbol=symbol,
                    config=config,
                    session=session,
                    api_client=api_client
                )
                record = process_single_symbol(context, capture_date)
        except Exception as e:
            logger.error(f"Failed to process {symbol}: {e}")
            logger.debug(traceback.format_exc())
            failures.append(symbol)
            continue

        records.append(record)
        try:
            save_record(record, config.output_dir)
        except PersistenceError as e:
            logger.error(str(e))
            failures.append(symbol)

    logger.info(f"Finished: {len(records)} records built, {len(failures)} failures")
    if failures:
        logger.warning(f"Failed symbols: {', '.join(failures)}")
    return records
