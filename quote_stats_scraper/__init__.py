"""
Quote Statistics Scraper

Extracts key statistics, free cash flow, analyst growth estimates and
insider purchase counts per symbol, merges them with a company overview
from Alpha Vantage, and writes one JSON record per symbol per day.
"""

__version__ = "1.0.0"

# Public API
from .config import ScraperConfig, ScraperError, URLS
from .api_client import FinancialDataClient, FinancialDataClientError, translate_symbol
from .browser import BrowserSession
from .cash_flow import InsufficientDataError, analyze_free_cash_flow
from .data_extractor import run_scraping, process_single_symbol, ScrapingContext
from .growth_estimates import CaptionTableSelector, PositionalTableSelector, extract_growth_estimates
from .insider import count_insider_buys
from .merger import merge_record
from .models import FinancialRecord, FreeCashFlowResult, Magnitude, RawText
from .navigator import NavigationResult, NavigationStatus, RetryingNavigator
from .numeric_text import NumericParseError, normalize_number, parse_number
from .storage import PersistenceError, load_symbols, save_record
from .table_processor import extract_key_values, extract_statistics, normalize_text

__all__ = [
    # Main functions
    'run_scraping',
    'process_single_symbol',

    # Configuration
    'ScraperConfig',
    'URLS',

    # Components
    'ScrapingContext',
    'BrowserSession',
    'RetryingNavigator',
    'FinancialDataClient',
    'PositionalTableSelector',
    'CaptionTableSelector',

    # Extraction
    'normalize_number',
    'parse_number',
    'extract_key_values',
    'extract_statistics',
    'analyze_free_cash_flow',
    'extract_growth_estimates',
    'count_insider_buys',
    'merge_record',

    # Data
    'FinancialRecord',
    'FreeCashFlowResult',
    'Magnitude',
    'RawText',
    'NavigationResult',
    'NavigationStatus',

    # Persistence
    'save_record',
    'load_symbols',

    # Errors
    'ScraperError',
    'NumericParseError',
    'InsufficientDataError',
    'FinancialDataClientError',
    'PersistenceError',

    # Utilities
    'translate_symbol',
    'normalize_text',
]
