"""
Command-line interface for the quote statistics scraper.
"""

import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd

from .config import ANALYST_GROWTH_KEY, ScraperConfig, ScraperError
from .data_extractor import run_scraping
from .models import FinancialRecord
from .storage import resolve_symbols


def setup_logging(verbose: bool = False, log_file: str = "scraper_debug.log"):
    """
    Set up logging configuration.

    Args:
        verbose: If True, enable DEBUG level logging on the console
        log_file: Path of the DEBUG log file
    """
    logger = logging.getLogger("quote_stats_scraper")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    if logger.handlers:
        return logger

    # File handler - always DEBUG
    file_handler = logging.FileHandler(log_file, mode='w')
    file_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(name)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_formatter)
    file_handler.setLevel(logging.DEBUG)

    # Console handler - INFO or DEBUG based on verbose flag
    console_handler = logging.StreamHandler(sys.stdout)
    console_formatter = logging.Formatter('%(levelname)s: %(message)s')
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='quote-stats',
        description='Scrape quote statistics, free cash flow, growth estimates and '
                    'insider purchases into one JSON record per symbol per day.'
    )
    parser.add_argument('symbols', nargs='*',
                        help='Ticker symbols (default: read from --symbols-file)')
    parser.add_argument('--symbols-file',
                        help='JSON or CSV list of records with a Symbol field')
    parser.add_argument('--output-dir', help='Base directory for output files')
    parser.add_argument('--api-key', help='Alpha Vantage API key')
    parser.add_argument('--max-attempts', type=int,
                        help='Navigation attempts per page (default: 4)')
    parser.add_argument('--timeout', type=int, dest='network_idle_timeout_ms',
                        help='Network idle timeout in milliseconds (default: 30000)')
    parser.add_argument('--browser', choices=['webkit', 'chromium', 'firefox'],
                        help='Playwright browser engine (default: webkit)')
    parser.add_argument('--headed', action='store_true',
                        help='Show the browser window')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable DEBUG logging on the console')
    return parser


def summarize(records: List[FinancialRecord]) -> pd.DataFrame:
    """One row per record, with values as they appear in the saved documents."""
    rows = []
    for record in records:
        document = record.to_document()
        rows.append({
            'Symbol': document['Symbol'],
            'Price': document.get('Price'),
            'FCF Average': document['FreeCashFlowAverage'],
            'Growth': document['Growth'],
            'Analyst Growth': document[f'Growth {ANALYST_GROWTH_KEY}'],
            'Insider Buys': document['InsiderBuys90Days'],
        })
    return pd.DataFrame(rows)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logger = setup_logging(verbose=args.verbose)

    try:
        config = ScraperConfig.from_env(
            output_dir=args.output_dir,
            api_key=args.api_key,
            symbols_file=args.symbols_file,
            max_attempts=args.max_attempts,
            network_idle_timeout_ms=args.network_idle_timeout_ms,
            browser=args.browser,
            headless=False if args.headed else None,
            verbose=args.verbose,
        )
        symbols = resolve_symbols(args.symbols, config.symbols_file)
    except (ScraperError, ValueError) as e:
        logger.error(str(e))
        return 2

    if not config.api_key:
        logger.warning("No API key set (ALPHAVANTAGE_API_KEY), overview data will be empty")

    try:
        records = run_scraping(symbols, config)
    except KeyboardInterrupt:
        print("\nProcess interrupted by user")
        return 130

    if not records:
        logger.warning("Scraping complete, but no records were built")
        logger.info("Check 'scraper_debug.log' for detailed information")
        return 1

    print("\n--- Summary ---")
    print(summarize(records).to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
