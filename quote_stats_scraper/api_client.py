"""
Alpha Vantage client for the company overview payload.
"""

import logging
from typing import Any, Dict, Optional

import requests

from .config import URLS, ScraperError

logger = logging.getLogger(__name__)

API_ERROR_KEYS = ('Error Message', 'Note', 'Information')


class FinancialDataClientError(ScraperError):
    """Base exception for financial data API errors."""
    pass


def translate_symbol(symbol: str, exchange_suffixes: Optional[Dict[str, str]] = None) -> str:
    """
    Convert a quote-page symbol to the API's notation.

    Exchange suffixes are rewritten (e.g. PETR4.SA -> PETR4.SAO) and
    share-class hyphens become periods (BRK-B -> BRK.B).

    Args:
        symbol: Symbol as used on the quote pages
        exchange_suffixes: Mapping of page suffix -> API suffix

    Returns:
        Translated symbol
    """
    translated = symbol.strip().upper()
    for page_suffix, api_suffix in (exchange_suffixes or {}).items():
        if translated.endswith(page_suffix.upper()):
            translated = translated[:-len(page_suffix)] + api_suffix
            break
    return translated.replace('-', '.')


class FinancialDataClient:
    """Client for the company overview endpoint."""

    def __init__(
        self,
        api_key: str,
        exchange_suffixes: Optional[Dict[str, str]] = None,
        timeout: float = 30
    ):
        """
        Initialize the client.

        Args:
            api_key: Alpha Vantage API key
            exchange_suffixes: Symbol suffix rewrites, see translate_symbol
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.exchange_suffixes = exchange_suffixes or {}
        self.timeout = timeout

    def get_overview(self, symbol: str) -> Dict[str, Any]:
        """
        Fetch the overview document for a symbol.

        Args:
            symbol: Symbol as used on the quote pages

        Returns:
            The decoded JSON body, unchanged

        Raises:
            FinancialDataClientError: request failed or the API reported an error
        """
        if not self.api_key:
            raise FinancialDataClientError("No API key configured")

        api_symbol = translate_symbol(symbol, self.exchange_suffixes)
        params = {
            'function': 'OVERVIEW',
            'symbol': api_symbol,
            'apikey': self.api_key,
        }

        try:
            logger.info(f"Fetching overview for {symbol} as {api_symbol}")
            response = requests.get(URLS['overview_api'], params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise FinancialDataClientError(f"Overview request failed for {api_symbol}: {e}") from e
        except ValueError as e:
            raise FinancialDataClientError(f"Overview response for {api_symbol} is not JSON") from e

        if not isinstance(data, dict):
            raise FinancialDataClientError(f"Unexpected overview payload for {api_symbol}")

        for key in API_ERROR_KEYS:
            if key in data:
                raise FinancialDataClientError(f"API error for {api_symbol}: {data[key]}")

        if not data:
            logger.warning(f"Empty overview payload for {api_symbol}")
        return data
