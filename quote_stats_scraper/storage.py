"""
Persistence of records and loading of symbol lists.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .config import ScraperError
from .models import FinancialRecord

logger = logging.getLogger(__name__)

RECORD_SUBDIR = 'statistics'


class PersistenceError(ScraperError):
    """Raised when a record cannot be written."""
    pass


def record_path(base_dir: Path, symbol: str, capture_date: date) -> Path:
    """<base>/<SYMBOL>/statistics/YYYY.MM.DD.json"""
    return Path(base_dir) / symbol / RECORD_SUBDIR / f"{capture_date.strftime('%Y.%m.%d')}.json"


def serialize_record(record: FinancialRecord) -> str:
    return json.dumps(record.to_document(), indent=2, ensure_ascii=False) + '\n'


def save_record(record: FinancialRecord, base_dir: Path) -> Path:
    """
    Write a record, creating the directory chain first.

    Raises:
        PersistenceError: the directory or file could not be written
    """
    path = record_path(base_dir, record.symbol, record.capture_date)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(serialize_record(record), encoding='utf-8')
    except (OSError, TypeError, ValueError) as e:
        raise PersistenceError(f"Failed to save {record.symbol} to {path}: {e}") from e

    logger.info(f"Saved {record.symbol} to {path}")
    return path


def load_symbols(path: Path, column: str = 'Symbol') -> List[str]:
    """
    Load symbols from a JSON array of records or a CSV file.

    Args:
        path: Symbol list file
        column: Field holding the symbol

    Returns:
        Symbols in file order, blanks removed
    """
    path = Path(path)
    if path.suffix.lower() == '.csv':
        # Tickers such as NA or NULL are symbols, not missing values
        df = pd.read_csv(path, dtype=str, keep_default_na=False, na_filter=False)
    else:
        df = pd.read_json(path, orient='records', dtype=False)

    if column not in df.columns:
        raise ScraperError(f"Symbol list {path} has no '{column}' field")

    symbols = [str(s).strip() for s in df[column].dropna().tolist()]
    symbols = [s for s in symbols if s]
    logger.info(f"Loaded {len(symbols)} symbols from {path}")
    return symbols


def resolve_symbols(symbols: Optional[List[str]], symbols_file: Optional[Path]) -> List[str]:
    """Explicit symbols win; otherwise fall back to the symbol list file."""
    if symbols:
        return list(symbols)
    if symbols_file is None:
        raise ScraperError("No symbols given and no symbol list configured")
    return load_symbols(symbols_file)
