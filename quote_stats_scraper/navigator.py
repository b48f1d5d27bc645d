"""
Bounded-retry page navigation.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from playwright.sync_api import TimeoutError as PlaywrightTimeout

from .config import Patterns, ScraperError

logger = logging.getLogger(__name__)


class NavigationStatus(Enum):
    LOADED = 'loaded'
    TIMEOUT = 'timeout'
    REFUSED = 'refused'
    FAILED = 'failed'


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of a navigation, after all attempts."""
    url: str
    status: NavigationStatus
    attempts: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is NavigationStatus.LOADED


class NavigationError(ScraperError):
    """Raised by callers that cannot continue without the page."""

    def __init__(self, result: NavigationResult):
        super().__init__(
            f"Navigation to {result.url} ended as {result.status.value} "
            f"after {result.attempts} attempt(s): {result.error}"
        )
        self.result = result


def classify_failure(error: Exception) -> NavigationStatus:
    """Map a navigation exception to a status."""
    if isinstance(error, (PlaywrightTimeout, TimeoutError)):
        return NavigationStatus.TIMEOUT
    if isinstance(error, ConnectionError) or Patterns.NETWORK_REFUSED.search(str(error)):
        return NavigationStatus.REFUSED
    return NavigationStatus.FAILED


class RetryingNavigator:
    """
    Load a URL through ``load`` up to ``max_attempts`` times.

    Every failed attempt is classified and logged; the final result tells
    the caller whether the page is usable.
    """

    def __init__(
        self,
        load: Callable[[str], None],
        max_attempts: int = 4,
        backoff_seconds: float = 0.0
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.load = load
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds

    def navigate(self, url: str) -> NavigationResult:
        status = NavigationStatus.FAILED
        error_text = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                self.load(url)
                if attempt > 1:
                    logger.info(f"Loaded {url} on attempt {attempt}")
                return NavigationResult(url, NavigationStatus.LOADED, attempt)
            except Exception as e:
                status = classify_failure(e)
                error_text = str(e).splitlines()[0] if str(e) else type(e).__name__
                logger.warning(
                    f"Attempt {attempt}/{self.max_attempts} for {url} failed "
                    f"({status.value}): {error_text}"
                )
                if self.backoff_seconds and attempt < self.max_attempts:
                    time.sleep(self.backoff_seconds)

        logger.error(f"Giving up on {url} after {self.max_attempts} attempts")
        return NavigationResult(url, status, self.max_attempts, error_text)
