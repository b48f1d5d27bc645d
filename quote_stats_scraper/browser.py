"""
Playwright browser session used for rendering the quote pages.
"""

import logging

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import ScraperConfig

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Safari/605.1.15"
)


class BrowserSession:
    """
    One browser and one page, reused serially for every load of a symbol.

    Use as a context manager; the browser is closed on every exit path.
    """

    def __init__(self, config: ScraperConfig):
        self.config = config
        self._playwright = None
        self._browser = None
        self.page = None

    def __enter__(self) -> 'BrowserSession':
        self._playwright = sync_playwright().start()
        try:
            engine = getattr(self._playwright, self.config.browser)
            self._browser = engine.launch(headless=self.config.headless)
            context = self._browser.new_context(
                user_agent=USER_AGENT,
                viewport={"width": 1920, "height": 1080}
            )
            self.page = context.new_page()
        except Exception:
            self.close()
            raise
        logger.debug(f"Opened {self.config.browser} session")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        if self._browser is not None:
            try:
                self._browser.close()
            except PlaywrightError as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
        self.page = None

    # ------------------------------------------------------------------
    # Page operations
    # ------------------------------------------------------------------

    def goto(self, url: str):
        """Navigate and wait for the network to settle; raises on failure."""
        response = self.page.goto(url, timeout=self.config.network_idle_timeout_ms)
        if response is not None and response.status >= 400:
            raise PlaywrightError(f"HTTP {response.status} for {url}")
        self.wait_for_network_idle()

    def wait_for_network_idle(self):
        self.page.wait_for_load_state('networkidle', timeout=self.config.network_idle_timeout_ms)

    def content(self) -> str:
        return self.page.content()

    def click_first(self, selector: str) -> bool:
        """Click the first element matching selector and let the page settle."""
        try:
            handles = self.page.query_selector_all(selector)
            if not handles:
                return False
            handles[0].click(timeout=self.config.network_idle_timeout_ms)
            self.wait_for_network_idle()
        except PlaywrightError as e:
            logger.warning(f"Could not click '{selector}': {e}")
            return False
        return True

