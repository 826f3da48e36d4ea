"""
Headless browser driver backed by the Playwright sync API.

The executor only relies on a small contract:

    driver.launch(options) -> session
    session.new_page() -> page
    page.goto(url, timeout_ms)
    page.find_and_activate(strategies, per_strategy_timeout_ms) -> strategy name or None
    page.wait(ms)
    page.current_url() -> str
    session.close()

so tests can swap in a fake driver without a real browser.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from playwright.sync_api import (
    sync_playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from ..email_processor.unsubscribe.exceptions import AutomationFailure, BrowserLaunchError
from ..email_processor.unsubscribe.logging import UnsubscribeLogger


@dataclass(frozen=True)
class LaunchOptions:
    """How the isolated browser session is started."""

    headless: bool = True
    chromium_sandbox: bool = True
    user_agent: Optional[str] = None
    args: Tuple[str, ...] = ('--disable-dev-shm-usage', '--disable-extensions')


@dataclass(frozen=True)
class SelectorStrategy:
    """One way of finding the confirmation control on an unsubscribe page."""

    name: str
    selector: str

    def activate(self, page, timeout_ms: int) -> None:
        """Click the first element matching the selector.

        Raises a Playwright error when nothing matches within ``timeout_ms``.
        """
        page.locator(self.selector).first.click(timeout=timeout_ms)


DEFAULT_STRATEGIES: Tuple[SelectorStrategy, ...] = (
    SelectorStrategy('button_text', 'button:has-text("Unsubscribe")'),
    SelectorStrategy('link_text', 'a:has-text("Unsubscribe")'),
    SelectorStrategy('action_attribute', '[data-action="unsubscribe"]'),
    SelectorStrategy('form_submit', 'form[action*="unsubscribe" i] [type="submit"]'),
)


class PlaywrightPage:
    """Single page of a browser session."""

    def __init__(self, page):
        self._page = page
        self.logger = UnsubscribeLogger("browser.page")

    def goto(self, url: str, timeout_ms: int) -> None:
        try:
            self._page.goto(url, wait_until='networkidle', timeout=timeout_ms)
        except PlaywrightTimeoutError:
            raise AutomationFailure(f'Navigation timed out after {timeout_ms} ms', stage='navigation')
        except PlaywrightError as e:
            raise AutomationFailure(f'Navigation failed: {e}', stage='navigation')

    def find_and_activate(self, strategies: Sequence[SelectorStrategy],
                          per_strategy_timeout_ms: int) -> Optional[str]:
        """Try strategies in order; return the name of the first that clicked."""
        for strategy in strategies:
            try:
                strategy.activate(self._page, per_strategy_timeout_ms)
            except PlaywrightError as e:
                self.logger.debug("Selector strategy did not match", {
                    'strategy': strategy.name,
                    'error': str(e).splitlines()[0] if str(e) else type(e).__name__
                })
                continue
            return strategy.name
        return None

    def wait(self, ms: int) -> None:
        self._page.wait_for_timeout(ms)

    def current_url(self) -> str:
        return self._page.url


class PlaywrightSession:
    """An isolated browser context; ``close`` is safe to call repeatedly."""

    def __init__(self, playwright, browser, context):
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self.closed = False

    def new_page(self) -> PlaywrightPage:
        try:
            return PlaywrightPage(self._context.new_page())
        except PlaywrightError as e:
            raise AutomationFailure(f'Could not open page: {e}', stage='new_page')

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self._context.close()
        finally:
            try:
                self._browser.close()
            finally:
                self._playwright.stop()


class PlaywrightDriver:
    """Launch headless Chromium sessions through Playwright."""

    def __init__(self):
        self.logger = UnsubscribeLogger("browser.driver")

    def launch(self, options: LaunchOptions) -> PlaywrightSession:
        try:
            playwright = sync_playwright().start()
        except Exception as e:
            raise BrowserLaunchError(f'Could not start Playwright: {e}')

        try:
            browser = playwright.chromium.launch(
                headless=options.headless,
                chromium_sandbox=options.chromium_sandbox,
                args=list(options.args)
            )
            context = browser.new_context(
                user_agent=options.user_agent,
                accept_downloads=False
            )
        except Exception as e:
            playwright.stop()
            raise BrowserLaunchError(f'Could not launch browser: {e}')

        self.logger.debug("Browser session launched", {
            'headless': options.headless,
            'sandbox': options.chromium_sandbox
        })
        return PlaywrightSession(playwright, browser, context)
