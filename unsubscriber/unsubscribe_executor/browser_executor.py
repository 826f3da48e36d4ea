"""
Browser Automation Unsubscribe Executor

Opens the unsubscribe page in a headless browser and clicks the
confirmation control a human would click. The browser session is the one
expensive resource of the engine: it is launched per attempt and closed
exactly once before the attempt returns, whatever happens in between.
"""

from typing import Dict, Any, Optional, Sequence

from ..email_processor.unsubscribe.constants import METHOD_BROWSER
from ..email_processor.unsubscribe.exceptions import AutomationFailure
from ..email_processor.unsubscribe.types import Email, ValidatedCandidate
from .base_executor import BaseUnsubscribeExecutor
from .browser_driver import DEFAULT_STRATEGIES, LaunchOptions, PlaywrightDriver, SelectorStrategy


class BrowserAutomationExecutor(BaseUnsubscribeExecutor):
    """Execute browser_link candidates by simulating the unsubscribe click."""

    def __init__(
        self,
        driver=None,
        navigation_timeout_ms: int = 30000,
        strategy_timeout_ms: int = 5000,
        settle_ms: int = 2000,
        strategies: Sequence[SelectorStrategy] = DEFAULT_STRATEGIES,
        launch_options: Optional[LaunchOptions] = None,
        rate_limit_delay: float = 0.0
    ):
        """
        Initialize browser executor.

        Args:
            driver: Object implementing ``launch(options)``; Playwright by default
            navigation_timeout_ms: Upper bound for page load (network idle)
            strategy_timeout_ms: Time each selector strategy may take
            settle_ms: Grace period after a successful click
            strategies: Ordered selector strategies
            launch_options: Browser launch options
            rate_limit_delay: Delay in seconds between attempts
        """
        super().__init__(navigation_timeout_ms // 1000, rate_limit_delay)
        self.driver = driver if driver is not None else PlaywrightDriver()
        self.navigation_timeout_ms = navigation_timeout_ms
        self.strategy_timeout_ms = strategy_timeout_ms
        self.settle_ms = settle_ms
        self.strategies = tuple(strategies)
        self.launch_options = launch_options or LaunchOptions()

    @property
    def method_name(self) -> str:
        return METHOD_BROWSER

    def _perform_execution(self, candidate: ValidatedCandidate, email: Email) -> Dict[str, Any]:
        try:
            session = self.driver.launch(self.launch_options)
        except Exception as e:
            return {
                'success': False,
                'error_message': f'Browser launch failed: {e}'
            }

        try:
            page = session.new_page()
            page.goto(candidate.url, self.navigation_timeout_ms)

            activated = page.find_and_activate(self.strategies, self.strategy_timeout_ms)
            if activated:
                try:
                    page.wait(self.settle_ms)
                except Exception as e:
                    # click already landed
                    self.logger.warning("Settle wait interrupted", {
                        'url': candidate.url,
                        'error': str(e)
                    })

            try:
                final_url = page.current_url() or ''
            except Exception:
                if not activated:
                    raise
                final_url = ''
            success = bool(activated) or 'unsubscribe' in final_url.lower()

            self.logger.debug("Browser unsubscribe finished", {
                'url': candidate.url,
                'strategy': activated,
                'final_url': final_url
            })

            result = {
                'success': success,
                'final_url': final_url
            }
            if not success:
                result['error_message'] = 'No unsubscribe control found'
            return result

        except AutomationFailure as e:
            return {
                'success': False,
                'error_message': str(e)
            }
        finally:
            self._close_session(session, candidate)

    def _close_session(self, session, candidate: ValidatedCandidate) -> None:
        """Close the browser; a teardown error never changes the attempt result."""
        try:
            session.close()
        except Exception as e:
            self.logger.warning("Browser teardown failed", {
                'url': candidate.url,
                'error_type': type(e).__name__,
                'error': str(e)
            })
