"""
Single-email unsubscribe engine.

Runs the safety gate first, and only when it allows proceeding extracts,
validates and executes candidates. ``process`` never raises: every failure
is carried in the Outcome of the returned report.
"""

from typing import Optional

from .config import Config
from .email_processor.unsubscribe import UnsubscribeLinkExtractor, UnsubscribeLinkValidator
from .email_processor.unsubscribe.constants import REASON_BLOCKED, REASON_NOT_REQUESTED
from .email_processor.unsubscribe.logging import UnsubscribeLogger
from .email_processor.unsubscribe.types import (
    Email, Classification, Outcome, SafetyVerdict, UnsubscribeReport
)
from .reporting import aggregate_result
from .safety import SafetyGate
from .unsubscribe_executor import (
    ExecutionLadder, HttpGetExecutor, HttpPostExecutor, BrowserAutomationExecutor,
    LaunchOptions
)


class UnsubscribeEngine:
    """Resolve and execute the unsubscribe of one email."""

    def __init__(
        self,
        extractor: UnsubscribeLinkExtractor,
        validator: UnsubscribeLinkValidator,
        gate: SafetyGate,
        ladder: ExecutionLadder,
        simulate: bool = True
    ):
        self.extractor = extractor
        self.validator = validator
        self.gate = gate
        self.ladder = ladder
        self.simulate = simulate
        self.logger = UnsubscribeLogger("engine")

    @classmethod
    def from_config(cls, simulate: Optional[bool] = None, driver=None) -> 'UnsubscribeEngine':
        """Wire the default components from Config."""
        executors = [
            HttpGetExecutor(
                timeout=Config.REQUEST_TIMEOUT,
                user_agent=Config.USER_AGENT,
                rate_limit_delay=Config.RATE_LIMIT_DELAY
            ),
            HttpPostExecutor(
                timeout=Config.REQUEST_TIMEOUT,
                user_agent=Config.USER_AGENT,
                rate_limit_delay=Config.RATE_LIMIT_DELAY
            ),
            BrowserAutomationExecutor(
                driver=driver,
                navigation_timeout_ms=Config.BROWSER_TIMEOUT_MS,
                strategy_timeout_ms=Config.BROWSER_STRATEGY_TIMEOUT_MS,
                settle_ms=Config.BROWSER_SETTLE_MS,
                launch_options=LaunchOptions(
                    chromium_sandbox=Config.BROWSER_SANDBOX,
                    user_agent=Config.USER_AGENT
                )
            ),
        ]
        return cls(
            extractor=UnsubscribeLinkExtractor(),
            validator=UnsubscribeLinkValidator(Config.shortener_domains()),
            gate=SafetyGate(min_confidence=Config.MIN_CONFIDENCE),
            ladder=ExecutionLadder(executors),
            simulate=Config.DRY_RUN if simulate is None else simulate
        )

    def process(self, email: Email, classification: Classification,
                whitelisted: bool) -> UnsubscribeReport:
        verdict = SafetyVerdict(proceed=False)
        try:
            with self.logger.scoped_context({'email_id': email.id}):
                verdict = self.gate.evaluate(email, classification, whitelisted)
                outcome = self._resolve(email, verdict)
        except Exception as e:
            self.logger.log_exception(e, {'email_id': email.id})
            outcome = Outcome(success=False, failure_reason=f'unexpected error: {e}',
                              simulated=self.simulate)
        return aggregate_result(email, classification, verdict, outcome)

    def _resolve(self, email: Email, verdict: SafetyVerdict) -> Outcome:
        if verdict.is_blocked:
            return Outcome(
                success=False,
                failure_reason=f"{REASON_BLOCKED}: {'; '.join(verdict.issues)}",
                simulated=self.simulate
            )
        if not verdict.proceed:
            return Outcome(success=False, failure_reason=REASON_NOT_REQUESTED,
                           simulated=self.simulate)

        candidates = self.extractor.extract(email)
        validated, rejections = self.validator.partition(candidates)
        self.logger.info("Resolved unsubscribe candidates", {
            'extracted': len(candidates),
            'validated': len(validated),
            'rejected': len(rejections)
        })
        return self.ladder.run(validated, email, simulate=self.simulate)
