"""
Base Unsubscribe Executor

Provides common functionality for all unsubscribe execution methods:
- Rate limiting between requests of the same executor
- Conversion of method-specific results into ExecutionAttempt records
- Capture of any exception as a failed attempt
- Template method pattern for execution workflow

Dry-run handling lives in the ExecutionLadder, so executors always act.
"""

import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, Optional

from ..email_processor.unsubscribe.logging import UnsubscribeLogger
from ..email_processor.unsubscribe.types import Email, ExecutionAttempt, ValidatedCandidate


class BaseUnsubscribeExecutor(ABC):
    """
    Abstract base class for all unsubscribe executors.

    Subclasses implement ``_perform_execution`` and return a result dict;
    ``attempt`` turns that dict (or any exception) into an ExecutionAttempt.
    """

    def __init__(self, timeout: int = 30, rate_limit_delay: float = 0.0):
        """
        Initialize base executor.

        Args:
            timeout: Request timeout in seconds
            rate_limit_delay: Minimum delay in seconds between requests
        """
        self.timeout = timeout
        self.rate_limit_delay = rate_limit_delay
        self._last_request_time: Optional[float] = None
        self.logger = UnsubscribeLogger(f"executor.{self.method_name}")

    @property
    @abstractmethod
    def method_name(self) -> str:
        """Return the candidate method handled (http_get, http_post, browser_link)."""
        pass

    def attempt(self, candidate: ValidatedCandidate, email: Email) -> ExecutionAttempt:
        """
        Execute one candidate (template method).

        Workflow:
        1. Apply rate limiting
        2. Perform method-specific execution
        3. Record the result as an ExecutionAttempt

        Never raises; failures are carried in the returned attempt.
        """
        attempted_at = datetime.now()
        self._apply_rate_limit()

        try:
            result = self._perform_execution(candidate, email)
        except Exception as e:
            self.logger.warning("Unsubscribe attempt raised", {
                'url': candidate.url,
                'error_type': type(e).__name__,
                'error': str(e)
            })
            result = {
                'success': False,
                'error_message': f'Unexpected error: {e}'
            }

        attempt = ExecutionAttempt(
            candidate=candidate,
            success=bool(result.get('success', False)),
            status_code=result.get('status_code'),
            error=result.get('error_message'),
            final_url=result.get('final_url'),
            attempted_at=attempted_at
        )

        self.logger.info("Unsubscribe attempt finished", {
            'url': candidate.url,
            'source': candidate.source,
            'success': attempt.success,
            'status_code': attempt.status_code,
            'error': attempt.error
        })
        return attempt

    @abstractmethod
    def _perform_execution(self, candidate: ValidatedCandidate, email: Email) -> Dict[str, Any]:
        """
        Perform method-specific unsubscribe execution.

        Returns:
            Dict with at minimum:
            - success (bool): Whether execution succeeded
            - status_code (int, optional): HTTP status
            - error_message (str, optional): Error details if failed
            - final_url (str, optional): Page URL after browser automation
        """
        pass

    def _apply_rate_limit(self):
        """Apply rate limiting delay between requests."""
        if self._last_request_time is not None and self.rate_limit_delay > 0:
            elapsed = time.time() - self._last_request_time
            if elapsed < self.rate_limit_delay:
                time.sleep(self.rate_limit_delay - elapsed)

        self._last_request_time = time.time()
