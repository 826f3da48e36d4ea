"""
Execution ladder: try validated candidates in order until one works.

Candidates arrive already ordered by source trust (header, html, text).
They are attempted one at a time and the ladder stops at the first success.
In simulate mode nothing is executed at all.
"""

from typing import Dict, List, Sequence

from ..email_processor.unsubscribe.constants import REASON_NO_CANDIDATES, REASON_ALL_FAILED
from ..email_processor.unsubscribe.logging import UnsubscribeLogger
from ..email_processor.unsubscribe.types import (
    Email, ExecutionAttempt, Outcome, ValidatedCandidate
)
from .base_executor import BaseUnsubscribeExecutor


class ExecutionLadder:
    """Dispatch candidates to the executor registered for their method."""

    def __init__(self, executors: Sequence[BaseUnsubscribeExecutor]):
        self.executors: Dict[str, BaseUnsubscribeExecutor] = {
            executor.method_name: executor for executor in executors
        }
        self.logger = UnsubscribeLogger("execution_ladder")

    def run(self, candidates: Sequence[ValidatedCandidate], email: Email,
            simulate: bool = True) -> Outcome:
        """Produce exactly one Outcome for the given candidates."""
        candidates = list(candidates)

        if not candidates:
            return Outcome(success=False, failure_reason=REASON_NO_CANDIDATES, simulated=simulate)

        if simulate:
            self.logger.info("DRY RUN: would unsubscribe using candidates", {
                'email_id': email.id,
                'candidates': [c.url for c in candidates]
            })
            return Outcome(success=True, candidates=candidates, simulated=True)

        attempts: List[ExecutionAttempt] = []
        for candidate in candidates:
            attempt = self._attempt(candidate, email)
            attempts.append(attempt)
            if attempt.success:
                return Outcome(
                    success=True,
                    method_used=attempt.method,
                    attempts=attempts,
                    candidates=candidates
                )

        self.logger.warning("All unsubscribe attempts failed", {
            'email_id': email.id,
            'attempts': len(attempts)
        })
        return Outcome(
            success=False,
            attempts=attempts,
            failure_reason=REASON_ALL_FAILED,
            candidates=candidates
        )

    def _attempt(self, candidate: ValidatedCandidate, email: Email) -> ExecutionAttempt:
        executor = self.executors.get(candidate.method)
        if executor is None:
            return ExecutionAttempt(
                candidate=candidate,
                success=False,
                error=f'No executor registered for method {candidate.method}'
            )
        try:
            return executor.attempt(candidate, email)
        except Exception as e:
            # Executors built on the base class never raise; custom ones might.
            return ExecutionAttempt(candidate=candidate, success=False, error=f'Unexpected error: {e}')
