"""
Batch processing of many emails, one at a time.

Cancellation is cooperative: ``should_cancel`` is checked between emails,
never while a ladder is running.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from .email_processor.unsubscribe.logging import UnsubscribeLogger
from .email_processor.unsubscribe.types import Email, Classification, UnsubscribeReport
from .engine import UnsubscribeEngine


@dataclass
class BatchSummary:
    """Counters and reports of one batch run."""

    processed: int = 0
    candidates: int = 0
    skipped: int = 0
    blocked: int = 0
    succeeded: int = 0
    failed: int = 0
    cancelled: bool = False
    reports: List[UnsubscribeReport] = field(default_factory=list)

    def record(self, report: UnsubscribeReport):
        self.candidates += 1
        self.reports.append(report)
        if report.verdict.is_blocked:
            self.blocked += 1
        elif report.success:
            self.succeeded += 1
        else:
            self.failed += 1


class BatchProcessor:
    """Classify emails and run the engine for the ones worth unsubscribing."""

    def __init__(
        self,
        engine: UnsubscribeEngine,
        classify: Callable[[Email], Classification],
        is_whitelisted: Callable[[Email], bool],
        min_confidence: float = 0.7
    ):
        self.engine = engine
        self.classify = classify
        self.is_whitelisted = is_whitelisted
        self.min_confidence = min_confidence
        self.logger = UnsubscribeLogger("batch")

    def process(self, emails: Iterable[Email],
                should_cancel: Optional[Callable[[], bool]] = None) -> BatchSummary:
        summary = BatchSummary()

        with self.logger.time_operation("batch"):
            for email in emails:
                if should_cancel is not None and should_cancel():
                    summary.cancelled = True
                    self.logger.warning("Batch cancelled", {'processed': summary.processed})
                    break

                summary.processed += 1
                classification = self.classify(email)
                if not classification.is_marketing or classification.confidence < self.min_confidence:
                    summary.skipped += 1
                    self.logger.debug("Skipping email", {
                        'email_id': email.id,
                        'is_marketing': classification.is_marketing,
                        'confidence': classification.confidence
                    })
                    continue

                report = self.engine.process(email, classification, self.is_whitelisted(email))
                summary.record(report)

        return summary
