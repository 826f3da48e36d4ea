"""
Result aggregation for processed emails.
"""

from .email_processor.unsubscribe.types import (
    Email, Classification, SafetyVerdict, Outcome, UnsubscribeReport
)


def aggregate_result(email: Email, classification: Classification,
                     verdict: SafetyVerdict, outcome: Outcome) -> UnsubscribeReport:
    """Compose the per-email record. Pure; performs no I/O."""
    return UnsubscribeReport(
        email_id=email.id,
        sender=email.sender,
        subject=email.subject,
        classification=classification,
        verdict=verdict,
        outcome=outcome
    )
