"""
Safety gate deciding whether an unsubscribe may run for an email.

Whitelist membership is the only blocking issue. Everything else the gate
notices (low confidence, transactional wording, important senders) is a
warning that ends up in the report but does not stop the run.
"""

from typing import List, Optional, Sequence

from ..email_processor.unsubscribe.logging import UnsubscribeLogger
from ..email_processor.unsubscribe.types import Email, Classification, SafetyVerdict

TRANSACTIONAL_KEYWORDS: List[str] = [
    'receipt', 'invoice', 'order confirmation', 'shipping', 'delivery',
    'password reset', 'verification', 'account'
]

IMPORTANT_SENDERS: List[str] = [
    'bank', 'paypal', 'amazon', 'apple', 'microsoft', 'google'
]

ISSUE_WHITELISTED = 'Email is whitelisted'
WARNING_TRANSACTIONAL = 'May be a transactional email'
WARNING_IMPORTANT_SENDER = 'From potentially important sender'


class SafetyGate:
    """Combine classification and whitelist membership into a verdict."""

    def __init__(self, min_confidence: float = 0.7,
                 transactional_keywords: Optional[Sequence[str]] = None,
                 important_senders: Optional[Sequence[str]] = None):
        self.min_confidence = min_confidence
        self.transactional_keywords = list(
            TRANSACTIONAL_KEYWORDS if transactional_keywords is None else transactional_keywords
        )
        self.important_senders = list(
            IMPORTANT_SENDERS if important_senders is None else important_senders
        )
        self.logger = UnsubscribeLogger("safety_gate")

    def evaluate(self, email: Email, classification: Classification,
                 whitelisted: bool) -> SafetyVerdict:
        issues = []
        warnings = []

        if whitelisted:
            issues.append(ISSUE_WHITELISTED)

        if classification.confidence < self.min_confidence:
            warnings.append(f'Low confidence ({classification.confidence})')

        subject_snippet = f"{email.subject or ''} {email.snippet or ''}".lower()
        if any(keyword in subject_snippet for keyword in self.transactional_keywords):
            warnings.append(WARNING_TRANSACTIONAL)

        if any(name in email.sender_address for name in self.important_senders):
            warnings.append(WARNING_IMPORTANT_SENDER)

        proceed = not issues and classification.should_unsubscribe
        verdict = SafetyVerdict(proceed=proceed, issues=issues, warnings=warnings)

        if issues:
            self.logger.info("Unsubscribe blocked", {'email_id': email.id, 'issues': issues})
        elif warnings:
            self.logger.debug("Unsubscribe allowed with warnings", {
                'email_id': email.id, 'warnings': warnings
            })
        return verdict
