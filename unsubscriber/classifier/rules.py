"""
Rule-based marketing classification.

Rules are plain data: each one tests a single aspect of an email and
contributes its weight to a cumulative score when it matches. An email is
marketing when the score reaches ``MARKETING_THRESHOLD`` and should be
unsubscribed from when it also reaches ``UNSUBSCRIBE_THRESHOLD``.
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..email_processor.unsubscribe.types import Email, Classification

MARKETING_THRESHOLD = 0.5
UNSUBSCRIBE_THRESHOLD = 0.6

MARKETING_KEYWORDS: Tuple[str, ...] = (
    'unsubscribe', 'marketing', 'promotion', 'sale', 'discount', 'offer',
    'deal', 'newsletter', 'update your preferences', 'email preferences',
    'manage subscription',
)

MARKETING_SENDER_PATTERNS: Tuple[str, ...] = (
    r'noreply@', r'no-reply@', r'marketing@', r'newsletter@', r'promo@', r'deals@',
)


@dataclass(frozen=True)
class KeywordRule:
    """Matches when any keyword appears in subject, body or snippet."""

    keywords: Tuple[str, ...]
    weight: float
    description: str = 'Contains marketing keywords'

    def matches(self, email: Email) -> bool:
        text = f"{email.subject} {email.body} {email.snippet}".lower()
        return any(keyword.lower() in text for keyword in self.keywords)


@dataclass(frozen=True)
class SenderPatternRule:
    """Matches when the From value fits any of the regular expressions."""

    patterns: Tuple[str, ...]
    weight: float
    description: str = 'Sender matches marketing pattern'

    def matches(self, email: Email) -> bool:
        sender = email.sender_address
        return any(re.search(pattern, sender, re.IGNORECASE) for pattern in self.patterns)


@dataclass(frozen=True)
class HeaderRule:
    """Matches when the email carries List-Unsubscribe headers."""

    weight: float
    description: str = 'Has unsubscribe header'

    def matches(self, email: Email) -> bool:
        return bool(email.list_unsubscribe or email.list_unsubscribe_post)


DEFAULT_RULES: Tuple = (
    KeywordRule(MARKETING_KEYWORDS, 0.4),
    SenderPatternRule(MARKETING_SENDER_PATTERNS, 0.3),
    HeaderRule(0.3),
)


class RuleBasedClassifier:
    """Score an email against a table of weighted rules."""

    def __init__(self, rules: Sequence = DEFAULT_RULES,
                 marketing_threshold: float = MARKETING_THRESHOLD,
                 unsubscribe_threshold: float = UNSUBSCRIBE_THRESHOLD):
        self.rules = tuple(rules)
        self.marketing_threshold = marketing_threshold
        self.unsubscribe_threshold = unsubscribe_threshold

    def classify(self, email: Email) -> Classification:
        score = 0.0
        reasons: List[str] = []

        for rule in self.rules:
            if rule.matches(email):
                score += rule.weight
                reasons.append(rule.description)

        # 0.4 + 0.3 must compare and report as 0.7
        score = round(score, 6)
        confidence = min(score, 1.0)
        is_marketing = score >= self.marketing_threshold

        return Classification(
            is_marketing=is_marketing,
            confidence=confidence,
            reason='; '.join(reasons) or 'No marketing indicators found',
            should_unsubscribe=is_marketing and confidence >= self.unsubscribe_threshold,
        )

    def __call__(self, email: Email) -> Classification:
        return self.classify(email)

    def classify_all(self, emails: Sequence[Email]) -> List[Tuple[Email, Classification]]:
        return [(email, self.classify(email)) for email in emails]
