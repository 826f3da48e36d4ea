"""
Type-safe dataclasses for the unsubscribe resolution pipeline.

Every value here is created fresh for one email and discarded once the
report has been produced. Nothing in this module is persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, List, Optional, Tuple

from .constants import SENDER_DOMAIN_PATTERN


@dataclass(frozen=True)
class Email:
    """An already-fetched email, as handed over by the mail source."""

    id: str
    thread_id: Optional[str] = None
    subject: str = ''
    sender: str = ''
    recipient: str = ''
    date: Optional[str] = None
    body: str = ''
    html_body: str = ''
    snippet: str = ''
    list_unsubscribe: Optional[str] = None
    list_unsubscribe_post: bool = False

    @property
    def sender_address(self) -> str:
        """Lower-cased From value."""
        return (self.sender or '').lower()

    @property
    def sender_domain(self) -> str:
        """Domain part of the sender address, or '' if there is none."""
        match = SENDER_DOMAIN_PATTERN.search(self.sender_address)
        return match.group(1) if match else ''


@dataclass(frozen=True)
class Classification:
    """Verdict of an external classifier."""

    is_marketing: bool
    confidence: float
    reason: str = ''
    should_unsubscribe: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_marketing': self.is_marketing,
            'confidence': self.confidence,
            'reason': self.reason,
            'should_unsubscribe': self.should_unsubscribe,
        }


@dataclass(frozen=True)
class UnsubscribeCandidate:
    """A detected, not yet validated, unsubscribe mechanism."""

    source: str
    url: str
    method: str
    text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'source': self.source, 'url': self.url, 'method': self.method}
        if self.text:
            result['text'] = self.text
        return result


@dataclass(frozen=True)
class ValidatedCandidate:
    """A candidate that passed validation."""

    candidate: UnsubscribeCandidate
    normalized_url: str

    @property
    def url(self) -> str:
        return self.candidate.url

    @property
    def method(self) -> str:
        return self.candidate.method

    @property
    def source(self) -> str:
        return self.candidate.source

    @property
    def dedup_key(self) -> Tuple[str, str]:
        return (self.normalized_url, self.candidate.method)

    def to_dict(self) -> Dict[str, Any]:
        return self.candidate.to_dict()


@dataclass(frozen=True)
class ValidationRejection:
    """Record of a candidate dropped during validation."""

    candidate: UnsubscribeCandidate
    reason: str


@dataclass(frozen=True)
class ExecutionAttempt:
    """One try of one candidate."""

    candidate: ValidatedCandidate
    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    final_url: Optional[str] = None
    attempted_at: datetime = field(default_factory=datetime.now)

    @property
    def method(self) -> str:
        return self.candidate.method

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'url': self.candidate.url,
            'method': self.candidate.method,
            'source': self.candidate.source,
            'success': self.success,
            'attempted_at': self.attempted_at.isoformat(),
        }
        if self.status_code is not None:
            result['status_code'] = self.status_code
        if self.error:
            result['error'] = self.error
        if self.final_url:
            result['final_url'] = self.final_url
        return result


@dataclass(frozen=True)
class Outcome:
    """Result of running the execution ladder for one email."""

    success: bool
    method_used: Optional[str] = None
    attempts: List[ExecutionAttempt] = field(default_factory=list)
    failure_reason: Optional[str] = None
    candidates: List[ValidatedCandidate] = field(default_factory=list)
    simulated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'method_used': self.method_used,
            'simulated': self.simulated,
            'failure_reason': self.failure_reason,
            'candidates': [candidate.to_dict() for candidate in self.candidates],
            'attempts': [attempt.to_dict() for attempt in self.attempts],
        }


@dataclass(frozen=True)
class SafetyVerdict:
    """Proceed/block decision of the safety gate."""

    proceed: bool
    issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_blocked(self) -> bool:
        return bool(self.issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'proceed': self.proceed,
            'issues': list(self.issues),
            'warnings': list(self.warnings),
        }


@dataclass(frozen=True)
class UnsubscribeReport:
    """Single reportable record for one processed email."""

    email_id: str
    sender: str
    subject: str
    classification: Classification
    verdict: SafetyVerdict
    outcome: Outcome

    @property
    def success(self) -> bool:
        return self.outcome.success

    def to_dict(self) -> Dict[str, Any]:
        return {
            'email_id': self.email_id,
            'sender': self.sender,
            'subject': self.subject,
            'classification': self.classification.to_dict(),
            'safety': self.verdict.to_dict(),
            'outcome': self.outcome.to_dict(),
        }
