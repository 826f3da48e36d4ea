"""
Unsubscribe resolution module.

This module provides:
- Candidate extraction from List-Unsubscribe headers, HTML and plain text
- Validation of candidates against scheme rules and a shortener deny-list
- The shared data model of the resolution pipeline
"""

from .extractors import UnsubscribeLinkExtractor
from .validators import UnsubscribeLinkValidator, normalize_url
from .types import (
    Email, Classification, UnsubscribeCandidate, ValidatedCandidate,
    ValidationRejection, ExecutionAttempt, Outcome, SafetyVerdict,
    UnsubscribeReport
)

__all__ = [
    'UnsubscribeLinkExtractor',
    'UnsubscribeLinkValidator',
    'normalize_url',
    'Email',
    'Classification',
    'UnsubscribeCandidate',
    'ValidatedCandidate',
    'ValidationRejection',
    'ExecutionAttempt',
    'Outcome',
    'SafetyVerdict',
    'UnsubscribeReport'
]
