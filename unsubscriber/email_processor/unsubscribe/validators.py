"""
Unsubscribe candidate validation and deduplication.

A candidate passes when it is an http(s) URL with a host that is not on the
shortener deny-list. Survivors keep their order and are deduplicated on the
normalized URL plus method.
"""

import urllib.parse
from typing import Iterable, List, Optional, Tuple

from .constants import (
    URL_SHORTENERS, ALLOWED_SCHEMES,
    REJECT_SCHEME, REJECT_NO_HOST, REJECT_SHORTENER, REJECT_DUPLICATE
)
from .logging import UnsubscribeLogger
from .types import UnsubscribeCandidate, ValidatedCandidate, ValidationRejection


def normalize_url(url: str) -> str:
    """Canonical form used for deduplication.

    Scheme and host are lower-cased, the fragment is dropped and a trailing
    slash on the path is removed. Query strings are kept verbatim since they
    usually carry the recipient token.
    """
    parts = urllib.parse.urlsplit(url.strip())
    path = parts.path.rstrip('/')
    return urllib.parse.urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), path, parts.query, '')
    )


class UnsubscribeLinkValidator:
    """Reject invalid or suspicious candidates, preserving order."""

    def __init__(self, denied_hosts: Optional[Iterable[str]] = None):
        hosts = URL_SHORTENERS if denied_hosts is None else denied_hosts
        self.denied_hosts = tuple(host.strip().lower() for host in hosts if host.strip())
        self.logger = UnsubscribeLogger("link_validator")

    def is_valid(self, candidate: UnsubscribeCandidate) -> bool:
        return self.rejection_reason(candidate) is None

    def rejection_reason(self, candidate: UnsubscribeCandidate) -> Optional[str]:
        """Return why a candidate fails validation, or None if it passes."""
        try:
            parsed = urllib.parse.urlsplit(candidate.url.strip())
            host = parsed.hostname
        except ValueError:
            return REJECT_NO_HOST

        if parsed.scheme.lower() not in ALLOWED_SCHEMES:
            return REJECT_SCHEME
        if not host:
            return REJECT_NO_HOST
        if self._is_denied_host(host.lower()):
            return REJECT_SHORTENER
        return None

    def _is_denied_host(self, host: str) -> bool:
        return any(host == denied or host.endswith('.' + denied) for denied in self.denied_hosts)

    def partition(self, candidates: Iterable[UnsubscribeCandidate]
                  ) -> Tuple[List[ValidatedCandidate], List[ValidationRejection]]:
        """Split candidates into validated ones and rejection records."""
        validated: List[ValidatedCandidate] = []
        rejections: List[ValidationRejection] = []
        seen = set()

        for candidate in candidates:
            reason = self.rejection_reason(candidate)
            if reason is not None:
                rejections.append(ValidationRejection(candidate, reason))
                continue

            item = ValidatedCandidate(candidate, normalize_url(candidate.url))
            if item.dedup_key in seen:
                rejections.append(ValidationRejection(candidate, REJECT_DUPLICATE))
                continue
            seen.add(item.dedup_key)
            validated.append(item)

        for rejection in rejections:
            self.logger.debug("Candidate rejected", {
                'url': rejection.candidate.url,
                'source': rejection.candidate.source,
                'reason': rejection.reason
            })
        return validated, rejections

    def filter(self, candidates: Iterable[UnsubscribeCandidate]) -> List[ValidatedCandidate]:
        """Valid candidates in original order, first occurrence per URL+method."""
        validated, _ = self.partition(candidates)
        return validated
