"""
Whitelist of senders that must never be unsubscribed from.

``WhitelistStore`` persists entries through SQLAlchemy. ``Whitelist`` is the
immutable snapshot a run works with: it is loaded once and then used as the
``Email -> bool`` registry collaborator.
"""

import re
from dataclasses import dataclass, field
from typing import List, Tuple, Pattern

from sqlalchemy.orm import Session

from ..database.models import (
    WhitelistEntry, ENTRY_DOMAIN, ENTRY_EMAIL, ENTRY_PATTERN, ENTRY_KINDS
)
from ..email_processor.unsubscribe.logging import UnsubscribeLogger
from ..email_processor.unsubscribe.types import Email

DEFAULT_WHITELIST_DOMAINS = ('gmail.com', 'google.com', 'github.com', 'linkedin.com')


@dataclass(frozen=True)
class Whitelist:
    """Read-only whitelist snapshot.

    Matching is case-insensitive: addresses and domains are substring
    matches against the sender, patterns are regular expressions tested
    against both the sender address and its domain.
    """

    domains: Tuple[str, ...] = ()
    emails: Tuple[str, ...] = ()
    patterns: Tuple[str, ...] = ()
    _compiled: Tuple[Pattern, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, '_compiled', tuple(
            re.compile(pattern, re.IGNORECASE) for pattern in self.patterns
        ))

    def matches(self, email: Email) -> bool:
        sender = email.sender_address
        domain = email.sender_domain

        if any(address.lower() in sender for address in self.emails if address):
            return True
        if domain and any(entry.lower() in domain for entry in self.domains if entry):
            return True
        return any(
            pattern.search(sender) or (domain and pattern.search(domain))
            for pattern in self._compiled
        )

    def __call__(self, email: Email) -> bool:
        return self.matches(email)


class WhitelistStore:
    """Persist whitelist entries in the database."""

    def __init__(self, session: Session):
        self.session = session
        self.logger = UnsubscribeLogger("whitelist")

    def add(self, value: str, kind: str = None) -> WhitelistEntry:
        """Add an entry; kind is inferred from '@' when not given.

        Returns the existing entry when the value is already whitelisted.
        """
        value = value.strip()
        if not value:
            raise ValueError("Whitelist value cannot be empty")
        if kind is None:
            kind = ENTRY_EMAIL if '@' in value else ENTRY_DOMAIN
        if kind not in ENTRY_KINDS:
            raise ValueError(f"Unknown whitelist kind: {kind}")
        if kind == ENTRY_PATTERN:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"Invalid whitelist pattern {value!r}: {e}")
        else:
            value = value.lower()

        existing = self.session.query(WhitelistEntry).filter_by(kind=kind, value=value).first()
        if existing:
            return existing

        entry = WhitelistEntry(kind=kind, value=value)
        self.session.add(entry)
        self.session.commit()
        self.logger.info("Whitelist entry added", {'kind': kind, 'value': value})
        return entry

    def remove(self, value: str, kind: str = None) -> bool:
        """Remove matching entries. Returns True if anything was deleted."""
        query = self.session.query(WhitelistEntry).filter(
            WhitelistEntry.value.in_({value.strip(), value.strip().lower()})
        )
        if kind is not None:
            query = query.filter(WhitelistEntry.kind == kind)

        deleted = query.delete(synchronize_session=False)
        self.session.commit()
        return deleted > 0

    def list_entries(self) -> List[WhitelistEntry]:
        return self.session.query(WhitelistEntry).order_by(
            WhitelistEntry.kind, WhitelistEntry.value
        ).all()

    def seed_defaults(self) -> int:
        """Populate the default domains when the whitelist is empty."""
        if self.session.query(WhitelistEntry).count() > 0:
            return 0
        for domain in DEFAULT_WHITELIST_DOMAINS:
            self.session.add(WhitelistEntry(kind=ENTRY_DOMAIN, value=domain))
        self.session.commit()
        return len(DEFAULT_WHITELIST_DOMAINS)

    def snapshot(self) -> Whitelist:
        """Load the whitelist once for the duration of a run."""
        entries = self.list_entries()
        return Whitelist(
            domains=tuple(e.value for e in entries if e.kind == ENTRY_DOMAIN),
            emails=tuple(e.value for e in entries if e.kind == ENTRY_EMAIL),
            patterns=tuple(e.value for e in entries if e.kind == ENTRY_PATTERN),
        )
