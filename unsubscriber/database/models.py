"""
Database models for the inbox unsubscriber.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, UniqueConstraint, create_engine
)
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

ENTRY_DOMAIN = 'domain'
ENTRY_EMAIL = 'email'
ENTRY_PATTERN = 'pattern'
ENTRY_KINDS = (ENTRY_DOMAIN, ENTRY_EMAIL, ENTRY_PATTERN)


class WhitelistEntry(Base):
    """A sender that must never be unsubscribed from."""
    __tablename__ = 'whitelist_entries'

    id = Column(Integer, primary_key=True)
    kind = Column(String(20), nullable=False)  # domain, email, pattern
    value = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        UniqueConstraint('kind', 'value', name='uq_whitelist_kind_value'),
    )

    def __repr__(self):
        return f"<WhitelistEntry(kind='{self.kind}', value='{self.value}')>"


def create_database_engine(database_url: str = "sqlite:///unsubscriber.db"):
    """Create database engine."""
    return create_engine(database_url, echo=False)


def create_tables(engine):
    """Create all tables."""
    Base.metadata.create_all(engine)


def get_session_maker(engine):
    """Get session maker for database operations."""
    return sessionmaker(bind=engine)
