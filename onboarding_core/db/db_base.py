"""
Base column types and mixins for the onboarding models.

Keeps cross-database compatibility (SQLite/PostgreSQL).
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import BYTEA
from sqlalchemy.types import TypeDecorator


def utc_now():
    """Return current UTC time with timezone info attached."""
    return datetime.now(UTC)


class EncryptedBinary(TypeDecorator):
    """
    Cross-database encrypted binary type.
    Uses BYTEA for PostgreSQL and Text for SQLite.
    """

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(BYTEA())
        else:
            return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if dialect.name == "postgresql":
            return value
        else:
            # SQLite: ensure it's a string for TEXT column
            if isinstance(value, bytes):
                return value.decode("utf-8", errors="ignore")
            return value

    def process_result_value(self, value, dialect):
        # Just pass through - encryption/decryption handled in utils
        return value


class TimestampMixin:
    """Simple mixin for created_at/updated_at timestamps."""

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)


class UUIDMixin:
    """Simple mixin for UUID primary keys."""

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
