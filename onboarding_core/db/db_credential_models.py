"""
Stored credential model.

Just the data structure - no business logic or class methods.
"""

from sqlalchemy import Column, String

from .db_base import EncryptedBinary, TimestampMixin, UUIDMixin
from .db_config import Base


class StoredCredential(Base, UUIDMixin, TimestampMixin):
    """Simple credential model - just data, no logic."""

    __tablename__ = "stored_credentials"

    kind = Column(String(50), nullable=False, index=True)
    username = Column(String(255), nullable=True)
    description = Column(String(255), nullable=False, default="")
    secret = Column(EncryptedBinary, nullable=False)  # Encrypted storage
