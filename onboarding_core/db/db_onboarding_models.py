"""
Onboarding settings and category models.

Just the data structure - mapping to and from schemas lives in the configuration store.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .db_base import EncryptedBinary, TimestampMixin
from .db_config import Base

# The settings table holds a single row
SETTINGS_ROW_ID = "onboarding"


class OnboardingSettingsRecord(Base, TimestampMixin):
    """Single settings row."""

    __tablename__ = "onboarding_settings"

    id = Column(String(36), primary_key=True, default=SETTINGS_ROW_ID)
    name = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    url = Column(Text, nullable=False, default="")
    username = Column(String(255), nullable=False, default="")
    password = Column(EncryptedBinary, nullable=True)  # Encrypted storage

    entries = relationship(
        "OnboardingEntryRecord",
        order_by="OnboardingEntryRecord.position",
        cascade="all, delete-orphan",
        back_populates="settings",
    )


class OnboardingEntryRecord(Base, TimestampMixin):
    """One onboarding category; ``position`` keeps the submitted order."""

    __tablename__ = "onboarding_entries"

    id = Column(String(36), primary_key=True)
    settings_id = Column(
        String(36), ForeignKey("onboarding_settings.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(255), nullable=False)
    position = Column(Integer, nullable=False)

    settings = relationship("OnboardingSettingsRecord", back_populates="entries")
