"""
Durable storage for onboarding settings.

A configuration store is the collaborator the configuration context loads from on
start-up and saves to after every successful mutation.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..db.db_config import DatabaseManager, get_db_manager
from ..db.db_onboarding_models import (
    SETTINGS_ROW_ID,
    OnboardingEntryRecord,
    OnboardingSettingsRecord,
)
from ..exceptions import RepositoryError
from ..schemas.onboarding_schemas import Entry, OnboardingSettings
from ..utils.encryption_utils import decrypt_password, encrypt_password
from ..utils.logger import get_logger


class ConfigurationStore(ABC):
    """Load/save contract for onboarding settings."""

    @abstractmethod
    def load(self) -> OnboardingSettings:
        """Return the stored settings, or defaults when nothing was saved yet."""

    @abstractmethod
    def save(self, settings: OnboardingSettings) -> None:
        """Persist ``settings`` durably, replacing what was stored."""


class InMemoryConfigurationStore(ConfigurationStore):
    """Process-local store, for hosts that persist elsewhere and for tests."""

    def __init__(self, initial: Optional[OnboardingSettings] = None):
        self._settings = initial.model_copy(deep=True) if initial else OnboardingSettings()
        self.save_count = 0

    def load(self) -> OnboardingSettings:
        return self._settings.model_copy(deep=True)

    def save(self, settings: OnboardingSettings) -> None:
        self._settings = settings.model_copy(deep=True)
        self.save_count += 1


class SqlConfigurationStore(ConfigurationStore):
    """
    SQLAlchemy-backed store: one settings row plus one row per entry.

    The password is encrypted with the database-specific helpers before it is written.
    """

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self.db_manager = db_manager or get_db_manager()
        self.logger = get_logger()

    def load(self) -> OnboardingSettings:
        with self.db_manager.session_factory() as session:
            try:
                record = session.get(OnboardingSettingsRecord, SETTINGS_ROW_ID)
                if record is None:
                    self.logger.info("No stored onboarding settings, using defaults")
                    return OnboardingSettings()

                password = decrypt_password(session, record.password) if record.password else ""
                settings = OnboardingSettings(
                    name=record.name,
                    description=record.description,
                    url=record.url,
                    username=record.username,
                    password=SecretStr(password or ""),
                    entries=tuple(Entry(name=row.name, id=row.id) for row in record.entries),
                )
            except SQLAlchemyError as e:
                raise RepositoryError(
                    f"Failed to load onboarding settings: {str(e)}", cause=e, operation="load"
                )
            except PydanticValidationError as e:
                raise RepositoryError(
                    "Stored onboarding settings are invalid", cause=e, operation="load"
                )

        self.logger.debug("Loaded onboarding settings", extra={"entry_count": len(settings.entries)})
        return settings

    def save(self, settings: OnboardingSettings) -> None:
        with self.db_manager.session_factory() as session:
            try:
                record = session.get(OnboardingSettingsRecord, SETTINGS_ROW_ID)
                if record is None:
                    record = OnboardingSettingsRecord(id=SETTINGS_ROW_ID)
                    session.add(record)

                record.name = settings.name
                record.description = settings.description
                record.url = settings.url
                record.username = settings.username
                password = settings.password.get_secret_value()
                record.password = encrypt_password(session, password) if password else None

                existing = {row.id: row for row in record.entries}
                rows = []
                for position, entry in enumerate(settings.entries):
                    row = existing.get(entry.id)
                    if row is None:
                        row = OnboardingEntryRecord(id=entry.id)
                    row.name = entry.name
                    row.position = position
                    rows.append(row)
                record.entries = rows

                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise RepositoryError(
                    f"Failed to save onboarding settings: {str(e)}", cause=e, operation="save"
                )

        self.logger.info("Saved onboarding settings", extra={"entry_count": len(settings.entries)})
