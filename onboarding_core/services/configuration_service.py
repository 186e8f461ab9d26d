"""
Onboarding configuration context.

Owns the onboarding settings and the category registry for one host process.
The host constructs it explicitly, opens it (cold load from the configuration
store) and closes it (final flush). Every successful mutation is saved at once;
a rejected submission leaves settings and registry untouched.
"""

import threading
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from ..config import get_config
from ..constants import CallbackErrorKind, CredentialKind, Messages
from ..dispatcher import CallbackDispatcher
from ..exceptions import ConfigurationError, CredentialNotFoundError, ServiceError, ValidationError
from ..registry import CandidateLike, Registry
from ..schemas.onboarding_schemas import (
    CallbackResult,
    ConfigurationSubmission,
    Entry,
    FieldCheck,
    OnboardingSettings,
)
from ..stores.configuration_store import ConfigurationStore
from ..stores.credential_store import CredentialStore
from ..utils.logger import get_logger
from ..validation import check_name, check_username, is_blank, is_valid_name, is_valid_username


class OnboardingConfiguration:
    """
    Settings of the onboarding integration plus its category registry.

    This service provides:
    - Cold load from, and save-on-every-change to, a configuration store
    - Validated setters for each settings field
    - Atomic binding of a full configuration form submission
    - Connection tests and credential submission through the callback dispatcher
    """

    def __init__(
        self,
        store: ConfigurationStore,
        credential_store: Optional[CredentialStore] = None,
        dispatcher: Optional[CallbackDispatcher] = None,
        preserve_ids: Optional[bool] = None,
    ):
        self.store = store
        self.credential_store = credential_store
        self.dispatcher = dispatcher or CallbackDispatcher()
        self.preserve_ids = (
            preserve_ids if preserve_ids is not None else get_config().registry.preserve_ids
        )
        self.registry = Registry()
        self.logger = get_logger()

        self._lock = threading.RLock()
        self._settings = OnboardingSettings()
        self._opened = False

    # ==================== LIFECYCLE ====================

    def open(self) -> "OnboardingConfiguration":
        """Load settings and entries from the store; a second call is a no-op."""
        with self._lock:
            if self._opened:
                return self
            settings = self.store.load()
            self._settings = settings.model_copy(update={"entries": ()})
            self.registry = Registry(settings.entries)
            self._opened = True

        self.logger.info(
            "Onboarding configuration loaded",
            extra={"entry_count": len(self.registry), "has_url": bool(settings.url)},
        )
        return self

    def close(self) -> None:
        """Flush the current state to the store; nothing is written if it was never opened."""
        with self._lock:
            if not self._opened:
                return
            self._save()
            self._opened = False
        self.logger.info("Onboarding configuration closed")

    def __enter__(self) -> "OnboardingConfiguration":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ==================== READ ACCESS ====================

    @property
    def name(self) -> str:
        return self._settings.name

    @property
    def description(self) -> str:
        return self._settings.description

    @property
    def url(self) -> str:
        return self._settings.url

    @property
    def username(self) -> str:
        return self._settings.username

    @property
    def password(self) -> SecretStr:
        return self._settings.password

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self.registry.list()

    def snapshot(self) -> OnboardingSettings:
        """Settings and entries as one immutable value."""
        with self._lock:
            return self._settings.model_copy(update={"entries": self.registry.list()})

    def category_choices(self) -> List[Tuple[str, str]]:
        return self.registry.selection_choices()

    def credential_choices(self) -> List[Tuple[str, str]]:
        """String credentials for a drop-down, headed by an empty choice."""
        choices = [("", "")]
        if self.credential_store is not None:
            choices.extend(self.credential_store.list_choices(CredentialKind.STRING))
        return choices

    # ==================== SETTERS ====================

    def set_name(self, name: str) -> None:
        if not is_valid_name(name):
            raise ValidationError(Messages.NAME_INVALID, field="name", value=name)
        self._update(name=name)

    def set_description(self, description: str) -> None:
        self._update(description=description)

    def set_url(self, url: str) -> None:
        self._update(url=url)

    def set_username(self, username: str) -> None:
        if not is_valid_username(username):
            raise ValidationError(Messages.USERNAME_INVALID, field="username", value=username)
        self._update(username=username)

    def set_password(self, password: Any) -> None:
        if not isinstance(password, SecretStr):
            password = SecretStr(password or "")
        self._update(password=password)

    def set_entries(self, candidates: Optional[List[CandidateLike]]) -> Tuple[Entry, ...]:
        """Replace all categories; None keeps the current ones and saves nothing."""
        if candidates is None:
            return self.registry.list()
        with self._mutation():
            entries = self.registry.replace_all(candidates, preserve_ids=self.preserve_ids)
        return entries

    def add_entry(self, name: str) -> Entry:
        with self._mutation():
            entry = self.registry.add(name)
        return entry

    def rename_entry(self, entry_id: str, new_name: str) -> Entry:
        with self._mutation():
            entry = self.registry.rename(entry_id, new_name)
        return entry

    def remove_entry(self, entry_id: str) -> Entry:
        with self._mutation():
            entry = self.registry.remove(entry_id)
        return entry

    # ==================== FORM HANDLING ====================

    def check_name(self, name: str) -> FieldCheck:
        return check_name(name)

    def check_username(self, username: str) -> FieldCheck:
        return check_username(username)

    def configure(self, form_data: Mapping[str, Any]) -> OnboardingSettings:
        """
        Bind a full configuration form submission.

        Args:
            form_data: Submitted fields (name, description, url, username, password, entries)

        Returns:
            The settings now in effect

        Raises:
            ConfigurationError: If any field is invalid; nothing is changed in that case
        """
        try:
            submission = ConfigurationSubmission.model_validate(dict(form_data))
        except PydanticValidationError as e:
            raise ConfigurationError("Configuration submission could not be parsed", cause=e)

        if not is_valid_name(submission.name):
            raise ConfigurationError(Messages.NAME_INVALID, field="name")
        if not is_valid_username(submission.username):
            raise ConfigurationError(Messages.USERNAME_INVALID, field="username")

        update = {
            "name": submission.name,
            "description": submission.description,
            "url": submission.url,
            "username": submission.username,
        }
        if submission.password is not None:
            update["password"] = submission.password

        with self._mutation():
            self._settings = self._settings.model_copy(update=update)
            self.registry.replace_all(submission.entries, preserve_ids=self.preserve_ids)
        settings = self.snapshot()

        self.logger.info(
            "Onboarding configuration submitted", extra={"entry_count": len(settings.entries)}
        )
        return settings

    # ==================== CALLBACKS ====================

    def test_connection(self, url: str, username: str, password: Any) -> CallbackResult:
        """Check arbitrary (typically not yet saved) callback settings."""
        return self.dispatcher.test_connection(url, username, password)

    def submit_credential(self, credential_id: Optional[str]) -> CallbackResult:
        """
        Resolve a stored string credential and POST its secret to the configured endpoint.

        Args:
            credential_id: Id of the credential in the credential store

        Returns:
            CallbackResult
        """
        if is_blank(credential_id):
            return CallbackResult.failure(
                CallbackErrorKind.MISSING_FIELD, Messages.MISSING_CREDENTIAL_ID
            )
        if self.credential_store is None:
            raise ServiceError(
                "No credential store configured",
                operation="submit_credential",
                credential_id=credential_id,
            )

        try:
            credential = self.credential_store.resolve(credential_id)
        except CredentialNotFoundError as e:
            return CallbackResult.failure(CallbackErrorKind.CREDENTIAL_NOT_FOUND, e.message)

        settings = self.snapshot()
        return self.dispatcher.submit_resolved(
            settings.url, settings.username, settings.password, credential
        )

    # ==================== INTERNALS ====================

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        """Apply a change and save it; on any failure restore the previous state."""
        with self._lock:
            if not self._opened:
                raise ServiceError(
                    "Onboarding configuration is not open; call open() before changing it",
                    operation="mutation",
                )
            previous_settings = self._settings
            previous_entries = self.registry.list()
            try:
                yield
                self._save()
            except Exception:
                self._settings = previous_settings
                self.registry.reset(previous_entries)
                raise

    def _update(self, **fields: Any) -> None:
        with self._mutation():
            self._settings = self._settings.model_copy(update=fields)

    def _save(self) -> None:
        self.store.save(self.snapshot())
