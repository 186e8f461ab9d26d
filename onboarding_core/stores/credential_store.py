"""
Credential stores: look up secrets by opaque id at call time.

Only the id of a credential is ever kept in the onboarding settings; the secret
is resolved here when a callback needs it.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from pydantic import SecretStr
from sqlalchemy.exc import SQLAlchemyError

from ..constants import CredentialKind
from ..db.db_config import DatabaseManager, get_db_manager
from ..db.db_credential_models import StoredCredential
from ..exceptions import CredentialNotFoundError, RepositoryError
from ..schemas.credential_schemas import CredentialCreate, ResolvedCredential
from ..utils.encryption_utils import decrypt_credential, encrypt_credential
from ..utils.logger import get_logger


def _not_found(credential_id: str) -> CredentialNotFoundError:
    return CredentialNotFoundError(
        f"No credential found with id: {credential_id}", credential_id=credential_id
    )


class CredentialStore(ABC):
    """Store/resolve contract for credentials."""

    @abstractmethod
    def resolve(self, credential_id: str) -> ResolvedCredential:
        """
        Look up a credential.

        Raises:
            CredentialNotFoundError: If no credential has this id
        """

    @abstractmethod
    def store(self, credential: CredentialCreate) -> str:
        """Store a credential (replacing one with the same id) and return its id."""

    @abstractmethod
    def delete(self, credential_id: str) -> bool:
        """Delete a credential; False if it did not exist."""

    @abstractmethod
    def list_credentials(self, kind: Optional[CredentialKind] = None) -> List[ResolvedCredential]:
        """All credentials, optionally of one kind, secrets left out."""

    def list_choices(self, kind: Optional[CredentialKind] = None) -> List[Tuple[str, str]]:
        """(label, id) pairs for a credential drop-down."""
        return [(credential.label, credential.id) for credential in self.list_credentials(kind)]


class InMemoryCredentialStore(CredentialStore):
    """Process-local credential store."""

    def __init__(self):
        self._credentials: Dict[str, ResolvedCredential] = {}

    def resolve(self, credential_id: str) -> ResolvedCredential:
        credential = self._credentials.get(credential_id)
        if credential is None:
            raise _not_found(credential_id)
        return credential

    def store(self, credential: CredentialCreate) -> str:
        credential_id = credential.id or str(uuid.uuid4())
        self._credentials[credential_id] = ResolvedCredential(
            id=credential_id,
            kind=credential.kind,
            secret=credential.secret,
            username=credential.username,
            description=credential.description,
        )
        return credential_id

    def delete(self, credential_id: str) -> bool:
        return self._credentials.pop(credential_id, None) is not None

    def list_credentials(self, kind: Optional[CredentialKind] = None) -> List[ResolvedCredential]:
        return [
            credential.model_copy(update={"secret": None})
            for credential in self._credentials.values()
            if kind is None or credential.kind == kind
        ]


class SqlCredentialStore(CredentialStore):
    """SQLAlchemy-backed credential store with encrypted secrets."""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self.db_manager = db_manager or get_db_manager()
        self.logger = get_logger()

    def resolve(self, credential_id: str) -> ResolvedCredential:
        self.logger.info("Credential access attempt", extra={"credential_id": credential_id})

        with self.db_manager.session_factory() as session:
            try:
                record = session.get(StoredCredential, credential_id)
                if record is None:
                    raise _not_found(credential_id)
                secret = decrypt_credential(session, record.secret, record.id)
                return ResolvedCredential(
                    id=record.id,
                    kind=CredentialKind(record.kind),
                    secret=SecretStr(secret) if secret is not None else None,
                    username=record.username,
                    description=record.description,
                )
            except SQLAlchemyError as e:
                raise RepositoryError(
                    f"Failed to resolve credential: {str(e)}",
                    cause=e,
                    credential_id=credential_id,
                )

    def store(self, credential: CredentialCreate) -> str:
        credential_id = credential.id or str(uuid.uuid4())

        with self.db_manager.session_factory() as session:
            try:
                record = session.get(StoredCredential, credential_id)
                if record is None:
                    record = StoredCredential(id=credential_id)
                    session.add(record)
                record.kind = credential.kind.value
                record.username = credential.username
                record.description = credential.description
                record.secret = encrypt_credential(
                    session, credential.secret.get_secret_value(), credential_id
                )
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise RepositoryError(
                    f"Failed to store credential: {str(e)}",
                    cause=e,
                    credential_id=credential_id,
                )

        self.logger.info(
            "Stored credential",
            extra={"credential_id": credential_id, "kind": credential.kind.value},
        )
        return credential_id

    def delete(self, credential_id: str) -> bool:
        with self.db_manager.session_factory() as session:
            try:
                record = session.get(StoredCredential, credential_id)
                if record is None:
                    return False
                session.delete(record)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise RepositoryError(
                    f"Failed to delete credential: {str(e)}",
                    cause=e,
                    credential_id=credential_id,
                )
        self.logger.info("Deleted credential", extra={"credential_id": credential_id})
        return True

    def list_credentials(self, kind: Optional[CredentialKind] = None) -> List[ResolvedCredential]:
        with self.db_manager.session_factory() as session:
            query = session.query(StoredCredential)
            if kind is not None:
                query = query.filter(StoredCredential.kind == kind.value)
            records = query.order_by(StoredCredential.created_at, StoredCredential.id).all()
            return [
                ResolvedCredential(
                    id=record.id,
                    kind=CredentialKind(record.kind),
                    username=record.username,
                    description=record.description,
                )
                for record in records
            ]
