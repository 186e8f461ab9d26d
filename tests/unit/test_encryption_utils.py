"""
Unit tests for encryption utilities.

Tests database-specific encryption (SQLite plaintext for testing, PostgreSQL pgcrypto).
Note: We use SQLite in tests, so PostgreSQL paths are tested with mocks.
"""

from unittest.mock import Mock

import pytest
from sqlalchemy.orm import Session

from onboarding_core.exceptions import ServiceError
from onboarding_core.utils.encryption_utils import (
    decrypt_credential,
    decrypt_password,
    decrypt_value,
    encrypt_credential,
    encrypt_password,
    encrypt_value,
)


def _postgres_session(scalar_result):
    session = Mock()
    session.bind.dialect.name = "postgresql"
    session.execute.return_value.scalar.return_value = scalar_result
    return session


class TestSQLite:
    """Test the plaintext path used with SQLite."""

    def test_encrypt_value_basic(self, db_session: Session):
        """Test encrypting value with SQLite (returns plaintext)."""
        encrypted = encrypt_value(db_session, "test_secret_value")

        assert encrypted == b"test_secret_value"

    def test_encrypt_unicode_value(self, db_session: Session):
        value = "unicode_üîê_secret"
        assert encrypt_value(db_session, value, "suffix") == value.encode("utf-8")

    def test_decrypt_value(self, db_session: Session):
        assert decrypt_value(db_session, b"secret") == "secret"
        assert decrypt_value(db_session, "secret") == "secret"

    def test_decrypt_empty_value(self, db_session: Session):
        assert decrypt_value(db_session, b"") is None
        assert decrypt_value(db_session, None) is None

    def test_password_helpers(self, db_session: Session):
        assert decrypt_password(db_session, encrypt_password(db_session, "pw")) == "pw"

    def test_credential_helpers(self, db_session: Session):
        encrypted = encrypt_credential(db_session, "token", "cred-1")
        assert decrypt_credential(db_session, encrypted, "cred-1") == "token"


class TestPostgres:
    """Test the pgcrypto path with a mocked session."""

    def test_encrypt_uses_pgcrypto_with_suffixed_key(self, app_config):
        app_config.security.encryption_key = "base"
        session = _postgres_session(b"\x01\x02")

        result = encrypt_credential(session, "token", "cred-1")

        assert result == b"\x01\x02"
        statement, params = session.execute.call_args.args
        assert "pgp_sym_encrypt" in str(statement)
        assert params == {"data": "token", "key": "base_cred_cred-1"}

    def test_decrypt_uses_pgcrypto(self, app_config):
        app_config.security.encryption_key = "base"
        session = _postgres_session("pw")

        assert decrypt_password(session, b"\x01") == "pw"
        statement, params = session.execute.call_args.args
        assert "pgp_sym_decrypt" in str(statement)
        assert params["key"] == "base_settings_password"

    def test_missing_key(self, app_config):
        app_config.security.encryption_key = None

        with pytest.raises(ServiceError, match="Encryption key not configured"):
            encrypt_value(_postgres_session(None), "value")
