"""
Simple encryption utilities for stored secrets.

Handles cross-database encryption (PostgreSQL pgcrypto, SQLite plaintext for testing).
"""

from typing import Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from ..config import get_config
from ..exceptions import ErrorCode, ServiceError


def _encryption_key(key_suffix: str) -> str:
    base_key = get_config().security.encryption_key
    if not base_key:
        raise ServiceError(
            "Encryption key not configured",
            error_code=ErrorCode.CONFIGURATION_ERROR,
            operation="encrypt_value",
        )
    return f"{base_key}_{key_suffix}" if key_suffix else base_key


def encrypt_value(session: Session, value: str, key_suffix: str = "") -> bytes:
    """
    Encrypt a value using database-specific encryption.

    Args:
        session: Database session
        value: Value to encrypt
        key_suffix: Key suffix separating different kinds of secrets

    Returns:
        Encrypted bytes
    """
    if session.bind.dialect.name == "postgresql":
        result = session.execute(
            text("SELECT pgp_sym_encrypt(:data, :key)"),
            {"data": value, "key": _encryption_key(key_suffix)},
        ).scalar()

        return result
    else:
        # SQLite for testing - return as-is
        return value.encode() if isinstance(value, str) else value


def decrypt_value(session: Session, encrypted_value: bytes, key_suffix: str = "") -> Optional[str]:
    """
    Decrypt a value using database-specific decryption.

    Args:
        session: Database session
        encrypted_value: Encrypted bytes
        key_suffix: Key suffix used when the value was encrypted

    Returns:
        Decrypted string or None
    """
    if not encrypted_value:
        return None

    if session.bind.dialect.name == "postgresql":
        result = session.execute(
            text("SELECT pgp_sym_decrypt(:data, :key)"),
            {"data": encrypted_value, "key": _encryption_key(key_suffix)},
        ).scalar()

        return result
    else:
        # SQLite for testing
        if isinstance(encrypted_value, bytes):
            return encrypted_value.decode()
        return encrypted_value


def encrypt_password(session: Session, password: str) -> bytes:
    """Encrypt the callback password of the onboarding settings."""
    return encrypt_value(session, password, "settings_password")


def decrypt_password(session: Session, encrypted: bytes) -> Optional[str]:
    """Decrypt the callback password of the onboarding settings."""
    return decrypt_value(session, encrypted, "settings_password")


def encrypt_credential(session: Session, secret: str, credential_id: str) -> bytes:
    """Encrypt a stored credential secret with per-credential key isolation."""
    return encrypt_value(session, secret, f"cred_{credential_id}")


def decrypt_credential(session: Session, encrypted: bytes, credential_id: str) -> Optional[str]:
    """Decrypt a stored credential secret."""
    return decrypt_value(session, encrypted, f"cred_{credential_id}")
