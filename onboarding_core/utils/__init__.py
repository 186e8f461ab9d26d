"""Utility modules for the onboarding core."""

# Encryption utilities
from .encryption_utils import (
    decrypt_credential,
    decrypt_password,
    decrypt_value,
    encrypt_credential,
    encrypt_password,
    encrypt_value,
)

# Logging utilities
from .logger import (
    ContextAwareLogger,
    CorrelationIdFilter,
    configure_logging,
    get_logger,
)

__all__ = [
    "decrypt_credential",
    "decrypt_password",
    "decrypt_value",
    "encrypt_credential",
    "encrypt_password",
    "encrypt_value",
    "ContextAwareLogger",
    "CorrelationIdFilter",
    "configure_logging",
    "get_logger",
]
