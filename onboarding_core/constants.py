"""
Constants and enums for the onboarding core.

This module centralizes the magic strings used throughout the package
so that validation messages, environment variables and wire details stay consistent.
"""

from enum import Enum


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    DATABASE_URL = "DATABASE_URL"
    APP_ENV = "APP_ENV"
    LOG_LEVEL = "LOG_LEVEL"
    DEBUG = "DEBUG"
    ENCRYPTION_KEY = "ENCRYPTION_KEY"
    CALLBACK_TIMEOUT = "CALLBACK_TIMEOUT"
    CALLBACK_VERIFY_SSL = "CALLBACK_VERIFY_SSL"
    REGISTRY_PRESERVE_IDS = "REGISTRY_PRESERVE_IDS"


class FieldCheckError(str, Enum):
    """Failure kinds reported by the field validators."""

    EMPTY = "empty"
    INVALID_FORMAT = "invalid-format"


class CallbackErrorKind(str, Enum):
    """Failure kinds reported by the callback dispatcher."""

    MISSING_FIELD = "missing-field"
    UNSUPPORTED_CREDENTIAL_TYPE = "unsupported-credential-type"
    CREDENTIAL_NOT_FOUND = "credential-not-found"
    EMPTY_SECRET = "empty-secret"
    HTTP_STATUS = "http-status"
    TRANSPORT_FAILURE = "transport-failure"


class CredentialKind(str, Enum):
    """Kinds of secrets held by a credential store."""

    STRING = "string"
    USERNAME_PASSWORD = "username_password"


# Allowed character classes
NAME_PATTERN = r"^[a-zA-Z ]*$"
USERNAME_PATTERN = r"^[a-zA-Z]*$"


class Messages:
    """User-facing messages."""

    NAME_EMPTY = "Please enter your name"
    NAME_INVALID = "Invalid name format"
    USERNAME_EMPTY = "Please enter your Username"
    USERNAME_INVALID = "Invalid Username format"
    MISSING_FIELD = "url or username or password must not be null or empty"
    MISSING_CREDENTIAL_ID = "credentialsId must not be null or empty"
    EMPTY_SECRET = "The credential secret must not be null or empty"
    UNSUPPORTED_CREDENTIAL = "Only string credentials are supported"
    CONNECTION_OK = "Input Validated"


# Time-related constants (in seconds)
class Timeouts:
    """Timeout values in seconds."""

    CALLBACK_REQUEST = 30
