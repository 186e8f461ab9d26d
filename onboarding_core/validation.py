"""
Field validators for onboarding settings.

Pure functions: no I/O, no exceptions. Both patterns accept the empty string,
so the ``check_*`` helpers report emptiness separately before testing the pattern.
"""

import re
from typing import Optional

from .constants import NAME_PATTERN, USERNAME_PATTERN, FieldCheckError, Messages
from .schemas.onboarding_schemas import FieldCheck

_NAME_RE = re.compile(NAME_PATTERN)
_USERNAME_RE = re.compile(USERNAME_PATTERN)


def is_match(value: str, pattern: "re.Pattern[str]") -> bool:
    """Return True if the whole of ``value`` matches ``pattern``."""
    return pattern.fullmatch(value) is not None


def is_valid_name(value: str) -> bool:
    """ASCII letters and spaces only (empty string included)."""
    return is_match(value, _NAME_RE)


def is_valid_username(value: str) -> bool:
    """ASCII letters only (empty string included)."""
    return is_match(value, _USERNAME_RE)


def is_blank(value: Optional[str]) -> bool:
    """True for None, the empty string, or whitespace only."""
    return value is None or not value.strip()


def check_name(value: str) -> FieldCheck:
    """Form check for the settings name field."""
    if len(value) == 0:
        return FieldCheck.failure(FieldCheckError.EMPTY, Messages.NAME_EMPTY)
    if not is_valid_name(value):
        return FieldCheck.failure(FieldCheckError.INVALID_FORMAT, Messages.NAME_INVALID)
    return FieldCheck.success()


def check_username(value: str) -> FieldCheck:
    """Form check for the callback username field."""
    if len(value) == 0:
        return FieldCheck.failure(FieldCheckError.EMPTY, Messages.USERNAME_EMPTY)
    if not is_valid_username(value):
        return FieldCheck.failure(FieldCheckError.INVALID_FORMAT, Messages.USERNAME_INVALID)
    return FieldCheck.success()
