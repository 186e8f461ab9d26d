"""
Pydantic schemas for onboarding settings, registry entries and check results.

Defines the structure and validation of the data exchanged between the
registry, the configuration context, the stores and the callback dispatcher.
"""

import re
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from ..constants import NAME_PATTERN, USERNAME_PATTERN, CallbackErrorKind, FieldCheckError


class Entry(BaseModel):
    """A named, uniquely identified onboarding category."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Category name")
    id: str = Field(..., min_length=1, description="Opaque unique identifier")


class EntryCandidate(BaseModel):
    """An entry as submitted by an administrator; ``id`` is set for rows that already existed."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Category name")
    id: Optional[str] = Field(None, description="Identifier of an existing entry, if any")


class OnboardingSettings(BaseModel):
    """Settings shown in the onboarding section of the administrator configuration."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(default="", description="Display name of the onboarding integration")
    description: str = Field(default="", description="Free-text description")
    url: str = Field(default="", description="Callback endpoint")
    username: str = Field(default="", description="Basic Auth username")
    password: SecretStr = Field(default=SecretStr(""), description="Basic Auth password")
    entries: Tuple[Entry, ...] = Field(default=(), description="Onboarding categories in order")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Letters and spaces only."""
        if not re.fullmatch(NAME_PATTERN, v):
            raise ValueError("Name can only contain letters and spaces")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        """Letters only."""
        if not re.fullmatch(USERNAME_PATTERN, v):
            raise ValueError("Username can only contain letters")
        return v


class ConfigurationSubmission(BaseModel):
    """A full configuration form submission."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=False)

    name: str = ""
    description: str = ""
    url: str = ""
    username: str = ""
    password: Optional[SecretStr] = None
    entries: Optional[List[EntryCandidate]] = None


class FieldCheck(BaseModel):
    """Outcome of a single form-field check."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    error: Optional[FieldCheckError] = None
    message: str = ""

    @classmethod
    def success(cls) -> "FieldCheck":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: FieldCheckError, message: str) -> "FieldCheck":
        return cls(ok=False, error=error, message=message)


class CallbackResult(BaseModel):
    """Outcome of a single callback attempt."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    error: Optional[CallbackErrorKind] = None
    message: str = ""
    status_code: Optional[int] = Field(None, description="HTTP status received, if any")

    @classmethod
    def success(cls, message: str = "", status_code: Optional[int] = 200) -> "CallbackResult":
        return cls(ok=True, message=message, status_code=status_code)

    @classmethod
    def failure(
        cls, error: CallbackErrorKind, message: str, status_code: Optional[int] = None
    ) -> "CallbackResult":
        return cls(ok=False, error=error, message=message, status_code=status_code)
