"""
Pydantic schemas for stored credentials.

Defines the structure and validation for the kinds of secrets a credential
store can hold and resolve.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from ..constants import CredentialKind


class BaseCredentialSchema(BaseModel):
    """Base schema for all credential types."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",  # Don't allow extra fields
    )


class CredentialCreate(BaseCredentialSchema):
    """Schema for storing a new credential."""

    id: Optional[str] = Field(None, max_length=100, description="Caller-chosen credential id")
    kind: CredentialKind = Field(default=CredentialKind.STRING, description="Credential kind")
    secret: SecretStr = Field(..., description="Secret text or password")
    username: Optional[str] = Field(None, description="Username, for username/password kind")
    description: str = Field(default="", max_length=255, description="Label shown in choices")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v):
        """Credential ids cannot be blank."""
        if v is not None and not v:
            raise ValueError("Credential id cannot be empty")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        """Validate username format."""
        if v is not None and (not v or v.isspace()):
            raise ValueError("Username cannot be empty or whitespace")
        return v


class ResolvedCredential(BaseModel):
    """A credential looked up by id, secret still wrapped."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Credential id")
    kind: CredentialKind = Field(..., description="Credential kind")
    secret: Optional[SecretStr] = Field(None, description="Secret text or password")
    username: Optional[str] = Field(None, description="Username, for username/password kind")
    description: str = Field(default="", description="Label shown in choices")

    @property
    def is_string_secret(self) -> bool:
        return self.kind == CredentialKind.STRING

    @property
    def label(self) -> str:
        return self.description or self.id
