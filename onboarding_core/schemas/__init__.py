"""Pydantic schemas for the onboarding core."""

from .credential_schemas import CredentialCreate, ResolvedCredential
from .onboarding_schemas import (
    CallbackResult,
    ConfigurationSubmission,
    Entry,
    EntryCandidate,
    FieldCheck,
    OnboardingSettings,
)

__all__ = [
    "CallbackResult",
    "ConfigurationSubmission",
    "CredentialCreate",
    "Entry",
    "EntryCandidate",
    "FieldCheck",
    "OnboardingSettings",
    "ResolvedCredential",
]
