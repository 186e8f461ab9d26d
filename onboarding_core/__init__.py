"""
Onboarding core: a validated category registry with authenticated HTTP callbacks.
"""

from .dispatcher import CallbackDispatcher, basic_auth_header
from .registry import Registry
from .schemas import (
    CallbackResult,
    CredentialCreate,
    Entry,
    EntryCandidate,
    FieldCheck,
    OnboardingSettings,
    ResolvedCredential,
)
from .services import OnboardingConfiguration
from .validation import check_name, check_username, is_valid_name, is_valid_username

__version__ = "0.1.0"

__all__ = [
    "CallbackDispatcher",
    "CallbackResult",
    "CredentialCreate",
    "Entry",
    "EntryCandidate",
    "FieldCheck",
    "OnboardingConfiguration",
    "OnboardingSettings",
    "Registry",
    "ResolvedCredential",
    "basic_auth_header",
    "check_name",
    "check_username",
    "is_valid_name",
    "is_valid_username",
]
