"""Configuration and credential stores."""

from .configuration_store import (
    ConfigurationStore,
    InMemoryConfigurationStore,
    SqlConfigurationStore,
)
from .credential_store import CredentialStore, InMemoryCredentialStore, SqlCredentialStore

__all__ = [
    "ConfigurationStore",
    "CredentialStore",
    "InMemoryConfigurationStore",
    "InMemoryCredentialStore",
    "SqlConfigurationStore",
    "SqlCredentialStore",
]
