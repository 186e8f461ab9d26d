"""
SQLAlchemy models and database configuration for the onboarding core.
"""

# Import base definitions
from .db_base import (
    EncryptedBinary,
    TimestampMixin,
    UUIDMixin,
    utc_now,
)

# Import configuration
from .db_config import (
    Base,
    DatabaseConfig,
    DatabaseManager,
    close_db,
    get_db_manager,
    get_default_config,
    import_all_models,
    initialize_db,
    set_db_manager,
)
from .db_credential_models import StoredCredential
from .db_onboarding_models import OnboardingEntryRecord, OnboardingSettingsRecord

__all__ = [
    # Base definitions
    "Base",
    "EncryptedBinary",
    "TimestampMixin",
    "UUIDMixin",
    "utc_now",
    # Configuration
    "DatabaseConfig",
    "DatabaseManager",
    "close_db",
    "get_db_manager",
    "get_default_config",
    "import_all_models",
    "initialize_db",
    "set_db_manager",
    # Models
    "OnboardingEntryRecord",
    "OnboardingSettingsRecord",
    "StoredCredential",
]
