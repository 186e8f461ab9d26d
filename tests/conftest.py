"""
Shared test fixtures for the onboarding core.

This module provides database setup, configuration isolation and common test data.
"""

import pytest
from sqlalchemy.orm import Session

from onboarding_core.config import AppConfig, reset_config, set_config
from onboarding_core.db import (
    DatabaseConfig,
    DatabaseManager,
    import_all_models,
)
from onboarding_core.db.db_config import init_db, set_db_manager
from onboarding_core.utils.logger import reset_logging


@pytest.fixture(autouse=True)
def app_config(monkeypatch) -> AppConfig:
    """Fresh application config per test, independent of the caller's environment."""
    for name in ("LOG_LEVEL", "CALLBACK_TIMEOUT", "CALLBACK_VERIFY_SSL", "REGISTRY_PRESERVE_IDS"):
        monkeypatch.delenv(name, raising=False)
    config = AppConfig()
    config.dispatcher.timeout = 5
    set_config(config)
    reset_logging()
    yield config
    reset_config()
    reset_logging()


@pytest.fixture
def db_config() -> DatabaseConfig:
    """Create SQLite in-memory database configuration for testing."""
    return DatabaseConfig(
        db_type="sqlite",
        database=":memory:",
        echo=False,
        development_mode=True,
    )


@pytest.fixture
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Database manager with all tables created, registered as the global manager."""
    import_all_models()

    manager = DatabaseManager(db_config)
    init_db(manager)
    set_db_manager(manager)

    yield manager

    set_db_manager(None)
    manager.drop_tables()
    manager.close()


@pytest.fixture
def db_session(db_manager: DatabaseManager) -> Session:
    """
    Create a database session for each test.

    The session is rolled back and closed after each test.
    """
    session = db_manager.session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def sample_entry_names() -> list:
    """Standard category names for testing."""
    return ["Backend", "Frontend", "Data Platform"]
