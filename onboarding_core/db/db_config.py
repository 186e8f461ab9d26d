from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ..config import get_config
from ..exceptions import ErrorCode, ServiceError, ValidationError
from ..utils import get_logger

# Base class for all SQLAlchemy models
Base: Any = declarative_base()


class DatabaseConfig(BaseModel):
    db_type: str = "postgres"
    database: str = ""
    host: Optional[str] = None
    port: str = "5432"
    username: Optional[str] = None
    password: Optional[str] = None
    url: Optional[str] = None
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    echo: bool = False
    development_mode: bool = False

    def get_connection_string(self) -> str:
        if self.url:
            return self.url
        if self.db_type.lower() == "postgres":
            if not all([self.host, self.database, self.username, self.password]):
                raise ValidationError(
                    "Missing required Postgres configuration parameters",
                    field="database_config",
                    error_code=ErrorCode.MISSING_REQUIRED,
                    value={"host": self.host, "database": self.database, "username": self.username},
                )
            return (
                f"postgresql://{self.username}:{self.password}@"
                f"{self.host}:{self.port}/{self.database}"
            )
        elif self.db_type.lower() == "sqlite":
            return f"sqlite:///{self.database}"
        raise ValidationError(
            f"Unsupported database type: {self.db_type}",
            field="db_type",
            error_code=ErrorCode.INVALID_FORMAT,
            value=self.db_type,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.get_connection_string().startswith("sqlite")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        """String representation with masked password for security."""
        return (
            f"DatabaseConfig("
            f"db_type='{self.db_type}', "
            f"host='{self.host}', "
            f"port='{self.port}', "
            f"database='{self.database}', "
            f"username='{self.username}', "
            f"password='***')"
        )


class DatabaseManager:
    """
    Database connection manager that uses a Pydantic DatabaseConfig.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.engine = self._create_engine()
        self.session_factory = sessionmaker(bind=self.engine)

    def _create_engine(self):
        connection_string = self.config.get_connection_string()
        if self.config.is_sqlite:
            connect_args = {"check_same_thread": False}
            if connection_string in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, so every session sees the same in-memory database
                from sqlalchemy.pool import StaticPool

                return create_engine(
                    connection_string,
                    echo=self.config.echo,
                    connect_args=connect_args,
                    poolclass=StaticPool,
                )
            return create_engine(
                connection_string, echo=self.config.echo, connect_args=connect_args
            )
        return create_engine(
            connection_string,
            echo=self.config.echo,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
        )

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        if self.config.development_mode:
            Base.metadata.drop_all(self.engine)
        else:
            raise ServiceError(
                "Cannot drop tables: not in development mode",
                error_code=ErrorCode.CONFIGURATION_ERROR,
                operation="drop_tables",
                development_mode=self.config.development_mode,
            )

    def close(self) -> None:
        self.engine.dispose()


def get_default_config() -> DatabaseConfig:
    """
    Get configuration from the application settings (DATABASE_URL).
    """
    settings = get_config().database
    return DatabaseConfig(
        url=settings.connection_string,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        echo=settings.echo,
    )


def import_all_models():
    """Import all models to ensure they're registered with SQLAlchemy metadata."""
    from sqlalchemy.orm import configure_mappers

    from .db_credential_models import StoredCredential  # noqa
    from .db_onboarding_models import OnboardingEntryRecord, OnboardingSettingsRecord  # noqa

    configure_mappers()


def init_db(db_manager: DatabaseManager) -> None:
    """
    Initialize the database, creating all tables.

    Args:
        db_manager: DatabaseManager instance to use for table creation
    """
    get_logger().info("Initializing DB")
    import_all_models()
    db_manager.create_tables()


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """
    Get the global database manager instance.

    Returns:
        DatabaseManager: The current database manager

    Raises:
        ServiceError: If no database manager has been initialized
    """
    global _db_manager
    if _db_manager is None:
        raise ServiceError(
            "Database manager not initialized. Call initialize_db() first.",
            error_code=ErrorCode.CONFIGURATION_ERROR,
            operation="get_db_manager",
        )
    return _db_manager


def set_db_manager(manager: Optional[DatabaseManager]) -> None:
    """
    Set the global database manager instance.

    This is primarily used for testing to inject a test database manager.
    """
    global _db_manager
    _db_manager = manager


def initialize_db(config: Optional[DatabaseConfig] = None) -> DatabaseManager:
    """
    Initialize the global database manager with the given config.

    Args:
        config: Optional DatabaseConfig. If None, uses DATABASE_URL from the app config.

    Returns:
        DatabaseManager: The initialized database manager
    """
    global _db_manager

    if config is None:
        config = get_default_config()

    _db_manager = DatabaseManager(config)
    init_db(_db_manager)

    return _db_manager


def close_db() -> None:
    """
    Close the database connections and dispose of the engine.
    """
    global _db_manager
    if _db_manager:
        _db_manager.close()
        _db_manager = None
