"""Database engine and session management for the events store.

Development runs against a local SQLite file; production requires a
PostgreSQL URL in DATABASE_URL. A single module-level Database instance
is shared by the API, the seed script and the tests.
"""

from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Generator
import os

from sqlalchemy import create_engine, Engine, inspect
from sqlalchemy.orm import scoped_session, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..models import Base
from ..models.category import Category  # noqa
from ..models.event import Event  # noqa
from ..config.environment import IS_PRODUCTION_ENVIRONMENT

logger = logging.getLogger(__name__)

DEFAULT_SQLITE_PATH = Path(__file__).parent.parent.parent / 'data' / 'charity_events.db'

class DatabaseConfig:
    """
    Where the events store lives and how connections are pooled.

    Args:
        sqlite_path: SQLite file for development (falls back to SQLITE_PATH,
                     then data/charity_events.db)
        postgres_url: PostgreSQL URL for production (falls back to DATABASE_URL)
        echo: Log every SQL statement
        pool: Pool overrides for PostgreSQL (pool_size, max_overflow, ...)

    Raises:
        ValueError: In production when no PostgreSQL URL is available
    """

    POOL_DEFAULTS = {
        "pool_size": 5,
        "max_overflow": 5,
        "pool_timeout": 30,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }

    def __init__(
        self,
        sqlite_path: Optional[Path] = None,
        postgres_url: Optional[str] = None,
        echo: bool = False,
        **pool: Any
    ):
        self.echo = echo
        self.pool = {**self.POOL_DEFAULTS, **pool}

        if IS_PRODUCTION_ENVIRONMENT:
            self.postgres_url = postgres_url or os.environ.get('DATABASE_URL')
            if not self.postgres_url:
                raise ValueError("DATABASE_URL must be set when running in production")
            self.sqlite_path = None
        else:
            self.postgres_url = None
            self.sqlite_path = Path(sqlite_path or os.environ.get('SQLITE_PATH') or DEFAULT_SQLITE_PATH)

    @property
    def is_sqlite(self) -> bool:
        return self.sqlite_path is not None

    @property
    def connection_url(self) -> str:
        if self.is_sqlite:
            return f"sqlite:///{self.sqlite_path}"
        return self.postgres_url

    def get_engine_args(self) -> Dict[str, Any]:
        """SQLAlchemy engine arguments for the configured backend."""
        if self.is_sqlite:
            # One shared connection so the API's worker threads see the same file handle
            return {
                "echo": self.echo,
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }
        return {"echo": self.echo, **self.pool}

class DatabaseError(Exception):
    """Base exception for database-related errors."""
    pass

class ConnectionError(DatabaseError):
    """Raised when the engine cannot be created or is missing."""
    pass

class SessionError(DatabaseError):
    """Raised when work inside a session fails; the cause is chained."""
    pass

class Database:
    """Process-wide database manager (singleton)."""

    _instance = None

    def __new__(cls, config: Optional[DatabaseConfig] = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config: Optional[DatabaseConfig] = None):
        if self._initialized:
            return

        self.config = config or DatabaseConfig()
        self.engine: Optional[Engine] = None
        # Query results are turned into dicts after commit, so keep them loaded
        self._session_factory = sessionmaker(expire_on_commit=False)
        self._scoped_session = scoped_session(self._session_factory)
        self._tables_checked = False
        self._initialized = True

        self._bind(self.config)

    def configure(self, config: DatabaseConfig) -> None:
        """Point the shared instance at another database (scripts and tests)."""
        if self.engine is not None:
            self.engine.dispose()
        self._bind(config)

    def _bind(self, config: DatabaseConfig) -> None:
        self.config = config
        self._tables_checked = False
        try:
            if config.is_sqlite:
                config.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
            self.engine = create_engine(config.connection_url, **config.get_engine_args())
        except Exception as e:
            raise ConnectionError(f"Failed to create database engine: {e}") from e
        self._session_factory.configure(bind=self.engine)
        logger.debug(f"Database bound to {'SQLite' if config.is_sqlite else 'PostgreSQL'}")

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise ConnectionError("Database engine not initialized")
        return self.engine

    def init_db(self) -> None:
        """Create every table that does not exist yet."""
        engine = self._require_engine()
        try:
            Base.metadata.create_all(engine)
        except Exception as e:
            raise DatabaseError(f"Failed to initialize database schema: {e}") from e
        self._tables_checked = True
        logger.info("Database schema initialized successfully")

    def drop_all(self) -> None:
        Base.metadata.drop_all(self._require_engine())
        self._tables_checked = False
        logger.info("Database schema dropped")

    def ensure_tables_exist(self) -> None:
        """Create the schema once per binding if any table is missing."""
        if self._tables_checked:
            return
        engine = self._require_engine()
        try:
            missing = set(Base.metadata.tables) - set(inspect(engine).get_table_names())
            if missing:
                logger.info(f"Missing tables {sorted(missing)}, initializing database schema")
                Base.metadata.create_all(engine)
        except Exception as e:
            raise DatabaseError(f"Failed to verify/create database schema: {e}") from e
        self._tables_checked = True

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Transactional scope: commits on success, rolls back on any error.

        Example:
            with db.session() as session:
                events = session.query(Event).filter(Event.is_active.is_(True)).all()

        Raises:
            SessionError: Wrapping whatever failed inside the block
            DatabaseError: If schema verification fails
        """
        self.ensure_tables_exist()

        session = self._scoped_session()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            raise SessionError(f"Database session error: {e}") from e
        finally:
            session.close()
            self._scoped_session.remove()

db = Database()
