from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from .models import Base


class Database:
    """SQLAlchemy engine and session factory for the bot's SQLite file."""

    def __init__(self, path: str):
        """Initialize database connection.

        Args:
            path: Path to SQLite database file.
        """
        self.path = path
        self._engine = create_engine(
            f"sqlite:///{path}",
            connect_args={
                "check_same_thread": False,
            },
            pool_pre_ping=True,
            echo=False,
        )

        def _set_sqlite_pragmas(dbapi_connection, connection_record):  # type: ignore[no-redef]
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        event.listen(self._engine, "connect", _set_sqlite_pragmas)  # type: ignore[arg-type]

        self._session_factory = sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False
        )

    def CreateTables(self) -> None:
        """Create all tables defined in metadata if they don't exist."""
        Base.metadata.create_all(bind=self._engine)

    def GetSession(self) -> Session:
        """Get a new database session.

        Returns:
            SQLAlchemy session object.
        """
        return self._session_factory()
