"""
Database Connection and Session Management

This module handles database connections, session management, and database initialization
for the FloatChat platform.
"""

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
from typing import Generator, Optional
import logging
import threading

from ..config import Config
from .models import Base

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Custom exception for database operations"""
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """Manages database connections and operations"""

    def __init__(self, database_url: Optional[str] = None, echo: Optional[bool] = None):
        self.database_url = database_url or Config.DATABASE_URL
        self.echo = Config.SQL_ECHO if echo is None else echo
        self.engine = None
        self.SessionLocal = None
        self._initialize_connection()

    def _initialize_connection(self):
        """Initialize database connection"""
        try:
            if self.database_url.startswith('sqlite'):
                # A single shared connection keeps in-memory databases alive across sessions
                self.engine = create_engine(
                    self.database_url,
                    connect_args={'check_same_thread': False},
                    poolclass=StaticPool,
                    echo=self.echo
                )
                event.listen(self.engine, 'connect', _enable_sqlite_foreign_keys)
            else:
                # Create engine with connection pooling
                self.engine = create_engine(
                    self.database_url,
                    pool_size=10,
                    max_overflow=20,
                    pool_recycle=3600,
                    pool_pre_ping=True,
                    echo=self.echo
                )

            # Create session factory
            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=self.engine
            )

            logger.info(f"Database connection initialized successfully ({self.engine.url.get_backend_name()})")

        except Exception as e:
            logger.error(f"Failed to initialize database connection: {str(e)}")
            raise

    def create_tables(self):
        """Create all database tables"""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Failed to create database tables: {str(e)}")
            raise

    def get_session(self) -> Session:
        """Get a new database session"""
        if not self.SessionLocal:
            raise RuntimeError("Database connection not initialized")
        return self.SessionLocal()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Context manager for database sessions with automatic cleanup"""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def test_connection(self) -> bool:
        """Test database connection"""
        try:
            with self.session_scope() as session:
                session.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(f"Database connection test failed: {str(e)}")
            return False

    def drop_tables(self):
        """Drop all database tables (use with caution!)"""
        try:
            Base.metadata.drop_all(bind=self.engine)
            logger.warning("All database tables dropped")
        except Exception as e:
            logger.error(f"Failed to drop database tables: {str(e)}")
            raise

    def execute_raw_sql(self, query: str, params: Optional[dict] = None) -> list:
        """Execute raw SQL query and return results as dictionaries"""
        try:
            with self.session_scope() as session:
                result = session.execute(text(query), params or {})
                return [dict(row._mapping) for row in result.fetchall()]
        except SQLAlchemyError as e:
            logger.error(f"Raw SQL execution failed: {str(e)}")
            raise DatabaseError(f"SQL execution failed: {str(e)}")

    def get_table_row_count(self, table_name: str) -> int:
        """Get the number of rows in a known table"""
        if table_name not in Base.metadata.tables:
            raise DatabaseError(f"Unknown table: {table_name}")

        try:
            with self.session_scope() as session:
                return session.execute(text(f"SELECT COUNT(*) FROM {table_name}")).scalar()
        except SQLAlchemyError as e:
            logger.error(f"Failed to count rows in {table_name}: {str(e)}")
            raise DatabaseError(f"Failed to get table info: {str(e)}")


# Global database manager instance
db_manager = None
_db_manager_lock = threading.Lock()


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance"""
    global db_manager
    if db_manager is None:
        # API handlers run in a threadpool; only one engine may be built
        with _db_manager_lock:
            if db_manager is None:
                db_manager = DatabaseManager()
    return db_manager


def init_database():
    """Initialize the database (create tables)"""
    get_db_manager().create_tables()


def test_db_connection() -> bool:
    """Test the database connection"""
    return get_db_manager().test_connection()


if __name__ == "__main__":
    logging.basicConfig(level=Config.LOG_LEVEL)
    # Test database connection and initialization
    print("Testing database connection...")
    if test_db_connection():
        print("✓ Database connection successful")
        print("Initializing database tables...")
        init_database()
        print("✓ Database initialization complete")
    else:
        print("✗ Database connection failed")
