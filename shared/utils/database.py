"""
Database utilities for Codivio services

Provides async SQLAlchemy engine and session management shared by every
service that owns relational tables.
"""

import os
from typing import Optional, AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models"""


class DatabaseManager:
    """Async database engine and session management"""

    def __init__(
        self,
        database_url: Optional[str] = None,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ):
        """
        Initialize database manager

        Args:
            database_url: Database connection URL. If None, will use environment variables.
            pool_size: Connections kept open in the pool
            max_overflow: Extra connections allowed above pool_size
            echo: Log every SQL statement
        """
        self.database_url = database_url or self._build_database_url()
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_maker: Optional[async_sessionmaker] = None

    @staticmethod
    def _build_database_url() -> str:
        """Build database URL from environment variables"""
        host = os.getenv("POSTGRES_HOST", "localhost")
        port = os.getenv("POSTGRES_PORT", "5432")
        database = os.getenv("POSTGRES_DB", "codivio")

        service_user = os.getenv("DB_SERVICE_USER")
        service_password = os.getenv("DB_SERVICE_PASSWORD")

        if not service_user or not service_password:
            raise ValueError(
                "DATABASE_URL or DB_SERVICE_USER/DB_SERVICE_PASSWORD must be set. "
                "Each service must use its own database user (e.g. user_service, project_service)."
            )

        return f"postgresql+asyncpg://{service_user}:{service_password}@{host}:{port}/{database}"

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def initialize(self) -> None:
        """Create the async engine and session factory"""
        if self.engine is not None:
            return

        try:
            if self.database_url.startswith("sqlite"):
                # In-memory SQLite needs a single shared connection
                self.engine = create_async_engine(
                    self.database_url,
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                    echo=self.echo,
                )
            else:
                self.engine = create_async_engine(
                    self.database_url,
                    pool_size=self.pool_size,
                    max_overflow=self.max_overflow,
                    pool_pre_ping=True,
                    echo=self.echo,
                )

            self.session_maker = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            logger.info("Database engine initialized", dialect=self.engine.dialect.name)

        except Exception as e:
            logger.error("Failed to initialize database engine", error=str(e))
            raise

    async def create_tables(self) -> None:
        """Create all tables registered on the declarative base"""
        if self.engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def close(self) -> None:
        """Dispose the engine and release pooled connections"""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.session_maker = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get database session with automatic rollback on error

        Callers commit explicitly; anything left uncommitted is rolled back
        when the session closes.

        Yields:
            SQLAlchemy async session
        """
        if self.session_maker is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        async with self.session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def test_connection(self) -> bool:
        """
        Test database connection

        Returns:
            True if connection successful, False otherwise
        """
        if self.engine is None:
            return False

        try:
            async with self.engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database connection test failed", error=str(e))
            return False
