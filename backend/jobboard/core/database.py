"""
Database connection and session management
"""
from typing import Generator, Optional
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
import structlog

from jobboard.core.config import settings

logger = structlog.get_logger()

# Base class for models
Base = declarative_base()


def _build_engine(url: str, pool_size: int, max_overflow: int, echo: bool) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,  # Verify connections before using
        echo=echo,
    )


class Database:
    """
    Owns the engine and session factory for one process.

    Constructed by the process entry point (the API lifespan, a Celery task,
    a script) and disposed by it; request handlers receive sessions through
    the get_db dependency.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ):
        self.url = url
        self.engine = _build_engine(url, pool_size, max_overflow, echo)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, url: Optional[str] = None) -> "Database":
        return cls(
            url or settings.DATABASE_URL,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            echo=settings.DEBUG,
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self):
        """Create tables for all registered models"""
        # Registers the models on Base.metadata
        import jobboard.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("database_initialized", url=self.engine.url.render_as_string(hide_password=True))

    def dispose(self):
        self.engine.dispose()
        logger.info("database_disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for getting database session
    Yields a database session and ensures it's closed after use
    """
    db = request.app.state.database.session()
    try:
        yield db
    except Exception as e:
        logger.error("database_session_error", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()
