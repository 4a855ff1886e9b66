"""
Database engine and session management
"""
from typing import Generator, Optional
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Owns the engine (connection pool) and session factory for one application

    Created once by the app factory, opened on startup and disposed on shutdown.
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        statement_timeout_ms: Optional[int] = None
    ):
        self.url = make_url(url)

        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        backend = self.url.get_backend_name()

        if backend == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if self.url.database in (None, "", ":memory:"):
                # Single shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        elif backend == "postgresql" and statement_timeout_ms:
            engine_kwargs["connect_args"] = {
                "options": f"-c statement_timeout={statement_timeout_ms}"
            }

        self.engine = create_engine(self.url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False
        )

    def init_db(self) -> None:
        """Create tables if they don't exist"""
        # Import models so they register on Base.metadata
        import quiz_api.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Database ready: {self.url.render_as_string(hide_password=True)}")

    def session(self) -> Session:
        return self.SessionLocal()

    def close(self) -> None:
        """Release all pooled connections"""
        self.engine.dispose()
        logger.info("Database connections closed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency yielding a session bound to the application's database"""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
