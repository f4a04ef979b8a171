"""Database connection and session management."""

from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from gathrio.config import get_settings


def build_engine(database_url: str) -> Engine:
    """Create a database engine for the given URL.

    Pool sizing only applies to server databases; SQLite gets the
    driver defaults plus cross-thread access for the test client.
    """
    engine_kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": False}
    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = 10  # Number of connections to maintain
        engine_kwargs["max_overflow"] = 20  # Maximum number of connections beyond pool_size
    return create_engine(database_url, **engine_kwargs)


engine = build_engine(get_settings().database_url)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session.

    Yields:
        Session: SQLAlchemy database session

    Example:
        ```python
        from gathrio.database import get_db

        @app.get("/events")
        def get_events(db: Session = Depends(get_db)):
            return db.query(Event).all()
        ```
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
