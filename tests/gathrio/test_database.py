"""Tests for database connection and session management."""

from sqlalchemy import inspect, text
from sqlalchemy.orm import Session

from gathrio.database import Base, SessionLocal, build_engine, engine, get_db


def test_engine_creation():
    """Test that database engine is created successfully."""
    assert engine is not None
    assert engine.url is not None


def test_build_engine_sqlite_has_no_pool_sizing():
    """Test that SQLite engines are created without server pool settings."""
    sqlite_engine = build_engine("sqlite://")

    try:
        assert sqlite_engine.dialect.name == "sqlite"
    finally:
        sqlite_engine.dispose()


def test_session_local_creation():
    """Test that SessionLocal is created successfully."""
    assert SessionLocal is not None
    assert callable(SessionLocal)


def test_base_declarative():
    """Test that Base knows every table."""
    assert {"users", "events", "ticket_types"} <= set(Base.metadata.tables)


def test_get_db_yields_and_closes_session():
    """Test that get_db yields a session and closes it afterwards."""
    db_gen = get_db()
    session = next(db_gen)

    assert isinstance(session, Session)

    try:
        next(db_gen)
    except StopIteration:
        pass

    assert not session.in_transaction()


def test_users_email_is_unique(test_db_engine):
    """Test that the store itself enforces unique emails."""
    indexes = inspect(test_db_engine).get_indexes("users")
    email_indexes = [index for index in indexes if index["column_names"] == ["email"]]

    assert email_indexes
    assert email_indexes[0]["unique"]


def test_database_connection(test_db_session: Session):
    """Test that we can execute a query on the database."""
    result = test_db_session.execute(text("SELECT 1"))
    row = result.fetchone()

    assert row is not None
    assert row[0] == 1
