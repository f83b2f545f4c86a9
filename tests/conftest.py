"""Shared pytest fixtures for videoshelf tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from videoshelf.config import Settings
from videoshelf.db.schema import Base

TEST_SECRET = "test-secret-key-with-enough-length-for-hs256"


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine, expire_on_commit=False)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        jwt_secret_key=TEST_SECRET,
        database_url="sqlite:///:memory:",
    )
