"""Core test fixtures for burnroll tests."""

import pytest
from sqlalchemy.orm import Session, sessionmaker

from burnroll.config import Settings
from burnroll.database.connection import create_db_engine, init_db
from burnroll.database.models.character import Character
from burnroll.managers.character_store import SqlCharacterStore
from tests.factories import ScriptedPrompts, create_character


@pytest.fixture(scope="session")
def engine():
    """In-memory SQLite engine with the character tables created."""
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    return engine


@pytest.fixture(scope="function")
def db_session(engine) -> Session:
    """Create a fresh database session for each test.

    Uses a transaction that rolls back after each test for isolation.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session_factory = sessionmaker(bind=connection)
    session = session_factory()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def store(db_session: Session) -> SqlCharacterStore:
    """SqlCharacterStore bound to the test session."""
    return SqlCharacterStore(db_session)


@pytest.fixture
def character(db_session: Session) -> Character:
    """Create a basic character fixture."""
    return create_character(db_session, character_key="aldric", name="Aldric")


@pytest.fixture
def prompts() -> ScriptedPrompts:
    """Prompt surface that declines everything unless scripted."""
    return ScriptedPrompts()


@pytest.fixture
def settings() -> Settings:
    """Settings with rulebook defaults, ignoring any .env file."""
    return Settings(_env_file=None)
