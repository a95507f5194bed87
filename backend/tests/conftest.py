"""
Configuration partagée pour tous les tests.
Override la dépendance get_db pour éviter toute connexion réelle à PostgreSQL,
et get_current_user pour simuler un enseignant connecté.
"""

import uuid
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import get_current_user
from app.database import Base, get_db
from app.main import app
from app.models.user import User


def make_user(**kwargs) -> User:
    user = MagicMock(spec=User)
    user.id = kwargs.get("id", uuid.uuid4())
    user.email = kwargs.get("email", "prof@ecole.be")
    user.first_name = kwargs.get("first_name", "Marie")
    user.last_name = kwargs.get("last_name", "Curie")
    user.is_admin = kwargs.get("is_admin", False)
    user.created_at = None
    return user


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def current_user():
    return make_user()


@pytest.fixture
def client(mock_db, current_user):
    """Client HTTP de test avec la BDD mockée et un enseignant connecté."""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_user] = lambda: current_user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(mock_db):
    """Client HTTP sans session : seule la BDD est mockée."""
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sqlite_session():
    """Session sur une base SQLite en mémoire, clés étrangères activées."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    db = Session()
    yield db
    db.close()
    Base.metadata.drop_all(engine)
    engine.dispose()
