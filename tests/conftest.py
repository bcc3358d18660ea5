"""Shared fixtures: in-memory database, seeded tribe, API client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tribe_console.models  # noqa: F401
from tribe_console.db.base import Base
from tribe_console.db.session import get_db
from tribe_console.db.seeds.seed_roles import seed_roles, seed_ranks, seed_role_ranks
from tribe_console.db.seeds.seed_access import seed_access_lists, seed_visibility
from tribe_console.main import app
from tribe_console.models.rank import Rank
from tribe_console.models.role import Role


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
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

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db):
    """Default roles, ranks, role-rank bindings, access lists and visibility."""
    seed_roles(db)
    seed_ranks(db)
    seed_role_ranks(db)
    seed_access_lists(db)
    seed_visibility(db)
    return db


class Lookup:
    """Find seeded rows by name."""

    def __init__(self, db):
        self.db = db

    def role(self, name):
        return self.db.query(Role).filter(Role.name == name).one()

    def rank(self, name, role_id=None):
        query = self.db.query(Rank).filter(Rank.name == name)
        if role_id is None:
            query = query.filter(Rank.role_id.is_(None))
        else:
            query = query.filter(Rank.role_id == role_id)
        return query.one()


@pytest.fixture
def lookup(seeded):
    return Lookup(seeded)


# ============================================================================
# API
# ============================================================================

@pytest.fixture
def client(session_factory, seeded):
    """TestClient whose requests each get their own session on the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def chief_headers():
    return {"X-Module-Auth": "true", "X-Module-Role": "Chief"}


@pytest.fixture
def elder_headers():
    return {"X-Module-Auth": "true", "X-Module-Role": "Elder"}


@pytest.fixture
def anon_headers():
    return {}
