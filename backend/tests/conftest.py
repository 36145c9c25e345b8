import os

# Point the app at an in-memory database before it is imported; each test
# then swaps in its own engine through the session dependency.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from stockwatch.database import create_db_and_tables, get_session
from stockwatch.main import app


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database shared across threads."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def create_member(client):
    """Return a helper that registers a member through the API."""
    counter = {'n': 0}

    def _create(**overrides):
        counter['n'] += 1
        n = counter['n']
        payload = {
            'name': f'Member {n}',
            'phoneNumber': f'09{n:08d}',
            'nationalIdNumber': f'A{n:09d}',
            'email': f'member{n}@example.com',
            'passwordHash': 'hash',
        }
        payload.update(overrides)
        r = client.post('/api/members', json=payload)
        assert r.status_code == 201, r.text
        return r.json()

    return _create


@pytest.fixture
def create_stock(client):
    def _create(code, name, **overrides):
        r = client.post('/api/stocks', json={'code': code, 'name': name, **overrides})
        assert r.status_code == 201, r.text
        return r.json()

    return _create


@pytest.fixture
def create_group(client):
    def _create(member_id, name, description=None):
        r = client.post(f'/api/stock-groups/member/{member_id}', json={'name': name, 'description': description})
        assert r.status_code == 201, r.text
        return r.json()

    return _create
