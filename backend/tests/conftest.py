"""Root conftest: in-memory database, test client, and user factories.

Every test gets fresh tables in an in-memory SQLite database; the app's
get_db dependency is overridden to hand out the test's own session.
"""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENCRYPTION_KEY", "test-encryption-key-0123456789abc")

import pytest
from fastapi.testclient import TestClient

from src import models  # noqa: F401  (register tables)
from src.core.database import Base, SessionLocal, engine, get_db
from src.core.security import create_access_token
from src.main import app
from src.models.user import User, UserRole


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(role: UserRole = UserRole.AGENT, **fields) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=fields.pop("email", f"user{n}@example.com"),
            password_hash="not-a-real-hash",
            first_name=fields.pop("first_name", f"First{n}"),
            last_name=fields.pop("last_name", f"Last{n}"),
            role=role,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def issue_token():
    def _issue(user: User) -> str:
        return create_access_token({"sub": str(user.id)})

    return _issue


@pytest.fixture
def auth_headers(issue_token):
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _headers
