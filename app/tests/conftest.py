import os
_default_test_secret = "test-jwt-secret-for-pytest-only-0000000000000000"
if len(os.environ.get("JWT_SECRET", "")) < 32:
    os.environ["JWT_SECRET"] = _default_test_secret

os.environ.setdefault("ENV", "test")

from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url

TEST_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./test_sitebook.db")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

from app import database
from app import models  # noqa: F401
from app.models.project import Project
from app.models.user import User


def _ensure_database_exists(database_url: str) -> None:
    url = make_url(database_url)

    if not url.drivername.startswith("postgresql"):
        return

    db_name = url.database
    admin_url = url.set(database="postgres")
    admin_engine = create_engine(admin_url, isolation_level="AUTOCOMMIT")

    try:
        with admin_engine.connect() as conn:
            exists = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"),
                {"name": db_name},
            ).scalar()
            if not exists:
                safe_db_name = db_name.replace('"', '""')
                conn.execute(text(f'CREATE DATABASE "{safe_db_name}"'))
    finally:
        admin_engine.dispose()


@pytest.fixture(scope="session", autouse=True)
def _prepare_test_database():
    _ensure_database_exists(TEST_DATABASE_URL)
    database.configure_database()

    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.engine.dispose()


@pytest.fixture(scope="function", autouse=True)
def _clear_tables_between_tests():
    yield

    with database.engine.begin() as conn:
        for table in reversed(database.Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_user(db, *, name="Admin", email=None, role="admin", wallet=Decimal("0"), sites=()) -> User:
    user = User(
        name=name,
        email=email or f"{name.lower().replace(' ', '.')}@example.com",
        role=role,
        wallet_balance=wallet,
    )
    user.assigned_sites = list(sites)
    db.add(user)
    db.commit()
    return user


def make_project(db, *, name="Site A", location="Pune") -> Project:
    project = Project(name=name, location=location)
    db.add(project)
    db.commit()
    return project


def auth_headers(client, user_id: int) -> dict:
    resp = client.post("/auth/token", json={"user_id": user_id})
    assert resp.status_code == 200, f"token request failed: {resp.status_code} {resp.text}"
    data = resp.json()
    assert "access_token" in data, f"token response missing access_token: {data}"
    return {"Authorization": f"Bearer {data['access_token']}"}


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def factory(db):
    """Row builders shared by the API tests."""

    class _Factory:
        user = staticmethod(lambda **kw: make_user(db, **kw))
        project = staticmethod(lambda **kw: make_project(db, **kw))

    return _Factory


@pytest.fixture()
def headers_for(client):
    return lambda user_id: auth_headers(client, user_id)
