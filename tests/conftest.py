"""Shared fixtures: in-memory database, API client and question factory."""

import os
import tempfile

# Settings are read at import time, so they are fixed before tsbapp is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_PASSWORD"] = "test-password"
os.environ["RESET_KEY"] = "test-reset-key"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["GENERATED_DIR"] = tempfile.mkdtemp(prefix="tsbapp-generated-")
os.environ["LOGO_PATH"] = os.path.join(tempfile.gettempdir(), "tsbapp-missing-logo.png")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tsbapp.infrastructure.db.base import Base
from tsbapp.infrastructure.db.models.question_model import QuestionModel
from tsbapp.infrastructure.repositories.question_repo_impl import create_question
from tsbapp.presentation.dependencies import get_db
from tsbapp.presentation.schemas.question_schema import QuestionCreate

ADMIN_PASSWORD = "test-password"
RESET_KEY = "test-reset-key"


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db):
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    response = client.post("/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    client.headers["Authorization"] = f"Bearer {response.json()['access_token']}"
    return client


def question_payload(**overrides) -> dict:
    payload = {
        "subject": "Physics",
        "round": 1,
        "question_type": "Short Answer",
        "question_role": "Tossup",
        "question_number": 1,
        "question": "What is the SI unit of force?",
        "answer": "Newton",
        "choices": [],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_question(db):
    """Store a question built from question_payload(**overrides)."""

    def _make(**overrides) -> QuestionModel:
        return create_question(db, QuestionCreate(**question_payload(**overrides)))

    return _make


@pytest.fixture
def payload():
    return question_payload
