"""
Shared fixtures: an application on a throwaway SQLite database
"""
import pytest
from fastapi.testclient import TestClient

from quiz_api.config import Settings
from quiz_api.main import create_app

TEST_SECRET = "test-signing-secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'quiz.db'}",
        JWT_SECRET=TEST_SECRET,
        BCRYPT_ROUNDS=4,
        RATE_LIMIT_ENABLED=False,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app, client):
    session = app.state.database.session()
    yield session
    session.close()


def register(client, username, role, password="secret-pw"):
    response = client.post(
        "/register", json={"username": username, "password": password, "role": role}
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def login(client, username, password="secret-pw"):
    response = client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def auth(token, bearer=True):
    return {"Authorization": f"Bearer {token}" if bearer else token}


QUESTION = {
    "question": "What is 2 + 2?",
    "option_a": "3",
    "option_b": "4",
    "option_c": "5",
    "option_d": "22",
    "correct_option": "b",
}


@pytest.fixture
def teacher(client):
    user_id = register(client, "ms_frizzle", "Teacher")
    return {"id": user_id, "token": login(client, "ms_frizzle")}


@pytest.fixture
def student(client):
    user_id = register(client, "arnold", "Student")
    return {"id": user_id, "token": login(client, "arnold")}


@pytest.fixture
def make_question(client, teacher):
    def _make(**overrides):
        payload = dict(QUESTION, **overrides)
        response = client.post("/questions", json=payload, headers=auth(teacher["token"]))
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _make
