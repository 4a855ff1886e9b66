"""
Token service and the authentication gate
"""
from datetime import timedelta

import pytest

from quiz_api.exceptions import AuthenticationError
from quiz_api.models import Role, User
from quiz_api.services.token_service import TokenService

from conftest import TEST_SECRET, auth


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET, expire_minutes=60)


@pytest.fixture
def user():
    return User(id=7, username="x", role=Role.TEACHER)


def corrupt(token):
    header, payload, signature = token.split(".")
    middle = len(signature) // 2
    replacement = "A" if signature[middle] != "A" else "B"
    signature = signature[:middle] + replacement + signature[middle + 1:]
    return ".".join([header, payload, signature])


def test_issue_and_verify(tokens, user):
    identity = tokens.verify(tokens.issue(user))
    assert identity.id == 7
    assert identity.role == Role.TEACHER


def test_corrupted_token_rejected(tokens, user):
    with pytest.raises(AuthenticationError):
        tokens.verify(corrupt(tokens.issue(user)))


def test_expired_token_rejected(tokens, user):
    token = tokens.issue(user, expires_delta=timedelta(seconds=-5))
    with pytest.raises(AuthenticationError):
        tokens.verify(token)


def test_other_secret_rejected(user):
    token = TokenService("another-secret").issue(user)
    with pytest.raises(AuthenticationError):
        TokenService(TEST_SECRET).verify(token)


@pytest.mark.parametrize("token", [None, "", "not-a-token", "a.b.c"])
def test_malformed_tokens_rejected(tokens, token):
    with pytest.raises(AuthenticationError) as exc_info:
        tokens.verify(token)
    assert exc_info.value.message == "Not authenticated"


def test_secret_required():
    with pytest.raises(ValueError):
        TokenService("")


def test_gate_accepts_raw_and_bearer_forms(client, student):
    for headers in (auth(student["token"]), auth(student["token"], bearer=False),
                    {"Authorization": f"bearer {student['token']}"}):
        assert client.get("/quiz/status", headers=headers).status_code == 200


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": ""},
    {"Authorization": "Bearer"},
    {"Authorization": "Basic dXNlcjpwYXNz"},
    {"Authorization": "Bearer garbage"},
])
def test_gate_rejects_bad_credentials(client, headers):
    response = client.get("/quiz/status", headers=headers)
    assert response.status_code == 403
    assert response.json() == {"error": "authentication_error", "message": "Not authenticated"}


def test_gate_rejects_corrupted_token(client, student):
    response = client.get("/quiz/status", headers=auth(corrupt(student["token"])))
    assert response.status_code == 403
