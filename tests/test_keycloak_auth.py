import pytest
import requests

from infrastructure.keycloak import InvalidTokenError, KeycloakClient, KeycloakError
from infrastructure.keycloak import client as keycloak_module
from settings import Settings


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def json(self):
        return self._payload


TOKENS = {
    "access_token": "access",
    "expires_in": 300,
    "refresh_token": "refresh",
    "refresh_expires_in": 1800,
    "token_type": "Bearer",
    "scope": "profile email",
}


def _fake_post(response=None, error=None, calls=None):
    def fake_post(url, data=None, timeout=None):
        if calls is not None:
            calls.append((url, data, timeout))
        if error is not None:
            raise error
        return response

    return fake_post


def test_decode_valid_token(keycloak, token_factory):
    claims = keycloak.decode(token_factory(["admin"], username="alice", client_roles=["user"]))

    assert claims["preferred_username"] == "alice"
    assert keycloak.roles(claims) == {"admin", "user"}


def test_roles_without_role_claims(keycloak):
    assert keycloak.roles({"sub": "x"}) == set()


def test_decode_expired_token(keycloak, token_factory):
    with pytest.raises(InvalidTokenError) as exc_info:
        keycloak.decode(token_factory(["admin"], expires_in=-60))

    assert exc_info.value.message == "Token expired"


def test_decode_token_with_wrong_secret(token_factory):
    other = KeycloakClient(Settings(KEYCLOAK_JWT_SECRET="another-secret-key-for-hs256-tokens-987"))

    with pytest.raises(InvalidTokenError) as exc_info:
        other.decode(token_factory(["admin"]))

    assert exc_info.value.message == "Invalid token"


def test_decode_garbage(keycloak):
    with pytest.raises(InvalidTokenError):
        keycloak.decode("not.a.token")


def test_token_posts_password_grant(keycloak, monkeypatch):
    calls = []
    monkeypatch.setattr(keycloak_module.requests, "post", _fake_post(FakeResponse(200, TOKENS), calls=calls))

    result = keycloak.token("alice", "p457")

    assert result["access_token"] == "access"
    url, data, _ = calls[0]
    assert url == "http://localhost:8880/realms/nest/protocol/openid-connect/token"
    assert data == {
        "grant_type": "password",
        "username": "alice",
        "password": "p457",
        "client_id": "nest-client",
    }


def test_refresh_sends_client_secret(monkeypatch):
    calls = []
    keycloak = KeycloakClient(Settings(KEYCLOAK_CLIENT_SECRET="s3cr3t"))
    monkeypatch.setattr(keycloak_module.requests, "post", _fake_post(FakeResponse(200, TOKENS), calls=calls))

    keycloak.refresh("refresh")

    data = calls[0][1]
    assert data["grant_type"] == "refresh_token"
    assert data["refresh_token"] == "refresh"
    assert data["client_secret"] == "s3cr3t"


def test_token_rejected(keycloak, monkeypatch):
    monkeypatch.setattr(keycloak_module.requests, "post", _fake_post(FakeResponse(401)))

    with pytest.raises(KeycloakError) as exc_info:
        keycloak.token("alice", "wrong")

    assert exc_info.value.status_code == 401


def test_keycloak_unavailable(keycloak, monkeypatch):
    monkeypatch.setattr(
        keycloak_module.requests, "post", _fake_post(error=requests.ConnectionError("refused"))
    )

    with pytest.raises(KeycloakError) as exc_info:
        keycloak.token("alice", "p457")

    assert exc_info.value.status_code is None
    assert exc_info.value.message == "Keycloak is unavailable"


# -------- /auth --------

def test_auth_token_endpoint(client, monkeypatch):
    monkeypatch.setattr(keycloak_module.requests, "post", _fake_post(FakeResponse(200, TOKENS)))

    response = client.post("/auth/token", json={"username": "alice", "password": "p457"})

    assert response.status_code == 200
    body = response.json()
    assert body["access_token"] == "access"
    assert body["refresh_expires_in"] == 1800
    assert "scope" not in body


def test_auth_token_invalid_credentials(client, monkeypatch):
    monkeypatch.setattr(keycloak_module.requests, "post", _fake_post(FakeResponse(401)))

    response = client.post("/auth/token", json={"username": "alice", "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_auth_token_keycloak_down(client, monkeypatch):
    monkeypatch.setattr(keycloak_module.requests, "post", _fake_post(error=requests.Timeout("timeout")))

    response = client.post("/auth/token", json={"username": "alice", "password": "p457"})

    assert response.status_code == 503


def test_auth_refresh_endpoint(client, monkeypatch):
    monkeypatch.setattr(keycloak_module.requests, "post", _fake_post(FakeResponse(200, TOKENS)))

    response = client.post("/auth/refresh", json={"refresh_token": "refresh"})

    assert response.status_code == 200
    assert response.json()["expires_in"] == 300


def test_auth_token_requires_credentials(client):
    response = client.post("/auth/token", json={"username": ""})

    assert response.status_code == 422
