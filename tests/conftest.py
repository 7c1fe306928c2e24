from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from infrastructure.database.seed import populate
from infrastructure.database.session import Database
from infrastructure.keycloak import KeycloakClient
from main import create_app
from settings import Settings

JWT_SECRET = "test-secret-key-for-hs256-tokens-0123456789"
CLIENT_ID = "nest-client"


class FakeMailService:
    """Запоминает письма вместо отправки по SMTP."""

    def __init__(self):
        self.sent = []

    def sendmail(self, subject: str, body: str) -> bool:
        self.sent.append((subject, body))
        return True


def make_token(roles, username="admin", expires_in=300, client_roles=None):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": f"id-{username}",
        "preferred_username": username,
        "realm_access": {"roles": list(roles)},
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    if client_roles:
        payload["resource_access"] = {CLIENT_ID: {"roles": list(client_roles)}}
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


def _auth_headers(*roles, username="admin"):
    return {"Authorization": f"Bearer {make_token(roles, username=username)}"}


@pytest.fixture
def test_settings():
    return Settings(
        KEYCLOAK_JWT_SECRET=JWT_SECRET,
        KEYCLOAK_CLIENT_ID=CLIENT_ID,
        KEYCLOAK_AUDIENCE=None,
        MAIL_ACTIVATED=False,
    )


@pytest.fixture
def db():
    database = Database("sqlite://")
    populate(database)
    yield database
    database.drop_schema()
    database.dispose()


@pytest.fixture
def session(db):
    with db.get_session() as s:
        yield s


@pytest.fixture
def mail_service():
    return FakeMailService()


@pytest.fixture
def keycloak(test_settings):
    return KeycloakClient(test_settings)


@pytest.fixture
def client(db, mail_service, keycloak):
    app = create_app(db=db, mail_service=mail_service, keycloak=keycloak)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers():
    return _auth_headers


@pytest.fixture
def token_factory():
    return make_token
