import os

# must be in place before review_api.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["EXPOSE_USER_LIST"] = "false"

import pytest
from fastapi.testclient import TestClient

from review_api.core.config import Settings
from review_api.core.security import TokenService
from review_api.main import create_app
from review_api.services.credential_store import CredentialStore
from review_api.services.entity_repository import EntityRepository


def make_settings(**overrides):
	values = {"DATABASE_URL": "sqlite://", "JWT_SECRET": "test-secret"}
	values.update(overrides)
	return Settings(**values)


@pytest.fixture()
def settings():
	return make_settings()


@pytest.fixture()
def app(settings):
	return create_app(settings)


@pytest.fixture()
def client(app):
	with TestClient(app) as c:
		yield c


@pytest.fixture()
def db(app):
	session = app.state.session_factory()
	try:
		yield session
	finally:
		session.close()


@pytest.fixture()
def store(app, db):
	return CredentialStore(db, app.state.password_hasher)


@pytest.fixture()
def repo(db):
	return EntityRepository(db)


@pytest.fixture()
def tokens(settings):
	return TokenService(settings)


def register(client, username, password="pw-secret-1"):
	response = client.post("/api/auth/register", json={"username": username, "password": password})
	assert response.status_code == 201, response.text
	return response.json()


def login(client, username, password="pw-secret-1"):
	response = client.post("/api/auth/login", json={"username": username, "password": password})
	assert response.status_code == 200, response.text
	return {"Authorization": f"Bearer {response.json()['access_token']}"}


def signup(client, username, password="pw-secret-1"):
	user = register(client, username, password)
	return user, login(client, username, password)
