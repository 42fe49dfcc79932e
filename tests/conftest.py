"""Shared pytest fixtures for finance_api tests."""

from datetime import date
from decimal import Decimal
from urllib.parse import urlencode

import pytest
from fastapi.testclient import TestClient

from finance_api.core.config import Settings
from finance_api.db.models import Category, Transaction, User
from finance_api.db.session import Database
from finance_api.main import create_app
from finance_api.services.google_oauth import AuthFailure
from finance_api.services.sessions import SessionStore


class FakeIdentityProvider:
    """Stands in for Google: maps authorization codes to exchange results."""

    def __init__(self):
        self.results = {}
        self.exchanges = []

    def authorization_url(self, redirect_uri, state):
        return "https://accounts.example/authorize?" + urlencode(
            {"redirect_uri": redirect_uri, "state": state}
        )

    async def exchange(self, code, redirect_uri):
        self.exchanges.append((code, redirect_uri))
        return self.results.get(code, AuthFailure("unknown code"))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'finance.db'}",
        SECRET_KEY="test-secret",
        CLIENT_URL="http://frontend.test",
        ENVIRONMENT="test",
    )


@pytest.fixture
def database(settings):
    """Create a temporary SQLite database with the full schema."""
    db = Database(settings.DATABASE_URL)
    db.create_all()
    yield db
    db.close()


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def app(settings, database, identity_provider):
    return create_app(settings=settings, database=database, identity_provider=identity_provider)


@pytest.fixture
def client(app):
    """Anonymous client."""
    return TestClient(app)


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


def create_user(database, google_id, nome=None, email=None):
    """Insert an account directly and return its id."""
    session = database.session()
    try:
        user = User(google_id=google_id, nome=nome, email=email)
        session.add(user)
        session.commit()
        return user.id
    finally:
        session.close()


def open_session(database, user_id):
    """Create a live session for user_id and return its sid."""
    session = database.session()
    try:
        return SessionStore(session).create(user_id).sid
    finally:
        session.close()


def authenticated_client(app, database, settings, user_id):
    sid = open_session(database, user_id)
    return TestClient(app, cookies={settings.SESSION_COOKIE_NAME: sid})


@pytest.fixture
def alice_id(database):
    return create_user(database, "google-alice", nome="Alice", email="alice@example.com")


@pytest.fixture
def bob_id(database):
    return create_user(database, "google-bob", nome="Bob", email="bob@example.com")


@pytest.fixture
def alice_client(app, database, settings, alice_id):
    return authenticated_client(app, database, settings, alice_id)


@pytest.fixture
def bob_client(app, database, settings, bob_id):
    return authenticated_client(app, database, settings, bob_id)


def add_category(database, owner_id, nome="Mercado", tipo="despesa"):
    session = database.session()
    try:
        cat = Category(nome=nome, tipo=tipo, usuario_id=owner_id)
        session.add(cat)
        session.commit()
        return cat.id
    finally:
        session.close()


def add_transaction(database, owner_id, data_transacao, valor="10.00", descricao="Compra", **fields):
    session = database.session()
    try:
        txn = Transaction(
            descricao=descricao,
            valor=Decimal(valor),
            tipo_transacao=fields.pop("tipo_transacao", "despesa"),
            data_transacao=data_transacao if isinstance(data_transacao, date) else date.fromisoformat(data_transacao),
            usuario_id=owner_id,
            **fields,
        )
        session.add(txn)
        session.commit()
        return txn.id
    finally:
        session.close()
