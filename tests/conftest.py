import pytest

from pwcb import create_app
from pwcb.models import db
from pwcb.services import accounts, catalog


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "AUTO_CREATE_TABLES": True,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


def make_player(username="alice", password="secret1"):
    return accounts.register(username, password)


def make_admin():
    return accounts.seed_default_admin()


def make_item(admin, name="Iron Sword", item_type="weapon", **extra):
    return catalog.create_item(admin, dict(name=name, item_type=item_type, **extra))
