"""
Pytest fixtures for BarFlow backend tests.

Every test gets its own application bound to a private in-memory store,
opened (and seeded with the default catalog, tables and staff) by the
application factory.
"""

import pytest

from barflow import create_app
from barflow.extensions import db
from barflow.models import Product, DiningTable, Client, StaffMember


TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test',
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'PIN_HASH_ROUNDS': 4,
}


def make_app(**overrides):
    """Build an app with the test config plus overrides."""
    config = dict(TEST_CONFIG)
    config.update(overrides)
    return create_app(config)


def sqlite_uri(path) -> str:
    return f"sqlite:///{path}"


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = make_app()
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Service tests run inside an app context against the seeded store."""
    with app.app_context():
        yield db.session
        db.session.rollback()


@pytest.fixture(scope='function')
def mojito(db_session):
    """Seeded product: price 10.00, cost 3.00, stock 50, alert at 10."""
    return db_session.query(Product).filter_by(name="Mojito").one()


@pytest.fixture(scope='function')
def nachos(db_session):
    return db_session.query(Product).filter_by(name="Nachos").one()


@pytest.fixture(scope='function')
def table_s1(db_session):
    return db_session.query(DiningTable).filter_by(name="S1").one()


@pytest.fixture(scope='function')
def regular(db_session):
    """A client with a zero balance."""
    client = Client(
        name="Marie Dupont",
        phone="0601020304",
        loyalty_points=0,
        total_spent_cents=0,
        balance_cents=0,
    )
    db_session.add(client)
    db_session.commit()
    return client


@pytest.fixture(scope='function')
def barman(db_session):
    return db_session.query(StaffMember).filter_by(name="Barman").one()
