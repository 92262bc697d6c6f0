"""
Pytest fixtures for fieldops backend tests.

Provides test database setup, users of each role with bearer tokens,
reference data (locations, products), and the test client.
"""

import pytest

from fieldops import create_app
from fieldops.extensions import db
from fieldops.models import User, Location, Product, City, ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_EMPLOYEE
from fieldops.services.auth_service import hash_password
from fieldops.services import session_service


DEFAULT_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SEED_ADMIN_ON_START': False,
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def make_user(db_session, *, role, name, email, approved=True, password=DEFAULT_PASSWORD):
    user = User(
        role=role,
        name=name,
        email=email,
        password_hash=hash_password(password),
        is_approved=approved,
    )
    db_session.add(user)
    db_session.commit()
    return user


def auth_headers(token: str) -> dict:
    """Create authorization headers with bearer token."""
    return {"Authorization": f"Bearer {token}"}


def token_for(user) -> str:
    _, token = session_service.create_session(user)
    return token


@pytest.fixture(scope='function')
def admin(db_session):
    return make_user(db_session, role=ROLE_ADMIN, name="Admin", email="admin@example.com")


@pytest.fixture(scope='function')
def supervisor(db_session):
    return make_user(db_session, role=ROLE_SUPERVISOR, name="Sara Supervisor", email="sara@example.com")


@pytest.fixture(scope='function')
def other_supervisor(db_session):
    return make_user(db_session, role=ROLE_SUPERVISOR, name="Omar Supervisor", email="omar@example.com")


@pytest.fixture(scope='function')
def employee(db_session):
    return make_user(db_session, role=ROLE_EMPLOYEE, name="Ali", email="ali@example.com")


@pytest.fixture(scope='function')
def other_employee(db_session):
    return make_user(db_session, role=ROLE_EMPLOYEE, name="Bina", email="bina@example.com")


@pytest.fixture(scope='function')
def admin_headers(admin):
    return auth_headers(token_for(admin))


@pytest.fixture(scope='function')
def supervisor_headers(supervisor):
    return auth_headers(token_for(supervisor))


@pytest.fixture(scope='function')
def other_supervisor_headers(other_supervisor):
    return auth_headers(token_for(other_supervisor))


@pytest.fixture(scope='function')
def employee_headers(employee):
    return auth_headers(token_for(employee))


@pytest.fixture(scope='function')
def city(db_session):
    city = City(name="Lahore")
    db_session.add(city)
    db_session.commit()
    return city


@pytest.fixture(scope='function')
def locations(db_session, city):
    """Three marts in Lahore."""
    rows = [
        Location(mart_name="Alpha Mart", area="Gulberg", city_id=str(city.id), city_name=city.name, lat=31.5, lng=74.3),
        Location(mart_name="Beta Store", area="DHA", city_id=str(city.id), city_name=city.name, lat=31.47, lng=74.4),
        Location(mart_name="Gamma Hyper", area="Johar Town", city_id=str(city.id), city_name=city.name, lat=31.46, lng=74.27),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


@pytest.fixture(scope='function')
def products(db_session):
    """Two weighted products and one without a unit weight."""
    rows = [
        Product(id="P-5", name="Rice 5kg", description="Basmati", brand_name="Acme", quantity=100, weight=5),
        Product(id="P-10", name="Flour 10kg", description="Chakki", brand_name="Acme", quantity=50, weight=10),
        Product(id="P-NW", name="Sample Pack", description="Promo", brand_name="Acme", quantity=10, weight=None),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows
