"""
Pytest fixtures for TechAsset backend tests.

Provides test database setup, one account per role, and bearer-token helpers.
"""

import pytest
from techasset import create_app
from techasset.extensions import db
from techasset.models import User
from techasset.roles import ADMIN, EDITOR, GLOBAL_ADMIN, MODULE_ADMIN, STANDARD_USER
from techasset.services import password_service
from techasset.services.auth_service import hash_password
from techasset.shaping import dump_json_list


TEST_PASSWORD = "password"

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'SECRET_KEY': 'test-secret-key',
    'BCRYPT_ROUNDS': 4,
    'APP_URL': 'http://feedback.test/',
    'ACTIVITY_LOG_LIMIT': 1000,
}


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

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


@pytest.fixture(scope='function')
def categories(db_session):
    """Seed the default password categories."""
    password_service.seed_default_categories()


def make_user(session, username: str, role: str, name: str | None = None, permissions=None) -> User:
    user = User(
        id=f"user-{username}",
        username=username,
        password_hash=hash_password(TEST_PASSWORD),
        name=name or username.title(),
        role=role,
        module_permissions=dump_json_list(permissions) if permissions is not None else None,
    )
    session.add(user)
    session.commit()
    return user


@pytest.fixture(scope='function')
def global_admin(db_session):
    return make_user(db_session, "globaladmin", GLOBAL_ADMIN, name="Global Administrator")


@pytest.fixture(scope='function')
def admin_user(db_session):
    return make_user(db_session, "admin", ADMIN, name="Site Admin")


@pytest.fixture(scope='function')
def editor_user(db_session):
    return make_user(db_session, "editor", EDITOR, name="Desk Editor")


@pytest.fixture(scope='function')
def module_admin(db_session):
    return make_user(
        db_session, "moduleadmin", MODULE_ADMIN, name="Module Administrator",
        permissions=["chapmancg-log", "internal-log", "software-licenses"],
    )


@pytest.fixture(scope='function')
def standard_user(db_session):
    return make_user(db_session, "standarduser", STANDARD_USER, name="Standard User", permissions=[])


def get_auth_token(client, username: str, password: str = TEST_PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def global_admin_headers(client, global_admin):
    return auth_headers(get_auth_token(client, global_admin.username))


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, admin_user.username))


@pytest.fixture(scope='function')
def editor_headers(client, editor_user):
    return auth_headers(get_auth_token(client, editor_user.username))


@pytest.fixture(scope='function')
def standard_headers(client, standard_user):
    return auth_headers(get_auth_token(client, standard_user.username))
