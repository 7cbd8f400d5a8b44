"""
Pytest configuration and fixtures for testing the Translation API.
"""

import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app, db
from app.models.user import User
from app.models.translation import Translation

fake = Faker()


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    os.environ['JWT_SECRET_KEY'] = 'test-secret-key-for-testing'

    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def cache(app):
    """The shared translation cache, emptied for each test."""
    cache = app.extensions['translation_cache']
    cache.clear()
    return cache


@pytest.fixture(scope='function')
def db_session(app, cache):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


@pytest.fixture
def service(app, db_session):
    """The application's TranslationService."""
    return app.extensions['translation_service']


def _create_user(password='testpassword123', **overrides):
    """Helper to create a user with sensible defaults."""
    data = {
        'name': fake.name(),
        'email': fake.unique.email().lower(),
    }
    data.update(overrides)
    user = User(**data)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'password': password,
    }


@pytest.fixture
def test_user(app, db_session):
    """Create a test user."""
    return _create_user()


def _get_token(client, email, password):
    """Login and return the API token."""
    resp = client.post('/api/login', json={
        'email': email,
        'password': password,
    })
    data = resp.get_json()
    if resp.status_code != 200 or not data or not data.get('token'):
        raise RuntimeError(f"Login failed: status={resp.status_code}, body={resp.data[:200]}")
    return data['token']


@pytest.fixture
def auth_headers(client, test_user):
    """Get authentication headers for test user."""
    token = _get_token(client, test_user['email'], test_user['password'])
    return {'Authorization': f'Bearer {token}'}


def make_translation(**overrides):
    """Insert a translation directly, bypassing the service and its cache."""
    data = {
        'key': f"{fake.word()}.{fake.pystr(min_chars=8, max_chars=8)}",
        'locale': fake.random_element(['en', 'es', 'fr', 'de', 'it']),
        'value': fake.sentence(),
        'tag': fake.random_element(['common', 'greeting', 'error', None]),
    }
    data.update(overrides)
    translation = Translation(**data)
    db.session.add(translation)
    db.session.commit()
    return translation


@pytest.fixture
def translation_factory(db_session):
    """Factory fixture creating translations straight in the database."""
    return make_translation
