"""
Tests for authentication endpoints and token handling.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app import create_app, limiter


class TestLogin:
    """Tests for POST /api/login"""

    def test_login_success(self, client, test_user):
        response = client.post('/api/login', json={
            'email': test_user['email'],
            'password': test_user['password'],
        })

        assert response.status_code == 200
        assert response.json['message'] == 'Login successful'
        payload = jwt.decode(response.json['token'], 'test-secret-key-for-testing', algorithms=['HS256'])
        assert payload['user_id'] == test_user['id']
        assert payload['jti']

    def test_login_wrong_password(self, client, test_user):
        response = client.post('/api/login', json={
            'email': test_user['email'],
            'password': 'wrongpassword',
        })

        assert response.status_code == 401
        assert response.json['message'] == 'Invalid credentials'

    def test_login_unknown_email(self, client, db_session):
        response = client.post('/api/login', json={
            'email': 'nobody@example.com',
            'password': 'whatever',
        })

        assert response.status_code == 401

    def test_login_validation(self, client, db_session):
        response = client.post('/api/login', json={'email': 'not-an-email'})

        assert response.status_code == 422
        assert set(response.json['errors']) == {'email', 'password'}


class TestTokens:
    """Tests for token_required and logout."""

    def test_missing_token(self, client, db_session):
        response = client.get('/api/translationsJsonExport')

        assert response.status_code == 401
        assert response.json['message'] == 'Token is missing'

    def test_invalid_token(self, client, db_session):
        response = client.get('/api/translationsJsonExport', headers={'Authorization': 'Bearer garbage'})

        assert response.status_code == 401
        assert response.json['message'] == 'Token is invalid'

    def test_expired_token(self, client, test_user):
        token = jwt.encode(
            {
                'user_id': test_user['id'],
                'jti': 'expired',
                'exp': datetime.now(timezone.utc) - timedelta(seconds=10),
            },
            'test-secret-key-for-testing',
            algorithm='HS256'
        )

        response = client.get('/api/translationsJsonExport', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.json['message'] == 'Token has expired'

    def test_logout_revokes_token(self, client, auth_headers):
        assert client.get('/api/translationsJsonExport', headers=auth_headers).status_code == 200

        response = client.post('/api/logout', headers=auth_headers)

        assert response.status_code == 200
        assert response.json['message'] == 'Logged out successfully'
        assert client.get('/api/translationsJsonExport', headers=auth_headers).status_code == 401

    def test_translation_writes_keep_revocations(self, client, auth_headers):
        client.post('/api/logout', headers=auth_headers)

        # Cache invalidation after a write must not drop revoked tokens
        client.application.extensions['translation_service'].clear_translation_caches()

        assert client.get('/api/translationsJsonExport', headers=auth_headers).status_code == 401


class TestLoginRateLimit:
    """Login is limited to 10 attempts per minute per client."""

    @pytest.fixture
    def limited_client(self):
        was_enabled = limiter.enabled
        limited_app = create_app('testing', {'RATELIMIT_ENABLED': True})

        yield limited_app.test_client()

        # The limiter is shared with the session app
        limiter.reset()
        limiter.enabled = was_enabled

    def test_eleventh_login_is_rejected(self, limited_client):
        credentials = {'email': 'nobody@example.com', 'password': 'wrong'}

        for _ in range(10):
            assert limited_client.post('/api/login', json=credentials).status_code == 401

        response = limited_client.post('/api/login', json=credentials)

        assert response.status_code == 429
        assert response.json == {'message': 'Too many requests'}
