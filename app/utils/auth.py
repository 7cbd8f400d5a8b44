"""Shared authentication utilities.

Tokens are HS256 JWTs carrying ``user_id``, a unique ``jti`` and ``exp``.
Logging out revokes a token by recording its ``jti`` in the translation
cache until the token would have expired anyway.
"""

from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, current_app, g
import jwt
import uuid

REVOKED_PREFIX = 'revoked_token:'


def _get_secret_key():
    """Get JWT secret from Flask app config (single source of truth)."""
    return current_app.config['JWT_SECRET_KEY']


def _get_cache():
    return current_app.extensions['translation_cache']


def issue_token(user_id):
    """Create a signed access token for the user."""
    payload = {
        'user_id': user_id,
        'jti': uuid.uuid4().hex,
        'exp': datetime.now(timezone.utc) + timedelta(seconds=current_app.config['JWT_ACCESS_TOKEN_EXPIRES'])
    }
    return jwt.encode(payload, _get_secret_key(), algorithm='HS256')


def revoke_token(payload):
    """Reject the token from now until it expires."""
    remaining = int(payload['exp'] - datetime.now(timezone.utc).timestamp())
    if remaining > 0:
        _get_cache().set(f"{REVOKED_PREFIX}{payload['jti']}", True, remaining)


def is_token_revoked(payload):
    return bool(_get_cache().get(f"{REVOKED_PREFIX}{payload.get('jti')}"))


def token_required(f):
    """
    Decorator to require a valid, unrevoked JWT token.

    Passes the user_id from the token as the first argument to the decorated
    function and keeps the decoded payload on ``g.token_payload``.

    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route(current_user_id):
            return jsonify({'user_id': current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        if not auth_header:
            return jsonify({'message': 'Token is missing'}), 401

        try:
            # Support both "Bearer <token>" and raw token formats
            token = auth_header.split(' ')[1] if ' ' in auth_header else auth_header
            payload = jwt.decode(token, _get_secret_key(), algorithms=['HS256'])
            current_user_id = payload['user_id']
        except jwt.ExpiredSignatureError:
            return jsonify({'message': 'Token has expired'}), 401
        except (jwt.InvalidTokenError, KeyError, IndexError):
            return jsonify({'message': 'Token is invalid'}), 401

        if is_token_revoked(payload):
            return jsonify({'message': 'Token is invalid'}), 401

        g.token_payload = payload
        return f(current_user_id, *args, **kwargs)
    return decorated
