"""Authentication routes: login and logout."""

from flask import Blueprint, request, jsonify, g
from app import limiter
from app.models import User
from app.utils import token_required, issue_token, revoke_token, validate_login

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    """Authenticate user and return an API token."""
    data = request.get_json(silent=True)

    errors = validate_login(data)
    if errors:
        return jsonify({'message': 'The given data was invalid', 'errors': errors}), 422

    user = User.query.filter_by(email=data['email'].strip().lower()).first()

    if not user or not user.check_password(data['password']):
        return jsonify({'message': 'Invalid credentials'}), 401

    return jsonify({
        'message': 'Login successful',
        'token': issue_token(user.id)
    }), 200


@auth_bp.route('/logout', methods=['POST'])
@token_required
def logout(current_user_id):
    """Revoke the token used for this request."""
    revoke_token(g.token_payload)
    return jsonify({'message': 'Logged out successfully'}), 200
