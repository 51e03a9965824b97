# routes/auth.py
from flask import Blueprint, request, jsonify
import logging

from supabase import AuthError

from ..services.registry import get_services
from ..utils.auth import AuthContext, token_required

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange email/password for a Supabase session; the access token is the AuthContext."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Missing email or password'}), 400
    email = data.get('email')
    password = data.get('password')

    if not all([email, password]):
        return jsonify({'error': 'Missing email or password'}), 400

    client = get_services().supabase.new_auth_client()
    try:
        auth_response = client.auth.sign_in_with_password({
            'email': email,
            'password': password
        })
    except AuthError as e:
        error_message = str(e)
        logger.warning(f"Login failed for {email}: {error_message}")
        if 'Email not confirmed' in error_message:
            return jsonify({
                'error': 'Please check your email to confirm your account before logging in.',
                'needsConfirmation': True,
                'email': email
            }), 401
        return jsonify({'error': 'Invalid email or password'}), 401

    if not auth_response.user or not auth_response.session:
        return jsonify({'error': 'Invalid credentials'}), 401

    auth = AuthContext(
        user_id=auth_response.user.id,
        access_token=auth_response.session.access_token,
        email=auth_response.user.email,
    )
    logger.info(f"User {auth.user_id} logged in")
    return jsonify({
        'token': auth.access_token,
        'refresh_token': auth_response.session.refresh_token,
        'user': {
            'id': auth.user_id,
            'email': auth.email,
        }
    })


@auth_bp.route('/session', methods=['GET'])
@token_required
def get_session(auth):
    return jsonify({'user': {'id': auth.user_id, 'email': auth.email}})


@auth_bp.route('/logout', methods=['POST'])
@token_required
def logout(auth):
    """Revoke the caller's session; the client drops its token."""
    try:
        get_services().supabase.client.auth.admin.sign_out(auth.access_token)
    except AuthError as e:
        logger.error(f"Logout failed for user {auth.user_id}: {str(e)}")
        return jsonify({'error': 'Failed to log out'}), 502
    logger.info(f"User {auth.user_id} logged out")
    return jsonify({'message': 'Logged out successfully'})
