# utils/auth.py
"""Per-request authentication context.

The signed-in user travels as an explicit :class:`AuthContext` handed to every
store that needs one; nothing here is module-level state.

Lifecycle: ``/api/auth/login`` exchanges credentials for a Supabase access
token; each later request carries it as ``Authorization: Bearer <token>`` and
``token_required`` rebuilds the context from it; ``/api/auth/logout`` revokes
the token, after which decoding still succeeds until expiry but Supabase
refuses its refresh token.
"""
from dataclasses import dataclass
from functools import wraps
from typing import Optional
import logging

import jwt
from flask import current_app, jsonify, request

logger = logging.getLogger(__name__)

JWT_AUDIENCE = 'authenticated'


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    access_token: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_authenticated(self):
        return bool(self.user_id)


class TokenError(Exception):
    pass


def _bearer_token():
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        return None
    parts = auth_header.split(' ')
    if len(parts) != 2 or parts[0] != 'Bearer' or not parts[1]:
        raise TokenError('Invalid token format')
    return parts[1]


def decode_token(token, secret):
    """Decode a Supabase access token into an :class:`AuthContext`."""
    try:
        data = jwt.decode(token, secret, algorithms=["HS256"], audience=JWT_AUDIENCE)
    except jwt.ExpiredSignatureError as e:
        raise TokenError('Token has expired') from e
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}")
        raise TokenError('Invalid token') from e

    user_id = data.get('sub')
    if not user_id:
        raise TokenError('Token has no subject')
    return AuthContext(user_id=user_id, access_token=token, email=data.get('email'))


def _context_from_request():
    token = _bearer_token()
    if token is None:
        return None
    secret = current_app.config.get('SUPABASE_JWT_SECRET')
    if not secret:
        logger.error("SUPABASE_JWT_SECRET is not configured")
        raise TokenError('Token verification is not configured')
    return decode_token(token, secret)


def token_required(f):
    """Decorator passing the caller's AuthContext as the first argument; 401 without one."""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            auth = _context_from_request()
        except TokenError as e:
            return jsonify({'error': str(e)}), 401
        if auth is None:
            logger.warning(f"Authorization header missing for {request.path}")
            return jsonify({'error': 'Token is required'}), 401
        return f(auth, *args, **kwargs)

    return decorated


def token_optional(f):
    """Like token_required but passes None for anonymous callers.

    A header that is present but invalid is still rejected.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            auth = _context_from_request()
        except TokenError as e:
            return jsonify({'error': str(e)}), 401
        return f(auth, *args, **kwargs)

    return decorated
