from flask import jsonify

from ..errors import (
    BackendUnavailable,
    MalformedKey,
    Unauthenticated,
    UnknownBook,
    UpstreamUnavailable,
)

ERROR_STATUS = (
    (MalformedKey, 400),
    (Unauthenticated, 401),
    (UnknownBook, 404),
    (LookupError, 404),
    (UpstreamUnavailable, 502),
    (BackendUnavailable, 502),
)


def error_status(exc):
    for error_class, status in ERROR_STATUS:
        if isinstance(exc, error_class):
            return status
    return 500


def error_response(exc, message=None):
    return jsonify({'error': message or str(exc)}), error_status(exc)
