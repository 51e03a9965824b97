# routes/bookmarks_routes.py
from flask import Blueprint, request, jsonify
import logging

from . import error_response, error_status
from ..errors import BibleReaderError
from ..services.registry import get_services
from ..utils.auth import token_required
from ..utils.verse_identity import parse_verse_key

logger = logging.getLogger(__name__)
bookmarks_bp = Blueprint('bookmarks_bp', __name__, url_prefix='/api/bookmarks')


def _bookmark_json(bookmark):
    return {
        "id": bookmark.id,
        "user_id": bookmark.user_id,
        "verse_key": bookmark.verse_key,
        "created_at": bookmark.created_at.isoformat() if bookmark.created_at else None,
    }


def _save(auth, verse_key):
    try:
        parse_verse_key(verse_key)
        bookmark = get_services().annotations(auth).set_bookmark(verse_key)
    except BibleReaderError as e:
        logger.error(f"Error creating bookmark {verse_key}: {str(e)}")
        return error_response(e)
    return jsonify(_bookmark_json(bookmark)), 200


@bookmarks_bp.route("/", methods=['GET'])
@token_required
def get_bookmarks(auth):
    """Bookmarked verses with their text, in canonical order."""
    view = get_services().bookmarks_view(auth, request.args.get('translation'))
    view.load()
    status = 200
    if not view.entries and view.last_error is not None:
        status = error_status(view.last_error)
    return jsonify(view.to_dict()), status


@bookmarks_bp.route("/", methods=['POST'])
@token_required
def create_bookmark(auth):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('verse_key'), str):
        return jsonify({"error": "Missing required field verse_key"}), 400
    return _save(auth, data['verse_key'])


@bookmarks_bp.route("/<verse_key>", methods=['PUT'])
@token_required
def put_bookmark(auth, verse_key):
    return _save(auth, verse_key)


@bookmarks_bp.route("/<verse_key>", methods=['GET'])
@token_required
def get_bookmark(auth, verse_key):
    try:
        parse_verse_key(verse_key)
        bookmark = get_services().annotations(auth).get_bookmark(verse_key)
    except BibleReaderError as e:
        logger.error(f"Error fetching bookmark {verse_key}: {str(e)}")
        return error_response(e)

    if bookmark is None:
        return jsonify({"error": "Bookmark not found"}), 404
    return jsonify(_bookmark_json(bookmark)), 200


@bookmarks_bp.route("/<verse_key>", methods=['DELETE'])
@token_required
def delete_bookmark(auth, verse_key):
    try:
        parse_verse_key(verse_key)
        get_services().annotations(auth).clear_bookmark(verse_key)
    except BibleReaderError as e:
        logger.error(f"Error deleting bookmark {verse_key}: {str(e)}")
        return error_response(e)
    return jsonify({"message": "Bookmark removed"}), 200
