# routes/highlight.py
from flask import Blueprint, request, jsonify
from pydantic import ValidationError
import logging

from . import error_response
from ..errors import BibleReaderError
from ..schemas.annotation_schemas import HighlightWrite
from ..services.annotations import HIGHLIGHT_COLORS
from ..services.registry import get_services
from ..utils.auth import token_required
from ..utils.verse_identity import parse_verse_key

logger = logging.getLogger(__name__)

highlight_bp = Blueprint('highlight_bp', __name__, url_prefix='/api/highlights')


@highlight_bp.route("/colors", methods=['GET'])
def get_colors():
    return jsonify(list(HIGHLIGHT_COLORS))


@highlight_bp.route("/<verse_key>", methods=['GET'])
@token_required
def get_highlight(auth, verse_key):
    try:
        parse_verse_key(verse_key)
        color = get_services().annotations(auth).get_highlight(verse_key)
    except BibleReaderError as e:
        logger.error(f"Error fetching highlight {verse_key}: {str(e)}")
        return error_response(e)
    return jsonify({"verse_key": verse_key, "color": color}), 200


@highlight_bp.route("/<verse_key>", methods=['PUT'])
@token_required
def put_highlight(auth, verse_key):
    """Set a verse's highlight color; ``{"color": null}`` removes it."""
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        body = HighlightWrite.model_validate(data)
    except ValidationError:
        return jsonify({"error": "color is required and must be a string or null"}), 400

    try:
        parse_verse_key(verse_key)
        color = get_services().annotations(auth).set_highlight(verse_key, body.color)
    except BibleReaderError as e:
        logger.error(f"Error saving highlight {verse_key}: {str(e)}")
        return error_response(e)
    return jsonify({"verse_key": verse_key, "color": color}), 200
