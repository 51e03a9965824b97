# routes/bible.py
from flask import Blueprint, jsonify, request
import logging

from pydantic import ValidationError

from . import error_response, error_status
from ..errors import BibleReaderError
from ..schemas.annotation_schemas import HighlightWrite
from ..services.registry import get_services
from ..utils.auth import token_optional, token_required
from ..views.daily import daily_verse

bible_bp = Blueprint('bible', __name__)
logger = logging.getLogger(__name__)


def _page_response(view, page):
    if page is None:
        return jsonify({
            'error': view.notices[-1].message if view.notices else 'Chapter could not be loaded',
            'notices': [n.to_dict() for n in view.notices],
        }), error_status(view.last_error)
    return jsonify(page.to_dict()), 200


@bible_bp.route('/books', methods=['GET'])
def get_books():
    services = get_services()
    try:
        books = services.catalog.list_books()
    except BibleReaderError as e:
        logger.error(f"Error fetching books: {str(e)}")
        return error_response(e, 'Could not load the list of books')

    return jsonify([{
        'name': book.name,
        'abbreviation': book.abbreviation,
        'chapters': book.chapter_count,
    } for book in books])


@bible_bp.route('/chapters/<book>/<int:chapter>', methods=['GET'])
@token_optional
def get_chapter(auth, book, chapter):
    view = get_services().reader(auth, request.args.get('translation'))
    page = view.open(book, chapter)
    return _page_response(view, page)


@bible_bp.route('/chapters/<book>/<int:chapter>/verses/<int:verse>/bookmark', methods=['POST'])
@token_required
def toggle_bookmark(auth, book, chapter, verse):
    view = get_services().reader(auth, request.args.get('translation'))
    page = view.open(book, chapter)
    if page is None:
        return _page_response(view, page)

    if not view.toggle_bookmark(verse):
        return jsonify({
            'error': view.notices[-1].message,
            'page': view.page().to_dict(),
        }), error_status(view.last_error)
    return _page_response(view, view.page())


@bible_bp.route('/chapters/<book>/<int:chapter>/verses/<int:verse>/highlight', methods=['PUT'])
@token_required
def set_highlight(auth, book, chapter, verse):
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        body = HighlightWrite.model_validate(data)
    except ValidationError:
        return jsonify({"error": "color is required and must be a string or null"}), 400

    view = get_services().reader(auth, request.args.get('translation'))
    page = view.open(book, chapter)
    if page is None:
        return _page_response(view, page)

    if not view.set_highlight(verse, body.color):
        return jsonify({
            'error': view.notices[-1].message,
            'page': view.page().to_dict(),
        }), error_status(view.last_error)
    return _page_response(view, view.page())


@bible_bp.route('/random', methods=['GET'])
@token_optional
def get_random_verse(auth):
    services = get_services()
    translation = services.translation(request.args.get('translation'))
    store = services.annotations(auth) if auth is not None else None
    try:
        verse = daily_verse(services.verse_source, store, translation)
    except BibleReaderError as e:
        logger.error(f"Error fetching random verse: {str(e)}")
        return error_response(e, 'Could not load a random verse. Please try again.')
    return jsonify(verse.to_dict())
