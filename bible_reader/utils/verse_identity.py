# utils/verse_identity.py
"""Canonical string keys for verses.

A verse key is ``"<book>.<chapter>.<verse>"``, e.g. ``"Genesis.1.1"`` or
``"Song of Solomon.2.4"``. It is the join key for bookmarks and highlights,
so the same verse must produce the same key whether it was reached by
navigation, by the random-verse endpoint or from a stored bookmark.
"""
from ..data.types import KEY_DELIMITER, VerseRef
from ..errors import MalformedKey


def verse_key(ref: VerseRef) -> str:
    return f"{ref.book}{KEY_DELIMITER}{ref.chapter}{KEY_DELIMITER}{ref.verse}"


def _parse_number(part, key):
    # Canonical form only: "1", "12", never "01", "+1" or " 1"
    if not part.isdigit() or not part.isascii() or part.startswith('0'):
        raise MalformedKey(f"Verse key {key!r} has a non-canonical number {part!r}")
    return int(part)


def parse_verse_key(key: str) -> VerseRef:
    """Inverse of :func:`verse_key`. Raises :class:`MalformedKey`."""
    if not isinstance(key, str):
        raise MalformedKey(f"Verse key must be a string, got {type(key).__name__}")

    parts = key.split(KEY_DELIMITER)
    if len(parts) != 3 or not all(parts):
        raise MalformedKey(f"Verse key {key!r} must have three non-empty parts")

    book, chapter, verse = parts
    return VerseRef(book, _parse_number(chapter, key), _parse_number(verse, key))


def key_for(book: str, chapter: int, verse: int) -> str:
    return verse_key(VerseRef(book, chapter, verse))


def chapter_of(key: str):
    """Return the ``(book, chapter)`` pair a verse key belongs to."""
    ref = parse_verse_key(key)
    return ref.book, ref.chapter


def format_reference(ref: VerseRef) -> str:
    """Display form of a ref, e.g. ``"John 3:16"``."""
    return f"{ref.book} {ref.chapter}:{ref.verse}"
