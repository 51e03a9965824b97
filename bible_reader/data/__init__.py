from .types import Book, RandomVerse, Verse, VerseRef
from .canon import BIBLE_BOOKS, CANON_ORDER, FALLBACK_CHAPTER_COUNT

__all__ = [
    'Book',
    'Verse',
    'VerseRef',
    'RandomVerse',
    'BIBLE_BOOKS',
    'CANON_ORDER',
    'FALLBACK_CHAPTER_COUNT',
]
