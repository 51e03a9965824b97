# views/reader.py
from dataclasses import dataclass, field
from typing import List, Optional
import logging
import threading

from ..errors import BackendUnavailable, BibleReaderError, Unauthenticated, UnknownBook
from ..services.annotations import HIGHLIGHT_COLORS
from ..utils.navigation import ReadingNavigator
from ..utils.verse_identity import key_for, verse_key
from .common import PENDING, AnnotationCache, Notice

logger = logging.getLogger(__name__)


@dataclass
class ChapterPage:
    book: str
    chapter: int
    translation: str
    verses: List[dict]
    previous: Optional[dict]
    next: Optional[dict]
    loading: bool = False
    notices: List[Notice] = field(default_factory=list)

    def to_dict(self):
        return {
            'book': self.book,
            'chapter': self.chapter,
            'translation': self.translation,
            'verses': self.verses,
            'previous': self.previous,
            'next': self.next,
            'loading': self.loading,
            'palette': list(HIGHLIGHT_COLORS),
            'notices': [n.to_dict() for n in self.notices],
        }


def _target(position):
    if position is None:
        return None
    return {'book': position.book, 'chapter': position.chapter}


class BibleReaderView:
    """One reader: a cursor, the chapter it shows and the user's marks on it.

    Loads are numbered; when a newer load has started, an older one that
    finishes later is discarded, so the page always matches the cursor.
    """

    def __init__(self, catalog, source, store, translation):
        self.catalog = catalog
        self.source = source
        self.store = store
        self.translation = translation
        self.navigator = None
        self.verses = []
        self.loaded_position = None
        self.loading = False
        self.notices = []
        self.last_error = None
        self.bookmarks = AnnotationCache(default=False)
        self.highlights = AnnotationCache(default=None)
        self._generation = 0
        self._lock = threading.Lock()

    def _notify(self, notice):
        self.notices.append(notice)

    def _fail(self, message, exc):
        logger.error(f"{message} ({type(exc).__name__}: {exc})")
        self.last_error = exc
        self._notify(Notice.failure(message, exc))

    def _ensure_catalog(self):
        try:
            books = self.catalog.list_books()
        except BibleReaderError as e:
            self._fail('Could not load the list of books.', e)
            return False
        if not books:
            self._fail('No books are available.', UnknownBook("Book catalog is empty"))
            return False
        if self.navigator is None:
            self.navigator = ReadingNavigator(self.catalog, books[0].name, 1)
        return True

    # --- navigation ---

    def open(self, book_name, chapter=1):
        self.last_error = None
        if not self._ensure_catalog():
            return None
        try:
            self.catalog.resolve(book_name)
        except UnknownBook as e:
            self._fail(f'Unknown book "{book_name}".', e)
            return None
        return self._load(self.navigator.go_to(book_name, chapter))

    def next_chapter(self):
        self.last_error = None
        if not self._ensure_catalog():
            return None
        return self._load(self.navigator.next())

    def previous_chapter(self):
        self.last_error = None
        if not self._ensure_catalog():
            return None
        return self._load(self.navigator.previous())

    def _fetch(self, position):
        book = self.catalog.resolve(position.book)
        verses = self.source.load_book_chapter(book, position.chapter, self.translation)
        keys = [verse_key(v.ref) for v in verses]

        bookmarked, highlights = set(), {}
        if self.store.is_authenticated and keys:
            try:
                bookmarked = self.store.bookmarks_for(keys)
                highlights = self.store.highlights_for(keys)
            except BackendUnavailable as e:
                # The text is still worth showing without the marks
                self._fail('Could not load your bookmarks and highlights.', e)
                bookmarked, highlights = set(), {}
        return verses, keys, bookmarked, highlights

    def _load(self, position):
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.loading = True

        logger.info(f"Loading {position.book} {position.chapter} ({self.translation}), request {generation}")
        result = None
        try:
            result = self._fetch(position)
        except BibleReaderError as e:
            self._fail(f'Could not load {position.book} {position.chapter}.', e)
        finally:
            with self._lock:
                if generation != self._generation:
                    logger.info(f"Discarding stale chapter {position.book} {position.chapter} (request {generation})")
                    result = None
                    stale = True
                else:
                    stale = False
                    self.loading = False
                    if result is not None:
                        verses, keys, bookmarked, highlights = result
                        self.verses = verses
                        self.loaded_position = position
                        self.bookmarks.reset(keys, {k: True for k in bookmarked})
                        self.highlights.reset(keys, highlights)

        if stale or result is None:
            return None
        return self.page()

    # --- annotations ---

    def _key_on_page(self, verse_number):
        if self.loaded_position is None:
            return None
        if not any(v.number == verse_number for v in self.verses):
            return None
        return key_for(self.loaded_position.book, self.loaded_position.chapter, verse_number)

    def _annotation_target(self, verse_number, action):
        self.last_error = None
        if not self.store.is_authenticated:
            exc = Unauthenticated(f"You must be logged in to {action}.")
            self._fail(str(exc), exc)
            return None
        key = self._key_on_page(verse_number)
        if key is None:
            exc = LookupError(f"Verse {verse_number} is not on this page")
            self._fail(f'Verse {verse_number} is not on this page.', exc)
        return key

    def toggle_bookmark(self, verse_number):
        key = self._annotation_target(verse_number, 'bookmark verses')
        if key is None:
            return False

        bookmarked = not self.bookmarks.get(key)
        self.bookmarks.begin(key, bookmarked)
        try:
            if bookmarked:
                self.store.set_bookmark(key)
            else:
                self.store.clear_bookmark(key)
        except BibleReaderError as e:
            self.bookmarks.rollback(key)
            self._fail('Failed to update bookmark.', e)
            return False

        self.bookmarks.confirm(key, bookmarked)
        self._notify(Notice.success('Verse bookmarked' if bookmarked else 'Bookmark removed'))
        return True

    def set_highlight(self, verse_number, color):
        key = self._annotation_target(verse_number, 'highlight verses')
        if key is None:
            return False

        self.highlights.begin(key, color)
        try:
            self.store.set_highlight(key, color)
        except BibleReaderError as e:
            self.highlights.rollback(key)
            self._fail('Failed to update highlight.', e)
            return False

        self.highlights.confirm(key, color)
        self._notify(Notice.success('Highlight removed' if color is None else 'Verse highlighted'))
        return True

    # --- rendering ---

    def page(self):
        position = self.loaded_position
        if position is None:
            return None
        verses = []
        for verse in self.verses:
            key = verse_key(verse.ref)
            verses.append({
                'verse': verse.number,
                'verse_key': key,
                'text': verse.text,
                'bookmarked': bool(self.bookmarks.get(key)),
                'highlight': self.highlights.get(key),
                'pending': PENDING in (self.bookmarks.status(key), self.highlights.status(key)),
            })

        previous_target = next_target = None
        if self.navigator is not None and self.navigator.position == position:
            previous_target = self.navigator.previous_target()
            next_target = self.navigator.next_target()
        return ChapterPage(
            book=position.book,
            chapter=position.chapter,
            translation=self.translation,
            verses=verses,
            previous=_target(previous_target),
            next=_target(next_target),
            loading=self.loading,
            notices=list(self.notices),
        )
