# views/bookmarks.py
"""The user's saved verses, with their text.

Bookmarks are grouped by chapter first so that each referenced chapter is
fetched once, however many of its verses are bookmarked. The chapters are
fetched in parallel and joined before the merged list is sorted into
canonical order.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging

from ..data.types import Book, VerseRef
from ..errors import BibleReaderError, MalformedKey, UnknownBook
from ..utils.verse_identity import format_reference, parse_verse_key
from .common import Notice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookmarkedVerse:
    bookmark_id: object
    verse_key: str
    ref: VerseRef
    text: str

    @property
    def reference(self):
        return format_reference(self.ref)

    def to_dict(self):
        return {
            'bookmark_id': self.bookmark_id,
            'verse_key': self.verse_key,
            'reference': self.reference,
            'book': self.ref.book,
            'chapter': self.ref.chapter,
            'verse': self.ref.verse,
            'text': self.text,
        }


def group_by_chapter(bookmarks):
    """Group bookmarks by the (book, chapter) of their key.

    Returns ``{(book, chapter): [(ref, bookmark), ...]}`` in first-seen order.
    Bookmarks whose key does not parse are logged and left out.
    """
    groups = {}
    for bookmark in bookmarks:
        try:
            ref = parse_verse_key(bookmark.verse_key)
        except MalformedKey as e:
            logger.warning(f"Skipping bookmark {bookmark.id} with malformed key: {e}")
            continue
        groups.setdefault((ref.book, ref.chapter), []).append((ref, bookmark))
    return groups


class BookmarksListView:
    def __init__(self, catalog, source, store, translation, max_workers=4):
        self.catalog = catalog
        self.source = source
        self.store = store
        self.translation = translation
        self.max_workers = max_workers
        self.entries = []
        self.loading = False
        self.notices = []
        self.last_error = None

    def _fail(self, message, exc):
        logger.error(f"{message} ({type(exc).__name__}: {exc})")
        self.last_error = exc
        self.notices.append(Notice.failure(message, exc))

    def _book_for(self, name):
        try:
            return self.catalog.resolve(name)
        except UnknownBook:
            if self.source.identifies_by == 'name':
                # The name is all the verse API needs
                return Book(name=name, abbreviation='', chapter_count=0)
            raise

    def _fetch_chapter(self, book_name, chapter):
        book = self._book_for(book_name)
        verses = self.source.load_book_chapter(book, chapter, self.translation)
        return {verse.number: verse for verse in verses}

    def _fetch_chapters(self, chapter_ids):
        """Fetch each chapter once, concurrently. Failed chapters are reported and left out."""
        chapters = {}
        if not chapter_ids:
            return chapters

        workers = max(1, min(self.max_workers, len(chapter_ids)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                chapter_id: executor.submit(self._fetch_chapter, *chapter_id)
                for chapter_id in chapter_ids
            }
            for (book_name, chapter), future in futures.items():
                try:
                    chapters[(book_name, chapter)] = future.result()
                except BibleReaderError as e:
                    self._fail(f'Could not load {book_name} {chapter}.', e)
        return chapters

    def sort_key(self, entry):
        return (self.catalog.sort_key(entry.ref.book), entry.ref.chapter, entry.ref.verse)

    def load(self):
        self.loading = True
        self.notices = []
        self.last_error = None
        try:
            bookmarks = self.store.list_bookmarks()
            try:
                self.catalog.list_books()
            except BibleReaderError as e:
                # Still usable: names resolve through the verse API, order falls back to name
                self._fail('Could not load the list of books.', e)

            groups = group_by_chapter(bookmarks)
            logger.info(f"{len(bookmarks)} bookmarks span {len(groups)} chapters")
            chapters = self._fetch_chapters(list(groups))

            entries = []
            for chapter_id, members in groups.items():
                verses = chapters.get(chapter_id)
                if verses is None:
                    continue
                for ref, bookmark in members:
                    verse = verses.get(ref.verse)
                    if verse is None:
                        logger.warning(f"Bookmarked verse {bookmark.verse_key} not found in {self.translation}")
                        continue
                    entries.append(BookmarkedVerse(bookmark.id, bookmark.verse_key, ref, verse.text))

            entries.sort(key=self.sort_key)
            self.entries = entries
        except BibleReaderError as e:
            self._fail('Failed to load your bookmarks.', e)
        finally:
            self.loading = False
        return self.entries

    def remove(self, verse_key):
        self.last_error = None
        try:
            self.store.clear_bookmark(verse_key)
        except BibleReaderError as e:
            self._fail('Failed to remove bookmark.', e)
            return False
        self.entries = [entry for entry in self.entries if entry.verse_key != verse_key]
        self.notices.append(Notice.success('Bookmark removed'))
        return True

    def to_dict(self):
        return {
            'bookmarks': [entry.to_dict() for entry in self.entries],
            'loading': self.loading,
            'notices': [n.to_dict() for n in self.notices],
        }
