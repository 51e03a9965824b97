# utils/navigation.py
from collections import namedtuple
import logging

from ..data.canon import FALLBACK_CHAPTER_COUNT

logger = logging.getLogger(__name__)

Position = namedtuple('Position', ['book', 'chapter'])


class ReadingNavigator:
    """The (book, chapter) cursor of a reader.

    Chapter bounds and book order come from a loaded BookCatalog. Moving past
    the last chapter of a book continues at chapter 1 of the next catalog
    book, and moving before chapter 1 continues at the last chapter of the
    previous one.
    """

    def __init__(self, catalog, book, chapter=1):
        self.catalog = catalog
        self.book = book
        self.chapter = 1
        self.go_to(book, chapter)

    @property
    def position(self):
        return Position(self.book, self.chapter)

    def bound(self, book_name):
        return self.catalog.chapter_count(book_name) or FALLBACK_CHAPTER_COUNT

    def go_to(self, book_name, chapter):
        self.book = book_name
        self.chapter = max(1, min(chapter, self.bound(book_name)))
        return self.position

    def next_target(self):
        """Where next() would move, or None at the end of the catalog."""
        if self.chapter < self.bound(self.book):
            return Position(self.book, self.chapter + 1)
        following = self.catalog.next_book(self.book)
        if following is None:
            return None
        return Position(following.name, 1)

    def previous_target(self):
        """Where previous() would move, or None at the start of the catalog."""
        if self.chapter > 1:
            return Position(self.book, self.chapter - 1)
        preceding = self.catalog.previous_book(self.book)
        if preceding is None:
            return None
        return Position(preceding.name, self.bound(preceding.name))

    def next(self):
        target = self.next_target()
        if target is None:
            logger.debug(f"next() at end of catalog ({self.book} {self.chapter})")
            return self.position
        return self.go_to(*target)

    def previous(self):
        target = self.previous_target()
        if target is None:
            logger.debug(f"previous() at start of catalog ({self.book} {self.chapter})")
            return self.position
        return self.go_to(*target)
