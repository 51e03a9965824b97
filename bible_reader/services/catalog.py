# services/catalog.py
import logging
import threading

from ..data.canon import BIBLE_BOOKS
from ..errors import UnknownBook

logger = logging.getLogger(__name__)


class BookCatalog:
    """Books in canonical order with their chapter counts.

    Loaded once, from the books API when a ``books_source`` is given and from
    the static canon table otherwise, then kept for the catalog's lifetime.
    """

    def __init__(self, books_source=None):
        self.books_source = books_source
        self._books = None
        self._by_name = {}
        self._lock = threading.Lock()

    @property
    def loaded(self):
        return self._books is not None

    def list_books(self):
        with self._lock:
            if self._books is None:
                if self.books_source is not None:
                    books = self.books_source.list_books()
                    logger.info(f"Loaded {len(books)} books from books API")
                else:
                    books = list(BIBLE_BOOKS)
                    logger.info(f"Using static book list ({len(books)} books)")
                self._books = tuple(books)
                self._by_name = {book.name: index for index, book in enumerate(self._books)}
            return list(self._books)

    def resolve(self, book_name):
        if self._books is None:
            raise UnknownBook(f"Book catalog not loaded; cannot resolve {book_name!r}")
        index = self._by_name.get(book_name)
        if index is None:
            raise UnknownBook(f"Unknown book {book_name!r}")
        return self._books[index]

    def chapter_count(self, book_name):
        """Chapter count of ``book_name``, 0 when the book is unknown."""
        try:
            return self.resolve(book_name).chapter_count
        except UnknownBook:
            return 0

    def index_of(self, book_name):
        """Position in catalog order, -1 when unknown."""
        return self._by_name.get(book_name, -1)

    def next_book(self, book_name):
        index = self.index_of(book_name)
        if 0 <= index < len(self._books or ()) - 1:
            return self._books[index + 1]
        return None

    def previous_book(self, book_name):
        index = self.index_of(book_name)
        if index > 0:
            return self._books[index - 1]
        return None

    def sort_key(self, book_name):
        """Sort key placing catalog books in canonical order, unknown books after them."""
        index = self.index_of(book_name)
        if index < 0:
            return (1, 0, book_name)
        return (0, index, '')
