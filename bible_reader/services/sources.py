# services/sources.py
"""Chapter data sources backed by the two Bible content APIs.

Both sources return verses in the order the upstream delivers them. The
verse API returns chapters presorted; the books API does not promise an
order, and no sorting happens here.
"""
import logging
import re

import requests
from pydantic import ValidationError

from ..data.types import Book, RandomVerse, Verse, VerseRef
from ..errors import UpstreamUnavailable
from ..schemas.upstream import (
    BooksResponse,
    ChapterResponse,
    PassageResponse,
    RandomVerseResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


def clean_text(text):
    """Collapse the line breaks and runs of whitespace upstream text carries."""
    return re.sub(r'\s+', ' ', text).strip()


class ChapterSource:
    """Base class for an upstream that serves one chapter per request."""

    # Which Book attribute addresses a chapter upstream: 'name' or 'abbreviation'
    identifies_by = 'name'

    def __init__(self, base_url, session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get_json(self, url, params=None):
        """GET ``url`` and return ``(status_code, payload)``.

        404 is returned to the caller, every other non-2xx raises.
        """
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {str(e)}")
            raise UpstreamUnavailable(f"Could not reach {url}") from e

        if response.status_code == 404:
            return response.status_code, None
        if not 200 <= response.status_code < 300:
            logger.error(f"Upstream {url} answered HTTP {response.status_code}")
            raise UpstreamUnavailable(
                f"Upstream answered HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.status_code, response.json()
        except ValueError as e:
            logger.error(f"Upstream {url} returned a non-JSON body")
            raise UpstreamUnavailable("Upstream returned a non-JSON body") from e

    @staticmethod
    def _validate(schema, payload, url):
        try:
            return schema.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Unexpected payload from {url}: {e.error_count()} validation errors")
            raise UpstreamUnavailable("Upstream returned an unexpected payload") from e

    def identifier_for(self, book: Book) -> str:
        return getattr(book, self.identifies_by)

    def load_chapter(self, book_identifier, chapter, translation, book_name=None):
        raise NotImplementedError

    def load_book_chapter(self, book: Book, chapter, translation):
        return self.load_chapter(
            self.identifier_for(book), chapter, translation, book_name=book.name
        )

    def _build_verses(self, book_name, chapter, numbered_texts, url):
        verses = [
            Verse(VerseRef(book_name, chapter, number), clean_text(text))
            for number, text in numbered_texts
        ]
        if not verses:
            logger.info(f"Empty chapter: {book_name} {chapter} ({url})")
        return verses


class VerseApiSource(ChapterSource):
    """Verse-by-reference service: ``GET /{book}+{chapter}?translation=``."""

    identifies_by = 'name'

    def chapter_url(self, book_identifier, chapter):
        reference = f"{book_identifier} {chapter}".replace(' ', '+')
        return f"{self.base_url}/{reference}"

    def load_chapter(self, book_identifier, chapter, translation, book_name=None):
        url = self.chapter_url(book_identifier, chapter)
        logger.info(f"Fetching {book_identifier} {chapter} ({translation}) from verse API")
        status, payload = self._get_json(url, params={'translation': translation})
        if payload is None:
            logger.info(f"Verse API has no {book_identifier} {chapter} in {translation}")
            return []

        passage = self._validate(PassageResponse, payload, url)
        return self._build_verses(
            book_name or book_identifier,
            chapter,
            ((v.verse, v.text) for v in passage.verses),
            url,
        )

    def random_verse(self, translation) -> RandomVerse:
        url = f"{self.base_url}/random"
        status, payload = self._get_json(url, params={'translation': translation})
        if payload is None:
            raise UpstreamUnavailable("Random verse endpoint not found", status_code=status)

        data = self._validate(RandomVerseResponse, payload, url)
        verse = Verse(VerseRef(data.book_name, data.chapter, data.verse), clean_text(data.text))
        return RandomVerse(verse=verse, reference=data.reference, translation=translation)


class BooksApiSource(ChapterSource):
    """Books/chapters service: ``GET /books`` and ``GET /books/{abbr}/chapters/{n}``."""

    identifies_by = 'abbreviation'

    def list_books(self):
        url = f"{self.base_url}/books"
        logger.info("Fetching book list from books API")
        status, payload = self._get_json(url)
        if payload is None:
            raise UpstreamUnavailable("Books endpoint not found", status_code=status)

        books = self._validate(BooksResponse, payload, url)
        return [
            Book(name=entry.name, abbreviation=entry.abbreviation, chapter_count=entry.chapters)
            for entry in books.data
        ]

    def load_chapter(self, book_identifier, chapter, translation, book_name=None):
        url = f"{self.base_url}/books/{book_identifier}/chapters/{chapter}"
        logger.info(f"Fetching {book_identifier} {chapter} ({translation}) from books API")
        status, payload = self._get_json(url, params={'translation': translation})
        if payload is None:
            logger.info(f"Books API has no {book_identifier} {chapter} in {translation}")
            return []

        data = self._validate(ChapterResponse, payload, url)
        return self._build_verses(
            book_name or book_identifier,
            chapter,
            ((v.verse, v.text) for v in data.data.verses),
            url,
        )
