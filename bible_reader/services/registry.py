# services/registry.py
"""Per-app wiring of sources, catalog and stores, kept in ``app.extensions``."""
import logging

import requests
from flask import current_app

from .annotations import AnnotationStore
from .catalog import BookCatalog
from .reading_plans import ReadingPlanStore
from .sources import BooksApiSource, VerseApiSource
from ..views.bookmarks import BookmarksListView
from ..views.reader import BibleReaderView

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'bible_reader'


class Services:
    def __init__(self, config, supabase, http_session=None):
        self.config = config
        self.supabase = supabase
        self.http_session = http_session or requests.Session()
        timeout = config['UPSTREAM_TIMEOUT']

        self.verse_source = VerseApiSource(config['VERSE_API_URL'], self.http_session, timeout)
        self.books_source = None
        if config.get('BOOKS_API_URL'):
            self.books_source = BooksApiSource(config['BOOKS_API_URL'], self.http_session, timeout)

        if config['CHAPTER_SOURCE'] == 'books-api':
            if self.books_source is None:
                logger.warning("CHAPTER_SOURCE is books-api but BOOKS_API_URL is unset; using the verse API")
                self.chapter_source = self.verse_source
            else:
                self.chapter_source = self.books_source
        else:
            self.chapter_source = self.verse_source

        # Shared for the app's lifetime; book lists do not change
        self.catalog = BookCatalog(self.books_source)

    def translation(self, requested=None):
        return requested or self.config['DEFAULT_TRANSLATION']

    def annotations(self, auth):
        return AnnotationStore(self.supabase.client, auth)

    def reading_plans(self, auth=None):
        return ReadingPlanStore(self.supabase.client, auth)

    def reader(self, auth, translation=None):
        return BibleReaderView(
            self.catalog, self.chapter_source, self.annotations(auth), self.translation(translation)
        )

    def bookmarks_view(self, auth, translation=None):
        return BookmarksListView(
            self.catalog,
            self.chapter_source,
            self.annotations(auth),
            self.translation(translation),
            max_workers=self.config['CHAPTER_FETCH_WORKERS'],
        )


def init_services(app, supabase, http_session=None):
    services = Services(app.config, supabase, http_session)
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services():
    return current_app.extensions[EXTENSION_KEY]
