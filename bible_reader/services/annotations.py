# services/annotations.py
"""Bookmarks and highlights stored in Supabase.

Each method is one round trip (``set_bookmark`` may take two) and is scoped
to the user of the :class:`~bible_reader.utils.auth.AuthContext` the store
was built with. The service-role client bypasses row-level security, so
every query filters on ``user_id`` itself.
"""
from datetime import datetime, timezone
import logging
from functools import wraps

import httpx
from postgrest.exceptions import APIError

from ..errors import BackendUnavailable, Unauthenticated
from ..schemas.annotation_schemas import BookmarkRead, HighlightRead

logger = logging.getLogger(__name__)

BOOKMARKS_TABLE = 'bookmarks'
HIGHLIGHTS_TABLE = 'highlights'
BOOKMARK_COLUMNS = 'id, user_id, verse_id, created_at'
HIGHLIGHT_COLUMNS = 'user_id, verse_id, color'

HIGHLIGHT_COLORS = ('yellow', 'green', 'blue', 'pink')

# Postgres unique_violation
UNIQUE_VIOLATION = '23505'


def utcnow():
    """Timestamp for ``updated_at``; upserts go through PostgREST, not the ORM."""
    return datetime.now(timezone.utc).isoformat()


def backend_call(operation):
    """Translate Supabase client failures into BackendUnavailable."""
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except APIError as e:
                logger.error(f"Supabase rejected {operation}: {e.code} {e.message}")
                raise BackendUnavailable(f"Failed to {operation}") from e
            except httpx.HTTPError as e:
                logger.error(f"Supabase unreachable during {operation}: {str(e)}")
                raise BackendUnavailable(f"Failed to {operation}") from e
        return decorated
    return decorator


def require_user(auth):
    if auth is None or not auth.is_authenticated:
        raise Unauthenticated("You must be logged in to do that.")
    return auth.user_id


class AnnotationStore:
    def __init__(self, client, auth):
        self.client = client
        self.auth = auth

    @property
    def is_authenticated(self):
        return self.auth is not None and self.auth.is_authenticated

    @property
    def user_id(self):
        return require_user(self.auth)

    # --- bookmarks ---

    @backend_call('read bookmark')
    def get_bookmark(self, verse_key):
        user_id = self.user_id
        response = self.client.table(BOOKMARKS_TABLE).select(BOOKMARK_COLUMNS)\
            .eq('user_id', user_id)\
            .eq('verse_id', verse_key)\
            .limit(1)\
            .execute()
        if not response.data:
            return None
        return BookmarkRead.model_validate(response.data[0])

    @backend_call('list bookmarks')
    def list_bookmarks(self):
        """All of the user's bookmarks, newest first."""
        user_id = self.user_id
        response = self.client.table(BOOKMARKS_TABLE).select(BOOKMARK_COLUMNS)\
            .eq('user_id', user_id)\
            .order('created_at', desc=True)\
            .execute()
        return [BookmarkRead.model_validate(row) for row in response.data]

    @backend_call('read bookmarks')
    def bookmarks_for(self, verse_keys):
        """Set of the given keys the user has bookmarked."""
        user_id = self.user_id
        verse_keys = list(verse_keys)
        if not verse_keys:
            return set()
        response = self.client.table(BOOKMARKS_TABLE).select('verse_id')\
            .eq('user_id', user_id)\
            .in_('verse_id', verse_keys)\
            .execute()
        return {row['verse_id'] for row in response.data}

    def set_bookmark(self, verse_key):
        """Bookmark a verse; returns the existing row if there already is one."""
        existing = self.get_bookmark(verse_key)
        if existing is not None:
            return existing
        return self._insert_bookmark(verse_key)

    @backend_call('create bookmark')
    def _insert_bookmark(self, verse_key):
        user_id = self.user_id
        try:
            response = self.client.table(BOOKMARKS_TABLE)\
                .insert({'user_id': user_id, 'verse_id': verse_key})\
                .execute()
        except APIError as e:
            if e.code != UNIQUE_VIOLATION:
                raise
            # Another request created it between our read and insert
            logger.info(f"Bookmark {verse_key} created concurrently; reading it back")
            response = self.client.table(BOOKMARKS_TABLE).select(BOOKMARK_COLUMNS)\
                .eq('user_id', user_id)\
                .eq('verse_id', verse_key)\
                .limit(1)\
                .execute()
        if not response.data:
            raise BackendUnavailable("Bookmark was not returned by the backend")
        logger.info(f"User {user_id} bookmarked {verse_key}")
        return BookmarkRead.model_validate(response.data[0])

    @backend_call('remove bookmark')
    def clear_bookmark(self, verse_key):
        user_id = self.user_id
        self.client.table(BOOKMARKS_TABLE).delete()\
            .eq('user_id', user_id)\
            .eq('verse_id', verse_key)\
            .execute()
        logger.info(f"User {user_id} removed bookmark {verse_key}")

    # --- highlights ---

    @backend_call('read highlight')
    def get_highlight(self, verse_key):
        """Highlight color of a verse, None when it has none."""
        user_id = self.user_id
        response = self.client.table(HIGHLIGHTS_TABLE).select(HIGHLIGHT_COLUMNS)\
            .eq('user_id', user_id)\
            .eq('verse_id', verse_key)\
            .limit(1)\
            .execute()
        if not response.data:
            return None
        return HighlightRead.model_validate(response.data[0]).color

    @backend_call('read highlights')
    def highlights_for(self, verse_keys):
        """Map of verse key to color for the given keys; tombstones are left out."""
        user_id = self.user_id
        verse_keys = list(verse_keys)
        if not verse_keys:
            return {}
        response = self.client.table(HIGHLIGHTS_TABLE).select(HIGHLIGHT_COLUMNS)\
            .eq('user_id', user_id)\
            .in_('verse_id', verse_keys)\
            .execute()
        highlights = (HighlightRead.model_validate(row) for row in response.data)
        return {h.verse_key: h.color for h in highlights if h.color is not None}

    @backend_call('save highlight')
    def set_highlight(self, verse_key, color):
        """Set or clear (``color=None``) a verse highlight with a single upsert.

        An empty color is stored as None so there is only one tombstone.
        """
        user_id = self.user_id
        color = color or None
        self.client.table(HIGHLIGHTS_TABLE)\
            .upsert(
                {'user_id': user_id, 'verse_id': verse_key, 'color': color, 'updated_at': utcnow()},
                on_conflict='user_id,verse_id',
            )\
            .execute()
        logger.info(f"User {user_id} set highlight {verse_key} -> {color}")
        return color
