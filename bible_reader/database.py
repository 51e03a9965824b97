# database.py
from contextlib import contextmanager
import logging

from sqlalchemy.orm import declarative_base
from supabase import create_client

from .config import Config

logger = logging.getLogger(__name__)

# Declarative base for the table models; the tables themselves live in Supabase
# Postgres and are created by the Alembic migrations.
Base = declarative_base()


class SupabaseClient:
    def __init__(self, url=None, key=None, client=None):
        self._url = url
        self._key = key
        self._client = client
        self._injected = client is not None
        # Defer initialization to first access

    def _get_or_init_client(self):
        if self._client is None:
            supabase_url = self._url or Config.SUPABASE_URL
            supabase_key = self._key or Config.SUPABASE_SERVICE_KEY

            if not supabase_url or not supabase_key:
                raise ValueError("SUPABASE_URL or SUPABASE_SERVICE_KEY not found")

            try:
                logger.info("Initializing Supabase client...")
                self._client = create_client(supabase_url, supabase_key)
                logger.info("Successfully initialized Supabase client")
            except Exception as e:
                logger.error(f"Error initializing Supabase client: {str(e)}")
                self._client = None
                raise
        return self._client

    @property
    def client(self):
        """Get the Supabase client, initializing if needed."""
        return self._get_or_init_client()

    def new_auth_client(self):
        """A fresh client for password sign-in.

        Signing in stores the user's session on the client, so it must not
        happen on the shared service-role client.
        """
        if self._injected:
            return self._client
        supabase_url = self._url or Config.SUPABASE_URL
        supabase_key = self._key or Config.SUPABASE_SERVICE_KEY
        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL or SUPABASE_SERVICE_KEY not found")
        return create_client(supabase_url, supabase_key)

    @contextmanager
    def db_connection(self):
        """Context manager for Supabase client usage"""
        try:
            yield self.client
        except Exception as e:
            logger.error(f"Error in Supabase client operation: {str(e)}")
            raise


_supabase_client_instance = None


def _get_supabase_instance():
    global _supabase_client_instance
    if _supabase_client_instance is None:
        _supabase_client_instance = SupabaseClient()
    return _supabase_client_instance
