# errors.py
"""Error taxonomy shared by the data sources, the stores and the views."""


class BibleReaderError(Exception):
    """Base class for every error raised by this package."""


class UpstreamUnavailable(BibleReaderError):
    """A Bible content API failed: network error, timeout, bad status or bad payload."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class BackendUnavailable(BibleReaderError):
    """The Supabase backend rejected or failed a request."""


class Unauthenticated(BibleReaderError):
    """An operation needing a signed-in user was attempted without a session."""


class UnknownBook(BibleReaderError, LookupError):
    pass


class MalformedKey(BibleReaderError, ValueError):
    pass
