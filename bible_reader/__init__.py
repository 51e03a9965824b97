"""Bible reader backend: chapter browsing, bookmarks, highlights and reading plans."""

__version__ = "0.1.0"
