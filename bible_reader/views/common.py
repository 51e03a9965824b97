# views/common.py
from dataclasses import dataclass
from typing import Optional
import threading

PENDING = 'pending'
CONFIRMED = 'confirmed'


@dataclass(frozen=True)
class Notice:
    """A non-blocking message for the user (the front end shows it as a toast)."""
    level: str
    message: str
    error: Optional[str] = None

    @classmethod
    def success(cls, message):
        return cls('success', message)

    @classmethod
    def failure(cls, message, exc=None):
        return cls('error', message, type(exc).__name__ if exc is not None else None)

    def to_dict(self):
        return {'level': self.level, 'message': self.message, 'error': self.error}


@dataclass
class CacheEntry:
    confirmed: object
    value: object
    status: str = CONFIRMED


class AnnotationCache:
    """Local mirror of remote annotation rows for the verses on screen.

    A write first records the new value as *pending*; the response either
    confirms it or rolls it back to the last confirmed value. Entries are
    independent, so one failed write never disturbs the others.
    """

    def __init__(self, default=None):
        self.default = default
        self._entries = {}
        self._lock = threading.Lock()

    def reset(self, keys, values):
        with self._lock:
            self._entries = {
                key: CacheEntry(values.get(key, self.default), values.get(key, self.default))
                for key in keys
            }

    def __contains__(self, key):
        return key in self._entries

    def get(self, key):
        entry = self._entries.get(key)
        return self.default if entry is None else entry.value

    def status(self, key):
        entry = self._entries.get(key)
        return None if entry is None else entry.status

    def begin(self, key, value):
        with self._lock:
            entry = self._entries.setdefault(key, CacheEntry(self.default, self.default))
            entry.value = value
            entry.status = PENDING

    def confirm(self, key, value):
        with self._lock:
            entry = self._entries.get(key)
            # Dropped by a navigation while the write was in flight
            if entry is None:
                return
            entry.confirmed = value
            entry.value = value
            entry.status = CONFIRMED

    def rollback(self, key):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return
            entry.value = entry.confirmed
            entry.status = CONFIRMED

    def values(self):
        return {key: entry.value for key, entry in self._entries.items()}
