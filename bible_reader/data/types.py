# data/types.py
from dataclasses import dataclass

from ..errors import MalformedKey

KEY_DELIMITER = '.'


@dataclass(frozen=True)
class VerseRef:
    """Structured address of a single verse.

    Book names are catalog names ("1 Samuel", "Song of Solomon") and may not
    contain the key delimiter; chapter and verse start at 1.
    """
    book: str
    chapter: int
    verse: int

    def __post_init__(self):
        if not isinstance(self.book, str) or not self.book:
            raise MalformedKey(f"Book name must be a non-empty string, got {self.book!r}")
        if KEY_DELIMITER in self.book:
            raise MalformedKey(f"Book name {self.book!r} contains the key delimiter {KEY_DELIMITER!r}")
        for field_name in ('chapter', 'verse'):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise MalformedKey(f"{field_name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class Verse:
    ref: VerseRef
    text: str

    @property
    def number(self) -> int:
        return self.ref.verse


@dataclass(frozen=True)
class RandomVerse:
    """A verse returned by the random-verse endpoint, with the upstream display reference."""
    verse: Verse
    reference: str
    translation: str


@dataclass(frozen=True)
class Book:
    name: str
    abbreviation: str
    chapter_count: int
    testament: str = ''
