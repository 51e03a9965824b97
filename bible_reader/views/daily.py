# views/daily.py
from dataclasses import dataclass
import logging

from ..utils.verse_identity import verse_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyVerse:
    verse_key: str
    reference: str
    text: str
    translation: str
    bookmarked: bool

    def to_dict(self):
        return {
            'verse_key': self.verse_key,
            'reference': self.reference,
            'text': self.text,
            'translation': self.translation,
            'bookmarked': self.bookmarked,
        }


def daily_verse(source, store, translation):
    """A random verse, with whether the signed-in user has bookmarked it."""
    random_verse = source.random_verse(translation)
    key = verse_key(random_verse.verse.ref)
    bookmarked = False
    if store is not None and store.is_authenticated:
        bookmarked = store.get_bookmark(key) is not None
    logger.info(f"Daily verse: {key} ({translation})")
    return DailyVerse(
        verse_key=key,
        reference=random_verse.reference,
        text=random_verse.verse.text,
        translation=translation,
        bookmarked=bookmarked,
    )
