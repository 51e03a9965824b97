from .common import AnnotationCache, Notice
from .reader import BibleReaderView, ChapterPage
from .bookmarks import BookmarkedVerse, BookmarksListView, group_by_chapter
from .daily import DailyVerse, daily_verse

__all__ = [
    'AnnotationCache',
    'Notice',
    'BibleReaderView',
    'ChapterPage',
    'BookmarkedVerse',
    'BookmarksListView',
    'group_by_chapter',
    'DailyVerse',
    'daily_verse',
]
