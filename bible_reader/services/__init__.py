from .sources import BooksApiSource, ChapterSource, VerseApiSource
from .catalog import BookCatalog
from .annotations import AnnotationStore, HIGHLIGHT_COLORS
from .reading_plans import ReadingPlanStore

__all__ = [
    'ChapterSource',
    'VerseApiSource',
    'BooksApiSource',
    'BookCatalog',
    'AnnotationStore',
    'HIGHLIGHT_COLORS',
    'ReadingPlanStore',
]
