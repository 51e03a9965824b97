# This file makes the models directory a Python package
from .bookmark import Bookmark
from .highlight import Highlight
from .reading_plan import ReadingPlan, ReadingProgress

__all__ = [
    'Bookmark',
    'Highlight',
    'ReadingPlan',
    'ReadingProgress',
]
