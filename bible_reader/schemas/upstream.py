# schemas/upstream.py
"""Payload shapes of the two Bible content APIs.

Upstream JSON is validated here and nowhere else; the rest of the package
only sees :mod:`bible_reader.data.types` objects.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UpstreamModel(BaseModel):
    model_config = ConfigDict(extra='ignore')


# --- Verse-by-reference service ---

class PassageVerse(UpstreamModel):
    book_name: Optional[str] = None
    chapter: int = Field(..., ge=1)
    verse: int = Field(..., ge=1)
    text: str


class PassageResponse(UpstreamModel):
    reference: Optional[str] = None
    verses: List[PassageVerse] = Field(default_factory=list)
    text: Optional[str] = None


class RandomVerseResponse(UpstreamModel):
    book_name: str
    chapter: int = Field(..., ge=1)
    verse: int = Field(..., ge=1)
    text: str
    reference: str


# --- Books/chapters service ---

class BookEntry(UpstreamModel):
    name: str
    chapters: int = Field(..., ge=0)
    abbreviation: str


class BooksResponse(UpstreamModel):
    data: List[BookEntry]


class ChapterVerse(UpstreamModel):
    verse: int = Field(..., ge=1)
    text: str


class ChapterData(UpstreamModel):
    verses: List[ChapterVerse] = Field(default_factory=list)


class ChapterResponse(UpstreamModel):
    data: ChapterData
