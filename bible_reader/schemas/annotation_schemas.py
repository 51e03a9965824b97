from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Union
from datetime import datetime


class AnnotationBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    user_id: str
    verse_key: str = Field(..., alias='verse_id')


class BookmarkRead(AnnotationBase):
    id: Union[int, str]
    created_at: Optional[datetime] = None


class HighlightRead(AnnotationBase):
    # None is the "no highlight" tombstone
    color: Optional[str] = None


class HighlightWrite(BaseModel):
    # Required; null clears the highlight
    color: Optional[str]

    @field_validator('color')
    @classmethod
    def blank_is_none(cls, value):
        if value is not None and not value.strip():
            return None
        return value


class ReadingPlanRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Union[int, str]
    name: str
    description: Optional[str] = None
    duration_days: int
    is_public: bool = True


class ReadingProgressRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    plan_id: Union[int, str]
    day_completed: int = 0


class ProgressWrite(BaseModel):
    day: int = Field(..., ge=0)
