# models/highlight.py
from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID

from ..database import Base


class Highlight(Base):
    __tablename__ = 'highlights'
    __table_args__ = (
        UniqueConstraint('user_id', 'verse_id', name='uq_highlights_user_verse'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    verse_id = Column(String(120), nullable=False)
    # NULL means "no highlight"; cleared rows stay as tombstones
    color = Column(String(32), nullable=True)
    # PostgREST upserts bypass onupdate, so the stores send updated_at themselves
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f'<Highlight {self.user_id} {self.verse_id} {self.color}>'
