import uuid

from sqlalchemy import Column, String, DateTime, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID

from ..database import Base


class Bookmark(Base):
    __tablename__ = 'bookmarks'
    __table_args__ = (
        UniqueConstraint('user_id', 'verse_id', name='uq_bookmarks_user_verse'),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, server_default=func.gen_random_uuid())
    # Supabase auth.users id; row-level security compares it with auth.uid()
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    verse_id = Column(String(120), nullable=False)  # verse key, e.g. "Genesis.1.1"
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f'<Bookmark {self.id} User: {self.user_id} - {self.verse_id}>'
