# models/reading_plan.py
import uuid

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ..database import Base


class ReadingPlan(Base):
    __tablename__ = 'reading_plans'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, server_default=func.gen_random_uuid())
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    duration_days = Column(Integer, nullable=False)
    is_public = Column(Boolean, nullable=False, default=True, server_default='true')

    progress = relationship("ReadingProgress", back_populates="plan", cascade="all, delete-orphan")

    def __repr__(self):
        return f'<ReadingPlan {self.name} ({self.duration_days} days)>'


class ReadingProgress(Base):
    __tablename__ = 'reading_progress'
    __table_args__ = (
        UniqueConstraint('user_id', 'plan_id', name='uq_reading_progress_user_plan'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    plan_id = Column(UUID(as_uuid=True), ForeignKey('reading_plans.id', ondelete='CASCADE'), nullable=False)
    day_completed = Column(Integer, nullable=False, default=0, server_default='0')
    # PostgREST upserts bypass onupdate, so the stores send updated_at themselves
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    plan = relationship("ReadingPlan", back_populates="progress")

    def __repr__(self):
        return f'<ReadingProgress {self.user_id} plan {self.plan_id}: day {self.day_completed}>'
