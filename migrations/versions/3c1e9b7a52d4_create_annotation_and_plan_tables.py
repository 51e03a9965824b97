"""create annotation and reading plan tables

Revision ID: 3c1e9b7a52d4
Revises:
Create Date: 2026-10-19 10:12:31.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3c1e9b7a52d4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Tables holding per-user rows; each gets an owner-only row-level security policy
USER_TABLES = ('bookmarks', 'highlights', 'reading_progress')


def upgrade() -> None:
    op.create_table('bookmarks',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('verse_id', sa.String(length=120), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'verse_id', name='uq_bookmarks_user_verse')
    )
    op.create_index(op.f('ix_bookmarks_user_id'), 'bookmarks', ['user_id'], unique=False)

    op.create_table('highlights',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('verse_id', sa.String(length=120), nullable=False),
        sa.Column('color', sa.String(length=32), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'verse_id', name='uq_highlights_user_verse')
    )
    op.create_index(op.f('ix_highlights_user_id'), 'highlights', ['user_id'], unique=False)

    op.create_table('reading_plans',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('is_public', sa.Boolean(), server_default='true', nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('reading_progress',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('plan_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('day_completed', sa.Integer(), server_default='0', nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['plan_id'], ['reading_plans.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'plan_id', name='uq_reading_progress_user_plan')
    )
    op.create_index(op.f('ix_reading_progress_user_id'), 'reading_progress', ['user_id'], unique=False)

    for table in USER_TABLES:
        op.execute(f'ALTER TABLE {table} ENABLE ROW LEVEL SECURITY')
        op.execute(
            f'CREATE POLICY {table}_owner ON {table} '
            f'USING (auth.uid() = user_id) WITH CHECK (auth.uid() = user_id)'
        )
    op.execute('ALTER TABLE reading_plans ENABLE ROW LEVEL SECURITY')
    op.execute('CREATE POLICY reading_plans_public_read ON reading_plans FOR SELECT USING (is_public)')


def downgrade() -> None:
    op.drop_index(op.f('ix_reading_progress_user_id'), table_name='reading_progress')
    op.drop_table('reading_progress')
    op.drop_table('reading_plans')
    op.drop_index(op.f('ix_highlights_user_id'), table_name='highlights')
    op.drop_table('highlights')
    op.drop_index(op.f('ix_bookmarks_user_id'), table_name='bookmarks')
    op.drop_table('bookmarks')
