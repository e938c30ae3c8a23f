"""add calendar events

Revision ID: 9b2f61d4c8a7
Revises: 4e1a7c2d9b30
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9b2f61d4c8a7'
down_revision: Union[str, None] = '4e1a7c2d9b30'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'events',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('recipient', sa.String(length=20), nullable=False),
        sa.Column('created_by', sa.String(length=20), nullable=False),
        sa.Column('teacher_id', sa.String(length=50), nullable=True),
        sa.Column('from_teacher', sa.String(length=255), nullable=True),
        sa.Column('subject_record_ids', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_events_start_date'), 'events', ['start_date'], unique=False)
    op.create_index(op.f('ix_events_teacher_id'), 'events', ['teacher_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_events_teacher_id'), table_name='events')
    op.drop_index(op.f('ix_events_start_date'), table_name='events')
    op.drop_table('events')
