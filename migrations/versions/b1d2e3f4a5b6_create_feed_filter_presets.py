"""create feed filter presets

Revision ID: b1d2e3f4a5b6
Revises: a0c1e2f3a4b5
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = 'b1d2e3f4a5b6'
down_revision: Union[str, Sequence[str], None] = 'a0c1e2f3a4b5'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add the recruiters' saved discovery-feed filters."""
    op.create_table(
        'feed_filter_presets',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('filters', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
    )
    op.create_index('ix_feed_filter_presets_id', 'feed_filter_presets', ['id'])
    op.create_index('ix_feed_filter_presets_user_id', 'feed_filter_presets', ['user_id'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_feed_filter_presets_user_id', table_name='feed_filter_presets')
    op.drop_index('ix_feed_filter_presets_id', table_name='feed_filter_presets')
    op.drop_table('feed_filter_presets')
