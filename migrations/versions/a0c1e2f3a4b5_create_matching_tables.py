"""create matching tables

Revision ID: a0c1e2f3a4b5
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = 'a0c1e2f3a4b5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy persists Python enum member names
user_role = sa.Enum('CANDIDATE', 'RECRUITER', name='userrole')
job_status = sa.Enum('OPEN', 'CLOSED', name='jobstatus')
swipe_target_type = sa.Enum('JOB', 'CANDIDATE', name='swipetargettype')
swipe_direction = sa.Enum('LEFT', 'RIGHT', name='swipedirection')


def upgrade() -> None:
    """Create users, profiles, jobs and the swipe/match/unmatch/message tables."""
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('cooldown_days', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('cooldown_days BETWEEN 1 AND 90', name='ck_users_cooldown_days_range'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'candidate_profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('yoe', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('location', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('about', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('last_active', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_candidate_profiles_id', 'candidate_profiles', ['id'])
    op.create_index('ix_candidate_profiles_user_id', 'candidate_profiles', ['user_id'], unique=True)
    op.create_index('ix_candidate_profiles_last_active', 'candidate_profiles', ['last_active'])

    op.create_table(
        'jobs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('recruiter_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('stack', sa.JSON(), nullable=True),
        sa.Column('min_yoe', sa.Integer(), nullable=True),
        sa.Column('remote', sa.Boolean(), nullable=True),
        sa.Column('status', job_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['recruiter_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_jobs_id', 'jobs', ['id'])
    op.create_index('ix_jobs_recruiter_id', 'jobs', ['recruiter_id'])
    op.create_index('ix_jobs_title', 'jobs', ['title'])
    op.create_index('ix_jobs_status', 'jobs', ['status'])
    op.create_index('ix_jobs_created_at', 'jobs', ['created_at'])

    op.create_table(
        'swipes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('actor_user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('target_type', swipe_target_type, nullable=False),
        sa.Column('target_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('direction', swipe_direction, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['actor_user_id'], ['users.id']),
        sa.UniqueConstraint('actor_user_id', 'target_type', 'target_id', name='uq_swipe_actor_target'),
    )
    op.create_index('ix_swipes_id', 'swipes', ['id'])
    op.create_index('ix_swipes_actor_user_id', 'swipes', ['actor_user_id'])
    op.create_index('ix_swipes_target_id', 'swipes', ['target_id'])
    op.create_index('ix_swipes_created_at', 'swipes', ['created_at'])
    op.create_index('ix_swipes_target_direction', 'swipes', ['target_type', 'target_id', 'direction'])
    op.create_index('ix_swipes_actor_direction_created', 'swipes', ['actor_user_id', 'direction', 'created_at'])

    op.create_table(
        'matches',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('candidate_user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('recruiter_user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['candidate_user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['recruiter_user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.UniqueConstraint('candidate_user_id', 'job_id', name='uq_match_candidate_job'),
    )
    op.create_index('ix_matches_id', 'matches', ['id'])
    op.create_index('ix_matches_candidate_user_id', 'matches', ['candidate_user_id'])
    op.create_index('ix_matches_recruiter_user_id', 'matches', ['recruiter_user_id'])
    op.create_index('ix_matches_job_id', 'matches', ['job_id'])
    op.create_index('ix_matches_created_at', 'matches', ['created_at'])
    op.create_index('ix_matches_candidate_created', 'matches', ['candidate_user_id', 'created_at'])
    op.create_index('ix_matches_recruiter_created', 'matches', ['recruiter_user_id', 'created_at'])

    op.create_table(
        'unmatch_records',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('candidate_user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('recruiter_user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('cooldown_days', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['candidate_user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['recruiter_user_id'], ['users.id']),
    )
    op.create_index('ix_unmatch_records_id', 'unmatch_records', ['id'])
    op.create_index(
        'ix_unmatch_pair_created',
        'unmatch_records',
        ['candidate_user_id', 'recruiter_user_id', 'created_at'],
    )

    op.create_table(
        'messages',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('match_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('sender_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id']),
    )
    op.create_index('ix_messages_id', 'messages', ['id'])
    op.create_index('ix_messages_match_id', 'messages', ['match_id'])
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'])
    op.create_index('ix_messages_match_created', 'messages', ['match_id', 'created_at'])


def downgrade() -> None:
    """Drop all matching tables and enum types."""
    op.drop_table('messages')
    op.drop_table('unmatch_records')
    op.drop_table('matches')
    op.drop_table('swipes')
    op.drop_table('jobs')
    op.drop_table('candidate_profiles')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (swipe_direction, swipe_target_type, job_status, user_role):
        enum_type.drop(bind, checkfirst=True)
