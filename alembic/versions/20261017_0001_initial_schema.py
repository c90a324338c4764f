"""Initial schema - users, progress, writing work, audit log

Revision ID: 0001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('username', sa.String(100), unique=True, nullable=False, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=False, default='student'),
        sa.Column('age', sa.Integer(), nullable=False, default=0),
        sa.Column('grade', sa.Integer(), nullable=False, default=0),
        sa.Column('avatar_url', sa.Text(), nullable=False, default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, default=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Progress table (one row per user, both tracks)
    op.create_table(
        'progress',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True, index=True),
        sa.Column('redi_skill_mastery', sa.JSON(), nullable=False),
        sa.Column('owl_skill_mastery', sa.JSON(), nullable=False),
        sa.Column('redi_level', sa.Integer(), nullable=False, default=1),
        sa.Column('owl_level', sa.Integer(), nullable=False, default=1),
        sa.Column('completed_exercises', sa.JSON(), nullable=False),
        sa.Column('completed_quests', sa.JSON(), nullable=False),
        sa.Column('unlocked_locations', sa.JSON(), nullable=False),
        sa.Column('achievements', sa.JSON(), nullable=False),
        sa.Column('currency', sa.Integer(), nullable=False, default=0),
        sa.Column('current_streak', sa.Integer(), nullable=False, default=0),
        sa.Column('longest_streak', sa.Integer(), nullable=False, default=0),
        sa.Column('last_writing_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('daily_challenge_id', sa.String(64), nullable=True),
        sa.Column('daily_challenge_completed', sa.Boolean(), nullable=False, default=False),
        sa.Column('progress_history', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Exercise attempts table
    op.create_table(
        'exercise_attempts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.String(100), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False),
        sa.Column('answers', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_exercise_attempts_user_exercise', 'exercise_attempts', ['user_id', 'exercise_id'])

    # Writing submissions table
    op.create_table(
        'writing_submissions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('quest_id', sa.String(100), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, default='submitted'),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('ai_feedback', sa.JSON(), nullable=True),
        sa.Column('skills_assessed', sa.JSON(), nullable=True),
        sa.Column('suggested_exercises', sa.JSON(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_writing_submissions_user_time', 'writing_submissions', ['user_id', 'submitted_at'])

    # Daily challenges table
    op.create_table(
        'daily_challenges',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('challenge_date', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('word_minimum', sa.Integer(), nullable=False, default=100),
        sa.Column('skill_focus', sa.String(20), nullable=False),
        sa.Column('difficulty', sa.Integer(), nullable=False, default=1),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
    )

    # Student links table (teacher/parent dashboards)
    op.create_table(
        'student_links',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('guardian_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('student_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('relationship_type', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('guardian_id', 'student_id', name='uq_student_links_guardian_student'),
    )

    # Event logs table (append-only)
    op.create_table(
        'event_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('event_type', sa.String(100), nullable=False, index=True),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False, index=True),
        sa.Column('user_id', sa.Uuid(), nullable=True, index=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
    )
    op.create_index('ix_event_logs_entity', 'event_logs', ['entity_type', 'entity_id'])
    op.create_index('ix_event_logs_user_time', 'event_logs', ['user_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_event_logs_user_time', table_name='event_logs')
    op.drop_index('ix_event_logs_entity', table_name='event_logs')
    op.drop_table('event_logs')
    op.drop_table('student_links')
    op.drop_table('daily_challenges')
    op.drop_index('ix_writing_submissions_user_time', table_name='writing_submissions')
    op.drop_table('writing_submissions')
    op.drop_index('ix_exercise_attempts_user_exercise', table_name='exercise_attempts')
    op.drop_table('exercise_attempts')
    op.drop_table('progress')
    op.drop_table('users')
