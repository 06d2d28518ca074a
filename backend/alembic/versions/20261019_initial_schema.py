"""Accounts, coaching links, workout catalog and history

Revision ID: 20261019_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'app_user',
        sa.Column('id', sa.String(), primary_key=True, nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    )
    op.create_index('ix_app_user_email', 'app_user', ['email'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', sa.String(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('app_user.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    )

    op.create_table(
        'professionals',
        sa.Column('id', sa.String(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('app_user.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('cref_number', sa.String(), nullable=False),
        sa.Column('cref_state', sa.String(), nullable=False),
        sa.Column('cref_status', sa.String(), nullable=False),
        sa.Column('cref_validated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('invite_code', sa.String(), nullable=False),
        sa.Column('specialties', sa.JSON(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    )
    op.create_index('ix_professionals_invite_code', 'professionals', ['invite_code'], unique=True)

    op.create_table(
        'students',
        sa.Column('id', sa.String(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('app_user.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('professional_id', sa.String(), sa.ForeignKey('professionals.id', ondelete='SET NULL'), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('goal', sa.Text(), nullable=True),
        sa.Column('streak_days', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('xp', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('last_check_in', sa.Date(), nullable=True),
        sa.Column('last_workout_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    )

    op.create_table(
        'exercises',
        sa.Column('id', sa.String(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('muscle_group', sa.String(), nullable=False),
        sa.Column('equipment', sa.String(), nullable=True),
        sa.Column('difficulty', sa.String(), nullable=False, server_default='intermediate'),
        sa.Column('instructions', sa.JSON(), nullable=True),
        sa.Column('gif_url', sa.String(), nullable=True),
        sa.Column('video_url', sa.String(), nullable=True),
        sa.Column('thumbnail_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    )
    op.create_index('ix_exercises_muscle_group', 'exercises', ['muscle_group'])

    op.create_table(
        'workouts',
        sa.Column('id', sa.String(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('student_id', sa.String(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('professional_id', sa.String(), sa.ForeignKey('professionals.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    )

    op.create_table(
        'workout_exercises',
        sa.Column('id', sa.String(), primary_key=True, nullable=False),
        sa.Column('workout_id', sa.String(), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('exercise_id', sa.String(), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sets', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('reps', sa.String(), nullable=False, server_default='10-12'),
        sa.Column('rest_seconds', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    )
    op.create_index('ix_workout_exercises_workout_order', 'workout_exercises', ['workout_id', 'order_index'])

    op.create_table(
        'workout_history',
        sa.Column('id', sa.String(), primary_key=True, nullable=False),
        sa.Column('student_id', sa.String(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('workout_id', sa.String(), sa.ForeignKey('workouts.id', ondelete='SET NULL'), nullable=True),
        sa.Column('session_id', sa.String(), nullable=True, unique=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_index('ix_workout_history_student_completed', 'workout_history', ['student_id', 'completed_at'])


def downgrade() -> None:
    op.drop_index('ix_workout_history_student_completed', table_name='workout_history')
    op.drop_table('workout_history')
    op.drop_index('ix_workout_exercises_workout_order', table_name='workout_exercises')
    op.drop_table('workout_exercises')
    op.drop_table('workouts')
    op.drop_index('ix_exercises_muscle_group', table_name='exercises')
    op.drop_table('exercises')
    op.drop_table('students')
    op.drop_index('ix_professionals_invite_code', table_name='professionals')
    op.drop_table('professionals')
    op.drop_table('profiles')
    op.drop_index('ix_app_user_email', table_name='app_user')
    op.drop_table('app_user')
