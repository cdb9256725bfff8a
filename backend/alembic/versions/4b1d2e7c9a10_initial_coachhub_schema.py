"""initial coachhub schema

Revision ID: 4b1d2e7c9a10
Revises:
Create Date: 2026-10-17 09:12:40.118532

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# define enum types once so we can create/drop them explicitly
user_role = postgresql.ENUM('client', 'instructor', 'admin', name='user_role', create_type=False)
program_difficulty = postgresql.ENUM('beginner', 'intermediate', 'advanced', name='program_difficulty', create_type=False)
program_section = postgresql.ENUM('WARMUP', 'CORE', 'COOLDOWN', name='program_section', create_type=False)
assignment_source = postgresql.ENUM('instructor', 'self_service', 'library', name='assignment_source', create_type=False)
session_status = postgresql.ENUM('in_progress', 'completed', 'cancelled', name='session_status', create_type=False)
notification_type = postgresql.ENUM(
    'event_registration', 'event_promoted', 'kudos_received', 'instructor_nudge',
    'program_created', 'program_assigned', 'new_post', 'comment',
    name='notification_type', create_type=False,
)
registration_status = postgresql.ENUM('registered', 'waitlisted', 'cancelled', name='registration_status', create_type=False)
media_kind = postgresql.ENUM('image', 'video', 'audio', 'document', name='media_kind', create_type=False)

ENUMS = (
    user_role, program_difficulty, program_section, assignment_source,
    session_status, notification_type, registration_status, media_kind,
)

# revision identifiers, used by Alembic.
revision: str = '4b1d2e7c9a10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOW = sa.text('CURRENT_TIMESTAMP')


def _user_fk(name='user_id', ondelete='CASCADE', nullable=False):
    return sa.Column(name, sa.Integer(), sa.ForeignKey('users.id', ondelete=ondelete), nullable=nullable, index=True)


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False)


def upgrade() -> None:
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True, index=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('role', user_role, nullable=False, server_default='client'),
        _user_fk('instructor_id', ondelete='SET NULL', nullable=True),
        _created_at(),
    )

    # Exercise catalog
    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk('creator_id'),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('sets', sa.Integer(), nullable=True),
        sa.Column('reps', sa.Integer(), nullable=True),
        sa.Column('hold_seconds', sa.Integer(), nullable=True),
        sa.Column('rest_seconds', sa.Integer(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('requires_equipment', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('equipment', sa.String(length=255), nullable=True),
        sa.Column('locations', sa.JSON(), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('video_url', sa.String(length=500), nullable=True),
        sa.Column('audio_url', sa.String(length=500), nullable=True),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_table(
        'equipment',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk('creator_id'),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('type', sa.String(length=60), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        'exercise_equipment',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('equipment_id', sa.Integer(), sa.ForeignKey('equipment.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('alternative_equipment_id', sa.Integer(), sa.ForeignKey('equipment.id', ondelete='SET NULL'), nullable=True),
        sa.Column('alternative_text', sa.String(length=255), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
    )

    # Programs
    op.create_table(
        'programs',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk('creator_id'),
        sa.Column('name', sa.String(length=160), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('short_description', sa.String(length=255), nullable=True),
        sa.Column('difficulty', program_difficulty, nullable=False, server_default='beginner'),
        sa.Column('location', sa.String(length=20), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )
    override_columns = lambda: [
        sa.Column('sets', sa.Integer(), nullable=True),
        sa.Column('reps', sa.Integer(), nullable=True),
        sa.Column('hold_seconds', sa.Integer(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('rest_seconds', sa.Integer(), nullable=True),
        sa.Column('weight_per_set', sa.JSON(), nullable=True),
        sa.Column('intensity', sa.String(length=60), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    ]
    op.create_table(
        'program_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('program_id', sa.Integer(), sa.ForeignKey('programs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('section', program_section, nullable=False, server_default='CORE'),
        *override_columns(),
        sa.UniqueConstraint('program_id', 'exercise_id', name='uq_program_item_exercise'),
    )

    # Assignment + per-client customization
    op.create_table(
        'client_programs',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk('client_id'),
        sa.Column('program_id', sa.Integer(), sa.ForeignKey('programs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('assigned_by', assignment_source, nullable=False, server_default='instructor'),
        _created_at(),
        sa.UniqueConstraint('client_id', 'program_id', name='uq_client_program'),
    )
    op.create_table(
        'client_program_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_program_id', sa.Integer(), sa.ForeignKey('client_programs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='RESTRICT'), nullable=False, index=True),
        *override_columns(),
        sa.Column('section', program_section, nullable=True),
        sa.Column('is_removed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_added', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.UniqueConstraint('client_program_id', 'exercise_id', name='uq_client_program_item_exercise'),
    )
    op.create_table(
        'scheduled_programs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_program_id', sa.Integer(), sa.ForeignKey('client_programs.id', ondelete='CASCADE'), nullable=False, index=True),
        _user_fk('client_id'),
        sa.Column('scheduled_date', sa.Date(), nullable=False, index=True),
        sa.Column('scheduled_time', sa.String(length=5), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        _created_at(),
    )

    # Training sessions
    op.create_table(
        'training_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column('client_program_id', sa.Integer(), sa.ForeignKey('client_programs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('status', session_status, nullable=False, server_default='in_progress'),
        sa.Column('started_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.Column('finished_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_table(
        'session_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('training_sessions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('skipped', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('recorded_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.UniqueConstraint('session_id', 'exercise_id', name='uq_session_item_exercise'),
    )
    op.create_table(
        'kudos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('training_sessions.id', ondelete='CASCADE'), nullable=False, index=True),
        _user_fk('instructor_id'),
        sa.Column('emoji', sa.String(length=16), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        _created_at(),
        sa.UniqueConstraint('session_id', 'instructor_id', name='uq_kudos_session_instructor'),
    )
    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column('type', notification_type, nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(length=255), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )

    # Events
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk('creator_id'),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('max_attendees', sa.Integer(), nullable=True),
        sa.Column('allow_waitlist', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('registration_deadline_hours', sa.Integer(), nullable=False, server_default='0'),
        _created_at(),
    )
    op.create_table(
        'event_registrations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True),
        _user_fk(),
        sa.Column('status', registration_status, nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.UniqueConstraint('event_id', 'user_id', name='uq_event_registration_user'),
    )

    # Community
    op.create_table(
        'communities',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk('owner_id'),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        'community_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('community_id', sa.Integer(), sa.ForeignKey('communities.id', ondelete='CASCADE'), nullable=False, index=True),
        _user_fk(),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.UniqueConstraint('community_id', 'user_id', name='uq_community_member'),
    )
    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk('author_id'),
        sa.Column('community_id', sa.Integer(), sa.ForeignKey('communities.id', ondelete='CASCADE'), nullable=True, index=True),
        sa.Column('title', sa.String(length=200), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('video_url', sa.String(length=500), nullable=True),
        sa.Column('is_pinned', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('publish_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('post_id', sa.Integer(), sa.ForeignKey('posts.id', ondelete='CASCADE'), nullable=False, index=True),
        _user_fk('author_id'),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('comments.id', ondelete='CASCADE'), nullable=True, index=True),
        sa.Column('content', sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_table(
        'post_likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('post_id', sa.Integer(), sa.ForeignKey('posts.id', ondelete='CASCADE'), nullable=False, index=True),
        _user_fk(),
        sa.UniqueConstraint('post_id', 'user_id', name='uq_post_like'),
    )
    op.create_table(
        'comment_likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('comment_id', sa.Integer(), sa.ForeignKey('comments.id', ondelete='CASCADE'), nullable=False, index=True),
        _user_fk(),
        sa.UniqueConstraint('comment_id', 'user_id', name='uq_comment_like'),
    )

    # Media library
    op.create_table(
        'media',
        sa.Column('id', sa.Integer(), primary_key=True),
        _user_fk('owner_id'),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('mime_type', sa.String(length=120), nullable=False),
        sa.Column('kind', media_kind, nullable=False),
        sa.Column('size_bytes', sa.BigInteger(), nullable=True),
        sa.Column('alt_text', sa.String(length=255), nullable=True),
        _created_at(),
    )


def downgrade() -> None:
    for table in (
        'media', 'comment_likes', 'post_likes', 'comments', 'posts', 'community_members', 'communities',
        'event_registrations', 'events', 'notifications', 'kudos', 'session_items', 'training_sessions',
        'scheduled_programs', 'client_program_items', 'client_programs', 'program_items', 'programs',
        'exercise_equipment', 'equipment', 'exercises', 'users',
    ):
        op.drop_table(table)
    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
