"""add client exercise notes

Revision ID: 9c3e51a0d7b2
Revises: 4b1d2e7c9a10
Create Date: 2026-10-18 10:41:07.502214

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '9c3e51a0d7b2'
down_revision: Union[str, None] = '4b1d2e7c9a10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'client_exercise_notes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('client_program_id', sa.Integer(), sa.ForeignKey('client_programs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.UniqueConstraint('client_program_id', 'exercise_id', name='uq_client_exercise_note'),
    )


def downgrade() -> None:
    op.drop_table('client_exercise_notes')
