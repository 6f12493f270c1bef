"""create_waitlist_table

Revision ID: 4f1c2a9b7e30
Revises:
Create Date: 2026-10-19 10:12:41.208114

"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '4f1c2a9b7e30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'waitlist',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email_hash', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('gamertag', sa.String(length=255), nullable=True),
        sa.Column('primary_game', sa.String(length=255), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('referrer', sa.Text(), nullable=True),
        sa.Column('consent_given', sa.Boolean(), nullable=False),
        sa.Column('consent_timestamp', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_waitlist_email_hash'), 'waitlist', ['email_hash'], unique=True)
    op.create_index(op.f('ix_waitlist_created_at'), 'waitlist', ['created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_waitlist_created_at'), table_name='waitlist')
    op.drop_index(op.f('ix_waitlist_email_hash'), table_name='waitlist')
    op.drop_table('waitlist')
