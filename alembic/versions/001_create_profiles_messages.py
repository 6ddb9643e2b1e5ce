"""Create profiles and messages tables

Revision ID: 001
Revises:
Create Date: 2026-09-28
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=True),
        sa.Column('handle', sa.String(100), nullable=False),
        sa.Column('role', sa.String(100), nullable=True),
        sa.Column('location', sa.String(200), nullable=True),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('ratings_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_profiles_handle', 'profiles', ['handle'], unique=True)

    op.create_table('messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('sender_id', sa.Uuid(), sa.ForeignKey('profiles.id'), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), sa.ForeignKey('profiles.id'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_messages_sender_created', 'messages', ['sender_id', 'created_at'])
    op.create_index('ix_messages_recipient_created', 'messages', ['recipient_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_messages_recipient_created', table_name='messages')
    op.drop_index('ix_messages_sender_created', table_name='messages')
    op.drop_table('messages')
    op.drop_index('ix_profiles_handle', table_name='profiles')
    op.drop_table('profiles')
