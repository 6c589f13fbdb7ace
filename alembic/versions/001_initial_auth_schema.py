"""Initial auth workflow schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the account, user_profile and one_time_code tables. Email is unique
on both account and user_profile; each profile belongs to exactly one account.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Apply the initial schema."""

    op.create_table(
        'account',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('roles', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("password_hash <> ''", name='ck_account_password_hash_not_empty')
    )
    op.create_index('ix_account_email', 'account', ['email'], unique=True)
    op.create_index('ix_account_created_at', 'account', ['created_at'])

    op.create_table(
        'user_profile',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('account_id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('image', sa.String(length=500), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['account_id'], ['account.id'], ondelete='CASCADE')
    )
    op.create_index('ix_user_profile_account_id', 'user_profile', ['account_id'], unique=True)
    op.create_index('ix_user_profile_email', 'user_profile', ['email'], unique=True)
    op.create_index('ix_user_profile_created_at', 'user_profile', ['created_at'])

    op.create_table(
        'one_time_code',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('code', sa.String(length=16), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_one_time_code_email', 'one_time_code', ['email'])
    op.create_index('ix_one_time_code_created_at', 'one_time_code', ['created_at'])


def downgrade() -> None:
    """Drop the auth workflow schema."""
    op.drop_index('ix_one_time_code_created_at', table_name='one_time_code')
    op.drop_index('ix_one_time_code_email', table_name='one_time_code')
    op.drop_table('one_time_code')

    op.drop_index('ix_user_profile_created_at', table_name='user_profile')
    op.drop_index('ix_user_profile_email', table_name='user_profile')
    op.drop_index('ix_user_profile_account_id', table_name='user_profile')
    op.drop_table('user_profile')

    op.drop_index('ix_account_created_at', table_name='account')
    op.drop_index('ix_account_email', table_name='account')
    op.drop_table('account')
