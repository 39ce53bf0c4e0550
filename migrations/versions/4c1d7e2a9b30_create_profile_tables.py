"""create_profile_tables

Revision ID: 4c1d7e2a9b30
Revises:
Create Date: 2026-10-12 10:41:08.512304

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1d7e2a9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profile_statuses and profiles tables."""
    op.create_table('profile_statuses',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profile_statuses_name', 'profile_statuses', ['name'], unique=False)

    op.create_table('profiles',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('caste_or_community', sa.String(length=120), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('star', sa.String(length=50), nullable=False),
        sa.Column('star_match_score', sa.Float(), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=100), nullable=False),
        sa.Column('mobile_number', sa.String(length=20), nullable=False),
        sa.Column('status_id', sa.String(length=64), nullable=False),
        sa.Column('matrimony_id', sa.String(length=64), nullable=False),
        sa.Column(
            'comments',
            sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'),
            nullable=True,
        ),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('age >= 18', name='ck_profiles_age'),
        sa.CheckConstraint(
            'star_match_score >= 0 AND star_match_score <= 10',
            name='ck_profiles_star_match_score',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_name', 'profiles', ['name'], unique=False)
    op.create_index('ix_profiles_status_id', 'profiles', ['status_id'], unique=False)
    op.create_index('ix_profiles_updated_at', 'profiles', ['updated_at'], unique=False)


def downgrade() -> None:
    """Drop profiles and profile_statuses tables."""
    op.drop_index('ix_profiles_updated_at', table_name='profiles')
    op.drop_index('ix_profiles_status_id', table_name='profiles')
    op.drop_index('ix_profiles_name', table_name='profiles')
    op.drop_table('profiles')
    op.drop_index('ix_profile_statuses_name', table_name='profile_statuses')
    op.drop_table('profile_statuses')
