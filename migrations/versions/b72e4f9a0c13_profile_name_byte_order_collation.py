"""profile_name_byte_order_collation

Revision ID: b72e4f9a0c13
Revises: 8f0b35c6d1e7
Create Date: 2026-10-19 09:14:52.604118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b72e4f9a0c13'
down_revision: Union[str, Sequence[str], None] = '8f0b35c6d1e7'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Compare profile names byte by byte on PostgreSQL.

    SQLite already compares with BINARY; other backends are left alone.
    """
    if op.get_bind().dialect.name != 'postgresql':
        return
    op.alter_column(
        'profiles',
        'name',
        existing_type=sa.String(length=120),
        type_=sa.String(length=120, collation='C'),
        existing_nullable=False,
    )


def downgrade() -> None:
    if op.get_bind().dialect.name != 'postgresql':
        return
    op.alter_column(
        'profiles',
        'name',
        existing_type=sa.String(length=120, collation='C'),
        type_=sa.String(length=120),
        existing_nullable=False,
    )
