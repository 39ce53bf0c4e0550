"""seed_default_statuses

Revision ID: 8f0b35c6d1e7
Revises: 4c1d7e2a9b30
Create Date: 2026-10-12 10:58:44.190276

"""

from collections.abc import Sequence

from alembic import op
from sqlalchemy import text

# revision identifiers, used by Alembic.
revision: str = "8f0b35c6d1e7"
down_revision: str | Sequence[str] | None = "4c1d7e2a9b30"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

STATUSES = [
    ("new", "New", "Newly added profile."),
    ("contacted", "Contacted", "Initial contact made."),
    ("meeting-scheduled", "Meeting Scheduled", "A meeting has been set up."),
    ("rejected", "Rejected", "Profile was rejected."),
    ("accepted", "Accepted", "Profile was accepted."),
    ("on-hold", "On Hold", "Decision pending or temporarily paused."),
    ("shared", "Profile Shared", "Profile was shared with the family."),
]


def upgrade() -> None:
    """Insert the well-known statuses that are not already present."""
    conn = op.get_bind()

    for status_id, name, description in STATUSES:
        conn.execute(
            text("""
            INSERT INTO profile_statuses (id, name, description)
            SELECT :id, :name, :description
            WHERE NOT EXISTS (SELECT 1 FROM profile_statuses WHERE id = :id)
        """),
            {"id": status_id, "name": name, "description": description},
        )


def downgrade() -> None:
    """Remove the seeded statuses no profile references."""
    conn = op.get_bind()

    for status_id, _, _ in STATUSES:
        conn.execute(
            text("""
            DELETE FROM profile_statuses
            WHERE id = :id
              AND NOT EXISTS (SELECT 1 FROM profiles WHERE status_id = :id)
        """),
            {"id": status_id},
        )
