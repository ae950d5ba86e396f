"""create users table

Create the users table holding one row per JIT-provisioned identity.
The primary key is the identity provider's subject id, never generated
by the database.

Revision ID: d71976bfc705
Revises:
Create Date: 2026-01-05 11:19:21.745228

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "d71976bfc705"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column(
            "external_user_id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            autoincrement=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("external_user_id"),
    )
    # Chronological listing
    op.create_index(
        op.f("ix_users_created_at"), "users", ["created_at"], unique=False
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_users_created_at"), table_name="users")
    op.drop_table("users")
