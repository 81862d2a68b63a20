"""Initial schema: user_connections table and lookup indexes

Revision ID: 0001_user_connections
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from typing import Sequence, Union
import sqlalchemy as sa
from alembic import op

revision: str = "0001_user_connections"
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user_connections",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    # Prefix search on ip_address
    op.create_index("ix_user_connections_ip_address", "user_connections", ["ip_address"])
    # Latest connection per user
    op.create_index(
        "ix_user_connections_user_id_timestamp",
        "user_connections",
        ["user_id", "timestamp"],
    )


def downgrade() -> None:
    op.drop_index("ix_user_connections_user_id_timestamp", table_name="user_connections")
    op.drop_index("ix_user_connections_ip_address", table_name="user_connections")
    op.drop_table("user_connections")
