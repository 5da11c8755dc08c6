"""Record store table: one JSONB document per key.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "kv_store",
        sa.Column("key", sa.Text(), primary_key=True),
        sa.Column("value", postgresql.JSONB(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    # Prefix scans (event:, booking:, user_booking:{id}:) are LIKE 'prefix%' queries.
    # text_pattern_ops lets them use the index regardless of the database collation.
    op.create_index(
        "ix_kv_store_key_pattern",
        "kv_store",
        [sa.text("key text_pattern_ops")],
    )


def downgrade() -> None:
    op.drop_index("ix_kv_store_key_pattern", table_name="kv_store")
    op.drop_table("kv_store")
