"""Create clients, webhook tokens and token usage logs.

Revision ID: 001
Revises:
Create Date: 2026-10-16
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("client_id"),
    )
    op.create_index("ix_clients_is_active", "clients", ["is_active"])

    op.create_table(
        "webhook_tokens",
        sa.Column("token_id", sa.Uuid(), nullable=False),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("token_hash", sa.String(length=512), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("is_revoked", sa.Boolean(), nullable=False),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_used_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["client_id"], ["clients.client_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("token_id"),
    )
    op.create_index("ix_webhook_tokens_client_id", "webhook_tokens", ["client_id"])
    op.create_index("ix_webhook_tokens_token_hash", "webhook_tokens", ["token_hash"], unique=True)

    op.create_table(
        "token_usage_logs",
        sa.Column("log_id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), autoincrement=True, nullable=False),
        sa.Column("token_id", sa.Uuid(), nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("endpoint_path", sa.String(length=256), nullable=False),
        sa.Column("is_successful", sa.Boolean(), nullable=False),
        sa.Column("error_message", sa.String(length=1024), nullable=True),
        sa.Column("used_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["token_id"], ["webhook_tokens.token_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("log_id"),
    )
    op.create_index("ix_token_usage_logs_token_id", "token_usage_logs", ["token_id"])


def downgrade() -> None:
    op.drop_index("ix_token_usage_logs_token_id", table_name="token_usage_logs")
    op.drop_table("token_usage_logs")
    op.drop_index("ix_webhook_tokens_token_hash", table_name="webhook_tokens")
    op.drop_index("ix_webhook_tokens_client_id", table_name="webhook_tokens")
    op.drop_table("webhook_tokens")
    op.drop_index("ix_clients_is_active", table_name="clients")
    op.drop_table("clients")
