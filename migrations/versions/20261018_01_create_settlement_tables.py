"""create settlement tables

Revision ID: 7c1e0f5a9b21
Revises: 
Create Date: 2026-10-18 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "7c1e0f5a9b21"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "game_configs",
        sa.Column("game_id", sa.String(length=50), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=255)),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("lives_config", sa.JSON(), nullable=False),
        sa.Column("scoring_rules", sa.JSON(), nullable=False),
        sa.Column("payment_config", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )

    op.create_table(
        "lives_accounts",
        sa.Column("wallet", sa.String(length=64), primary_key=True),
        sa.Column("free_today", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bonus_today", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("paid_bank", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_reset_at", sa.Date(), nullable=False),
        sa.Column("last_claim_at", sa.Date()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("free_today >= 0", name="ck_lives_free_non_negative"),
        sa.CheckConstraint("bonus_today >= 0", name="ck_lives_bonus_non_negative"),
        sa.CheckConstraint("paid_bank >= 0", name="ck_lives_paid_non_negative"),
    )

    op.create_table(
        "round_records",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("game_id", sa.String(length=50), nullable=False),
        sa.Column("wallet", sa.String(length=64), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("game_data", sa.JSON(), nullable=False),
        sa.Column("moves_hash", sa.String(length=64), nullable=False),
        sa.Column("seed_hash", sa.String(length=64), nullable=False),
        sa.Column("validated", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("wallet", "game_id", "seed_hash", "moves_hash", name="uq_round_replay"),
    )
    op.create_index("ix_round_records_wallet", "round_records", ["wallet"])
    op.create_index("ix_round_records_game_created", "round_records", ["game_id", "created_at"])

    op.create_table(
        "user_game_stats",
        sa.Column("wallet", sa.String(length=64), primary_key=True),
        sa.Column("game_id", sa.String(length=50), primary_key=True),
        sa.Column("games_played", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("high_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_played_at", sa.DateTime(timezone=True)),
    )

    op.create_table(
        "payment_records",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("wallet", sa.String(length=64), nullable=False),
        sa.Column("signature", sa.String(length=128), nullable=False, unique=True),
        sa.Column("amount", sa.Numeric(30, 9), nullable=False),
        sa.Column("token", sa.String(length=20), nullable=False),
        sa.Column("lives_bought", sa.Integer(), nullable=False),
        sa.Column("tier", sa.String(length=20), nullable=False),
        sa.Column("game_id", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_payment_records_wallet", "payment_records", ["wallet"])

    op.create_table(
        "processed_payment_markers",
        sa.Column("signature", sa.String(length=128), primary_key=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_processed_payment_markers_expires_at", "processed_payment_markers", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_processed_payment_markers_expires_at", table_name="processed_payment_markers")
    op.drop_table("processed_payment_markers")
    op.drop_index("ix_payment_records_wallet", table_name="payment_records")
    op.drop_table("payment_records")
    op.drop_table("user_game_stats")
    op.drop_index("ix_round_records_game_created", table_name="round_records")
    op.drop_index("ix_round_records_wallet", table_name="round_records")
    op.drop_table("round_records")
    op.drop_table("lives_accounts")
    op.drop_table("game_configs")
