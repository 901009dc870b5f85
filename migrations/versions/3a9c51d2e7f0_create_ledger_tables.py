"""create users, items, inventory and transfers tables

Revision ID: 3a9c51d2e7f0
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "3a9c51d2e7f0"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column(
            "role", sa.String(length=16), nullable=False, server_default=sa.text("'player'")
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("item_type", sa.String(length=16), nullable=False),
        sa.Column(
            "rarity", sa.String(length=16), nullable=False, server_default=sa.text("'common'")
        ),
        sa.Column("stats", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "inventory",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column(
            "quantity", sa.Integer(), nullable=False, server_default=sa.text("0")
        ),
        sa.Column("obtained_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "item_id", name="uq_inventory_user_item"),
        sa.CheckConstraint("quantity >= 0", name="ck_inventory_quantity_nonnegative"),
    )
    op.create_index(op.f("ix_inventory_user_id"), "inventory", ["user_id"])
    op.create_index(op.f("ix_inventory_item_id"), "inventory", ["item_id"])

    op.create_table(
        "transfers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("from_user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("to_user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("transfer_date", sa.DateTime(), nullable=False),
        sa.Column(
            "status", sa.String(length=16), nullable=False, server_default=sa.text("'completed'")
        ),
        sa.CheckConstraint("quantity > 0", name="ck_transfers_quantity_positive"),
    )
    op.create_index(op.f("ix_transfers_from_user_id"), "transfers", ["from_user_id"])
    op.create_index(op.f("ix_transfers_to_user_id"), "transfers", ["to_user_id"])
    op.create_index(op.f("ix_transfers_item_id"), "transfers", ["item_id"])
    op.create_index(op.f("ix_transfers_transfer_date"), "transfers", ["transfer_date"])


def downgrade() -> None:
    op.drop_table("transfers")
    op.drop_table("inventory")
    op.drop_table("items")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")
