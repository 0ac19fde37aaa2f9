"""Accounts, transactions and ledger entries.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


ENTRY_TYPE = sa.Enum(
    "DEBIT", "CREDIT", name="entry_type_enum", create_constraint=True
)
TRANSACTION_TYPE = sa.Enum(
    "DEPOSIT", "WITHDRAWAL", "TRANSFER",
    name="transaction_type_enum", create_constraint=True,
)
TRANSACTION_STATUS = sa.Enum(
    "COMPLETED", "FAILED", name="transaction_status_enum", create_constraint=True
)


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("external_id", sa.Uuid(), nullable=False, unique=True),
        sa.Column("user_id", sa.String(50), nullable=False),
        sa.Column("account_type", sa.String(20), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_accounts_user_id", "accounts", ["user_id"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("external_id", sa.Uuid(), nullable=False, unique=True),
        sa.Column("idempotency_key", sa.String(100), nullable=True, unique=True),
        sa.Column("transaction_type", TRANSACTION_TYPE, nullable=False),
        sa.Column("status", TRANSACTION_STATUS, nullable=False),
        sa.Column(
            "source_account_id", sa.Integer(),
            sa.ForeignKey("accounts.id"), nullable=True,
        ),
        sa.Column(
            "destination_account_id", sa.Integer(),
            sa.ForeignKey("accounts.id"), nullable=True,
        ),
        sa.Column("amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="check_positive_transaction_amount"),
    )
    op.create_index(
        "ix_transactions_source_account_id", "transactions", ["source_account_id"]
    )
    op.create_index(
        "ix_transactions_destination_account_id",
        "transactions",
        ["destination_account_id"],
    )

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "account_id", sa.Integer(),
            sa.ForeignKey("accounts.id"), nullable=False,
        ),
        sa.Column(
            "transaction_id", sa.Integer(),
            sa.ForeignKey("transactions.id"), nullable=False,
        ),
        sa.Column("entry_type", ENTRY_TYPE, nullable=False),
        sa.Column("amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="check_positive_amount"),
    )
    op.create_index(
        "ix_ledger_entries_account_id", "ledger_entries", ["account_id"]
    )
    op.create_index(
        "ix_ledger_entries_transaction_id", "ledger_entries", ["transaction_id"]
    )


def downgrade() -> None:
    op.drop_table("ledger_entries")
    op.drop_table("transactions")
    op.drop_table("accounts")
    bind = op.get_bind()
    for enum in (ENTRY_TYPE, TRANSACTION_TYPE, TRANSACTION_STATUS):
        enum.drop(bind, checkfirst=True)
