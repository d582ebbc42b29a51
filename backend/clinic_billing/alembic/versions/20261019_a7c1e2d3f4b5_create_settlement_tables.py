"""create settlement tables

Revision ID: a7c1e2d3f4b5
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "a7c1e2d3f4b5"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "invoices",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("doc_no", sa.String(length=50), nullable=True),
        sa.Column("payer_id", sa.String(length=36), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("total", sa.Numeric(precision=12, scale=4), nullable=False, server_default="0"),
        sa.Column("paid_amount", sa.Numeric(precision=12, scale=4), nullable=False, server_default="0"),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="unpaid"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_invoices_doc_no", "invoices", ["doc_no"], unique=True)
    op.create_index("ix_invoices_payer_id", "invoices", ["payer_id"], unique=False)

    op.create_table(
        "credits",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("payer_id", sa.String(length=36), nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("original_amount", sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column("available_balance", sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column("reference", sa.String(length=50), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("available_balance >= 0", name="ck_credits_available_balance_non_negative"),
    )
    op.create_index("ix_credits_payer_id", "credits", ["payer_id"], unique=False)

    op.create_table(
        "credit_consumptions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("credit_id", sa.String(length=36), nullable=False),
        sa.Column("invoice_id", sa.String(length=36), nullable=True),
        sa.Column("session_id", sa.String(length=64), nullable=True),
        sa.Column("amount", sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column("resulting_balance", sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column("applied_amount", sa.Numeric(precision=12, scale=4), nullable=True),
        sa.Column("exchange_rate_used", sa.Numeric(precision=18, scale=8), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["credit_id"], ["credits.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_credit_consumptions_credit_id", "credit_consumptions", ["credit_id"], unique=False)
    op.create_index("ix_credit_consumptions_invoice_id", "credit_consumptions", ["invoice_id"], unique=False)
    op.create_index(
        "ix_credit_consumptions_credit_invoice",
        "credit_consumptions",
        ["credit_id", "invoice_id"],
        unique=False,
    )

    op.create_table(
        "payment_records",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("invoice_id", sa.String(length=36), nullable=False),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("method", sa.String(length=50), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("exchange_rate_used", sa.Numeric(precision=18, scale=8), nullable=True),
        sa.Column("converted_amount", sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column("transaction_type", sa.String(length=30), nullable=False, server_default="direct_payment"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_payment_records_invoice_id", "payment_records", ["invoice_id"], unique=False)
    op.create_index("ix_payment_records_session_id", "payment_records", ["session_id"], unique=False)

    op.create_table(
        "payment_methods",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("code", sa.String(length=30), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("is_cash_equivalent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_payment_methods_code", "payment_methods", ["code"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_payment_methods_code", table_name="payment_methods")
    op.drop_table("payment_methods")
    op.drop_index("ix_payment_records_session_id", table_name="payment_records")
    op.drop_index("ix_payment_records_invoice_id", table_name="payment_records")
    op.drop_table("payment_records")
    op.drop_index("ix_credit_consumptions_credit_invoice", table_name="credit_consumptions")
    op.drop_index("ix_credit_consumptions_invoice_id", table_name="credit_consumptions")
    op.drop_index("ix_credit_consumptions_credit_id", table_name="credit_consumptions")
    op.drop_table("credit_consumptions")
    op.drop_index("ix_credits_payer_id", table_name="credits")
    op.drop_table("credits")
    op.drop_index("ix_invoices_payer_id", table_name="invoices")
    op.drop_index("ix_invoices_doc_no", table_name="invoices")
    op.drop_table("invoices")
