"""initial sitebook schema

Revision ID: 1c2d3e4f5a6b
Revises:
Create Date: 2026-10-18 10:12:44.208311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1c2d3e4f5a6b'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money(name: str, nullable: bool = False, default: bool = True) -> sa.Column:
    kwargs = {"server_default": "0"} if default else {}
    return sa.Column(name, sa.Numeric(14, 2), nullable=nullable, **kwargs)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="sitemanager"),
        sa.Column("phone", sa.String(), nullable=True),
        _money("salary"),
        _money("wallet_balance"),
        sa.Column("date_of_joining", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="running"),
        sa.Column("assigned_manager_id", sa.Integer(), nullable=True),
        _money("budget"),
        _money("expenses"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("road_distance_value", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("road_distance_unit", sa.String(), nullable=False, server_default="km"),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["assigned_manager_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_projects_id", "projects", ["id"], unique=False)
    op.create_index("ix_projects_status", "projects", ["status"], unique=False)
    op.create_index("ix_projects_assigned_manager_id", "projects", ["assigned_manager_id"], unique=False)

    op.create_table(
        "user_sites",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "project_id"),
    )

    op.create_table(
        "vendors",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("contact", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("materials_supplied", sa.Text(), nullable=True),
        _money("pending_amount"),
        _money("advance_payment"),
        _money("total_supplied"),
        _created_at(),
        sa.CheckConstraint("pending_amount >= 0", name="ck_vendors_pending_amount_nonnegative"),
        sa.CheckConstraint("advance_payment >= 0", name="ck_vendors_advance_payment_nonnegative"),
    )
    op.create_index("ix_vendors_id", "vendors", ["id"], unique=False)

    op.create_table(
        "contractors",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("mobile", sa.String(), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("distance_value", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("distance_unit", sa.String(), nullable=False, server_default="km"),
        _money("expense_per_unit"),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        _money("pending_amount"),
        _money("advance_payment"),
        _created_at(),
        sa.CheckConstraint("pending_amount >= 0", name="ck_contractors_pending_amount_nonnegative"),
        sa.CheckConstraint("advance_payment >= 0", name="ck_contractors_advance_payment_nonnegative"),
    )
    op.create_index("ix_contractors_id", "contractors", ["id"], unique=False)

    op.create_table(
        "contractor_projects",
        sa.Column("contractor_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["contractor_id"], ["contractors.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("contractor_id", "project_id"),
    )

    op.create_table(
        "creditors",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("mobile", sa.String(), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        _money("current_balance"),
        sa.Column("added_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["added_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_creditors_id", "creditors", ["id"], unique=False)

    op.create_table(
        "bank_accounts",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("holder_name", sa.String(), nullable=False),
        sa.Column("bank_name", sa.String(), nullable=False),
        sa.Column("branch", sa.String(), nullable=False),
        sa.Column("account_number", sa.String(), nullable=False),
        sa.Column("ifsc_code", sa.String(), nullable=False),
        _money("opening_balance"),
        _money("current_balance"),
        sa.Column("added_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["added_by"], ["users.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("account_number"),
    )
    op.create_index("ix_bank_accounts_id", "bank_accounts", ["id"], unique=False)

    for table, owner, owner_table in (
        ("bank_ledger_entries", "bank_account_id", "bank_accounts"),
        ("creditor_ledger_entries", "creditor_id", "creditors"),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column(owner, sa.Integer(), nullable=False),
            sa.Column("entry_type", sa.String(), nullable=False),
            _money("amount", default=False),
            sa.Column("entry_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("ref_id", sa.Integer(), nullable=True),
            sa.Column("ref_model", sa.String(), nullable=True),
            _created_at(),
            sa.ForeignKeyConstraint([owner], [f"{owner_table}.id"], ondelete="CASCADE"),
            sa.CheckConstraint("entry_type IN ('credit', 'debit')", name=f"ck_{table}_entry_type"),
            sa.CheckConstraint("amount >= 0", name=f"ck_{table}_amount_nonnegative"),
        )
        op.create_index(f"ix_{table}_{owner}", table, [owner], unique=False)
    op.create_index(
        "ix_bank_ledger_entries_bank_date", "bank_ledger_entries", ["bank_account_id", "entry_date"], unique=False
    )
    op.create_index(
        "ix_creditor_ledger_entries_creditor_date", "creditor_ledger_entries", ["creditor_id", "entry_date"], unique=False
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        _money("amount", default=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False, server_default="other"),
        sa.Column("payment_mode", sa.String(), nullable=False, server_default="cash"),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("related_id", sa.Integer(), nullable=True),
        sa.Column("related_model", sa.String(), nullable=True),
        sa.Column("added_by", sa.Integer(), nullable=True),
        sa.Column("bank_account_id", sa.Integer(), nullable=True),
        sa.Column("creditor_id", sa.Integer(), nullable=True),
        sa.Column("project_id", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["added_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["bank_account_id"], ["bank_accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["creditor_id"], ["creditors.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="SET NULL"),
        sa.CheckConstraint("type IN ('credit', 'debit')", name="ck_transactions_type"),
    )
    op.create_index("ix_transactions_id", "transactions", ["id"], unique=False)
    op.create_index("ix_transactions_date", "transactions", ["date"], unique=False)
    op.create_index("ix_transactions_category", "transactions", ["category"], unique=False)
    op.create_index("ix_transactions_bank_account_id", "transactions", ["bank_account_id"], unique=False)
    op.create_index("ix_transactions_creditor_id", "transactions", ["creditor_id"], unique=False)
    op.create_index("ix_transactions_project_id", "transactions", ["project_id"], unique=False)

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        _money("amount", default=False),
        sa.Column("voucher_number", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=False, server_default="material"),
        sa.Column("payment_mode", sa.String(), nullable=False, server_default="cash"),
        sa.Column("bank_account_id", sa.Integer(), nullable=True),
        sa.Column("creditor_id", sa.Integer(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("receipt_url", sa.String(), nullable=True),
        sa.Column("added_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["bank_account_id"], ["bank_accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["creditor_id"], ["creditors.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["added_by"], ["users.id"], ondelete="SET NULL"),
        sa.CheckConstraint("amount >= 0", name="ck_expenses_amount_nonnegative"),
    )
    op.create_index("ix_expenses_id", "expenses", ["id"], unique=False)
    op.create_index("ix_expenses_project_id", "expenses", ["project_id"], unique=False)
    op.create_index("ix_expenses_category", "expenses", ["category"], unique=False)
    op.create_index("ix_expenses_added_by", "expenses", ["added_by"], unique=False)
    op.create_index("ix_expenses_created_at", "expenses", ["created_at"], unique=False)

    op.create_table(
        "labours",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=False),
        _money("daily_wage", default=False),
        sa.Column("designation", sa.String(), nullable=False),
        sa.Column("assigned_site_id", sa.Integer(), nullable=True),
        sa.Column("contractor_id", sa.Integer(), nullable=True),
        sa.Column("enrolled_by", sa.Integer(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _money("pending_payout"),
        _created_at(),
        sa.ForeignKeyConstraint(["assigned_site_id"], ["projects.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["contractor_id"], ["contractors.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["enrolled_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_labours_id", "labours", ["id"], unique=False)
    op.create_index("ix_labours_assigned_site_id", "labours", ["assigned_site_id"], unique=False)
    op.create_index("ix_labours_active", "labours", ["active"], unique=False)

    op.create_table(
        "labour_attendance",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("labour_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("marked_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["labour_id"], ["labours.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["marked_by"], ["users.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("labour_id", "date", name="uq_labour_attendance_labour_date"),
    )
    op.create_index("ix_labour_attendance_id", "labour_attendance", ["id"], unique=False)
    op.create_index("ix_labour_attendance_labour_id", "labour_attendance", ["labour_id"], unique=False)
    op.create_index("ix_labour_attendance_project_id", "labour_attendance", ["project_id"], unique=False)

    op.create_table(
        "vendor_payments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("vendor_id", sa.Integer(), nullable=False),
        _money("amount", default=False),
        _money("advance"),
        _money("deduction"),
        sa.Column("payment_mode", sa.String(), nullable=False, server_default="cash"),
        sa.Column("bank_account_id", sa.Integer(), nullable=True),
        sa.Column("creditor_id", sa.Integer(), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("is_advance", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("receipt_url", sa.String(), nullable=True),
        sa.Column("recorded_by", sa.Integer(), nullable=True),
        sa.Column("paid_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["vendor_id"], ["vendors.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["bank_account_id"], ["bank_accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["creditor_id"], ["creditors.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["recorded_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["paid_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_vendor_payments_id", "vendor_payments", ["id"], unique=False)
    op.create_index("ix_vendor_payments_vendor_id", "vendor_payments", ["vendor_id"], unique=False)
    op.create_index("ix_vendor_payments_date", "vendor_payments", ["date"], unique=False)
    op.create_index("ix_vendor_payments_paid_by", "vendor_payments", ["paid_by"], unique=False)

    op.create_table(
        "contractor_payments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("contractor_id", sa.Integer(), nullable=False),
        sa.Column("contractor_name", sa.String(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=True),
        _money("amount", default=False),
        _money("advance"),
        _money("deduction"),
        _money("machine_rent"),
        sa.Column("payment_mode", sa.String(), nullable=False, server_default="cash"),
        sa.Column("bank_account_id", sa.Integer(), nullable=True),
        sa.Column("creditor_id", sa.Integer(), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("recorded_by", sa.Integer(), nullable=True),
        sa.Column("paid_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["contractor_id"], ["contractors.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["bank_account_id"], ["bank_accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["creditor_id"], ["creditors.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["recorded_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["paid_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_contractor_payments_id", "contractor_payments", ["id"], unique=False)
    op.create_index("ix_contractor_payments_contractor_id", "contractor_payments", ["contractor_id"], unique=False)
    op.create_index("ix_contractor_payments_project_id", "contractor_payments", ["project_id"], unique=False)
    op.create_index("ix_contractor_payments_date", "contractor_payments", ["date"], unique=False)
    op.create_index("ix_contractor_payments_paid_by", "contractor_payments", ["paid_by"], unique=False)

    op.create_table(
        "labour_payments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("labour_id", sa.Integer(), nullable=False),
        sa.Column("paid_by", sa.Integer(), nullable=True),
        _money("amount", default=False),
        _money("deduction"),
        _money("advance"),
        _money("final_amount", default=False),
        sa.Column("payment_mode", sa.String(), nullable=False, server_default="cash"),
        sa.Column("bank_account_id", sa.Integer(), nullable=True),
        sa.Column("creditor_id", sa.Integer(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        _created_at(),
        sa.ForeignKeyConstraint(["labour_id"], ["labours.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["paid_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["bank_account_id"], ["bank_accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["creditor_id"], ["creditors.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_labour_payments_id", "labour_payments", ["id"], unique=False)
    op.create_index("ix_labour_payments_labour_id", "labour_payments", ["labour_id"], unique=False)
    op.create_index("ix_labour_payments_paid_by", "labour_payments", ["paid_by"], unique=False)
    op.create_index("ix_labour_payments_date", "labour_payments", ["date"], unique=False)

    op.create_table(
        "creditor_payments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("creditor_id", sa.Integer(), nullable=False),
        sa.Column("source_creditor_id", sa.Integer(), nullable=True),
        _money("amount", default=False),
        sa.Column("date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("payment_mode", sa.String(), nullable=False, server_default="cash"),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("bank_account_id", sa.Integer(), nullable=True),
        sa.Column("recorded_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["creditor_id"], ["creditors.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["source_creditor_id"], ["creditors.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["bank_account_id"], ["bank_accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["recorded_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_creditor_payments_id", "creditor_payments", ["id"], unique=False)
    op.create_index("ix_creditor_payments_creditor_id", "creditor_payments", ["creditor_id"], unique=False)
    op.create_index("ix_creditor_payments_date", "creditor_payments", ["date"], unique=False)

    op.create_table(
        "stocks",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("vendor_id", sa.Integer(), nullable=True),
        sa.Column("material_name", sa.String(), nullable=False),
        sa.Column("unit", sa.String(), nullable=False, server_default="kg"),
        sa.Column("quantity", sa.Numeric(14, 3), nullable=False),
        _money("unit_price", default=False),
        _money("total_price", default=False),
        sa.Column("payment_status", sa.String(), nullable=False, server_default="credit"),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("added_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["vendor_id"], ["vendors.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["added_by"], ["users.id"], ondelete="SET NULL"),
        sa.CheckConstraint("quantity >= 0", name="ck_stocks_quantity_nonnegative"),
    )
    op.create_index("ix_stocks_id", "stocks", ["id"], unique=False)
    op.create_index("ix_stocks_project_id", "stocks", ["project_id"], unique=False)
    op.create_index("ix_stocks_vendor_id", "stocks", ["vendor_id"], unique=False)
    op.create_index("ix_stocks_added_by", "stocks", ["added_by"], unique=False)
    op.create_index(
        "ix_stocks_project_material_created", "stocks", ["project_id", "material_name", "created_at"], unique=False
    )

    op.create_table(
        "stock_outs",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("stock_id", sa.Integer(), nullable=True),
        sa.Column("material_name", sa.String(), nullable=False),
        sa.Column("quantity", sa.Numeric(14, 3), nullable=False),
        sa.Column("unit", sa.String(), nullable=False),
        sa.Column("used_for", sa.String(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("recorded_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["stock_id"], ["stocks.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["recorded_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_stock_outs_id", "stock_outs", ["id"], unique=False)
    op.create_index("ix_stock_outs_project_id", "stock_outs", ["project_id"], unique=False)
    op.create_index("ix_stock_outs_date", "stock_outs", ["date"], unique=False)

    op.create_table(
        "machines",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("model", sa.String(), nullable=True),
        sa.Column("plate_number", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=False, server_default="big"),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(), nullable=False, server_default="available"),
        sa.Column("ownership_type", sa.String(), nullable=False, server_default="own"),
        sa.Column("vendor_name", sa.String(), nullable=True),
        sa.Column("machine_category", sa.String(), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
        _money("per_day_expense"),
        sa.Column("assigned_as_rental", sa.Boolean(), nullable=False, server_default=sa.false()),
        _money("assigned_rental_rate"),
        sa.Column("rental_type", sa.String(), nullable=False, server_default="perDay"),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("assigned_to_contractor_id", sa.Integer(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(), nullable=True),
        sa.Column("returned_at", sa.DateTime(), nullable=True),
        _money("total_rent_paid"),
        sa.Column("is_rent_paused", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rent_paused_at", sa.DateTime(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_to_contractor_id"], ["contractors.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_machines_id", "machines", ["id"], unique=False)
    op.create_index("ix_machines_status", "machines", ["status"], unique=False)
    op.create_index("ix_machines_project_id", "machines", ["project_id"], unique=False)
    op.create_index("ix_machines_assigned_to_contractor_id", "machines", ["assigned_to_contractor_id"], unique=False)

    op.create_table(
        "machine_rent_pauses",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("machine_id", sa.Integer(), nullable=False),
        sa.Column("paused_at", sa.DateTime(), nullable=False),
        sa.Column("resumed_at", sa.DateTime(), nullable=False),
        sa.Column("duration_hours", sa.Numeric(12, 4), nullable=False),
        sa.ForeignKeyConstraint(["machine_id"], ["machines.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_machine_rent_pauses_machine_id", "machine_rent_pauses", ["machine_id"], unique=False)

    op.create_table(
        "machine_assignments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("machine_id", sa.Integer(), nullable=False),
        sa.Column("assigned_to_id", sa.Integer(), nullable=True),
        sa.Column("assigned_model", sa.String(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(), nullable=False),
        sa.Column("returned_at", sa.DateTime(), nullable=True),
        sa.Column("initial_status", sa.String(), nullable=False, server_default="in-use"),
        sa.Column("return_status", sa.String(), nullable=True),
        sa.Column("rent_type", sa.String(), nullable=True),
        _money("rate", nullable=True, default=False),
        _money("total_rent", nullable=True, default=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["machine_id"], ["machines.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_machine_assignments_machine_id", "machine_assignments", ["machine_id"], unique=False)

    for table in ("lab_equipment", "equipment"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("category", sa.String(), nullable=True),
            sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("status", sa.String(), nullable=False, server_default="active"),
            sa.Column("serial_number", sa.String(), nullable=True),
            sa.Column("purchase_date", sa.Date(), nullable=True),
            sa.Column("remarks", sa.Text(), nullable=True),
            _created_at(),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        )
        op.create_index(f"ix_{table}_id", table, ["id"], unique=False)
        op.create_index(f"ix_{table}_project_id", table, ["project_id"], unique=False)
        op.create_index(f"ix_{table}_status", table, ["status"], unique=False)

    op.create_table(
        "consumable_goods",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("quantity", sa.Numeric(14, 3), nullable=False),
        sa.Column("unit", sa.String(), nullable=False),
        sa.Column("min_stock_level", sa.Numeric(14, 3), nullable=False, server_default="0"),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.CheckConstraint("quantity >= 0", name="ck_consumable_goods_quantity_nonnegative"),
    )
    op.create_index("ix_consumable_goods_id", "consumable_goods", ["id"], unique=False)
    op.create_index("ix_consumable_goods_project_id", "consumable_goods", ["project_id"], unique=False)

    op.create_table(
        "transfers",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("from_project_id", sa.Integer(), nullable=False),
        sa.Column("to_project_id", sa.Integer(), nullable=False),
        sa.Column("labour_id", sa.Integer(), nullable=True),
        sa.Column("machine_id", sa.Integer(), nullable=True),
        sa.Column("asset_id", sa.Integer(), nullable=True),
        sa.Column("material_name", sa.String(), nullable=True),
        sa.Column("quantity", sa.Numeric(14, 3), nullable=False, server_default="1"),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("requested_by", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["from_project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["to_project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["labour_id"], ["labours.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["machine_id"], ["machines.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["requested_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_transfers_id", "transfers", ["id"], unique=False)
    op.create_index("ix_transfers_type", "transfers", ["type"], unique=False)
    op.create_index("ix_transfers_from_project_id", "transfers", ["from_project_id"], unique=False)
    op.create_index("ix_transfers_to_project_id", "transfers", ["to_project_id"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("recipient_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(), nullable=False, server_default="info"),
        sa.Column("link", sa.String(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("related_id", sa.Integer(), nullable=True),
        sa.Column("related_model", sa.String(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["recipient_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notifications_id", "notifications", ["id"], unique=False)
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "notifications",
        "transfers",
        "consumable_goods",
        "equipment",
        "lab_equipment",
        "machine_assignments",
        "machine_rent_pauses",
        "machines",
        "stock_outs",
        "stocks",
        "creditor_payments",
        "labour_payments",
        "contractor_payments",
        "vendor_payments",
        "labour_attendance",
        "labours",
        "expenses",
        "transactions",
        "creditor_ledger_entries",
        "bank_ledger_entries",
        "bank_accounts",
        "creditors",
        "contractor_projects",
        "contractors",
        "vendors",
        "user_sites",
        "projects",
        "users",
    ):
        op.drop_table(table)
