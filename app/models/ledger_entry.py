from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text

from app.database import Base


class BankLedgerEntry(Base):
    __tablename__ = "bank_ledger_entries"

    __table_args__ = (
        CheckConstraint("entry_type IN ('credit', 'debit')", name="ck_bank_ledger_entries_entry_type"),
        CheckConstraint("amount >= 0", name="ck_bank_ledger_entries_amount_nonnegative"),
        Index("ix_bank_ledger_entries_bank_date", "bank_account_id", "entry_date"),
    )

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="CASCADE"), nullable=False, index=True)

    entry_type = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    entry_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    description = Column(Text, nullable=True)

    ref_id = Column(Integer, nullable=True)
    ref_model = Column(String, nullable=True)  # Expense|VendorPayment|ContractorPayment|CreditorPayment|Transaction

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class CreditorLedgerEntry(Base):
    __tablename__ = "creditor_ledger_entries"

    __table_args__ = (
        CheckConstraint("entry_type IN ('credit', 'debit')", name="ck_creditor_ledger_entries_entry_type"),
        CheckConstraint("amount >= 0", name="ck_creditor_ledger_entries_amount_nonnegative"),
        Index("ix_creditor_ledger_entries_creditor_date", "creditor_id", "entry_date"),
    )

    id = Column(Integer, primary_key=True)
    creditor_id = Column(Integer, ForeignKey("creditors.id", ondelete="CASCADE"), nullable=False, index=True)

    entry_type = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    entry_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    description = Column(Text, nullable=True)

    ref_id = Column(Integer, nullable=True)
    ref_model = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
