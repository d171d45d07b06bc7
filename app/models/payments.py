from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from app.database import Base


class VendorPayment(Base):
    __tablename__ = "vendor_payments"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    advance = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    deduction = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    payment_mode = Column(String, nullable=False, default="cash")
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), nullable=True)
    creditor_id = Column(Integer, ForeignKey("creditors.id", ondelete="SET NULL"), nullable=True)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    remarks = Column(Text, nullable=True)
    is_advance = Column(Boolean, nullable=False, default=False)
    receipt_url = Column(String, nullable=True)
    recorded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    paid_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class ContractorPayment(Base):
    __tablename__ = "contractor_payments"

    id = Column(Integer, primary_key=True, index=True)
    contractor_id = Column(Integer, ForeignKey("contractors.id", ondelete="CASCADE"), nullable=False, index=True)
    contractor_name = Column(String, nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    advance = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    deduction = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    machine_rent = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    payment_mode = Column(String, nullable=False, default="cash")
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), nullable=True)
    creditor_id = Column(Integer, ForeignKey("creditors.id", ondelete="SET NULL"), nullable=True)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    remarks = Column(Text, nullable=True)
    recorded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    paid_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class LabourPayment(Base):
    __tablename__ = "labour_payments"

    id = Column(Integer, primary_key=True, index=True)
    labour_id = Column(Integer, ForeignKey("labours.id", ondelete="CASCADE"), nullable=False, index=True)
    paid_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    deduction = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    advance = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    final_amount = Column(Numeric(14, 2), nullable=False)
    payment_mode = Column(String, nullable=False, default="cash")
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), nullable=True)
    creditor_id = Column(Integer, ForeignKey("creditors.id", ondelete="SET NULL"), nullable=True)
    remarks = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class CreditorPayment(Base):
    __tablename__ = "creditor_payments"

    id = Column(Integer, primary_key=True, index=True)
    creditor_id = Column(Integer, ForeignKey("creditors.id", ondelete="CASCADE"), nullable=False, index=True)
    source_creditor_id = Column(Integer, ForeignKey("creditors.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Numeric(14, 2), nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    payment_mode = Column(String, nullable=False, default="cash")  # cash|online|check|bank|creditor
    remarks = Column(Text, nullable=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), nullable=True)
    recorded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
