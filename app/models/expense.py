from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from app.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_expenses_amount_nonnegative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    voucher_number = Column(String, nullable=True)
    category = Column(String, nullable=False, default="material", index=True)  # material|labour|equipment|other|machine_rental|maintenance
    payment_mode = Column(String, nullable=False, default="cash")

    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), nullable=True)
    creditor_id = Column(Integer, ForeignKey("creditors.id", ondelete="SET NULL"), nullable=True)

    remarks = Column(Text, nullable=True)
    receipt_url = Column(String, nullable=True)
    added_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
