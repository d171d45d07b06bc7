from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from app.database import Base


class Transaction(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint("type IN ('credit', 'debit')", name="ck_transactions_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    type = Column(String, nullable=False)  # credit = money in, debit = money out
    category = Column(String, nullable=False, default="other", index=True)  # capital|expense|income|other|wallet_allocation
    payment_mode = Column(String, nullable=False, default="cash")
    description = Column(Text, nullable=False)

    related_id = Column(Integer, nullable=True)
    related_model = Column(String, nullable=True)

    added_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), nullable=True, index=True)
    creditor_id = Column(Integer, ForeignKey("creditors.id", ondelete="SET NULL"), nullable=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
