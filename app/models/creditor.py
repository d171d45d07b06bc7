from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from app.database import Base


class Creditor(Base):
    __tablename__ = "creditors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    mobile = Column(String, nullable=False)
    address = Column(Text, nullable=True)

    # signed: what we owe them. credit entries raise it, debit entries lower it.
    current_balance = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))

    added_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
