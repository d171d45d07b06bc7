from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String

from app.database import Base


class BankAccount(Base):
    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True, index=True)
    holder_name = Column(String, nullable=False)
    bank_name = Column(String, nullable=False)
    branch = Column(String, nullable=False)
    account_number = Column(String, nullable=False, unique=True)
    ifsc_code = Column(String, nullable=False)

    opening_balance = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    current_balance = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))

    added_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
