from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, Text

from app.database import Base


class Vendor(Base):
    __tablename__ = "vendors"

    __table_args__ = (
        CheckConstraint("pending_amount >= 0", name="ck_vendors_pending_amount_nonnegative"),
        CheckConstraint("advance_payment >= 0", name="ck_vendors_advance_payment_nonnegative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    contact = Column(String, nullable=False)
    email = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    materials_supplied = Column(Text, nullable=True)

    pending_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    advance_payment = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    total_supplied = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
