from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text

from app.database import Base


class LabEquipment(Base):
    __tablename__ = "lab_equipment"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    status = Column(String, nullable=False, default="active", index=True)  # active|maintenance|damaged
    serial_number = Column(String, nullable=True)
    purchase_date = Column(Date, nullable=True)
    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    status = Column(String, nullable=False, default="active", index=True)
    serial_number = Column(String, nullable=True)
    purchase_date = Column(Date, nullable=True)
    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class ConsumableGoods(Base):
    __tablename__ = "consumable_goods"

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_consumable_goods_quantity_nonnegative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    quantity = Column(Numeric(14, 3), nullable=False)
    unit = Column(String, nullable=False)
    min_stock_level = Column(Numeric(14, 3), nullable=False, default=Decimal("0"))
    expiry_date = Column(Date, nullable=True)
    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
