from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text

from app.database import Base


class Stock(Base):
    __tablename__ = "stocks"

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_stocks_quantity_nonnegative"),
        Index("ix_stocks_project_material_created", "project_id", "material_name", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True, index=True)
    material_name = Column(String, nullable=False)
    unit = Column(String, nullable=False, default="kg")

    # running balance; stock-out and transfers mutate it in place
    quantity = Column(Numeric(14, 3), nullable=False)
    unit_price = Column(Numeric(14, 2), nullable=False)
    total_price = Column(Numeric(14, 2), nullable=False)

    payment_status = Column(String, nullable=False, default="credit")  # credit|paid
    photo_url = Column(String, nullable=True)
    remarks = Column(Text, nullable=True)
    added_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class StockOut(Base):
    __tablename__ = "stock_outs"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    stock_id = Column(Integer, ForeignKey("stocks.id", ondelete="SET NULL"), nullable=True)
    material_name = Column(String, nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    unit = Column(String, nullable=False)
    used_for = Column(String, nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    remarks = Column(Text, nullable=True)
    recorded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    daily_report_id = Column(Integer, ForeignKey("daily_reports.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
