from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint

from app.database import Base


class Labour(Base):
    __tablename__ = "labours"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    daily_wage = Column(Numeric(14, 2), nullable=False)
    designation = Column(String, nullable=False)
    assigned_site_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True)
    contractor_id = Column(Integer, ForeignKey("contractors.id", ondelete="SET NULL"), nullable=True)
    enrolled_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    active = Column(Boolean, nullable=False, default=True, index=True)
    pending_payout = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class LabourAttendance(Base):
    __tablename__ = "labour_attendance"

    __table_args__ = (
        UniqueConstraint("labour_id", "date", name="uq_labour_attendance_labour_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    labour_id = Column(Integer, ForeignKey("labours.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(String, nullable=False)  # present|half|absent
    marked_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
