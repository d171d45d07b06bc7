from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text

from app.database import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="running", index=True)  # running|completed|pending|active

    assigned_manager_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    budget = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    # running total maintained by the ledger; never recomputed
    expenses = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))

    description = Column(Text, nullable=True)
    road_distance_value = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    road_distance_unit = Column(String, nullable=False, default="km")

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
