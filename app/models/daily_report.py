from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class DailyReport(Base):
    __tablename__ = "daily_reports"

    __table_args__ = (
        Index("ix_daily_reports_project_created", "project_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    report_type = Column(String, nullable=False)  # Morning Report|Evening Report|Full Day Report
    description = Column(Text, nullable=False)
    photos = Column(JSON, nullable=False, default=list)
    road_progress = Column(JSON, nullable=False, default=list)
    submitted_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    stock_used = relationship("StockOut", lazy="selectin", order_by="StockOut.id")
