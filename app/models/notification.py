from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from app.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String, nullable=False, default="info")  # info|warning|success|error|general|urgent
    link = Column(String, nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    related_id = Column(Integer, nullable=True)
    related_model = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
