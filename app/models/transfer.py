from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from app.database import Base


class Transfer(Base):
    __tablename__ = "transfers"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False, index=True)  # labour|machine|stock|lab-equipment|consumable-goods|equipment
    from_project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    to_project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)

    # which of these is set depends on type
    labour_id = Column(Integer, ForeignKey("labours.id", ondelete="SET NULL"), nullable=True)
    machine_id = Column(Integer, ForeignKey("machines.id", ondelete="SET NULL"), nullable=True)
    asset_id = Column(Integer, nullable=True)
    material_name = Column(String, nullable=True)

    quantity = Column(Numeric(14, 3), nullable=False, default=Decimal("1"))
    remarks = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="pending")  # pending|approved|rejected|completed
    requested_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
