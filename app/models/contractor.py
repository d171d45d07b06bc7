from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Table, Text
from sqlalchemy.orm import relationship

from app.database import Base

contractor_projects = Table(
    "contractor_projects",
    Base.metadata,
    Column("contractor_id", Integer, ForeignKey("contractors.id", ondelete="CASCADE"), primary_key=True),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
)


class Contractor(Base):
    __tablename__ = "contractors"

    __table_args__ = (
        CheckConstraint("pending_amount >= 0", name="ck_contractors_pending_amount_nonnegative"),
        CheckConstraint("advance_payment >= 0", name="ck_contractors_advance_payment_nonnegative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    mobile = Column(String, nullable=False)
    address = Column(Text, nullable=True)
    distance_value = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    distance_unit = Column(String, nullable=False, default="km")
    expense_per_unit = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    status = Column(String, nullable=False, default="pending")  # pending|complete|active|inactive

    pending_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    advance_payment = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    assigned_projects = relationship("Project", secondary=contractor_projects, lazy="selectin", order_by="Project.id")

    @property
    def assigned_project_ids(self) -> list[int]:
        return [p.id for p in self.assigned_projects]
