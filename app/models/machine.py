from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.database import Base


class Machine(Base):
    __tablename__ = "machines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    model = Column(String, nullable=True)
    plate_number = Column(String, nullable=True)
    category = Column(String, nullable=False, default="big")  # big|lab|consumables|equipment
    quantity = Column(Integer, nullable=False, default=1)
    status = Column(String, nullable=False, default="available", index=True)  # available|in-use|maintenance|returned
    ownership_type = Column(String, nullable=False, default="own")  # own|rented
    vendor_name = Column(String, nullable=True)
    machine_category = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)

    per_day_expense = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    assigned_as_rental = Column(Boolean, nullable=False, default=False)
    assigned_rental_rate = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    rental_type = Column(String, nullable=False, default="perDay")  # perDay|perHour

    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True)
    assigned_to_contractor_id = Column(Integer, ForeignKey("contractors.id", ondelete="SET NULL"), nullable=True, index=True)
    assigned_at = Column(DateTime, nullable=True)
    returned_at = Column(DateTime, nullable=True)
    total_rent_paid = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))

    is_rent_paused = Column(Boolean, nullable=False, default=False)
    rent_paused_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    rent_pauses = relationship(
        "MachineRentPause",
        order_by="MachineRentPause.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    assignments = relationship(
        "MachineAssignment",
        order_by="MachineAssignment.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class MachineRentPause(Base):
    __tablename__ = "machine_rent_pauses"

    id = Column(Integer, primary_key=True)
    machine_id = Column(Integer, ForeignKey("machines.id", ondelete="CASCADE"), nullable=False, index=True)
    paused_at = Column(DateTime, nullable=False)
    resumed_at = Column(DateTime, nullable=False)
    duration_hours = Column(Numeric(12, 4), nullable=False)


class MachineAssignment(Base):
    __tablename__ = "machine_assignments"

    id = Column(Integer, primary_key=True)
    machine_id = Column(Integer, ForeignKey("machines.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_to_id = Column(Integer, nullable=True)
    assigned_model = Column(String, nullable=True)  # Project|Contractor
    assigned_at = Column(DateTime, nullable=False)
    returned_at = Column(DateTime, nullable=True)
    initial_status = Column(String, nullable=False, default="in-use")
    return_status = Column(String, nullable=True)
    rent_type = Column(String, nullable=True)
    rate = Column(Numeric(14, 2), nullable=True)
    total_rent = Column(Numeric(14, 2), nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=0)
