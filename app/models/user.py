from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Table
from sqlalchemy.orm import relationship

from app.database import Base

user_sites = Table(
    "user_sites",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    role = Column(String, nullable=False, default="sitemanager", index=True)  # admin|sitemanager
    phone = Column(String, nullable=True)
    salary = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    wallet_balance = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    date_of_joining = Column(DateTime, nullable=False, default=datetime.utcnow)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    assigned_sites = relationship("Project", secondary=user_sites, lazy="selectin", order_by="Project.id")

    @property
    def assigned_site_ids(self) -> list[int]:
        return [p.id for p in self.assigned_sites]
