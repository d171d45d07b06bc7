from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ProjectStatus = Literal["running", "completed", "pending", "active"]


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProjectStatus = "running"
    budget: Decimal = Field(default=Decimal("0"), ge=0)
    assigned_manager_id: Optional[int] = None
    description: Optional[str] = None
    road_distance_value: Decimal = Decimal("0")
    road_distance_unit: str = "km"


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[ProjectStatus] = None
    budget: Optional[Decimal] = Field(default=None, ge=0)
    assigned_manager_id: Optional[int] = None
    description: Optional[str] = None
    road_distance_value: Optional[Decimal] = None
    road_distance_unit: Optional[str] = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: str
    start_date: Optional[date]
    end_date: Optional[date]
    status: str
    budget: Decimal
    expenses: Decimal
    assigned_manager_id: Optional[int]
    description: Optional[str]
    created_at: datetime
