from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class LabourCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    daily_wage: Decimal = Field(ge=0)
    designation: str = Field(min_length=1)
    assigned_site_id: int
    contractor_id: Optional[int] = None


class LabourUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    daily_wage: Optional[Decimal] = Field(default=None, ge=0)
    designation: Optional[str] = None
    assigned_site_id: Optional[int] = None
    contractor_id: Optional[int] = None
    active: Optional[bool] = None


class LabourResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str
    daily_wage: Decimal
    designation: str
    assigned_site_id: Optional[int]
    contractor_id: Optional[int]
    active: bool
    pending_payout: Decimal
    created_at: datetime


class AttendanceCreate(BaseModel):
    labour_id: int
    project_id: int
    date: date_type
    status: Literal["present", "half", "absent"]


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    labour_id: int
    project_id: int
    date: date_type
    status: str
    marked_by: Optional[int]
