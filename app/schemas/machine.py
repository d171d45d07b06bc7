from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MachineStatus = Literal["available", "in-use", "maintenance", "returned"]
RentalType = Literal["perDay", "perHour"]


class MachineCreate(BaseModel):
    name: str = Field(min_length=1)
    model: Optional[str] = None
    plate_number: Optional[str] = None
    category: Literal["big", "lab", "consumables", "equipment"] = "big"
    quantity: int = Field(default=1, ge=1)
    status: MachineStatus = "available"
    ownership_type: Literal["own", "rented"] = "own"
    vendor_name: Optional[str] = None
    machine_category: Optional[str] = None
    photo: Optional[str] = None
    per_day_expense: Decimal = Field(default=Decimal("0"), ge=0)
    assigned_as_rental: bool = False
    assigned_rental_rate: Decimal = Field(default=Decimal("0"), ge=0)
    rental_type: RentalType = "perDay"
    project_id: Optional[int] = None
    assigned_to_contractor_id: Optional[int] = None
    assigned_at: Optional[datetime] = None


class MachineUpdate(BaseModel):
    name: Optional[str] = None
    model: Optional[str] = None
    plate_number: Optional[str] = None
    status: Optional[MachineStatus] = None
    ownership_type: Optional[Literal["own", "rented"]] = None
    vendor_name: Optional[str] = None
    photo: Optional[str] = None
    per_day_expense: Optional[Decimal] = Field(default=None, ge=0)
    assigned_as_rental: Optional[bool] = None
    assigned_rental_rate: Optional[Decimal] = Field(default=None, ge=0)
    rental_type: Optional[RentalType] = None
    project_id: Optional[int] = None
    assigned_to_contractor_id: Optional[int] = None
    assigned_at: Optional[datetime] = None


class RentPauseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    paused_at: datetime
    resumed_at: datetime
    duration_hours: Decimal


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assigned_to_id: Optional[int]
    assigned_model: Optional[str]
    assigned_at: datetime
    returned_at: Optional[datetime]
    initial_status: str
    return_status: Optional[str]
    rent_type: Optional[str]
    rate: Optional[Decimal]
    total_rent: Optional[Decimal]
    duration_minutes: int


class MachineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    model: Optional[str]
    plate_number: Optional[str]
    category: str
    quantity: int
    status: str
    ownership_type: str
    vendor_name: Optional[str]
    photo_url: Optional[str]
    per_day_expense: Decimal
    assigned_as_rental: bool
    assigned_rental_rate: Decimal
    rental_type: str
    project_id: Optional[int]
    assigned_to_contractor_id: Optional[int]
    assigned_at: Optional[datetime]
    returned_at: Optional[datetime]
    total_rent_paid: Decimal
    is_rent_paused: bool
    rent_paused_at: Optional[datetime]
    rent_pauses: list[RentPauseResponse] = Field(default_factory=list)
    assignments: list[AssignmentResponse] = Field(default_factory=list)
    created_at: datetime


class RentCalculation(BaseModel):
    start_date: datetime
    end_date: datetime
    is_returned: bool
    total_duration_hours: Decimal
    total_paused_hours: Decimal
    billable_hours: Decimal
    rate: Decimal
    type: str
    estimated_total_rent: Decimal


class MachineDetailsResponse(BaseModel):
    machine: MachineResponse
    rent_calculation: RentCalculation


class PauseStateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    is_rent_paused: bool
    rent_paused_at: Optional[datetime]


class RentalDetails(BaseModel):
    duration: str
    rate: Decimal
    total_rent: Decimal
