from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class StockCreate(BaseModel):
    project_id: int
    vendor_id: Optional[int] = None
    material_name: str = Field(min_length=1)
    unit: str = "kg"
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    payment_status: Literal["credit", "paid"] = "credit"
    photo: Optional[str] = None
    remarks: Optional[str] = None


class StockUpdate(BaseModel):
    vendor_id: Optional[int] = None
    material_name: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    payment_status: Optional[Literal["credit", "paid"]] = None
    photo: Optional[str] = None
    remarks: Optional[str] = None


class StockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    vendor_id: Optional[int]
    material_name: str
    unit: str
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal
    payment_status: str
    photo_url: Optional[str]
    remarks: Optional[str]
    added_by: Optional[int]
    created_at: datetime


class StockOutCreate(BaseModel):
    project_id: int
    material_name: str = Field(min_length=1)
    quantity: Decimal
    unit: Optional[str] = None
    used_for: str = Field(min_length=1)
    date: Optional[datetime] = None
    remarks: Optional[str] = None


class StockOutResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    stock_id: Optional[int]
    material_name: str
    quantity: Decimal
    unit: str
    used_for: str
    date: datetime
    remarks: Optional[str]
    daily_report_id: Optional[int] = None


class MaterialSummary(BaseModel):
    project_id: int
    project_name: str
    material_name: str
    unit: str
    quantity: Decimal


class StockMovement(BaseModel):
    direction: Literal["IN", "OUT"]
    id: int
    project_id: int
    material_name: str
    quantity: Decimal
    unit: str
    date: datetime
    remarks: Optional[str]


class StockMovementPage(BaseModel):
    limit: int
    offset: int
    total: int
    rows: list[StockMovement]
