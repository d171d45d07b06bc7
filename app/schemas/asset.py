from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AssetStatus = Literal["active", "maintenance", "damaged"]


class EquipmentCreate(BaseModel):
    project_id: int
    name: str = Field(min_length=1)
    category: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    status: AssetStatus = "active"
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    remarks: Optional[str] = None


class EquipmentUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    status: Optional[AssetStatus] = None
    serial_number: Optional[str] = None
    remarks: Optional[str] = None


class EquipmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    category: Optional[str]
    quantity: int
    status: str
    serial_number: Optional[str]
    purchase_date: Optional[date]
    remarks: Optional[str]
    created_at: datetime


class ConsumableCreate(BaseModel):
    project_id: int
    name: str = Field(min_length=1)
    category: Optional[str] = None
    quantity: Decimal = Field(ge=0)
    unit: str = Field(min_length=1)
    min_stock_level: Decimal = Field(default=Decimal("0"), ge=0)
    expiry_date: Optional[date] = None
    remarks: Optional[str] = None


class ConsumableUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit: Optional[str] = None
    min_stock_level: Optional[Decimal] = Field(default=None, ge=0)
    expiry_date: Optional[date] = None
    remarks: Optional[str] = None


class ConsumableResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    category: Optional[str]
    quantity: Decimal
    unit: str
    min_stock_level: Decimal
    expiry_date: Optional[date]
    remarks: Optional[str]
    created_at: datetime
