from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class VendorCreate(BaseModel):
    name: str = Field(min_length=1)
    contact: str = Field(min_length=1)
    email: Optional[str] = None
    address: Optional[str] = None
    materials_supplied: Optional[str] = None
    pending_amount: Decimal = Field(default=Decimal("0"), ge=0)


class VendorUpdate(BaseModel):
    name: Optional[str] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    materials_supplied: Optional[str] = None


class VendorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    contact: str
    email: Optional[str]
    address: Optional[str]
    materials_supplied: Optional[str]
    pending_amount: Decimal
    advance_payment: Decimal
    total_supplied: Decimal
    created_at: datetime


ContractorStatus = Literal["pending", "complete", "active", "inactive"]


class ContractorCreate(BaseModel):
    name: str = Field(min_length=1)
    mobile: str = Field(min_length=1)
    address: Optional[str] = None
    distance_value: Decimal = Decimal("0")
    distance_unit: str = "km"
    expense_per_unit: Decimal = Decimal("0")
    status: ContractorStatus = "pending"
    pending_amount: Decimal = Field(default=Decimal("0"), ge=0)
    assigned_project_ids: list[int] = Field(default_factory=list)


class ContractorUpdate(BaseModel):
    name: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None
    distance_value: Optional[Decimal] = None
    distance_unit: Optional[str] = None
    expense_per_unit: Optional[Decimal] = None
    status: Optional[ContractorStatus] = None
    assigned_project_ids: Optional[list[int]] = None


class ContractorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    mobile: str
    address: Optional[str]
    status: str
    expense_per_unit: Decimal
    pending_amount: Decimal
    advance_payment: Decimal
    assigned_project_ids: list[int]
    created_at: datetime


class CreditorCreate(BaseModel):
    name: str = Field(min_length=1)
    mobile: str = Field(min_length=1)
    address: Optional[str] = None


class CreditorUpdate(BaseModel):
    name: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None


class CreditorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    mobile: str
    address: Optional[str]
    current_balance: Decimal
    created_at: datetime


class LedgerEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    entry_type: str
    amount: Decimal
    entry_date: datetime
    description: Optional[str]
    ref_id: Optional[int]
    ref_model: Optional[str]


class CreditorDetailResponse(CreditorResponse):
    transactions: list[LedgerEntryResponse] = Field(default_factory=list)
