from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    role: Literal["admin", "sitemanager"] = "sitemanager"
    phone: Optional[str] = None
    salary: Decimal = Field(default=Decimal("0"), ge=0)


class UserUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    salary: Optional[Decimal] = Field(default=None, ge=0)
    active: Optional[bool] = None
    assigned_site_ids: Optional[list[int]] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    phone: Optional[str]
    salary: Decimal
    wallet_balance: Decimal
    active: bool
    assigned_site_ids: list[int]
    created_at: datetime
