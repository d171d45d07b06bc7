from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.party import LedgerEntryResponse


class BankAccountCreate(BaseModel):
    holder_name: str = Field(min_length=1)
    bank_name: str = Field(min_length=1)
    branch: str = Field(min_length=1)
    account_number: str = Field(min_length=1)
    ifsc_code: str = Field(min_length=1)
    opening_balance: Decimal = Decimal("0")


class BankAccountUpdate(BaseModel):
    holder_name: Optional[str] = None
    bank_name: Optional[str] = None
    branch: Optional[str] = None
    ifsc_code: Optional[str] = None


class BankAccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    holder_name: str
    bank_name: str
    branch: str
    account_number: str
    ifsc_code: str
    opening_balance: Decimal
    current_balance: Decimal
    created_at: datetime


class BankAccountDetailResponse(BankAccountResponse):
    transactions: list[LedgerEntryResponse] = Field(default_factory=list)


class BankTransferRequest(BaseModel):
    source_bank_id: int
    dest_bank_id: int
    amount: Decimal = Field(gt=0)
    description: Optional[str] = None


class ReconciliationResponse(BaseModel):
    stored: Decimal
    computed: Decimal
    delta: Decimal
    ok: bool
    repaired: bool = False
