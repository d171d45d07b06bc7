from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PaymentMode = Literal["cash", "bank", "online", "upi", "check", "cheque", "credit", "creditor"]

ExpenseCategory = Literal["material", "labour", "equipment", "other", "machine_rental", "maintenance"]


class TransactionCreate(BaseModel):
    amount: Decimal = Field(gt=0)
    type: Literal["credit", "debit"] = "debit"
    category: Literal["capital", "expense", "income", "other"] = "other"
    description: str = "Transaction"
    payment_mode: PaymentMode = "cash"
    date: Optional[datetime] = None
    bank_account_id: Optional[int] = None
    creditor_id: Optional[int] = None
    project_id: Optional[int] = None


class CapitalCreate(BaseModel):
    amount: Decimal = Field(gt=0)
    description: str = "Capital addition"
    payment_mode: PaymentMode = "bank"
    date: Optional[datetime] = None
    bank_account_id: Optional[int] = None
    project_id: Optional[int] = None


class AllocateFundsRequest(BaseModel):
    manager_id: int
    amount: Decimal = Field(gt=0)
    description: Optional[str] = None
    payment_mode: PaymentMode = "bank"
    bank_account_id: Optional[int] = None


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: datetime
    amount: Decimal
    type: str
    category: str
    payment_mode: str
    description: str
    related_id: Optional[int]
    related_model: Optional[str]
    bank_account_id: Optional[int]
    creditor_id: Optional[int]
    project_id: Optional[int]


class ExpenseCreate(BaseModel):
    project_id: int
    name: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    voucher_number: Optional[str] = None
    category: ExpenseCategory = "material"
    payment_mode: PaymentMode = "cash"
    bank_account_id: Optional[int] = None
    creditor_id: Optional[int] = None
    remarks: Optional[str] = None
    receipt: Optional[str] = None


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: Optional[int]
    name: str
    amount: Decimal
    voucher_number: Optional[str]
    category: str
    payment_mode: str
    bank_account_id: Optional[int]
    creditor_id: Optional[int]
    remarks: Optional[str]
    receipt_url: Optional[str]
    added_by: Optional[int]
    created_at: datetime


class VendorPaymentCreate(BaseModel):
    vendor_id: int
    amount: Decimal = Field(gt=0)
    payment_mode: PaymentMode = "cash"
    date: Optional[datetime] = None
    remarks: Optional[str] = None
    is_advance: bool = False
    receipt: Optional[str] = None
    bank_account_id: Optional[int] = None
    creditor_id: Optional[int] = None


class VendorPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    vendor_id: int
    amount: Decimal
    payment_mode: str
    bank_account_id: Optional[int]
    creditor_id: Optional[int]
    date: datetime
    remarks: Optional[str]
    is_advance: bool
    paid_by: Optional[int]


class ContractorPaymentCreate(BaseModel):
    contractor_id: int
    project_id: Optional[int] = None
    amount: Decimal = Field(gt=0)
    payment_mode: PaymentMode = "cash"
    date: Optional[datetime] = None
    remarks: Optional[str] = None
    machine_rent: Decimal = Field(default=Decimal("0"), ge=0)
    bank_account_id: Optional[int] = None
    creditor_id: Optional[int] = None


class ContractorPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contractor_id: int
    contractor_name: str
    project_id: Optional[int]
    amount: Decimal
    machine_rent: Decimal
    payment_mode: str
    bank_account_id: Optional[int]
    creditor_id: Optional[int]
    date: datetime
    remarks: Optional[str]
    paid_by: Optional[int]


class CreditorPaymentCreate(BaseModel):
    creditor_id: int
    amount: Decimal = Field(gt=0)
    payment_mode: PaymentMode = "cash"
    date: Optional[datetime] = None
    remarks: Optional[str] = None
    bank_account_id: Optional[int] = None
    source_creditor_id: Optional[int] = None


class CreditorPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    creditor_id: int
    source_creditor_id: Optional[int]
    amount: Decimal
    date: datetime
    payment_mode: str
    remarks: Optional[str]
    bank_account_id: Optional[int]


class LabourPaymentCreate(BaseModel):
    labour_id: int
    amount: Decimal = Field(gt=0)
    deduction: Decimal = Field(default=Decimal("0"), ge=0)
    advance: Decimal = Field(default=Decimal("0"), ge=0)
    payment_mode: PaymentMode = "cash"
    remarks: Optional[str] = None
    date: Optional[datetime] = None


class LabourPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    labour_id: int
    paid_by: Optional[int]
    amount: Decimal
    deduction: Decimal
    advance: Decimal
    final_amount: Decimal
    payment_mode: str
    remarks: Optional[str]
    date: datetime


class FeedRow(BaseModel):
    id: int
    ref_model: str
    date: datetime
    description: Optional[str]
    amount: Decimal
    type: str
    category: str
    payment_mode: Optional[str] = None


class AccountsResponse(BaseModel):
    capital: Decimal
    total_expenses: Decimal
    total_bank_transactions: Decimal
    total_cash_transactions: Decimal
    transactions: list[FeedRow]


class WalletResponse(BaseModel):
    wallet_balance: Decimal
    transactions: list[FeedRow]
