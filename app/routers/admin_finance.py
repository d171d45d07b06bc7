from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.authorization import Role, require_role
from app.core.errors import BusinessRuleViolation, NotFound
from app.database import SessionLocal
from app.models.bank_account import BankAccount
from app.models.creditor import Creditor
from app.models.expense import Expense
from app.models.ledger_entry import BankLedgerEntry, CreditorLedgerEntry
from app.models.payments import CreditorPayment
from app.models.transaction import Transaction
from app.schemas.bank import (
    BankAccountCreate,
    BankAccountDetailResponse,
    BankAccountResponse,
    BankAccountUpdate,
    BankTransferRequest,
    ReconciliationResponse,
)
from app.schemas.common import ApiResponse, ok
from app.schemas.ledger import (
    AccountsResponse,
    AllocateFundsRequest,
    CapitalCreate,
    CreditorPaymentCreate,
    CreditorPaymentResponse,
    ExpenseCreate,
    ExpenseResponse,
    TransactionCreate,
    TransactionResponse,
)
from app.schemas.party import (
    CreditorCreate,
    CreditorDetailResponse,
    CreditorResponse,
    CreditorUpdate,
    LedgerEntryResponse,
)
from app.services import accounts_service, ledger_service, reconciliation_service

router = APIRouter(prefix="/admin", tags=["Admin finance"])

admin_only = require_role(Role.ADMIN)


# ---- creditors ----


@router.get("/creditors", response_model=ApiResponse[list[CreditorResponse]])
def list_creditors(_role=Depends(admin_only)):
    db = SessionLocal()
    try:
        rows = db.query(Creditor).order_by(Creditor.name.asc(), Creditor.id.asc()).all()
        return ok([CreditorResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/creditors/payments", response_model=ApiResponse[list[CreditorPaymentResponse]])
def list_creditor_payments(creditor_id: Optional[int] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(CreditorPayment)
        if creditor_id is not None:
            q = q.filter(CreditorPayment.creditor_id == int(creditor_id))
        rows = q.order_by(CreditorPayment.date.desc(), CreditorPayment.id.desc()).all()
        return ok([CreditorPaymentResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/creditors/{creditor_id}", response_model=ApiResponse[CreditorDetailResponse])
def get_creditor(creditor_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Creditor).filter(Creditor.id == int(creditor_id)).first()
        if row is None:
            raise NotFound("Creditor not found")
        entries = (
            db.query(CreditorLedgerEntry)
            .filter(CreditorLedgerEntry.creditor_id == row.id)
            .order_by(CreditorLedgerEntry.entry_date.desc(), CreditorLedgerEntry.id.desc())
            .all()
        )
        detail = CreditorDetailResponse.model_validate(row)
        detail.transactions = [LedgerEntryResponse.model_validate(e) for e in entries]
        return ok(detail)
    finally:
        db.close()


@router.post("/creditors", status_code=201, response_model=ApiResponse[CreditorResponse])
def create_creditor(payload: CreditorCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = Creditor(**payload.model_dump(), added_by=request.state.user_id)
        db.add(row)
        db.commit()
        db.refresh(row)
        return ok(CreditorResponse.model_validate(row))
    finally:
        db.close()


@router.put("/creditors/{creditor_id}", response_model=ApiResponse[CreditorResponse])
def update_creditor(creditor_id: int, payload: CreditorUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Creditor).filter(Creditor.id == int(creditor_id)).first()
        if row is None:
            raise NotFound("Creditor not found")
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        db.commit()
        db.refresh(row)
        return ok(CreditorResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/creditors/{creditor_id}")
def delete_creditor(creditor_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Creditor).filter(Creditor.id == int(creditor_id)).first()
        if row is None:
            raise NotFound("Creditor not found")
        db.delete(row)
        db.commit()
        return ok({"id": int(creditor_id)}, message="Creditor deleted successfully")
    finally:
        db.close()


@router.post("/creditors/payments", status_code=201, response_model=ApiResponse[CreditorPaymentResponse])
def pay_creditor(payload: CreditorPaymentCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = ledger_service.record_creditor_payment(
            db=db,
            creditor_id=payload.creditor_id,
            amount=payload.amount,
            payment_mode=payload.payment_mode,
            bank_account_id=payload.bank_account_id,
            source_creditor_id=payload.source_creditor_id,
            remarks=payload.remarks,
            date=payload.date,
            recorded_by=request.state.user_id,
        )
        db.commit()
        return ok(CreditorPaymentResponse.model_validate(row), message="Payment recorded successfully")
    finally:
        db.close()


@router.post("/creditors/{creditor_id}/reconcile", response_model=ApiResponse[ReconciliationResponse])
def reconcile_creditor(creditor_id: int, repair: bool = Query(False), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        result = reconciliation_service.reconcile_creditor(db=db, creditor_id=creditor_id, repair=repair)
        db.commit()
        return ok(result)
    finally:
        db.close()


# ---- banks ----


@router.get("/banks", response_model=ApiResponse[list[BankAccountResponse]])
def list_banks(_role=Depends(admin_only)):
    db = SessionLocal()
    try:
        rows = db.query(BankAccount).order_by(BankAccount.id.asc()).all()
        return ok([BankAccountResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/banks/{bank_id}", response_model=ApiResponse[BankAccountDetailResponse])
def get_bank(bank_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(BankAccount).filter(BankAccount.id == int(bank_id)).first()
        if row is None:
            raise NotFound("Bank account not found")
        entries = (
            db.query(BankLedgerEntry)
            .filter(BankLedgerEntry.bank_account_id == row.id)
            .order_by(BankLedgerEntry.entry_date.desc(), BankLedgerEntry.id.desc())
            .all()
        )
        detail = BankAccountDetailResponse.model_validate(row)
        detail.transactions = [LedgerEntryResponse.model_validate(e) for e in entries]
        return ok(detail)
    finally:
        db.close()


@router.post("/banks", status_code=201, response_model=ApiResponse[BankAccountResponse])
def create_bank(payload: BankAccountCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        exists = db.query(BankAccount.id).filter(BankAccount.account_number == payload.account_number).first()
        if exists is not None:
            raise BusinessRuleViolation("Bank account with this account number already exists")

        row = BankAccount(
            **payload.model_dump(),
            current_balance=payload.opening_balance,
            added_by=request.state.user_id,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return ok(BankAccountResponse.model_validate(row))
    finally:
        db.close()


@router.put("/banks/{bank_id}", response_model=ApiResponse[BankAccountResponse])
def update_bank(bank_id: int, payload: BankAccountUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(BankAccount).filter(BankAccount.id == int(bank_id)).first()
        if row is None:
            raise NotFound("Bank account not found")
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        db.commit()
        db.refresh(row)
        return ok(BankAccountResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/banks/{bank_id}")
def delete_bank(bank_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(BankAccount).filter(BankAccount.id == int(bank_id)).first()
        if row is None:
            raise NotFound("Bank account not found")
        db.delete(row)
        db.commit()
        return ok({"id": int(bank_id)}, message="Bank account deleted successfully")
    finally:
        db.close()


@router.post("/banks/transfer", status_code=201, response_model=ApiResponse[list[TransactionResponse]])
def transfer_between_banks(payload: BankTransferRequest, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        debit_row, credit_row = ledger_service.transfer_bank_to_bank(
            db=db,
            source_bank_id=payload.source_bank_id,
            dest_bank_id=payload.dest_bank_id,
            amount=payload.amount,
            description=payload.description,
            added_by=request.state.user_id,
        )
        db.commit()
        return ok(
            [TransactionResponse.model_validate(debit_row), TransactionResponse.model_validate(credit_row)],
            message="Funds transferred successfully",
        )
    finally:
        db.close()


@router.post("/banks/{bank_id}/reconcile", response_model=ApiResponse[ReconciliationResponse])
def reconcile_bank(bank_id: int, repair: bool = Query(False), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        result = reconciliation_service.reconcile_bank_account(db=db, bank_account_id=bank_id, repair=repair)
        db.commit()
        return ok(result)
    finally:
        db.close()


# ---- accounts ----


@router.get("/accounts", response_model=ApiResponse[AccountsResponse])
def get_accounts(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    manager_id: Optional[int] = Query(None),
    _role=Depends(admin_only),
):
    db = SessionLocal()
    try:
        return ok(accounts_service.account_feed(db, start=start_date, end=end_date, manager_id=manager_id))
    finally:
        db.close()


@router.post("/accounts/capital", status_code=201, response_model=ApiResponse[TransactionResponse])
def add_capital(payload: CapitalCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = ledger_service.add_capital(
            db=db,
            amount=payload.amount,
            description=payload.description,
            payment_mode=payload.payment_mode,
            bank_account_id=payload.bank_account_id,
            project_id=payload.project_id,
            added_by=request.state.user_id,
            date=payload.date,
        )
        db.commit()
        return ok(TransactionResponse.model_validate(row), message="Capital added successfully")
    finally:
        db.close()


@router.post("/accounts/transactions", status_code=201, response_model=ApiResponse[TransactionResponse])
def add_transaction(payload: TransactionCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = ledger_service.add_transaction(
            db=db,
            type=payload.type,
            amount=payload.amount,
            description=payload.description,
            category=payload.category,
            payment_mode=payload.payment_mode,
            bank_account_id=payload.bank_account_id,
            creditor_id=payload.creditor_id,
            project_id=payload.project_id,
            added_by=request.state.user_id,
            date=payload.date,
        )
        db.commit()
        return ok(TransactionResponse.model_validate(row), message="Transaction added successfully")
    finally:
        db.close()


@router.get("/accounts/transactions", response_model=ApiResponse[list[TransactionResponse]])
def list_transactions(category: Optional[str] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(Transaction)
        if category:
            q = q.filter(Transaction.category == category)
        rows = q.order_by(Transaction.date.desc(), Transaction.id.desc()).all()
        return ok([TransactionResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.delete("/accounts/transactions/{transaction_id}")
def delete_transaction(transaction_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        ledger_service.delete_transaction(db=db, transaction_id=transaction_id)
        db.commit()
        return ok({"id": int(transaction_id)}, message="Transaction deleted successfully")
    finally:
        db.close()


@router.post("/accounts/allocate", status_code=201, response_model=ApiResponse[TransactionResponse])
def allocate_funds(payload: AllocateFundsRequest, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = ledger_service.allocate_funds(
            db=db,
            user_id=payload.manager_id,
            amount=payload.amount,
            description=payload.description,
            payment_mode=payload.payment_mode,
            bank_account_id=payload.bank_account_id,
            added_by=request.state.user_id,
        )
        db.commit()
        return ok(TransactionResponse.model_validate(row), message="Funds allocated successfully")
    finally:
        db.close()


# ---- expenses ----


@router.get("/expenses", response_model=ApiResponse[list[ExpenseResponse]])
def list_expenses(project_id: Optional[int] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(Expense)
        if project_id is not None:
            q = q.filter(Expense.project_id == int(project_id))
        rows = q.order_by(Expense.created_at.desc(), Expense.id.desc()).all()
        return ok([ExpenseResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/expenses", status_code=201, response_model=ApiResponse[ExpenseResponse])
def create_expense(payload: ExpenseCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = ledger_service.record_expense(
            db=db,
            project_id=payload.project_id,
            name=payload.name,
            amount=payload.amount,
            category=payload.category,
            payment_mode=payload.payment_mode,
            bank_account_id=payload.bank_account_id,
            creditor_id=payload.creditor_id,
            voucher_number=payload.voucher_number,
            remarks=payload.remarks,
            receipt_url=payload.receipt,
            added_by=request.state.user_id,
        )
        db.commit()
        return ok(ExpenseResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/expenses/{expense_id}")
def delete_expense(expense_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        ledger_service.reverse_expense(db=db, expense_id=expense_id)
        db.commit()
        return ok({"id": int(expense_id)}, message="Expense deleted successfully")
    finally:
        db.close()
