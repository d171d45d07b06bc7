import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.core.errors import BusinessRuleViolation, InsufficientBalance, NotFound
from app.models.bank_account import BankAccount
from app.models.contractor import Contractor
from app.models.creditor import Creditor
from app.models.expense import Expense
from app.models.labour import Labour
from app.models.ledger_entry import BankLedgerEntry, CreditorLedgerEntry
from app.models.payments import ContractorPayment, CreditorPayment, LabourPayment, VendorPayment
from app.models.project import Project
from app.models.transaction import Transaction
from app.models.user import User
from app.models.vendor import Vendor
from app.services.party_balance import settle_charge, settle_payment

logger = logging.getLogger(__name__)

CREDIT = "credit"
DEBIT = "debit"


def lock_row(db: Session, model, row_id: int, label: str):
    row = (
        db.query(model)
        .filter(model.id == int(row_id))
        .with_for_update()
        .first()
    )
    if row is None:
        raise NotFound(f"{label} not found")
    return row


def post_bank_entry(
    db: Session,
    bank: BankAccount,
    *,
    entry_type: str,
    amount: Decimal,
    description: str,
    ref_id: Optional[int] = None,
    ref_model: Optional[str] = None,
    entry_date: Optional[datetime] = None,
) -> BankLedgerEntry:
    if entry_type == CREDIT:
        bank.current_balance = bank.current_balance + amount
    elif entry_type == DEBIT:
        bank.current_balance = bank.current_balance - amount
    else:
        raise ValueError(f"Unknown entry_type: {entry_type}")

    entry = BankLedgerEntry(
        bank_account_id=bank.id,
        entry_type=entry_type,
        amount=amount,
        entry_date=entry_date or datetime.utcnow(),
        description=description,
        ref_id=ref_id,
        ref_model=ref_model,
    )
    db.add(entry)
    return entry


def post_creditor_entry(
    db: Session,
    creditor: Creditor,
    *,
    entry_type: str,
    amount: Decimal,
    description: str,
    ref_id: Optional[int] = None,
    ref_model: Optional[str] = None,
    entry_date: Optional[datetime] = None,
) -> CreditorLedgerEntry:
    if entry_type == CREDIT:
        creditor.current_balance = creditor.current_balance + amount
    elif entry_type == DEBIT:
        creditor.current_balance = creditor.current_balance - amount
    else:
        raise ValueError(f"Unknown entry_type: {entry_type}")

    entry = CreditorLedgerEntry(
        creditor_id=creditor.id,
        entry_type=entry_type,
        amount=amount,
        entry_date=entry_date or datetime.utcnow(),
        description=description,
        ref_id=ref_id,
        ref_model=ref_model,
    )
    db.add(entry)
    return entry


def _lock_funding(
    db: Session,
    bank_account_id: Optional[int],
    creditor_id: Optional[int],
) -> Tuple[Optional[BankAccount], Optional[Creditor]]:
    bank = lock_row(db, BankAccount, bank_account_id, "Bank account") if bank_account_id else None
    creditor = lock_row(db, Creditor, creditor_id, "Creditor") if creditor_id else None
    return bank, creditor


def _post_funding(
    db: Session,
    bank: Optional[BankAccount],
    creditor: Optional[Creditor],
    *,
    entry_type: str,
    amount: Decimal,
    description: str,
    ref_id: int,
    ref_model: str,
    entry_date: Optional[datetime] = None,
) -> None:
    if bank is not None:
        post_bank_entry(
            db, bank,
            entry_type=entry_type, amount=amount, description=description,
            ref_id=ref_id, ref_model=ref_model, entry_date=entry_date,
        )
    if creditor is not None:
        post_creditor_entry(
            db, creditor,
            entry_type=entry_type, amount=amount, description=description,
            ref_id=ref_id, ref_model=ref_model, entry_date=entry_date,
        )


def debit_wallet(db: Session, user_id: int, amount: Decimal) -> User:
    user = lock_row(db, User, user_id, "User")
    if user.wallet_balance < amount:
        raise InsufficientBalance(
            f"Insufficient wallet balance. Available: {user.wallet_balance}, required: {amount}"
        )
    user.wallet_balance = user.wallet_balance - amount
    return user


# ---------------------------------------------------------------------------
# Party payments
# ---------------------------------------------------------------------------


def record_vendor_payment(
    *,
    db: Session,
    vendor_id: int,
    amount: Decimal,
    payment_mode: str = "cash",
    bank_account_id: Optional[int] = None,
    creditor_id: Optional[int] = None,
    remarks: Optional[str] = None,
    date: Optional[datetime] = None,
    is_advance: bool = False,
    receipt_url: Optional[str] = None,
    recorded_by: Optional[int] = None,
    wallet_user_id: Optional[int] = None,
) -> VendorPayment:
    """Pay a vendor: drain pending, overflow to advance, then post the funding source.

    ``wallet_user_id`` is set for site-manager payments, which come out of the
    manager's wallet instead of a bank.
    """
    vendor = lock_row(db, Vendor, vendor_id, "Vendor")
    bank, creditor = _lock_funding(db, bank_account_id, creditor_id)
    if wallet_user_id is not None:
        debit_wallet(db, wallet_user_id, amount)

    settle_payment(vendor, amount)

    payment = VendorPayment(
        vendor_id=vendor.id,
        amount=amount,
        payment_mode=payment_mode,
        bank_account_id=bank.id if bank else None,
        creditor_id=creditor.id if creditor else None,
        date=date or datetime.utcnow(),
        remarks=remarks,
        is_advance=is_advance,
        receipt_url=receipt_url,
        recorded_by=recorded_by,
        paid_by=wallet_user_id,
    )
    db.add(payment)
    db.flush()

    _post_funding(
        db, bank, creditor,
        entry_type=DEBIT, amount=amount,
        description=f"Payment to vendor {vendor.name}",
        ref_id=payment.id, ref_model="VendorPayment", entry_date=payment.date,
    )

    logger.info(
        "vendor payment recorded",
        extra={
            "vendor_id": vendor.id,
            "payment_id": payment.id,
            "amount": amount,
            "pending_amount": vendor.pending_amount,
            "advance_payment": vendor.advance_payment,
        },
    )
    return payment


def record_contractor_payment(
    *,
    db: Session,
    contractor_id: int,
    amount: Decimal,
    payment_mode: str = "cash",
    project_id: Optional[int] = None,
    bank_account_id: Optional[int] = None,
    creditor_id: Optional[int] = None,
    remarks: Optional[str] = None,
    date: Optional[datetime] = None,
    machine_rent: Decimal = Decimal("0"),
    recorded_by: Optional[int] = None,
    wallet_user_id: Optional[int] = None,
) -> ContractorPayment:
    contractor = lock_row(db, Contractor, contractor_id, "Contractor")
    bank, creditor = _lock_funding(db, bank_account_id, creditor_id)
    if wallet_user_id is not None:
        debit_wallet(db, wallet_user_id, amount)

    settle_payment(contractor, amount)

    payment = ContractorPayment(
        contractor_id=contractor.id,
        contractor_name=contractor.name,
        project_id=project_id,
        amount=amount,
        machine_rent=machine_rent,
        payment_mode=payment_mode,
        bank_account_id=bank.id if bank else None,
        creditor_id=creditor.id if creditor else None,
        date=date or datetime.utcnow(),
        remarks=remarks,
        recorded_by=recorded_by,
        paid_by=wallet_user_id,
    )
    db.add(payment)
    db.flush()

    _post_funding(
        db, bank, creditor,
        entry_type=DEBIT, amount=amount,
        description=f"Payment to contractor {contractor.name}",
        ref_id=payment.id, ref_model="ContractorPayment", entry_date=payment.date,
    )

    logger.info(
        "contractor payment recorded",
        extra={
            "contractor_id": contractor.id,
            "payment_id": payment.id,
            "amount": amount,
            "pending_amount": contractor.pending_amount,
            "advance_payment": contractor.advance_payment,
        },
    )
    return payment


def reverse_vendor_payment(*, db: Session, payment_id: int) -> None:
    payment = lock_row(db, VendorPayment, payment_id, "Vendor payment")
    vendor = lock_row(db, Vendor, payment.vendor_id, "Vendor")
    bank, creditor = _lock_funding(db, payment.bank_account_id, payment.creditor_id)

    settle_charge(vendor, payment.amount)
    _post_funding(
        db, bank, creditor,
        entry_type=CREDIT, amount=payment.amount,
        description=f"Reversal of payment to vendor {vendor.name}",
        ref_id=payment.id, ref_model="VendorPayment",
    )
    db.delete(payment)

    logger.info(
        "vendor payment reversed",
        extra={"vendor_id": vendor.id, "payment_id": payment_id, "amount": payment.amount},
    )


def reverse_contractor_payment(*, db: Session, payment_id: int) -> None:
    payment = lock_row(db, ContractorPayment, payment_id, "Contractor payment")
    contractor = lock_row(db, Contractor, payment.contractor_id, "Contractor")
    bank, creditor = _lock_funding(db, payment.bank_account_id, payment.creditor_id)

    settle_charge(contractor, payment.amount)
    _post_funding(
        db, bank, creditor,
        entry_type=CREDIT, amount=payment.amount,
        description=f"Reversal of payment to contractor {contractor.name}",
        ref_id=payment.id, ref_model="ContractorPayment",
    )
    db.delete(payment)

    logger.info(
        "contractor payment reversed",
        extra={"contractor_id": contractor.id, "payment_id": payment_id, "amount": payment.amount},
    )


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------


def record_expense(
    *,
    db: Session,
    project_id: Optional[int],
    name: str,
    amount: Decimal,
    category: str = "material",
    payment_mode: str = "cash",
    bank_account_id: Optional[int] = None,
    creditor_id: Optional[int] = None,
    voucher_number: Optional[str] = None,
    remarks: Optional[str] = None,
    receipt_url: Optional[str] = None,
    added_by: Optional[int] = None,
    wallet_user_id: Optional[int] = None,
    created_at: Optional[datetime] = None,
) -> Expense:
    project = lock_row(db, Project, project_id, "Project") if project_id else None
    bank, creditor = _lock_funding(db, bank_account_id, creditor_id)
    if wallet_user_id is not None:
        debit_wallet(db, wallet_user_id, amount)

    expense = Expense(
        project_id=project.id if project else None,
        name=name,
        amount=amount,
        voucher_number=voucher_number,
        category=category,
        payment_mode=payment_mode,
        bank_account_id=bank.id if bank else None,
        creditor_id=creditor.id if creditor else None,
        remarks=remarks,
        receipt_url=receipt_url,
        added_by=added_by,
        created_at=created_at or datetime.utcnow(),
    )
    db.add(expense)

    if project is not None:
        project.expenses = project.expenses + amount

    db.flush()

    _post_funding(
        db, bank, creditor,
        entry_type=DEBIT, amount=amount,
        description=f"Expense: {name}",
        ref_id=expense.id, ref_model="Expense", entry_date=expense.created_at,
    )

    logger.info(
        "expense recorded",
        extra={"expense_id": expense.id, "project_id": expense.project_id, "amount": amount, "category": category},
    )
    return expense


def reverse_expense(*, db: Session, expense_id: int) -> None:
    expense = lock_row(db, Expense, expense_id, "Expense")
    bank, creditor = _lock_funding(db, expense.bank_account_id, expense.creditor_id)

    if expense.project_id is not None:
        project = db.query(Project).filter(Project.id == expense.project_id).with_for_update().first()
        if project is not None:
            project.expenses = project.expenses - expense.amount

    _post_funding(
        db, bank, creditor,
        entry_type=CREDIT, amount=expense.amount,
        description=f"Reversal of expense: {expense.name}",
        ref_id=expense.id, ref_model="Expense",
    )
    db.delete(expense)

    logger.info("expense reversed", extra={"expense_id": expense_id, "amount": expense.amount})


# ---------------------------------------------------------------------------
# Generic transactions
# ---------------------------------------------------------------------------


def add_transaction(
    *,
    db: Session,
    type: str,
    amount: Decimal,
    description: str,
    category: str = "other",
    payment_mode: str = "cash",
    bank_account_id: Optional[int] = None,
    creditor_id: Optional[int] = None,
    project_id: Optional[int] = None,
    added_by: Optional[int] = None,
    date: Optional[datetime] = None,
) -> Transaction:
    """Write one generic ledger row; a linked bank or creditor moves in the same direction."""
    if type not in (CREDIT, DEBIT):
        raise BusinessRuleViolation("Transaction type must be credit or debit")

    bank, creditor = _lock_funding(db, bank_account_id, creditor_id)

    row = Transaction(
        date=date or datetime.utcnow(),
        amount=amount,
        type=type,
        category=category,
        payment_mode=payment_mode,
        description=description,
        added_by=added_by,
        bank_account_id=bank.id if bank else None,
        creditor_id=creditor.id if creditor else None,
        project_id=project_id,
    )
    db.add(row)
    db.flush()

    _post_funding(
        db, bank, creditor,
        entry_type=type, amount=amount, description=description,
        ref_id=row.id, ref_model="Transaction", entry_date=row.date,
    )

    logger.info(
        "transaction recorded",
        extra={"transaction_id": row.id, "type": type, "category": category, "amount": amount},
    )
    return row


def add_capital(
    *,
    db: Session,
    amount: Decimal,
    description: str = "Capital addition",
    payment_mode: str = "bank",
    bank_account_id: Optional[int] = None,
    project_id: Optional[int] = None,
    added_by: Optional[int] = None,
    date: Optional[datetime] = None,
) -> Transaction:
    return add_transaction(
        db=db,
        type=CREDIT,
        amount=amount,
        description=description,
        category="capital",
        payment_mode=payment_mode,
        bank_account_id=bank_account_id,
        project_id=project_id,
        added_by=added_by,
        date=date,
    )


def allocate_funds(
    *,
    db: Session,
    user_id: int,
    amount: Decimal,
    description: Optional[str] = None,
    payment_mode: str = "bank",
    bank_account_id: Optional[int] = None,
    added_by: Optional[int] = None,
) -> Transaction:
    """Move company money into a site manager's wallet."""
    user = lock_row(db, User, user_id, "Site manager")
    if user.role != "sitemanager" or not user.active:
        raise NotFound("Site manager not found")

    bank, _ = _lock_funding(db, bank_account_id, None)

    user.wallet_balance = user.wallet_balance + amount

    row = Transaction(
        date=datetime.utcnow(),
        amount=amount,
        type=DEBIT,
        category="wallet_allocation",
        payment_mode=payment_mode,
        description=description or f"Wallet allocation to {user.name}",
        related_id=user.id,
        related_model="User",
        added_by=added_by,
        bank_account_id=bank.id if bank else None,
    )
    db.add(row)
    db.flush()

    _post_funding(
        db, bank, None,
        entry_type=DEBIT, amount=amount, description=row.description,
        ref_id=row.id, ref_model="Transaction", entry_date=row.date,
    )

    logger.info(
        "funds allocated",
        extra={"user_id": user.id, "amount": amount, "wallet_balance": user.wallet_balance},
    )
    return row


def delete_transaction(*, db: Session, transaction_id: int) -> None:
    row = lock_row(db, Transaction, transaction_id, "Transaction")
    bank, creditor = _lock_funding(db, row.bank_account_id, row.creditor_id)

    reversal = DEBIT if row.type == CREDIT else CREDIT
    _post_funding(
        db, bank, creditor,
        entry_type=reversal, amount=row.amount,
        description=f"Reversal of transaction: {row.description}",
        ref_id=row.id, ref_model="Transaction",
    )

    if row.category == "wallet_allocation" and row.related_model == "User" and row.related_id:
        user = db.query(User).filter(User.id == row.related_id).with_for_update().first()
        if user is not None:
            user.wallet_balance = user.wallet_balance - row.amount

    db.delete(row)
    logger.info("transaction deleted", extra={"transaction_id": transaction_id, "amount": row.amount})


def transfer_bank_to_bank(
    *,
    db: Session,
    source_bank_id: int,
    dest_bank_id: int,
    amount: Decimal,
    description: Optional[str] = None,
    added_by: Optional[int] = None,
) -> Tuple[Transaction, Transaction]:
    if int(source_bank_id) == int(dest_bank_id):
        raise BusinessRuleViolation("Source and destination bank accounts must be different")

    # lock in id order so two opposite transfers cannot deadlock
    first_id, second_id = sorted([int(source_bank_id), int(dest_bank_id)])
    locked = {
        first_id: lock_row(db, BankAccount, first_id, "Bank account"),
        second_id: lock_row(db, BankAccount, second_id, "Bank account"),
    }
    source = locked[int(source_bank_id)]
    dest = locked[int(dest_bank_id)]

    now = datetime.utcnow()
    note = description or f"Transfer from {source.bank_name} to {dest.bank_name}"

    debit_row = Transaction(
        date=now,
        amount=amount,
        type=DEBIT,
        category="other",
        payment_mode="bank",
        description=f"{note} (sent)",
        added_by=added_by,
        bank_account_id=source.id,
    )
    credit_row = Transaction(
        date=now,
        amount=amount,
        type=CREDIT,
        category="other",
        payment_mode="bank",
        description=f"{note} (received)",
        added_by=added_by,
        bank_account_id=dest.id,
    )
    db.add_all([debit_row, credit_row])
    db.flush()

    post_bank_entry(
        db, source, entry_type=DEBIT, amount=amount, description=debit_row.description,
        ref_id=debit_row.id, ref_model="Transaction", entry_date=now,
    )
    post_bank_entry(
        db, dest, entry_type=CREDIT, amount=amount, description=credit_row.description,
        ref_id=credit_row.id, ref_model="Transaction", entry_date=now,
    )

    logger.info(
        "bank transfer recorded",
        extra={"source_bank_id": source.id, "dest_bank_id": dest.id, "amount": amount},
    )
    return debit_row, credit_row


# ---------------------------------------------------------------------------
# Creditors
# ---------------------------------------------------------------------------


def record_creditor_payment(
    *,
    db: Session,
    creditor_id: int,
    amount: Decimal,
    payment_mode: str = "cash",
    bank_account_id: Optional[int] = None,
    source_creditor_id: Optional[int] = None,
    remarks: Optional[str] = None,
    date: Optional[datetime] = None,
    recorded_by: Optional[int] = None,
) -> CreditorPayment:
    """Pay down a creditor.

    With ``source_creditor_id`` the money is borrowed from another creditor:
    the source's balance rises (we owe them more) and the target's falls.
    """
    if source_creditor_id is not None and int(source_creditor_id) == int(creditor_id):
        raise BusinessRuleViolation("Cannot pay a creditor with its own funds")

    target = lock_row(db, Creditor, creditor_id, "Creditor")
    source = lock_row(db, Creditor, source_creditor_id, "Source creditor") if source_creditor_id else None
    bank, _ = _lock_funding(db, bank_account_id, None) if source is None else (None, None)

    when = date or datetime.utcnow()

    if source is not None:
        note = f"Transfer from {source.name}: {remarks}" if remarks else f"Transfer from {source.name}"
        mode = "creditor"
    else:
        note = remarks
        mode = payment_mode

    payment = CreditorPayment(
        creditor_id=target.id,
        source_creditor_id=source.id if source else None,
        amount=amount,
        date=when,
        payment_mode=mode,
        remarks=note,
        bank_account_id=bank.id if bank else None,
        recorded_by=recorded_by,
    )
    db.add(payment)
    db.flush()

    if source is not None:
        post_creditor_entry(
            db, source,
            entry_type=CREDIT, amount=amount,
            description=f"Funds used for paying {target.name}",
            ref_id=payment.id, ref_model="CreditorPayment", entry_date=when,
        )
        post_creditor_entry(
            db, target,
            entry_type=DEBIT, amount=amount,
            description=f"Payment recd from {source.name}",
            ref_id=payment.id, ref_model="CreditorPayment", entry_date=when,
        )
    else:
        post_creditor_entry(
            db, target,
            entry_type=DEBIT, amount=amount,
            description=remarks or "Payment made",
            ref_id=payment.id, ref_model="CreditorPayment", entry_date=when,
        )
        if bank is not None:
            post_bank_entry(
                db, bank,
                entry_type=DEBIT, amount=amount,
                description=f"Payment to creditor {target.name}",
                ref_id=payment.id, ref_model="CreditorPayment", entry_date=when,
            )

    logger.info(
        "creditor payment recorded",
        extra={
            "creditor_id": target.id,
            "source_creditor_id": source.id if source else None,
            "amount": amount,
            "creditor_balance": target.current_balance,
        },
    )
    return payment


# ---------------------------------------------------------------------------
# Labour
# ---------------------------------------------------------------------------


def record_labour_payment(
    *,
    db: Session,
    labour_id: int,
    amount: Decimal,
    deduction: Decimal = Decimal("0"),
    advance: Decimal = Decimal("0"),
    payment_mode: str = "cash",
    remarks: Optional[str] = None,
    date: Optional[datetime] = None,
    paid_by: Optional[int] = None,
) -> LabourPayment:
    labour = lock_row(db, Labour, labour_id, "Labour")

    final_amount = amount - deduction - advance
    if payment_mode == "cash" and final_amount > 0 and paid_by is not None:
        debit_wallet(db, paid_by, final_amount)

    payment = LabourPayment(
        labour_id=labour.id,
        paid_by=paid_by,
        amount=amount,
        deduction=deduction,
        advance=advance,
        final_amount=final_amount,
        payment_mode=payment_mode,
        remarks=remarks,
        date=date or datetime.utcnow(),
    )
    db.add(payment)

    labour.pending_payout = labour.pending_payout - amount
    db.flush()

    logger.info(
        "labour payment recorded",
        extra={"labour_id": labour.id, "amount": amount, "final_amount": final_amount},
    )
    return payment
