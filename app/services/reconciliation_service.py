from decimal import Decimal

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.models.bank_account import BankAccount
from app.models.creditor import Creditor
from app.models.ledger_entry import BankLedgerEntry, CreditorLedgerEntry
from app.services.ledger_service import lock_row


def _signed_total(db: Session, entry_model, owner_column, owner_id: int) -> Decimal:
    signed = case(
        (entry_model.entry_type == "credit", entry_model.amount),
        else_=-entry_model.amount,
    )
    total = (
        db.query(func.coalesce(func.sum(signed), 0))
        .filter(owner_column == int(owner_id))
        .scalar()
    )
    return Decimal(str(total or 0))


def _report(stored: Decimal, computed: Decimal) -> dict:
    stored = Decimal(str(stored))
    return {
        "stored": stored,
        "computed": computed,
        "delta": stored - computed,
        "ok": stored == computed,
    }


def reconcile_bank_account(*, db: Session, bank_account_id: int, repair: bool = False) -> dict:
    """
    Enforce invariant:
    bank.current_balance
    ==
    bank.opening_balance + SUM(credit entries) - SUM(debit entries)
    """
    bank = lock_row(db, BankAccount, bank_account_id, "Bank account")

    computed = Decimal(str(bank.opening_balance)) + _signed_total(
        db, BankLedgerEntry, BankLedgerEntry.bank_account_id, bank.id
    )
    result = _report(bank.current_balance, computed)

    if repair and not result["ok"]:
        bank.current_balance = computed
        result["repaired"] = True

    return result


def reconcile_creditor(*, db: Session, creditor_id: int, repair: bool = False) -> dict:
    """
    Enforce invariant:
    creditor.current_balance == SUM(credit entries) - SUM(debit entries)
    """
    creditor = lock_row(db, Creditor, creditor_id, "Creditor")

    computed = _signed_total(db, CreditorLedgerEntry, CreditorLedgerEntry.creditor_id, creditor.id)
    result = _report(creditor.current_balance, computed)

    if repair and not result["ok"]:
        creditor.current_balance = computed
        result["repaired"] = True

    return result
