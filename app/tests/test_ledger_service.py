from decimal import Decimal

import pytest

from app.core.errors import BusinessRuleViolation, InsufficientBalance, NotFound
from app.models.bank_account import BankAccount
from app.models.creditor import Creditor
from app.models.ledger_entry import BankLedgerEntry, CreditorLedgerEntry
from app.models.transaction import Transaction
from app.models.vendor import Vendor
from app.services import ledger_service, reconciliation_service


def _bank(db, *, number="000111", balance=Decimal("0")) -> BankAccount:
    bank = BankAccount(
        holder_name="Acme Builders",
        bank_name=f"Bank {number}",
        branch="Main",
        account_number=number,
        ifsc_code="IFSC0001",
        opening_balance=balance,
        current_balance=balance,
    )
    db.add(bank)
    db.commit()
    return bank


def _creditor(db, name: str, balance=Decimal("0")) -> Creditor:
    creditor = Creditor(name=name, mobile="9000000000", current_balance=balance)
    db.add(creditor)
    db.commit()
    return creditor


def _vendor(db, pending=Decimal("0"), advance=Decimal("0")) -> Vendor:
    vendor = Vendor(name="Cement Co", contact="9111111111", pending_amount=pending, advance_payment=advance)
    db.add(vendor)
    db.commit()
    return vendor


def test_vendor_overpayment_then_reversal(db):
    vendor = _vendor(db, pending=Decimal("1000"))
    bank = _bank(db, balance=Decimal("5000"))

    payment = ledger_service.record_vendor_payment(
        db=db, vendor_id=vendor.id, amount=Decimal("1500"), payment_mode="bank", bank_account_id=bank.id
    )
    db.commit()

    db.refresh(vendor)
    db.refresh(bank)
    assert vendor.pending_amount == Decimal("0")
    assert vendor.advance_payment == Decimal("500")
    assert bank.current_balance == Decimal("3500")

    ledger_service.reverse_vendor_payment(db=db, payment_id=payment.id)
    db.commit()

    db.refresh(vendor)
    db.refresh(bank)
    assert vendor.pending_amount == Decimal("1000")
    assert vendor.advance_payment == Decimal("0")
    assert bank.current_balance == Decimal("5000")

    entries = db.query(BankLedgerEntry).filter_by(bank_account_id=bank.id).order_by(BankLedgerEntry.id).all()
    assert [e.entry_type for e in entries] == ["debit", "credit"]


def test_expense_debits_bank_and_rolls_up_project(db, factory):
    project = factory.project()
    bank = _bank(db, balance=Decimal("10000"))

    expense = ledger_service.record_expense(
        db=db,
        project_id=project.id,
        name="Diesel",
        amount=Decimal("1200"),
        category="fuel",
        payment_mode="bank",
        bank_account_id=bank.id,
    )
    db.commit()

    db.refresh(bank)
    db.refresh(project)
    assert bank.current_balance == Decimal("8800")
    assert project.expenses == Decimal("1200")

    entry = db.query(BankLedgerEntry).filter_by(ref_id=expense.id, ref_model="Expense").one()
    assert entry.entry_type == "debit"
    assert entry.amount == Decimal("1200")

    ledger_service.reverse_expense(db=db, expense_id=expense.id)
    db.commit()
    db.refresh(bank)
    db.refresh(project)
    assert bank.current_balance == Decimal("10000")
    assert project.expenses == Decimal("0")


def test_expense_on_creditor_raises_what_we_owe(db, factory):
    project = factory.project()
    creditor = _creditor(db, "Local Lender")

    ledger_service.record_expense(
        db=db, project_id=project.id, name="Sand", amount=Decimal("700"), payment_mode="credit", creditor_id=creditor.id
    )
    db.commit()

    db.refresh(creditor)
    assert creditor.current_balance == Decimal("-700")


def test_bank_transfer_moves_money_between_accounts(db):
    source = _bank(db, number="A-1", balance=Decimal("5000"))
    dest = _bank(db, number="B-1", balance=Decimal("1000"))

    debit_row, credit_row = ledger_service.transfer_bank_to_bank(
        db=db, source_bank_id=source.id, dest_bank_id=dest.id, amount=Decimal("2000")
    )
    db.commit()

    db.refresh(source)
    db.refresh(dest)
    assert source.current_balance == Decimal("3000")
    assert dest.current_balance == Decimal("3000")
    assert debit_row.type == "debit" and credit_row.type == "credit"
    assert debit_row.date == credit_row.date
    assert db.query(Transaction).count() == 2


def test_bank_transfer_to_same_account_rejected(db):
    bank = _bank(db, balance=Decimal("100"))
    with pytest.raises(BusinessRuleViolation):
        ledger_service.transfer_bank_to_bank(db=db, source_bank_id=bank.id, dest_bank_id=bank.id, amount=Decimal("10"))


def test_inter_creditor_payment_moves_debt_from_target_to_source(db):
    source = _creditor(db, "Lender A", balance=Decimal("1000"))
    target = _creditor(db, "Lender B", balance=Decimal("2000"))

    payment = ledger_service.record_creditor_payment(
        db=db, creditor_id=target.id, source_creditor_id=source.id, amount=Decimal("500"), remarks="bridge"
    )
    db.commit()

    db.refresh(source)
    db.refresh(target)
    assert source.current_balance == Decimal("1500")
    assert target.current_balance == Decimal("1500")
    assert payment.payment_mode == "creditor"
    assert payment.remarks == "Transfer from Lender A: bridge"

    source_entry = db.query(CreditorLedgerEntry).filter_by(creditor_id=source.id).one()
    target_entry = db.query(CreditorLedgerEntry).filter_by(creditor_id=target.id).one()
    assert source_entry.entry_type == "credit"
    assert source_entry.description == "Funds used for paying Lender B"
    assert target_entry.entry_type == "debit"
    assert target_entry.description == "Payment recd from Lender A"


def test_creditor_payment_from_bank(db):
    bank = _bank(db, balance=Decimal("3000"))
    creditor = _creditor(db, "Lender C", balance=Decimal("2500"))

    ledger_service.record_creditor_payment(
        db=db, creditor_id=creditor.id, amount=Decimal("1000"), payment_mode="bank", bank_account_id=bank.id
    )
    db.commit()

    db.refresh(bank)
    db.refresh(creditor)
    assert bank.current_balance == Decimal("2000")
    assert creditor.current_balance == Decimal("1500")


def test_creditor_cannot_pay_itself(db):
    creditor = _creditor(db, "Lender D")
    with pytest.raises(BusinessRuleViolation):
        ledger_service.record_creditor_payment(
            db=db, creditor_id=creditor.id, source_creditor_id=creditor.id, amount=Decimal("10")
        )


def test_allocate_funds_and_delete_reverts_wallet(db, factory):
    manager = factory.user(name="Ravi", role="sitemanager")
    bank = _bank(db, balance=Decimal("10000"))

    row = ledger_service.allocate_funds(db=db, user_id=manager.id, amount=Decimal("4000"), bank_account_id=bank.id)
    db.commit()

    db.refresh(manager)
    db.refresh(bank)
    assert manager.wallet_balance == Decimal("4000")
    assert bank.current_balance == Decimal("6000")
    assert row.category == "wallet_allocation"
    assert row.description == "Wallet allocation to Ravi"

    ledger_service.delete_transaction(db=db, transaction_id=row.id)
    db.commit()

    db.refresh(manager)
    db.refresh(bank)
    assert manager.wallet_balance == Decimal("0")
    assert bank.current_balance == Decimal("10000")


def test_allocate_funds_requires_site_manager(db, factory):
    admin = factory.user(name="Boss", role="admin")
    with pytest.raises(NotFound):
        ledger_service.allocate_funds(db=db, user_id=admin.id, amount=Decimal("10"))


def test_wallet_debit_refuses_overdraft(db, factory):
    manager = factory.user(name="Meera", role="sitemanager", wallet=Decimal("100"))
    with pytest.raises(InsufficientBalance):
        ledger_service.debit_wallet(db, manager.id, Decimal("100.01"))


def test_labour_payment_debits_wallet_by_final_amount(db, factory):
    from app.models.labour import Labour

    project = factory.project()
    manager = factory.user(name="Anil", role="sitemanager", wallet=Decimal("5000"), sites=[project])
    labour = Labour(
        name="Suresh",
        phone="9222222222",
        daily_wage=Decimal("600"),
        designation="Mason",
        assigned_site_id=project.id,
        pending_payout=Decimal("3000"),
    )
    db.add(labour)
    db.commit()

    payment = ledger_service.record_labour_payment(
        db=db,
        labour_id=labour.id,
        amount=Decimal("3000"),
        deduction=Decimal("200"),
        advance=Decimal("300"),
        paid_by=manager.id,
    )
    db.commit()

    db.refresh(manager)
    db.refresh(labour)
    assert payment.final_amount == Decimal("2500")
    assert manager.wallet_balance == Decimal("2500")
    assert labour.pending_payout == Decimal("0")


def test_reconciliation_reports_and_repairs_drift(db):
    bank = _bank(db, balance=Decimal("1000"))
    ledger_service.add_capital(db=db, amount=Decimal("500"), bank_account_id=bank.id)
    db.commit()

    report = reconciliation_service.reconcile_bank_account(db=db, bank_account_id=bank.id)
    assert report["ok"] is True

    bank.current_balance = Decimal("9999")
    db.commit()

    report = reconciliation_service.reconcile_bank_account(db=db, bank_account_id=bank.id, repair=True)
    db.commit()
    assert report["ok"] is False
    assert report["computed"] == Decimal("1500")

    db.refresh(bank)
    assert bank.current_balance == Decimal("1500")


def test_contractor_payment_from_wallet_then_reversal(db, factory):
    from app.models.contractor import Contractor

    project = factory.project()
    manager = factory.user(name="Kiran", role="sitemanager", wallet=Decimal("2000"), sites=[project])
    contractor = Contractor(name="Shiv Earthworks", mobile="9333333333", pending_amount=Decimal("800"))
    db.add(contractor)
    db.commit()

    payment = ledger_service.record_contractor_payment(
        db=db,
        contractor_id=contractor.id,
        amount=Decimal("1000"),
        project_id=project.id,
        wallet_user_id=manager.id,
    )
    db.commit()

    db.refresh(contractor)
    db.refresh(manager)
    assert contractor.pending_amount == Decimal("0")
    assert contractor.advance_payment == Decimal("200")
    assert manager.wallet_balance == Decimal("1000")
    assert payment.paid_by == manager.id

    ledger_service.reverse_contractor_payment(db=db, payment_id=payment.id)
    db.commit()

    db.refresh(contractor)
    assert contractor.pending_amount == Decimal("800")
    assert contractor.advance_payment == Decimal("0")
