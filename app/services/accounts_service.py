from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.contractor import Contractor
from app.models.expense import Expense
from app.models.labour import Labour
from app.models.payments import ContractorPayment, CreditorPayment, LabourPayment, VendorPayment
from app.models.project import Project
from app.models.stock import Stock
from app.models.transaction import Transaction
from app.models.user import User
from app.models.vendor import Vendor
from app.services.site_scope import get_user

ZERO = Decimal("0")
BANK_MODES = {"bank", "online", "upi", "check"}
FEED_LIMIT = 100


def _sum(values) -> Decimal:
    return sum((Decimal(str(v or 0)) for v in values), ZERO)


def admin_dashboard(db: Session) -> dict:
    total_expenses = db.query(func.coalesce(func.sum(Expense.amount), 0)).scalar()
    projects = db.query(Project).order_by(Project.created_at.desc(), Project.id.desc()).limit(10).all()

    return {
        "total_projects": db.query(func.count(Project.id)).scalar(),
        "running_projects": db.query(func.count(Project.id)).filter(Project.status == "running").scalar(),
        "completed_projects": db.query(func.count(Project.id)).filter(Project.status == "completed").scalar(),
        "total_site_managers": (
            db.query(func.count(User.id))
            .filter(User.role == "sitemanager", User.active.is_(True))
            .scalar()
        ),
        "total_labours": db.query(func.count(Labour.id)).filter(Labour.active.is_(True)).scalar(),
        "total_expenses": Decimal(str(total_expenses or 0)),
        "projects": projects,
    }


def site_dashboard(db: Session, user_id: int) -> dict:
    user = get_user(db, user_id)
    site_ids = user.assigned_site_ids

    labour_count = 0
    if site_ids:
        labour_count = db.query(func.count(Labour.id)).filter(Labour.assigned_site_id.in_(site_ids)).scalar()

    return {
        "user": user,
        "assigned_projects": list(user.assigned_sites),
        "labour_count": labour_count,
        "wallet_balance": user.wallet_balance,
    }


def _between(column, start: Optional[datetime], end: Optional[datetime]):
    clauses = []
    if start is not None:
        clauses.append(column >= start)
    if end is not None:
        clauses.append(column <= end)
    return clauses


def account_feed(
    db: Session,
    *,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    manager_id: Optional[int] = None,
) -> dict:
    """Every money movement normalized into one list, newest first, with totals."""
    feed = []

    manual = (
        db.query(Transaction)
        .filter(*_between(Transaction.date, start, end))
        .order_by(Transaction.date.desc())
        .limit(FEED_LIMIT)
        .all()
    )
    for t in manual:
        feed.append({
            "id": t.id,
            "ref_model": "Transaction",
            "date": t.date,
            "description": t.description,
            "amount": t.amount,
            "type": t.type,
            "category": t.category,
            "payment_mode": (t.payment_mode or "cash").lower(),
        })

    expenses_q = db.query(Expense).filter(*_between(Expense.created_at, start, end))
    if manager_id is not None:
        expenses_q = expenses_q.filter(Expense.added_by == int(manager_id))
    for e in expenses_q.order_by(Expense.created_at.desc()).limit(FEED_LIMIT).all():
        feed.append({
            "id": e.id,
            "ref_model": "Expense",
            "date": e.created_at,
            "description": e.name,
            "amount": e.amount,
            "type": "debit",
            "category": "expense",
            "payment_mode": (e.payment_mode or "cash").lower(),
        })

    vendor_names = dict(db.query(Vendor.id, Vendor.name).all())
    for vp in (
        db.query(VendorPayment)
        .filter(*_between(VendorPayment.date, start, end))
        .order_by(VendorPayment.date.desc())
        .limit(FEED_LIMIT)
        .all()
    ):
        feed.append({
            "id": vp.id,
            "ref_model": "VendorPayment",
            "date": vp.date,
            "description": f"Payment to {vendor_names.get(vp.vendor_id, 'Vendor')}",
            "amount": vp.amount,
            "type": "debit",
            "category": "vendor_payment",
            "payment_mode": (vp.payment_mode or "cash").lower(),
        })

    for cp in (
        db.query(ContractorPayment)
        .filter(*_between(ContractorPayment.date, start, end))
        .order_by(ContractorPayment.date.desc())
        .limit(FEED_LIMIT)
        .all()
    ):
        feed.append({
            "id": cp.id,
            "ref_model": "ContractorPayment",
            "date": cp.date,
            "description": f"Payment to {cp.contractor_name}",
            "amount": cp.amount,
            "type": "debit",
            "category": "contractor_payment",
            "payment_mode": (cp.payment_mode or "cash").lower(),
        })

    for lp in (
        db.query(LabourPayment)
        .filter(*_between(LabourPayment.date, start, end))
        .order_by(LabourPayment.date.desc())
        .limit(FEED_LIMIT)
        .all()
    ):
        feed.append({
            "id": lp.id,
            "ref_model": "LabourPayment",
            "date": lp.date,
            "description": f"Labour payment #{lp.labour_id}",
            "amount": lp.amount,
            "type": "debit",
            "category": "expense",
            "payment_mode": (lp.payment_mode or "cash").lower(),
        })

    for crp in (
        db.query(CreditorPayment)
        .filter(*_between(CreditorPayment.date, start, end))
        .order_by(CreditorPayment.date.desc())
        .limit(FEED_LIMIT)
        .all()
    ):
        feed.append({
            "id": crp.id,
            "ref_model": "CreditorPayment",
            "date": crp.date,
            "description": crp.remarks or "Payment to creditor",
            "amount": crp.amount,
            "type": "debit",
            "category": "creditor_payment",
            "payment_mode": (crp.payment_mode or "cash").lower(),
        })

    feed.sort(key=lambda row: row["date"], reverse=True)

    return {
        "capital": _sum(t.amount for t in manual if t.category == "capital" and t.type == "credit"),
        "total_expenses": _sum(row["amount"] for row in feed if row["type"] == "debit"),
        "total_bank_transactions": _sum(row["amount"] for row in feed if row["payment_mode"] in BANK_MODES),
        "total_cash_transactions": _sum(row["amount"] for row in feed if row["payment_mode"] == "cash"),
        "transactions": feed,
    }


def wallet_feed(db: Session, user_id: int) -> dict:
    """Inflows (allocations) and outflows (site spending) of one manager's wallet."""
    user = get_user(db, user_id)
    rows = []

    for t in (
        db.query(Transaction)
        .filter(
            Transaction.category == "wallet_allocation",
            Transaction.related_model == "User",
            Transaction.related_id == user.id,
        )
        .all()
    ):
        rows.append({
            "id": t.id, "ref_model": "Transaction", "date": t.date, "type": "credit",
            "category": "Allocation", "description": t.description or "Wallet Top-up", "amount": t.amount,
        })

    for e in db.query(Expense).filter(Expense.added_by == user.id).all():
        rows.append({
            "id": e.id, "ref_model": "Expense", "date": e.created_at, "type": "debit",
            "category": "Expense", "description": f"{e.name} ({e.category})", "amount": e.amount,
        })

    for s in db.query(Stock).filter(Stock.added_by == user.id, Stock.payment_status == "paid").all():
        rows.append({
            "id": s.id, "ref_model": "Stock", "date": s.created_at, "type": "debit",
            "category": "Stock Purchase", "description": f"{s.material_name} - {s.quantity} {s.unit}",
            "amount": s.total_price,
        })

    for cp in db.query(ContractorPayment).filter(ContractorPayment.paid_by == user.id).all():
        rows.append({
            "id": cp.id, "ref_model": "ContractorPayment", "date": cp.date, "type": "debit",
            "category": "Contractor Payment", "description": f"Payment to {cp.contractor_name}", "amount": cp.amount,
        })

    vendor_names = dict(db.query(Vendor.id, Vendor.name).all())
    for vp in db.query(VendorPayment).filter(VendorPayment.paid_by == user.id).all():
        rows.append({
            "id": vp.id, "ref_model": "VendorPayment", "date": vp.date, "type": "debit",
            "category": "Vendor Payment", "description": f"Payment to {vendor_names.get(vp.vendor_id, 'Vendor')}",
            "amount": vp.amount,
        })

    for lp in db.query(LabourPayment).filter(LabourPayment.paid_by == user.id).all():
        rows.append({
            "id": lp.id, "ref_model": "LabourPayment", "date": lp.date, "type": "debit",
            "category": "Labour Payment", "description": f"Labour payment #{lp.labour_id}",
            "amount": lp.final_amount,
        })

    rows.sort(key=lambda row: row["date"], reverse=True)
    return {"wallet_balance": user.wallet_balance, "transactions": rows}


def profit_and_loss(db: Session) -> list[dict]:
    total_expenses = Decimal(str(db.query(func.coalesce(func.sum(Expense.amount), 0)).scalar() or 0))
    total_budget = Decimal(str(db.query(func.coalesce(func.sum(Project.budget), 0)).scalar() or 0))
    return [
        {"type": "Revenue", "amount": total_budget, "description": "Total Project Budget"},
        {"type": "Expenses", "amount": total_expenses, "description": "Total Expenses"},
        {"type": "Profit", "amount": total_budget - total_expenses, "description": "Net Profit/Loss"},
    ]


def outstanding_parties(db: Session) -> dict:
    vendor_pending = db.query(func.coalesce(func.sum(Vendor.pending_amount), 0)).scalar()
    contractor_pending = db.query(func.coalesce(func.sum(Contractor.pending_amount), 0)).scalar()
    return {
        "vendor_pending": Decimal(str(vendor_pending or 0)),
        "contractor_pending": Decimal(str(contractor_pending or 0)),
    }
