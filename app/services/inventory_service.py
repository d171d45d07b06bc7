import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import BusinessRuleViolation, InsufficientStock, NotFound
from app.models.project import Project
from app.models.stock import Stock, StockOut
from app.models.vendor import Vendor
from app.services.ledger_service import debit_wallet, lock_row
from app.services.party_balance import settle_charge

logger = logging.getLogger(__name__)


def line_total(quantity: Decimal, unit_price: Decimal) -> Decimal:
    return (Decimal(str(quantity)) * Decimal(str(unit_price))).quantize(Decimal("0.01"))


def add_stock(
    *,
    db: Session,
    project_id: int,
    material_name: str,
    quantity: Decimal,
    unit_price: Decimal,
    unit: str = "kg",
    vendor_id: Optional[int] = None,
    payment_status: str = "credit",
    photo_url: Optional[str] = None,
    remarks: Optional[str] = None,
    added_by: Optional[int] = None,
    wallet_user_id: Optional[int] = None,
) -> Stock:
    """Receive a new lot. Credit lots are charged to the vendor; paid lots by a
    site manager come out of their wallet."""
    if quantity <= 0:
        raise BusinessRuleViolation("Quantity must be greater than zero")

    lock_row(db, Project, project_id, "Project")
    vendor = lock_row(db, Vendor, vendor_id, "Vendor") if vendor_id else None

    total = line_total(quantity, unit_price)

    if payment_status == "paid" and wallet_user_id is not None:
        debit_wallet(db, wallet_user_id, total)

    lot = Stock(
        project_id=int(project_id),
        vendor_id=vendor.id if vendor else None,
        material_name=material_name,
        unit=unit,
        quantity=quantity,
        unit_price=unit_price,
        total_price=total,
        payment_status=payment_status,
        photo_url=photo_url,
        remarks=remarks,
        added_by=added_by,
    )
    db.add(lot)

    if vendor is not None:
        vendor.total_supplied = vendor.total_supplied + total
        if payment_status != "paid":
            settle_charge(vendor, total)

    db.flush()
    logger.info(
        "stock lot received",
        extra={
            "stock_id": lot.id,
            "project_id": lot.project_id,
            "material_name": material_name,
            "quantity": quantity,
            "total_price": total,
        },
    )
    return lot


def update_stock(*, db: Session, stock_id: int, changes: dict) -> Stock:
    lot = lock_row(db, Stock, stock_id, "Stock")

    for field in ("material_name", "unit", "quantity", "unit_price", "vendor_id", "payment_status", "photo_url", "remarks"):
        if field in changes and changes[field] is not None:
            setattr(lot, field, changes[field])

    if lot.quantity < 0:
        raise BusinessRuleViolation("Quantity cannot be negative")

    lot.total_price = line_total(lot.quantity, lot.unit_price)
    return lot


def delete_stock(*, db: Session, stock_id: int) -> None:
    lot = lock_row(db, Stock, stock_id, "Stock")
    db.delete(lot)


def oldest_lot(db: Session, project_id: int, material_name: str, min_quantity: Optional[Decimal] = None) -> Optional[Stock]:
    q = db.query(Stock).filter(
        Stock.project_id == int(project_id),
        Stock.material_name == material_name,
    )
    if min_quantity is not None:
        q = q.filter(Stock.quantity >= min_quantity)

    return q.order_by(Stock.created_at.asc(), Stock.id.asc()).with_for_update().first()


def record_stock_out(
    *,
    db: Session,
    project_id: int,
    material_name: str,
    quantity: Decimal,
    used_for: str,
    unit: Optional[str] = None,
    date: Optional[datetime] = None,
    remarks: Optional[str] = None,
    recorded_by: Optional[int] = None,
) -> StockOut:
    """Consume from the oldest single lot that covers the whole request.

    Lots are never split: two lots of 50 and 30 cannot serve a request of 60.
    """
    if quantity is None or quantity <= 0:
        raise BusinessRuleViolation("Quantity must be greater than zero")

    lot = oldest_lot(db, project_id, material_name, min_quantity=quantity)
    if lot is None:
        raise InsufficientStock(f"Insufficient stock for {material_name}")

    lot.quantity = lot.quantity - quantity
    lot.total_price = line_total(lot.quantity, lot.unit_price)

    row = StockOut(
        project_id=int(project_id),
        stock_id=lot.id,
        material_name=material_name,
        quantity=quantity,
        unit=unit or lot.unit,
        used_for=used_for,
        date=date or datetime.utcnow(),
        remarks=remarks,
        recorded_by=recorded_by,
    )
    db.add(row)
    db.flush()

    logger.info(
        "stock out recorded",
        extra={
            "stock_id": lot.id,
            "project_id": int(project_id),
            "material_name": material_name,
            "quantity": quantity,
            "remaining": lot.quantity,
        },
    )
    return row


def materials_summary(db: Session, project_ids: Iterable[int]) -> list[dict]:
    """Per (project, material) quantity on hand, positive balances only."""
    ids = [int(p) for p in project_ids]
    if not ids:
        return []

    rows = (
        db.query(
            Stock.project_id,
            Project.name,
            Stock.material_name,
            Stock.unit,
            func.sum(Stock.quantity).label("quantity"),
        )
        .join(Project, Project.id == Stock.project_id)
        .filter(Stock.project_id.in_(ids))
        .group_by(Stock.project_id, Project.name, Stock.material_name, Stock.unit)
        .order_by(Stock.project_id.asc(), Stock.material_name.asc())
        .all()
    )

    return [
        {
            "project_id": project_id,
            "project_name": project_name,
            "material_name": material_name,
            "unit": unit,
            "quantity": Decimal(str(quantity)),
        }
        for project_id, project_name, material_name, unit, quantity in rows
        if quantity is not None and Decimal(str(quantity)) > 0
    ]


def stock_movements(
    db: Session,
    project_ids: Iterable[int],
    *,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    """Merged IN (lots received) and OUT (stock-outs) list, newest first."""
    ids = [int(p) for p in project_ids]
    if not ids:
        return {"limit": limit, "offset": offset, "total": 0, "rows": []}

    lots = db.query(Stock).filter(Stock.project_id.in_(ids)).all()
    outs = db.query(StockOut).filter(StockOut.project_id.in_(ids)).all()

    movements = [
        {
            "direction": "IN",
            "id": lot.id,
            "project_id": lot.project_id,
            "material_name": lot.material_name,
            "quantity": lot.quantity,
            "unit": lot.unit,
            "date": lot.created_at,
            "remarks": lot.remarks,
        }
        for lot in lots
    ]
    movements.extend(
        {
            "direction": "OUT",
            "id": out.id,
            "project_id": out.project_id,
            "material_name": out.material_name,
            "quantity": out.quantity,
            "unit": out.unit,
            "date": out.date,
            "remarks": out.used_for,
        }
        for out in outs
    )
    movements.sort(key=lambda m: (m["date"], m["id"]), reverse=True)

    return {
        "limit": limit,
        "offset": offset,
        "total": len(movements),
        "rows": movements[offset:offset + limit],
    }


def get_stock(db: Session, stock_id: int) -> Stock:
    lot = db.query(Stock).filter(Stock.id == int(stock_id)).first()
    if lot is None:
        raise NotFound("Stock not found")
    return lot
