from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from app.core.errors import BusinessRuleViolation, InsufficientBalance, InsufficientStock
from app.models.stock import Stock
from app.models.vendor import Vendor
from app.services import inventory_service


def _lot(db, project_id, qty, *, price="10", created_at=None, material="Cement"):
    lot = inventory_service.add_stock(
        db=db,
        project_id=project_id,
        material_name=material,
        quantity=Decimal(qty),
        unit_price=Decimal(price),
        unit="bag",
    )
    if created_at is not None:
        lot.created_at = created_at
    db.commit()
    return lot


def test_stock_out_takes_from_oldest_lot_that_covers_request(db, factory):
    project = factory.project()
    now = datetime.utcnow()
    old = _lot(db, project.id, "50", created_at=now - timedelta(days=2))
    new = _lot(db, project.id, "30", created_at=now - timedelta(days=1))

    out = inventory_service.record_stock_out(
        db=db, project_id=project.id, material_name="Cement", quantity=Decimal("20"), used_for="Slab"
    )
    db.commit()

    db.refresh(old)
    db.refresh(new)
    assert out.stock_id == old.id
    assert out.unit == "bag"
    assert old.quantity == Decimal("30")
    assert old.total_price == Decimal("300.00")
    assert new.quantity == Decimal("30")


def test_stock_out_never_splits_lots(db, factory):
    project = factory.project()
    now = datetime.utcnow()
    old = _lot(db, project.id, "50", created_at=now - timedelta(days=2))
    new = _lot(db, project.id, "30", created_at=now - timedelta(days=1))

    with pytest.raises(InsufficientStock):
        inventory_service.record_stock_out(
            db=db, project_id=project.id, material_name="Cement", quantity=Decimal("60"), used_for="Column"
        )
    db.rollback()

    db.refresh(old)
    db.refresh(new)
    assert old.quantity == Decimal("50")
    assert new.quantity == Decimal("30")


def test_stock_out_rejects_non_positive_quantity(db, factory):
    project = factory.project()
    _lot(db, project.id, "10")
    with pytest.raises(BusinessRuleViolation):
        inventory_service.record_stock_out(
            db=db, project_id=project.id, material_name="Cement", quantity=Decimal("0"), used_for="x"
        )


def test_credit_lot_charges_vendor_after_advance(db, factory):
    project = factory.project()
    vendor = Vendor(name="Steel Co", contact="9333333333", advance_payment=Decimal("200"))
    db.add(vendor)
    db.commit()

    inventory_service.add_stock(
        db=db,
        project_id=project.id,
        vendor_id=vendor.id,
        material_name="Rebar",
        quantity=Decimal("10"),
        unit_price=Decimal("50"),
    )
    db.commit()

    db.refresh(vendor)
    assert vendor.total_supplied == Decimal("500")
    assert vendor.advance_payment == Decimal("0")
    assert vendor.pending_amount == Decimal("300")


def test_paid_lot_from_wallet_needs_funds(db, factory):
    project = factory.project()
    manager = factory.user(name="Kiran", role="sitemanager", wallet=Decimal("100"), sites=[project])

    with pytest.raises(InsufficientBalance):
        inventory_service.add_stock(
            db=db,
            project_id=project.id,
            material_name="Bricks",
            quantity=Decimal("1000"),
            unit_price=Decimal("8"),
            payment_status="paid",
            wallet_user_id=manager.id,
        )
    db.rollback()
    assert db.query(Stock).count() == 0


def test_update_stock_recomputes_total(db, factory):
    project = factory.project()
    lot = _lot(db, project.id, "10", price="12.50")

    inventory_service.update_stock(db=db, stock_id=lot.id, changes={"quantity": Decimal("4")})
    db.commit()

    db.refresh(lot)
    assert lot.total_price == Decimal("50.00")


def test_materials_summary_and_movements(db, factory):
    project = factory.project()
    _lot(db, project.id, "40")
    _lot(db, project.id, "5", material="Sand")
    inventory_service.record_stock_out(
        db=db, project_id=project.id, material_name="Cement", quantity=Decimal("15"), used_for="Plaster"
    )
    db.commit()

    summary = {row["material_name"]: row["quantity"] for row in inventory_service.materials_summary(db, [project.id])}
    assert Decimal(str(summary["Cement"])) == Decimal("25")
    assert Decimal(str(summary["Sand"])) == Decimal("5")

    page = inventory_service.stock_movements(db, [project.id], limit=2, offset=0)
    assert page["total"] == 3
    assert len(page["rows"]) == 2
