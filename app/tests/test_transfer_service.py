from decimal import Decimal

import pytest

from app.core.errors import BusinessRuleViolation, InvalidState, NotFound
from app.models.asset import ConsumableGoods
from app.models.labour import Labour
from app.models.machine import Machine
from app.models.notification import Notification
from app.models.stock import Stock
from app.services import inventory_service, machine_service, transfer_service


def _transfer(db, type, item, from_project, to_project, quantity=None, **kw):
    variant = transfer_service.build_variant(type, item, quantity)
    row = transfer_service.create_transfer(
        db=db, variant=variant, from_project_id=from_project.id, to_project_id=to_project.id, **kw
    )
    db.commit()
    return row


def _stock_total(db, project_id, material):
    return sum(
        (s.quantity for s in db.query(Stock).filter_by(project_id=project_id, material_name=material)),
        Decimal("0"),
    )


def test_stock_transfer_conserves_quantity(db, factory):
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    inventory_service.add_stock(
        db=db, project_id=a.id, material_name="Cement", quantity=Decimal("40"), unit_price=Decimal("350")
    )
    db.commit()

    row = _transfer(db, "stock", "Cement", a, b, quantity="15")

    assert row.status == "approved"
    assert row.quantity == Decimal("15")
    assert _stock_total(db, a.id, "Cement") == Decimal("25")
    assert _stock_total(db, b.id, "Cement") == Decimal("15")

    dest = db.query(Stock).filter_by(project_id=b.id).one()
    assert dest.unit_price == Decimal("350")
    assert dest.total_price == Decimal("5250.00")


def test_stock_transfer_moves_at_most_what_source_has(db, factory):
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    inventory_service.add_stock(
        db=db, project_id=a.id, material_name="Sand", quantity=Decimal("10"), unit_price=Decimal("40")
    )
    db.commit()

    row = _transfer(db, "stock", "Sand", a, b, quantity="25")

    assert row.quantity == Decimal("10")
    assert _stock_total(db, a.id, "Sand") == Decimal("0")
    assert _stock_total(db, b.id, "Sand") == Decimal("10")


def test_repeat_stock_transfer_merges_into_matching_lot(db, factory):
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    inventory_service.add_stock(
        db=db, project_id=a.id, material_name="Gravel", quantity=Decimal("30"), unit_price=Decimal("20")
    )
    db.commit()

    _transfer(db, "stock", "Gravel", a, b, quantity="5")
    _transfer(db, "stock", "Gravel", a, b, quantity="7")

    lots = db.query(Stock).filter_by(project_id=b.id).all()
    assert len(lots) == 1
    assert lots[0].quantity == Decimal("12")


def test_labour_and_machine_transfers_move_assignment(db, factory):
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    labour = Labour(name="Ramesh", phone="9444444444", daily_wage=Decimal("500"), designation="Helper", assigned_site_id=a.id)
    machine = Machine(name="JCB", project_id=a.id, status="in-use")
    db.add_all([labour, machine])
    db.commit()

    _transfer(db, "labour", labour.id, a, b)
    _transfer(db, "machine", str(machine.id), a, b)

    db.refresh(labour)
    db.refresh(machine)
    assert labour.assigned_site_id == b.id
    assert machine.project_id == b.id
    assert machine.status == "available"


def test_consumable_transfer_by_name(db, factory):
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    db.add(ConsumableGoods(project_id=a.id, name="Gloves", quantity=Decimal("100"), unit="pair"))
    db.commit()

    _transfer(db, "consumable-goods", "Gloves", a, b, quantity="30")

    source = db.query(ConsumableGoods).filter_by(project_id=a.id).one()
    dest = db.query(ConsumableGoods).filter_by(project_id=b.id).one()
    assert source.quantity == Decimal("70")
    assert dest.quantity == Decimal("30")


def test_transfer_to_same_project_rejected(db, factory):
    a = factory.project()
    with pytest.raises(BusinessRuleViolation):
        _transfer(db, "labour", 1, a, a)


def test_unknown_transfer_type_rejected():
    with pytest.raises(BusinessRuleViolation):
        transfer_service.build_variant("helicopter", 1)


def test_missing_item_rejected(db, factory):
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    with pytest.raises(NotFound):
        _transfer(db, "stock", "Unobtainium", a, b, quantity="1")


def test_requested_transfer_notifies_admins(db, factory):
    admin = factory.user(name="Owner", role="admin")
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    labour = Labour(name="Mohan", phone="9555555555", daily_wage=Decimal("450"), designation="Helper", assigned_site_id=a.id)
    db.add(labour)
    db.commit()

    row = _transfer(db, "labour", labour.id, a, b, notify=True)

    note = db.query(Notification).filter_by(recipient_id=admin.id).one()
    assert note.title == "New Transfer Request"
    assert note.related_id == row.id
    assert "Site A" in note.message and "Site B" in note.message


@pytest.mark.parametrize("kind", ["labour", "machine", "consumable-goods"])
def test_item_must_be_at_source_project(db, factory, kind):
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    c = factory.project(name="Site C")
    if kind == "labour":
        item = Labour(name="Ramesh", phone="9444444444", daily_wage=Decimal("500"), designation="Helper", assigned_site_id=b.id)
    elif kind == "machine":
        item = Machine(name="Crane", project_id=b.id)
    else:
        item = ConsumableGoods(project_id=b.id, name="Helmets", quantity=Decimal("20"), unit="pcs")
    db.add(item)
    db.commit()
    item_id = item.id

    with pytest.raises(BusinessRuleViolation, match="not at the source project"):
        _transfer(db, kind, str(item_id), a, c, quantity="1")
    db.rollback()

    moved = db.get(type(item), item_id)
    at = moved.assigned_site_id if kind == "labour" else moved.project_id
    assert at == b.id


def test_in_use_rented_machine_must_be_returned_first(db, factory):
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    machine = machine_service.create_machine(
        db=db,
        data={
            "name": "Excavator",
            "project_id": a.id,
            "ownership_type": "rented",
            "assigned_rental_rate": Decimal("1500"),
            "rental_type": "perDay",
            "status": "in-use",
        },
    )
    db.commit()

    with pytest.raises(InvalidState):
        _transfer(db, "machine", str(machine.id), a, b)
    db.rollback()

    db.refresh(machine)
    assert machine.project_id == a.id
    assert machine.status == "in-use"


def test_in_use_own_machine_transfer_closes_assignment(db, factory):
    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    machine = machine_service.create_machine(
        db=db, data={"name": "Roller", "project_id": a.id, "status": "in-use"}
    )
    db.commit()
    machine_service.toggle_pause(db=db, machine_id=machine.id)
    db.commit()

    _transfer(db, "machine", str(machine.id), a, b)

    db.refresh(machine)
    assert machine.project_id == b.id
    assert machine.status == "available"
    assert machine.is_rent_paused is False
    assert machine.rent_paused_at is None
    last = machine.assignments[-1]
    assert last.returned_at is not None
    assert last.return_status == "available"
