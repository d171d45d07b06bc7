from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from app.core.errors import InvalidState, NotInUse, NotRented
from app.models.expense import Expense
from app.services import machine_service

T0 = datetime(2024, 5, 1, 9, 0, 0)


def _rented(db, project, **overrides):
    data = {
        "name": "Excavator",
        "plate_number": "MH12AB1234",
        "ownership_type": "rented",
        "rental_type": "perDay",
        "assigned_as_rental": True,
        "assigned_rental_rate": Decimal("500"),
        "project_id": project.id,
        "status": "in-use",
        "assigned_at": T0,
    }
    data.update(overrides)
    machine = machine_service.create_machine(db=db, data=data)
    db.commit()
    return machine


def test_pause_window_is_not_billed_on_return(db, factory):
    project = factory.project()
    machine = _rented(db, project)

    machine_service.toggle_pause(db=db, machine_id=machine.id, now=T0 + timedelta(days=2))
    db.commit()
    machine_service.toggle_pause(db=db, machine_id=machine.id, now=T0 + timedelta(days=4))
    db.commit()

    result = machine_service.return_rented_machine(db=db, machine_id=machine.id, now=T0 + timedelta(days=10))
    db.commit()

    assert result["rental_details"]["total_rent"] == Decimal("4000.00")
    assert result["rental_details"]["duration"] == "8 days"
    assert result["machine"].status == "returned"
    assert result["machine"].total_rent_paid == Decimal("4000.00")

    expense = db.query(Expense).one()
    assert expense.category == "machine_rental"
    assert expense.amount == Decimal("4000.00")
    assert expense.name == "Rental return: Excavator [MH12AB1234]"

    db.refresh(project)
    assert project.expenses == Decimal("4000.00")

    last = result["machine"].assignments[-1]
    assert last.duration_minutes == 8 * 1440
    assert last.return_status == "returned"


def test_open_pause_is_closed_at_return(db, factory):
    project = factory.project()
    machine = _rented(db, project, rental_type="perHour", assigned_rental_rate=Decimal("120"))

    machine_service.toggle_pause(db=db, machine_id=machine.id, now=T0 + timedelta(hours=3))
    db.commit()

    result = machine_service.return_rented_machine(db=db, machine_id=machine.id, now=T0 + timedelta(hours=5))
    db.commit()

    assert result["rental_details"]["total_rent"] == Decimal("360.00")
    assert result["machine"].is_rent_paused is False
    assert len(result["machine"].rent_pauses) == 1


def test_only_rented_machines_can_be_returned(db, factory):
    project = factory.project()
    machine = _rented(db, project, ownership_type="own")
    with pytest.raises(NotRented):
        machine_service.return_rented_machine(db=db, machine_id=machine.id)


def test_return_requires_machine_in_use(db, factory):
    project = factory.project()
    machine = _rented(db, project, status="available")
    with pytest.raises(NotInUse):
        machine_service.return_rented_machine(db=db, machine_id=machine.id)


def test_pause_requires_in_use(db, factory):
    project = factory.project()
    machine = _rented(db, project, status="maintenance")
    with pytest.raises(InvalidState):
        machine_service.toggle_pause(db=db, machine_id=machine.id)


def test_returned_machine_is_terminal(db, factory):
    project = factory.project()
    machine = _rented(db, project)
    machine_service.return_rented_machine(db=db, machine_id=machine.id, now=T0 + timedelta(days=1))
    db.commit()

    with pytest.raises(InvalidState):
        machine_service.update_machine(db=db, machine_id=machine.id, changes={"status": "in-use"})


def test_status_cannot_be_set_to_returned_directly(db, factory):
    project = factory.project()
    machine = _rented(db, project)
    with pytest.raises(InvalidState):
        machine_service.update_machine(db=db, machine_id=machine.id, changes={"status": "returned"})


def test_details_estimate_running_rent(db, factory):
    project = factory.project()
    machine = _rented(db, project)

    details = machine_service.get_machine_details(db, machine.id, now=T0 + timedelta(days=1, hours=1))

    calc = details["rent_calculation"]
    assert calc["is_returned"] is False
    assert calc["estimated_total_rent"] == Decimal("1000.00")
    assert calc["type"] == "perDay"


def test_leaving_in_use_closes_assignment(db, factory):
    project = factory.project()
    machine = _rented(db, project)

    machine_service.update_machine(db=db, machine_id=machine.id, changes={"status": "maintenance"})
    db.commit()

    assert machine.status == "maintenance"
    assert machine.assignments[-1].returned_at is not None
    assert machine.assignments[-1].return_status == "maintenance"
