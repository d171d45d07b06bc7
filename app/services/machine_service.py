import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidState, NotFound, NotInUse, NotRented
from app.models.contractor import Contractor
from app.models.machine import Machine, MachineAssignment, MachineRentPause
from app.models.project import Project
from app.services.ledger_service import lock_row, record_expense
from app.services.rental_billing import machine_rate, quote_machine

logger = logging.getLogger(__name__)


MACHINE_STATUSES = ("available", "in-use", "maintenance", "returned")

_EDITABLE_FIELDS = (
    "name",
    "model",
    "plate_number",
    "category",
    "quantity",
    "ownership_type",
    "vendor_name",
    "machine_category",
    "photo_url",
    "per_day_expense",
    "assigned_as_rental",
    "assigned_rental_rate",
    "rental_type",
    "project_id",
    "assigned_to_contractor_id",
)


def _naive_utc(dt: Optional[datetime]) -> datetime:
    if dt is None:
        return datetime.utcnow()
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _start_assignment(machine: Machine, assigned_at: Optional[datetime]) -> MachineAssignment:
    if machine.assigned_to_contractor_id:
        target_id, target_model = machine.assigned_to_contractor_id, "Contractor"
    else:
        target_id, target_model = machine.project_id, "Project"

    machine.status = "in-use"
    machine.assigned_at = assigned_at or datetime.utcnow()
    machine.returned_at = None
    machine.is_rent_paused = False
    machine.rent_paused_at = None

    row = MachineAssignment(
        assigned_to_id=target_id,
        assigned_model=target_model,
        assigned_at=machine.assigned_at,
        initial_status="in-use",
        rent_type=machine.rental_type,
        rate=machine_rate(machine),
    )
    machine.assignments.append(row)
    return row


def end_assignment(machine: Machine, new_status: str, now: Optional[datetime] = None) -> None:
    """Leave in-use: close the open assignment and drop any pause state."""
    if machine.status == "in-use" and machine.assignments:
        last = machine.assignments[-1]
        if last.returned_at is None:
            last.returned_at = now or datetime.utcnow()
            last.return_status = new_status
    machine.status = new_status
    machine.is_rent_paused = False
    machine.rent_paused_at = None


def _check_targets(db: Session, project_id: Optional[int], contractor_id: Optional[int]) -> None:
    if project_id is not None and db.query(Project.id).filter(Project.id == int(project_id)).first() is None:
        raise NotFound("Project not found")
    if contractor_id is not None and db.query(Contractor.id).filter(Contractor.id == int(contractor_id)).first() is None:
        raise NotFound("Contractor not found")


def create_machine(*, db: Session, data: dict) -> Machine:
    data = dict(data)
    status = data.pop("status", None) or "available"
    assigned_at = data.pop("assigned_at", None)

    if status not in MACHINE_STATUSES:
        raise InvalidState(f"Unknown machine status: {status}")
    _check_targets(db, data.get("project_id"), data.get("assigned_to_contractor_id"))

    machine = Machine(**{k: v for k, v in data.items() if k in _EDITABLE_FIELDS and v is not None})
    machine.status = "available"
    db.add(machine)

    if status == "in-use":
        _start_assignment(machine, _naive_utc(assigned_at) if assigned_at else None)
    else:
        machine.status = status

    db.flush()
    logger.info("machine created", extra={"machine_id": machine.id, "status": machine.status})
    return machine


def update_machine(*, db: Session, machine_id: int, changes: dict) -> Machine:
    machine = lock_row(db, Machine, machine_id, "Machine")
    changes = dict(changes)
    new_status = changes.pop("status", None)
    assigned_at = changes.pop("assigned_at", None)

    _check_targets(db, changes.get("project_id"), changes.get("assigned_to_contractor_id"))

    for field in _EDITABLE_FIELDS:
        if field in changes:
            setattr(machine, field, changes[field])

    if new_status is None or new_status == machine.status:
        return machine

    if new_status not in MACHINE_STATUSES:
        raise InvalidState(f"Unknown machine status: {new_status}")
    if machine.status == "returned":
        raise InvalidState("Returned machines cannot change status")
    if new_status == "returned":
        raise InvalidState("Use the return operation to return a machine")

    if new_status == "in-use":
        _start_assignment(machine, _naive_utc(assigned_at) if assigned_at else None)
    else:
        end_assignment(machine, new_status)

    logger.info("machine status changed", extra={"machine_id": machine.id, "status": machine.status})
    return machine


def delete_machine(*, db: Session, machine_id: int) -> None:
    machine = lock_row(db, Machine, machine_id, "Machine")
    db.delete(machine)


def toggle_pause(*, db: Session, machine_id: int, now: Optional[datetime] = None) -> Machine:
    machine = lock_row(db, Machine, machine_id, "Machine")
    if machine.status != "in-use":
        raise InvalidState("Rent can only be paused while the machine is in use")

    now = _naive_utc(now)

    if machine.is_rent_paused:
        paused_at = machine.rent_paused_at or now
        machine.rent_pauses.append(
            MachineRentPause(
                paused_at=paused_at,
                resumed_at=now,
                duration_hours=Decimal(str((now - paused_at).total_seconds() / 3600)).quantize(Decimal("0.0001")),
            )
        )
        machine.is_rent_paused = False
        machine.rent_paused_at = None
    else:
        machine.is_rent_paused = True
        machine.rent_paused_at = now

    logger.info(
        "machine rent pause toggled",
        extra={"machine_id": machine.id, "is_rent_paused": machine.is_rent_paused},
    )
    return machine


def get_machine(db: Session, machine_id: int) -> Machine:
    machine = db.query(Machine).filter(Machine.id == int(machine_id)).first()
    if machine is None:
        raise NotFound("Machine not found")
    return machine


def get_machine_details(db: Session, machine_id: int, *, now: Optional[datetime] = None) -> dict:
    machine = get_machine(db, machine_id)
    quote = quote_machine(machine, now=now or datetime.utcnow())
    return {
        "machine": machine,
        "rent_calculation": {
            "start_date": quote.start,
            "end_date": quote.end,
            "is_returned": machine.returned_at is not None,
            "total_duration_hours": quote.total_hours,
            "total_paused_hours": quote.paused_hours,
            "billable_hours": quote.billable_hours,
            "rate": quote.rate,
            "type": quote.rental_type,
            "estimated_total_rent": quote.total_rent,
        },
    }


def return_rented_machine(
    *,
    db: Session,
    machine_id: int,
    returned_by: Optional[int] = None,
    now: Optional[datetime] = None,
) -> dict:
    machine = lock_row(db, Machine, machine_id, "Machine")
    if machine.ownership_type != "rented":
        raise NotRented("Only rented equipment can be returned")
    if machine.status != "in-use":
        raise NotInUse("Machine is not currently in use")

    now = _naive_utc(now)

    # an open pause ends at the return instant
    if machine.is_rent_paused and machine.rent_paused_at is not None:
        machine.rent_pauses.append(
            MachineRentPause(
                paused_at=machine.rent_paused_at,
                resumed_at=now,
                duration_hours=Decimal(str((now - machine.rent_paused_at).total_seconds() / 3600)).quantize(
                    Decimal("0.0001")
                ),
            )
        )
    machine.is_rent_paused = False
    machine.rent_paused_at = None
    machine.returned_at = now

    quote = quote_machine(machine, now=now)

    machine.status = "returned"
    machine.total_rent_paid = quote.total_rent

    if machine.assignments:
        last = machine.assignments[-1]
        last.returned_at = now
        last.return_status = "returned"
        last.total_rent = quote.total_rent
        last.duration_minutes = quote.duration_minutes

    unit = "hr" if quote.rental_type == "perHour" else "day"
    label = f"{machine.name} [{machine.plate_number}]" if machine.plate_number else machine.name
    expense = record_expense(
        db=db,
        project_id=machine.project_id,
        name=f"Rental return: {label}",
        amount=quote.total_rent,
        category="machine_rental",
        remarks=(
            f"{quote.duration_display} @ {quote.rate}/{unit}. "
            f"Assigned: {quote.start:%Y-%m-%d %H:%M}, Returned: {quote.end:%Y-%m-%d %H:%M}"
        ),
        added_by=returned_by,
        created_at=now,
    )

    logger.info(
        "rented machine returned",
        extra={
            "machine_id": machine.id,
            "project_id": machine.project_id,
            "total_rent": quote.total_rent,
            "billable_hours": quote.billable_hours,
        },
    )
    return {
        "machine": machine,
        "expense": expense,
        "rental_details": {
            "duration": quote.duration_display,
            "rate": quote.rate,
            "total_rent": quote.total_rent,
        },
    }
