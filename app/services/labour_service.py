import logging
from datetime import date as date_type
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import BusinessRuleViolation
from app.models.labour import Labour, LabourAttendance
from app.services.ledger_service import lock_row

logger = logging.getLogger(__name__)

ATTENDANCE_STATUSES = ("present", "half", "absent")


def wage_for(status: str, daily_wage) -> Decimal:
    wage = Decimal(str(daily_wage or 0))
    if status == "present":
        return wage
    if status == "half":
        return wage / 2
    return Decimal("0")


def mark_attendance(
    *,
    db: Session,
    labour_id: int,
    project_id: int,
    date: date_type,
    status: str,
    marked_by: Optional[int] = None,
) -> LabourAttendance:
    """Record or correct one day's attendance; the labour's pending payout follows."""
    if status not in ATTENDANCE_STATUSES:
        raise BusinessRuleViolation(f"Unknown attendance status: {status}")

    labour = lock_row(db, Labour, labour_id, "Labour")
    if labour.assigned_site_id != int(project_id):
        raise BusinessRuleViolation("Labour is not assigned to this project")

    row = (
        db.query(LabourAttendance)
        .filter(LabourAttendance.labour_id == labour.id, LabourAttendance.date == date)
        .with_for_update()
        .first()
    )

    if row is not None:
        labour.pending_payout = labour.pending_payout - wage_for(row.status, labour.daily_wage)
        row.status = status
        row.project_id = int(project_id)
        row.marked_by = marked_by
    else:
        row = LabourAttendance(
            labour_id=labour.id,
            project_id=int(project_id),
            date=date,
            status=status,
            marked_by=marked_by,
        )
        db.add(row)

    labour.pending_payout = labour.pending_payout + wage_for(status, labour.daily_wage)
    db.flush()

    logger.info(
        "attendance marked",
        extra={"labour_id": labour.id, "date": date, "status": status, "pending_payout": labour.pending_payout},
    )
    return row
