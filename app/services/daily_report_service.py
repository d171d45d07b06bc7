"""Site daily reports.

A report may list the materials consumed that day. Each one is taken from a
single lot with the same rule as a manual stock-out, so one short material
fails the whole report.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.daily_report import DailyReport
from app.models.project import Project
from app.services import inventory_service
from app.services.ledger_service import lock_row

logger = logging.getLogger(__name__)

REPORTS_LIMIT = 50


def progress_remarks(road_progress: list[dict]) -> str:
    return ", ".join(
        f"{rp.get('description') or 'Road'}: {rp['value']} {rp.get('unit') or 'm'}" for rp in road_progress
    )


def submit_daily_report(
    *,
    db: Session,
    project_id: int,
    report_type: str,
    description: str,
    photos: Optional[list[str]] = None,
    road_progress: Optional[list[dict]] = None,
    stock_used: Optional[list[dict]] = None,
    submitted_by: Optional[int] = None,
) -> DailyReport:
    project = lock_row(db, Project, project_id, "Project")
    road_progress = list(road_progress or [])

    report = DailyReport(
        project_id=project.id,
        report_type=report_type,
        description=description,
        photos=list(photos or []),
        road_progress=road_progress,
        submitted_by=submitted_by,
    )
    db.add(report)
    db.flush()

    remarks = f"Road construction: {progress_remarks(road_progress)}"
    for item in stock_used or []:
        out = inventory_service.record_stock_out(
            db=db,
            project_id=project.id,
            material_name=item["material_name"],
            quantity=item["quantity"],
            unit=item.get("unit"),
            used_for=f"Daily Report - {report_type}",
            remarks=remarks,
            recorded_by=submitted_by,
        )
        report.stock_used.append(out)

    db.flush()
    logger.info(
        "daily report submitted",
        extra={
            "daily_report_id": report.id,
            "project_id": project.id,
            "materials": len(report.stock_used),
            "submitted_by": submitted_by,
        },
    )
    return report


def list_daily_reports(db: Session, site_ids: list[int], *, limit: int = REPORTS_LIMIT) -> list[DailyReport]:
    if not site_ids:
        return []
    return (
        db.query(DailyReport)
        .filter(DailyReport.project_id.in_(site_ids))
        .order_by(DailyReport.created_at.desc(), DailyReport.id.desc())
        .limit(limit)
        .all()
    )
