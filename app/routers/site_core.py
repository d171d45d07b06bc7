from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.authorization import Role, require_role
from app.database import SessionLocal
from app.models.labour import Labour, LabourAttendance
from app.models.payments import LabourPayment
from app.schemas.common import ApiResponse, ok
from app.schemas.labour import AttendanceCreate, AttendanceResponse, LabourCreate, LabourResponse, LabourUpdate
from app.schemas.ledger import LabourPaymentCreate, LabourPaymentResponse, WalletResponse
from app.schemas.project import ProjectResponse
from app.schemas.user import UserResponse
from app.services import accounts_service, labour_service, ledger_service, site_scope

router = APIRouter(prefix="/site", tags=["Site"])

site_only = require_role(Role.SITE_MANAGER)


@router.get("/dashboard")
def dashboard(request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        data = accounts_service.site_dashboard(db, request.state.user_id)
        data["user"] = UserResponse.model_validate(data["user"])
        data["assigned_projects"] = [ProjectResponse.model_validate(p) for p in data["assigned_projects"]]
        return ok(data)
    finally:
        db.close()


@router.get("/wallet", response_model=ApiResponse[WalletResponse])
def wallet(request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        return ok(accounts_service.wallet_feed(db, request.state.user_id))
    finally:
        db.close()


# ---- labour ----


@router.get("/labours", response_model=ApiResponse[list[LabourResponse]])
def list_labours(request: Request, project_id: Optional[int] = Query(None), _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_ids = site_scope.assigned_site_ids(db, request.state.user_id)
        if project_id is not None:
            site_ids = [site_scope.ensure_site(db, request.state.user_id, project_id)]
        if not site_ids:
            return ok([])
        rows = (
            db.query(Labour)
            .filter(Labour.assigned_site_id.in_(site_ids))
            .order_by(Labour.id.asc())
            .all()
        )
        return ok([LabourResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/labours", status_code=201, response_model=ApiResponse[LabourResponse])
def enroll_labour(payload: LabourCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_scope.ensure_site(db, request.state.user_id, payload.assigned_site_id)
        row = Labour(**payload.model_dump(), enrolled_by=request.state.user_id)
        db.add(row)
        db.commit()
        db.refresh(row)
        return ok(LabourResponse.model_validate(row))
    finally:
        db.close()


@router.put("/labours/{labour_id}", response_model=ApiResponse[LabourResponse])
def update_labour(labour_id: int, payload: LabourUpdate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        row = db.query(Labour).filter(Labour.id == int(labour_id)).first()
        site_scope.ensure_row_in_scope(db, request.state.user_id, row, "Labour", project_attr="assigned_site_id")

        changes = payload.model_dump(exclude_unset=True)
        if changes.get("assigned_site_id") is not None:
            site_scope.ensure_site(db, request.state.user_id, changes["assigned_site_id"])
        for field, value in changes.items():
            setattr(row, field, value)
        db.commit()
        db.refresh(row)
        return ok(LabourResponse.model_validate(row))
    finally:
        db.close()


@router.post("/labour-attendance", status_code=201, response_model=ApiResponse[AttendanceResponse])
def mark_attendance(payload: AttendanceCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_scope.ensure_site(db, request.state.user_id, payload.project_id)
        labour = db.query(Labour).filter(Labour.id == int(payload.labour_id)).first()
        site_scope.ensure_row_in_scope(db, request.state.user_id, labour, "Labour", project_attr="assigned_site_id")
        row = labour_service.mark_attendance(
            db=db,
            labour_id=payload.labour_id,
            project_id=payload.project_id,
            date=payload.date,
            status=payload.status,
            marked_by=request.state.user_id,
        )
        db.commit()
        return ok(AttendanceResponse.model_validate(row))
    finally:
        db.close()


@router.get("/labour-attendance", response_model=ApiResponse[list[AttendanceResponse]])
def list_attendance(
    request: Request,
    project_id: int = Query(...),
    date: Optional[date_type] = Query(None),
    _role=Depends(site_only),
):
    db = SessionLocal()
    try:
        site_scope.ensure_site(db, request.state.user_id, project_id)
        q = db.query(LabourAttendance).filter(LabourAttendance.project_id == int(project_id))
        if date is not None:
            q = q.filter(LabourAttendance.date == date)
        rows = q.order_by(LabourAttendance.date.desc(), LabourAttendance.id.asc()).all()
        return ok([AttendanceResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/payments/labour", status_code=201, response_model=ApiResponse[LabourPaymentResponse])
def pay_labour(payload: LabourPaymentCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        labour = db.query(Labour).filter(Labour.id == int(payload.labour_id)).first()
        site_scope.ensure_row_in_scope(db, request.state.user_id, labour, "Labour", project_attr="assigned_site_id")

        row = ledger_service.record_labour_payment(
            db=db,
            labour_id=payload.labour_id,
            amount=payload.amount,
            deduction=payload.deduction,
            advance=payload.advance,
            payment_mode=payload.payment_mode,
            remarks=payload.remarks,
            date=payload.date,
            paid_by=request.state.user_id,
        )
        db.commit()
        return ok(LabourPaymentResponse.model_validate(row), message="Payment recorded successfully")
    finally:
        db.close()


@router.get("/payments/labour", response_model=ApiResponse[list[LabourPaymentResponse]])
def list_labour_payments(request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        rows = (
            db.query(LabourPayment)
            .filter(LabourPayment.paid_by == request.state.user_id)
            .order_by(LabourPayment.date.desc(), LabourPayment.id.desc())
            .all()
        )
        return ok([LabourPaymentResponse.model_validate(r) for r in rows])
    finally:
        db.close()
