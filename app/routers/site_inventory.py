from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import or_

from app.core.authorization import Role, require_role
from app.database import SessionLocal
from app.models.machine import Machine
from app.models.stock import Stock, StockOut
from app.models.transfer import Transfer
from app.schemas.common import ApiResponse, ok
from app.schemas.daily_report import DailyReportCreate, DailyReportResponse
from app.schemas.machine import MachineDetailsResponse, MachineResponse, PauseStateResponse
from app.schemas.stock import (
    MaterialSummary,
    StockCreate,
    StockMovementPage,
    StockOutCreate,
    StockOutResponse,
    StockResponse,
)
from app.schemas.transfer import TransferCreate, TransferResponse
from app.services import daily_report_service, inventory_service, machine_service, site_scope, transfer_service

router = APIRouter(prefix="/site", tags=["Site inventory"])

site_only = require_role(Role.SITE_MANAGER)


def _scoped_ids(db, user_id: int, project_id: Optional[int]) -> list[int]:
    if project_id is not None:
        return [site_scope.ensure_site(db, user_id, project_id)]
    return site_scope.assigned_site_ids(db, user_id)


# ---- stock ----


@router.get("/stocks", response_model=ApiResponse[list[StockResponse]])
def list_stocks(request: Request, project_id: Optional[int] = Query(None), _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_ids = _scoped_ids(db, request.state.user_id, project_id)
        if not site_ids:
            return ok([])
        rows = (
            db.query(Stock)
            .filter(Stock.project_id.in_(site_ids))
            .order_by(Stock.created_at.desc(), Stock.id.desc())
            .all()
        )
        return ok([StockResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/stocks", status_code=201, response_model=ApiResponse[StockResponse])
def add_stock(payload: StockCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_scope.ensure_site(db, request.state.user_id, payload.project_id)
        row = inventory_service.add_stock(
            db=db,
            project_id=payload.project_id,
            vendor_id=payload.vendor_id,
            material_name=payload.material_name,
            unit=payload.unit,
            quantity=payload.quantity,
            unit_price=payload.unit_price,
            payment_status=payload.payment_status,
            photo_url=payload.photo,
            remarks=payload.remarks,
            added_by=request.state.user_id,
            wallet_user_id=request.state.user_id,
        )
        db.commit()
        return ok(StockResponse.model_validate(row))
    finally:
        db.close()


@router.post("/stock-out", status_code=201, response_model=ApiResponse[StockOutResponse])
def stock_out(payload: StockOutCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_scope.ensure_site(db, request.state.user_id, payload.project_id)
        row = inventory_service.record_stock_out(
            db=db,
            project_id=payload.project_id,
            material_name=payload.material_name,
            quantity=payload.quantity,
            unit=payload.unit,
            used_for=payload.used_for,
            date=payload.date,
            remarks=payload.remarks,
            recorded_by=request.state.user_id,
        )
        db.commit()
        return ok(StockOutResponse.model_validate(row), message="Stock out recorded successfully")
    finally:
        db.close()


@router.get("/stock-out", response_model=ApiResponse[list[StockOutResponse]])
def list_stock_outs(request: Request, project_id: Optional[int] = Query(None), _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_ids = _scoped_ids(db, request.state.user_id, project_id)
        if not site_ids:
            return ok([])
        rows = (
            db.query(StockOut)
            .filter(StockOut.project_id.in_(site_ids))
            .order_by(StockOut.date.desc(), StockOut.id.desc())
            .all()
        )
        return ok([StockOutResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/materials", response_model=ApiResponse[list[MaterialSummary]])
def materials(request: Request, project_id: Optional[int] = Query(None), _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_ids = _scoped_ids(db, request.state.user_id, project_id)
        return ok(inventory_service.materials_summary(db, site_ids))
    finally:
        db.close()


@router.get("/stock-movements", response_model=ApiResponse[StockMovementPage])
def stock_movements(
    request: Request,
    project_id: Optional[int] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    _role=Depends(site_only),
):
    db = SessionLocal()
    try:
        site_ids = _scoped_ids(db, request.state.user_id, project_id)
        return ok(inventory_service.stock_movements(db, site_ids, limit=limit, offset=offset))
    finally:
        db.close()


# ---- daily reports ----


@router.post("/daily-reports", status_code=201, response_model=ApiResponse[DailyReportResponse])
def submit_daily_report(payload: DailyReportCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_scope.ensure_site(db, request.state.user_id, payload.project_id)
        row = daily_report_service.submit_daily_report(
            db=db,
            project_id=payload.project_id,
            report_type=payload.report_type,
            description=payload.description,
            photos=payload.photos,
            road_progress=[rp.model_dump(mode="json") for rp in payload.road_progress],
            stock_used=[item.model_dump() for item in payload.stock_used],
            submitted_by=request.state.user_id,
        )
        db.commit()
        return ok(DailyReportResponse.model_validate(row), message="Daily report submitted successfully")
    finally:
        db.close()


@router.get("/daily-reports", response_model=ApiResponse[list[DailyReportResponse]])
def list_daily_reports(request: Request, project_id: Optional[int] = Query(None), _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_ids = _scoped_ids(db, request.state.user_id, project_id)
        rows = daily_report_service.list_daily_reports(db, site_ids)
        return ok([DailyReportResponse.model_validate(r) for r in rows])
    finally:
        db.close()


# ---- transfers ----


@router.get("/transfers", response_model=ApiResponse[list[TransferResponse]])
def list_transfers(request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        user_id = request.state.user_id
        site_ids = site_scope.assigned_site_ids(db, user_id)
        rows = (
            db.query(Transfer)
            .filter(
                or_(
                    Transfer.from_project_id.in_(site_ids),
                    Transfer.to_project_id.in_(site_ids),
                    Transfer.requested_by == user_id,
                )
            )
            .order_by(Transfer.created_at.desc(), Transfer.id.desc())
            .all()
        )
        return ok([TransferResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/transfers", status_code=201, response_model=ApiResponse[TransferResponse])
def request_transfer(payload: TransferCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_scope.ensure_site(db, request.state.user_id, payload.from_project)
        variant = transfer_service.build_variant(payload.type, payload.item_id, payload.quantity)
        row = transfer_service.create_transfer(
            db=db,
            variant=variant,
            from_project_id=payload.from_project,
            to_project_id=payload.to_project,
            remarks=payload.remarks,
            requested_by=request.state.user_id,
            notify=True,
        )
        db.commit()
        return ok(TransferResponse.model_validate(row), message="Transfer executed successfully (Auto-Approved)")
    finally:
        db.close()


# ---- machines ----


@router.get("/machines", response_model=ApiResponse[list[MachineResponse]])
def list_machines(request: Request, project_id: Optional[int] = Query(None), _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_ids = _scoped_ids(db, request.state.user_id, project_id)
        if not site_ids:
            return ok([])
        rows = (
            db.query(Machine)
            .filter(Machine.project_id.in_(site_ids))
            .order_by(Machine.created_at.desc(), Machine.id.desc())
            .all()
        )
        return ok([MachineResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/machines/{machine_id}", response_model=ApiResponse[MachineDetailsResponse])
def machine_details(machine_id: int, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        machine = machine_service.get_machine(db, machine_id)
        site_scope.ensure_row_in_scope(db, request.state.user_id, machine, "Machine")
        details = machine_service.get_machine_details(db, machine_id)
        details["machine"] = MachineResponse.model_validate(details["machine"])
        return ok(details)
    finally:
        db.close()


@router.put("/machines/{machine_id}/pause", response_model=ApiResponse[PauseStateResponse])
def toggle_pause(machine_id: int, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        machine = machine_service.get_machine(db, machine_id)
        site_scope.ensure_row_in_scope(db, request.state.user_id, machine, "Machine")
        row = machine_service.toggle_pause(db=db, machine_id=machine_id)
        db.commit()
        message = "Machine rent paused" if row.is_rent_paused else "Machine rent resumed"
        return ok(PauseStateResponse.model_validate(row), message=message)
    finally:
        db.close()
