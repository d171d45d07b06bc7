from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.authorization import Role, require_role
from app.core.errors import NotFound
from app.database import SessionLocal
from app.models.asset import ConsumableGoods, Equipment, LabEquipment
from app.models.labour import Labour
from app.models.project import Project
from app.models.stock import Stock
from app.models.transfer import Transfer
from app.schemas.asset import (
    ConsumableCreate,
    ConsumableResponse,
    ConsumableUpdate,
    EquipmentCreate,
    EquipmentResponse,
    EquipmentUpdate,
)
from app.schemas.common import ApiResponse, ok
from app.schemas.labour import LabourCreate, LabourResponse, LabourUpdate
from app.schemas.stock import StockCreate, StockResponse, StockUpdate
from app.schemas.transfer import TransferCreate, TransferResponse
from app.services import inventory_service, transfer_service

router = APIRouter(prefix="/admin", tags=["Admin inventory"])

admin_only = require_role(Role.ADMIN)

_ASSET_KINDS = {
    "lab-equipment": (LabEquipment, "Lab equipment"),
    "equipment": (Equipment, "Equipment"),
}


def _asset_model(kind: str):
    if kind not in _ASSET_KINDS:
        raise NotFound("Not Found")
    return _ASSET_KINDS[kind]


def _require_project(db, project_id: int) -> None:
    if db.query(Project.id).filter(Project.id == int(project_id)).first() is None:
        raise NotFound("Project not found")


# ---- stocks ----


@router.get("/stocks", response_model=ApiResponse[list[StockResponse]])
def list_stocks(project_id: Optional[int] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(Stock)
        if project_id is not None:
            q = q.filter(Stock.project_id == int(project_id))
        rows = q.order_by(Stock.created_at.desc(), Stock.id.desc()).all()
        return ok([StockResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/stocks", status_code=201, response_model=ApiResponse[StockResponse])
def create_stock(payload: StockCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
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
        )
        db.commit()
        return ok(StockResponse.model_validate(row))
    finally:
        db.close()


@router.put("/stocks/{stock_id}", response_model=ApiResponse[StockResponse])
def update_stock(stock_id: int, payload: StockUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        changes = payload.model_dump(exclude_unset=True)
        if "photo" in changes:
            changes["photo_url"] = changes.pop("photo")
        row = inventory_service.update_stock(db=db, stock_id=stock_id, changes=changes)
        db.commit()
        return ok(StockResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/stocks/{stock_id}")
def delete_stock(stock_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        inventory_service.delete_stock(db=db, stock_id=stock_id)
        db.commit()
        return ok({"id": int(stock_id)}, message="Stock deleted successfully")
    finally:
        db.close()


# ---- transfers ----


@router.get("/transfers", response_model=ApiResponse[list[TransferResponse]])
def list_transfers(type: Optional[str] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(Transfer)
        if type:
            q = q.filter(Transfer.type == type)
        rows = q.order_by(Transfer.created_at.desc(), Transfer.id.desc()).all()
        return ok([TransferResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/transfers", status_code=201, response_model=ApiResponse[TransferResponse])
def create_transfer(payload: TransferCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        variant = transfer_service.build_variant(payload.type, payload.item_id, payload.quantity)
        row = transfer_service.create_transfer(
            db=db,
            variant=variant,
            from_project_id=payload.from_project,
            to_project_id=payload.to_project,
            remarks=payload.remarks,
            requested_by=request.state.user_id,
        )
        db.commit()
        return ok(TransferResponse.model_validate(row), message="Transfer executed successfully")
    finally:
        db.close()


# ---- labours ----


@router.get("/labours", response_model=ApiResponse[list[LabourResponse]])
def list_labours(project_id: Optional[int] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(Labour)
        if project_id is not None:
            q = q.filter(Labour.assigned_site_id == int(project_id))
        rows = q.order_by(Labour.id.asc()).all()
        return ok([LabourResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/labours", status_code=201, response_model=ApiResponse[LabourResponse])
def create_labour(payload: LabourCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        _require_project(db, payload.assigned_site_id)
        row = Labour(**payload.model_dump(), enrolled_by=request.state.user_id)
        db.add(row)
        db.commit()
        db.refresh(row)
        return ok(LabourResponse.model_validate(row))
    finally:
        db.close()


@router.put("/labours/{labour_id}", response_model=ApiResponse[LabourResponse])
def update_labour(labour_id: int, payload: LabourUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Labour).filter(Labour.id == int(labour_id)).first()
        if row is None:
            raise NotFound("Labour not found")
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("assigned_site_id") is not None:
            _require_project(db, changes["assigned_site_id"])
        for field, value in changes.items():
            setattr(row, field, value)
        db.commit()
        db.refresh(row)
        return ok(LabourResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/labours/{labour_id}")
def delete_labour(labour_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Labour).filter(Labour.id == int(labour_id)).first()
        if row is None:
            raise NotFound("Labour not found")
        db.delete(row)
        db.commit()
        return ok({"id": int(labour_id)}, message="Labour deleted successfully")
    finally:
        db.close()


# ---- assets ----


@router.get("/assets/consumable-goods", response_model=ApiResponse[list[ConsumableResponse]])
def list_consumables(project_id: Optional[int] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(ConsumableGoods)
        if project_id is not None:
            q = q.filter(ConsumableGoods.project_id == int(project_id))
        rows = q.order_by(ConsumableGoods.id.asc()).all()
        return ok([ConsumableResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/assets/consumable-goods", status_code=201, response_model=ApiResponse[ConsumableResponse])
def create_consumable(payload: ConsumableCreate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        _require_project(db, payload.project_id)
        row = ConsumableGoods(**payload.model_dump())
        db.add(row)
        db.commit()
        db.refresh(row)
        return ok(ConsumableResponse.model_validate(row))
    finally:
        db.close()


@router.put("/assets/consumable-goods/{item_id}", response_model=ApiResponse[ConsumableResponse])
def update_consumable(item_id: int, payload: ConsumableUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(ConsumableGoods).filter(ConsumableGoods.id == int(item_id)).first()
        if row is None:
            raise NotFound("Consumable goods not found")
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        db.commit()
        db.refresh(row)
        return ok(ConsumableResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/assets/consumable-goods/{item_id}")
def delete_consumable(item_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(ConsumableGoods).filter(ConsumableGoods.id == int(item_id)).first()
        if row is None:
            raise NotFound("Consumable goods not found")
        db.delete(row)
        db.commit()
        return ok({"id": int(item_id)}, message="Consumable goods deleted successfully")
    finally:
        db.close()


@router.get("/assets/{kind}", response_model=ApiResponse[list[EquipmentResponse]])
def list_assets(kind: str, project_id: Optional[int] = Query(None), _role=Depends(admin_only)):
    model, _label = _asset_model(kind)
    db = SessionLocal()
    try:
        q = db.query(model)
        if project_id is not None:
            q = q.filter(model.project_id == int(project_id))
        rows = q.order_by(model.id.asc()).all()
        return ok([EquipmentResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/assets/{kind}", status_code=201, response_model=ApiResponse[EquipmentResponse])
def create_asset(kind: str, payload: EquipmentCreate, _role=Depends(admin_only)):
    model, _label = _asset_model(kind)
    db = SessionLocal()
    try:
        _require_project(db, payload.project_id)
        row = model(**payload.model_dump())
        db.add(row)
        db.commit()
        db.refresh(row)
        return ok(EquipmentResponse.model_validate(row))
    finally:
        db.close()


@router.put("/assets/{kind}/{item_id}", response_model=ApiResponse[EquipmentResponse])
def update_asset(kind: str, item_id: int, payload: EquipmentUpdate, _role=Depends(admin_only)):
    model, label = _asset_model(kind)
    db = SessionLocal()
    try:
        row = db.query(model).filter(model.id == int(item_id)).first()
        if row is None:
            raise NotFound(f"{label} not found")
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        db.commit()
        db.refresh(row)
        return ok(EquipmentResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/assets/{kind}/{item_id}")
def delete_asset(kind: str, item_id: int, _role=Depends(admin_only)):
    model, label = _asset_model(kind)
    db = SessionLocal()
    try:
        row = db.query(model).filter(model.id == int(item_id)).first()
        if row is None:
            raise NotFound(f"{label} not found")
        db.delete(row)
        db.commit()
        return ok({"id": int(item_id)}, message=f"{label} deleted successfully")
    finally:
        db.close()
