from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.authorization import Role, require_role
from app.database import SessionLocal
from app.models.machine import Machine
from app.schemas.common import ApiResponse, ok
from app.schemas.ledger import ExpenseResponse
from app.schemas.machine import MachineCreate, MachineDetailsResponse, MachineResponse, MachineUpdate, RentalDetails
from app.services import machine_service

router = APIRouter(prefix="/admin/machines", tags=["Admin machines"])

admin_only = require_role(Role.ADMIN)


def _machine_fields(payload) -> dict:
    data = payload.model_dump(exclude_unset=True)
    if "photo" in data:
        data["photo_url"] = data.pop("photo")
    return data


@router.get("", response_model=ApiResponse[list[MachineResponse]])
def list_machines(
    status: Optional[str] = Query(None),
    project_id: Optional[int] = Query(None),
    _role=Depends(admin_only),
):
    db = SessionLocal()
    try:
        q = db.query(Machine)
        if status:
            q = q.filter(Machine.status == status)
        if project_id is not None:
            q = q.filter(Machine.project_id == int(project_id))
        rows = q.order_by(Machine.created_at.desc(), Machine.id.desc()).all()
        return ok([MachineResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/{machine_id}", response_model=ApiResponse[MachineDetailsResponse])
def get_machine(machine_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        details = machine_service.get_machine_details(db, machine_id)
        details["machine"] = MachineResponse.model_validate(details["machine"])
        return ok(details)
    finally:
        db.close()


@router.post("", status_code=201, response_model=ApiResponse[MachineResponse])
def create_machine(payload: MachineCreate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = machine_service.create_machine(db=db, data=_machine_fields(payload))
        db.commit()
        db.refresh(row)
        return ok(MachineResponse.model_validate(row))
    finally:
        db.close()


@router.put("/{machine_id}", response_model=ApiResponse[MachineResponse])
def update_machine(machine_id: int, payload: MachineUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = machine_service.update_machine(db=db, machine_id=machine_id, changes=_machine_fields(payload))
        db.commit()
        db.refresh(row)
        return ok(MachineResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/{machine_id}")
def delete_machine(machine_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        machine_service.delete_machine(db=db, machine_id=machine_id)
        db.commit()
        return ok({"id": int(machine_id)}, message="Machine deleted successfully")
    finally:
        db.close()


@router.post("/{machine_id}/return")
def return_machine(machine_id: int, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        result = machine_service.return_rented_machine(
            db=db,
            machine_id=machine_id,
            returned_by=request.state.user_id,
        )
        db.commit()
        return ok(
            {
                "machine": MachineResponse.model_validate(result["machine"]),
                "expense": ExpenseResponse.model_validate(result["expense"]),
                "rental_details": RentalDetails(**result["rental_details"]),
            },
            message="Machine returned and expense recorded successfully",
        )
    finally:
        db.close()
