from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.authorization import Role, require_role
from app.core.errors import NotFound
from app.database import SessionLocal
from app.models.contractor import Contractor
from app.models.payments import ContractorPayment, VendorPayment
from app.models.project import Project
from app.models.vendor import Vendor
from app.schemas.common import ApiResponse, ok
from app.schemas.ledger import (
    ContractorPaymentCreate,
    ContractorPaymentResponse,
    VendorPaymentCreate,
    VendorPaymentResponse,
)
from app.schemas.party import (
    ContractorCreate,
    ContractorResponse,
    ContractorUpdate,
    VendorCreate,
    VendorResponse,
    VendorUpdate,
)
from app.services import ledger_service

router = APIRouter(prefix="/admin", tags=["Admin parties"])

admin_only = require_role(Role.ADMIN)


def _projects(db, ids: list[int]) -> list[Project]:
    rows = db.query(Project).filter(Project.id.in_(ids)).all() if ids else []
    if len(rows) != len(set(ids)):
        raise NotFound("Project not found")
    return rows


# ---- vendors ----


@router.get("/vendors", response_model=ApiResponse[list[VendorResponse]])
def list_vendors(_role=Depends(admin_only)):
    db = SessionLocal()
    try:
        rows = db.query(Vendor).order_by(Vendor.name.asc(), Vendor.id.asc()).all()
        return ok([VendorResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/vendors/payments", response_model=ApiResponse[list[VendorPaymentResponse]])
def list_vendor_payments(vendor_id: Optional[int] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(VendorPayment)
        if vendor_id is not None:
            q = q.filter(VendorPayment.vendor_id == int(vendor_id))
        rows = q.order_by(VendorPayment.date.desc(), VendorPayment.id.desc()).all()
        return ok([VendorPaymentResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/vendors/{vendor_id}", response_model=ApiResponse[VendorResponse])
def get_vendor(vendor_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Vendor).filter(Vendor.id == int(vendor_id)).first()
        if row is None:
            raise NotFound("Vendor not found")
        return ok(VendorResponse.model_validate(row))
    finally:
        db.close()


@router.post("/vendors", status_code=201, response_model=ApiResponse[VendorResponse])
def create_vendor(payload: VendorCreate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = Vendor(**payload.model_dump())
        db.add(row)
        db.commit()
        db.refresh(row)
        return ok(VendorResponse.model_validate(row))
    finally:
        db.close()


@router.put("/vendors/{vendor_id}", response_model=ApiResponse[VendorResponse])
def update_vendor(vendor_id: int, payload: VendorUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Vendor).filter(Vendor.id == int(vendor_id)).first()
        if row is None:
            raise NotFound("Vendor not found")
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        db.commit()
        db.refresh(row)
        return ok(VendorResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/vendors/{vendor_id}")
def delete_vendor(vendor_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Vendor).filter(Vendor.id == int(vendor_id)).first()
        if row is None:
            raise NotFound("Vendor not found")
        db.delete(row)
        db.commit()
        return ok({"id": int(vendor_id)}, message="Vendor deleted successfully")
    finally:
        db.close()


@router.post("/vendors/payments", status_code=201, response_model=ApiResponse[VendorPaymentResponse])
def pay_vendor(payload: VendorPaymentCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = ledger_service.record_vendor_payment(
            db=db,
            vendor_id=payload.vendor_id,
            amount=payload.amount,
            payment_mode=payload.payment_mode,
            bank_account_id=payload.bank_account_id,
            creditor_id=payload.creditor_id,
            remarks=payload.remarks,
            date=payload.date,
            is_advance=payload.is_advance,
            receipt_url=payload.receipt,
            recorded_by=request.state.user_id,
        )
        db.commit()
        return ok(VendorPaymentResponse.model_validate(row), message="Payment recorded successfully")
    finally:
        db.close()


@router.delete("/vendors/payments/{payment_id}")
def delete_vendor_payment(payment_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        ledger_service.reverse_vendor_payment(db=db, payment_id=payment_id)
        db.commit()
        return ok({"id": int(payment_id)}, message="Vendor payment deleted")
    finally:
        db.close()


# ---- contractors ----


@router.get("/contractors", response_model=ApiResponse[list[ContractorResponse]])
def list_contractors(_role=Depends(admin_only)):
    db = SessionLocal()
    try:
        rows = db.query(Contractor).order_by(Contractor.name.asc(), Contractor.id.asc()).all()
        return ok([ContractorResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/contractors/payments", response_model=ApiResponse[list[ContractorPaymentResponse]])
def list_contractor_payments(contractor_id: Optional[int] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(ContractorPayment)
        if contractor_id is not None:
            q = q.filter(ContractorPayment.contractor_id == int(contractor_id))
        rows = q.order_by(ContractorPayment.date.desc(), ContractorPayment.id.desc()).all()
        return ok([ContractorPaymentResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/contractors", status_code=201, response_model=ApiResponse[ContractorResponse])
def create_contractor(payload: ContractorCreate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        data = payload.model_dump()
        project_ids = data.pop("assigned_project_ids")
        row = Contractor(**data)
        row.assigned_projects = _projects(db, project_ids)
        db.add(row)
        db.commit()
        db.refresh(row)
        return ok(ContractorResponse.model_validate(row))
    finally:
        db.close()


@router.put("/contractors/{contractor_id}", response_model=ApiResponse[ContractorResponse])
def update_contractor(contractor_id: int, payload: ContractorUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Contractor).filter(Contractor.id == int(contractor_id)).first()
        if row is None:
            raise NotFound("Contractor not found")
        changes = payload.model_dump(exclude_unset=True)
        project_ids = changes.pop("assigned_project_ids", None)
        for field, value in changes.items():
            setattr(row, field, value)
        if project_ids is not None:
            row.assigned_projects = _projects(db, project_ids)
        db.commit()
        db.refresh(row)
        return ok(ContractorResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/contractors/{contractor_id}")
def delete_contractor(contractor_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Contractor).filter(Contractor.id == int(contractor_id)).first()
        if row is None:
            raise NotFound("Contractor not found")
        db.delete(row)
        db.commit()
        return ok({"id": int(contractor_id)}, message="Contractor deleted successfully")
    finally:
        db.close()


@router.post("/contractors/payments", status_code=201, response_model=ApiResponse[ContractorPaymentResponse])
def pay_contractor(payload: ContractorPaymentCreate, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = ledger_service.record_contractor_payment(
            db=db,
            contractor_id=payload.contractor_id,
            project_id=payload.project_id,
            amount=payload.amount,
            payment_mode=payload.payment_mode,
            bank_account_id=payload.bank_account_id,
            creditor_id=payload.creditor_id,
            remarks=payload.remarks,
            date=payload.date,
            machine_rent=payload.machine_rent,
            recorded_by=request.state.user_id,
        )
        db.commit()
        return ok(ContractorPaymentResponse.model_validate(row), message="Payment recorded successfully")
    finally:
        db.close()


@router.delete("/contractors/payments/{payment_id}")
def delete_contractor_payment(payment_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        ledger_service.reverse_contractor_payment(db=db, payment_id=payment_id)
        db.commit()
        return ok({"id": int(payment_id)}, message="Contractor payment deleted")
    finally:
        db.close()
