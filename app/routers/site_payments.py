from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.authorization import Role, require_role
from app.database import SessionLocal
from app.models.contractor import Contractor, contractor_projects
from app.models.expense import Expense
from app.models.payments import ContractorPayment, VendorPayment
from app.models.vendor import Vendor
from app.schemas.common import ApiResponse, ok
from app.schemas.ledger import (
    ContractorPaymentCreate,
    ContractorPaymentResponse,
    ExpenseCreate,
    ExpenseResponse,
    VendorPaymentCreate,
    VendorPaymentResponse,
)
from app.schemas.party import ContractorResponse, VendorResponse
from app.services import ledger_service, site_scope

router = APIRouter(prefix="/site", tags=["Site payments"])

site_only = require_role(Role.SITE_MANAGER)


@router.get("/expenses", response_model=ApiResponse[list[ExpenseResponse]])
def list_expenses(request: Request, project_id: Optional[int] = Query(None), _role=Depends(site_only)):
    db = SessionLocal()
    try:
        if project_id is not None:
            site_ids = [site_scope.ensure_site(db, request.state.user_id, project_id)]
        else:
            site_ids = site_scope.assigned_site_ids(db, request.state.user_id)
        if not site_ids:
            return ok([])
        rows = (
            db.query(Expense)
            .filter(Expense.project_id.in_(site_ids))
            .order_by(Expense.created_at.desc(), Expense.id.desc())
            .all()
        )
        return ok([ExpenseResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/expenses", status_code=201, response_model=ApiResponse[ExpenseResponse])
def add_expense(payload: ExpenseCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_scope.ensure_site(db, request.state.user_id, payload.project_id)
        row = ledger_service.record_expense(
            db=db,
            project_id=payload.project_id,
            name=payload.name,
            amount=payload.amount,
            category=payload.category,
            payment_mode=payload.payment_mode,
            voucher_number=payload.voucher_number,
            remarks=payload.remarks,
            receipt_url=payload.receipt,
            added_by=request.state.user_id,
            wallet_user_id=request.state.user_id,
        )
        db.commit()
        return ok(ExpenseResponse.model_validate(row))
    finally:
        db.close()


@router.get("/vendors", response_model=ApiResponse[list[VendorResponse]])
def list_vendors(_role=Depends(site_only)):
    db = SessionLocal()
    try:
        rows = db.query(Vendor).order_by(Vendor.name.asc(), Vendor.id.asc()).all()
        return ok([VendorResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/contractors", response_model=ApiResponse[list[ContractorResponse]])
def list_contractors(request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        site_ids = site_scope.assigned_site_ids(db, request.state.user_id)
        if not site_ids:
            return ok([])
        rows = (
            db.query(Contractor)
            .join(contractor_projects, contractor_projects.c.contractor_id == Contractor.id)
            .filter(contractor_projects.c.project_id.in_(site_ids))
            .distinct()
            .order_by(Contractor.id.asc())
            .all()
        )
        return ok([ContractorResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/payments/vendor", status_code=201, response_model=ApiResponse[VendorPaymentResponse])
def pay_vendor(payload: VendorPaymentCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        row = ledger_service.record_vendor_payment(
            db=db,
            vendor_id=payload.vendor_id,
            amount=payload.amount,
            payment_mode=payload.payment_mode,
            remarks=payload.remarks,
            date=payload.date,
            is_advance=payload.is_advance,
            receipt_url=payload.receipt,
            recorded_by=request.state.user_id,
            wallet_user_id=request.state.user_id,
        )
        db.commit()
        return ok(VendorPaymentResponse.model_validate(row), message="Payment recorded successfully")
    finally:
        db.close()


@router.post("/payments/contractor", status_code=201, response_model=ApiResponse[ContractorPaymentResponse])
def pay_contractor(payload: ContractorPaymentCreate, request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        if payload.project_id is not None:
            site_scope.ensure_site(db, request.state.user_id, payload.project_id)
        row = ledger_service.record_contractor_payment(
            db=db,
            contractor_id=payload.contractor_id,
            project_id=payload.project_id,
            amount=payload.amount,
            payment_mode=payload.payment_mode,
            remarks=payload.remarks,
            date=payload.date,
            machine_rent=payload.machine_rent,
            recorded_by=request.state.user_id,
            wallet_user_id=request.state.user_id,
        )
        db.commit()
        return ok(ContractorPaymentResponse.model_validate(row), message="Payment recorded successfully")
    finally:
        db.close()


@router.get("/payments/vendor", response_model=ApiResponse[list[VendorPaymentResponse]])
def list_vendor_payments(request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        rows = (
            db.query(VendorPayment)
            .filter(VendorPayment.paid_by == request.state.user_id)
            .order_by(VendorPayment.date.desc(), VendorPayment.id.desc())
            .all()
        )
        return ok([VendorPaymentResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/payments/contractor", response_model=ApiResponse[list[ContractorPaymentResponse]])
def list_contractor_payments(request: Request, _role=Depends(site_only)):
    db = SessionLocal()
    try:
        rows = (
            db.query(ContractorPayment)
            .filter(ContractorPayment.paid_by == request.state.user_id)
            .order_by(ContractorPayment.date.desc(), ContractorPayment.id.desc())
            .all()
        )
        return ok([ContractorPaymentResponse.model_validate(r) for r in rows])
    finally:
        db.close()
