from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.authorization import Role, require_role
from app.core.errors import BusinessRuleViolation, NotFound
from app.database import SessionLocal
from app.models.expense import Expense
from app.models.labour import Labour
from app.models.project import Project
from app.models.user import User
from app.schemas.common import ApiResponse, ok
from app.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services import accounts_service, site_scope

router = APIRouter(prefix="/admin", tags=["Admin"])

admin_only = require_role(Role.ADMIN)


@router.get("/dashboard")
def dashboard(_role=Depends(admin_only)):
    db = SessionLocal()
    try:
        data = accounts_service.admin_dashboard(db)
        data["projects"] = [ProjectResponse.model_validate(p) for p in data["projects"]]
        data.update(accounts_service.outstanding_parties(db))
        return ok(data)
    finally:
        db.close()


@router.get("/reports/pl")
def profit_and_loss(_role=Depends(admin_only)):
    db = SessionLocal()
    try:
        return ok(accounts_service.profit_and_loss(db))
    finally:
        db.close()


# ---- projects ----


@router.get("/projects", response_model=ApiResponse[list[ProjectResponse]])
def list_projects(status: Optional[str] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(Project)
        if status:
            q = q.filter(Project.status == status)
        rows = q.order_by(Project.created_at.desc(), Project.id.desc()).all()
        return ok([ProjectResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.get("/projects/{project_id}", response_model=ApiResponse[ProjectResponse])
def get_project(project_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Project).filter(Project.id == int(project_id)).first()
        if row is None:
            raise NotFound("Project not found")
        return ok(ProjectResponse.model_validate(row))
    finally:
        db.close()


@router.post("/projects", status_code=201, response_model=ApiResponse[ProjectResponse])
def create_project(payload: ProjectCreate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        if payload.assigned_manager_id is not None:
            manager = db.query(User).filter(User.id == payload.assigned_manager_id).first()
            if manager is None:
                raise NotFound("Site manager not found")

        row = Project(**payload.model_dump())
        db.add(row)
        db.flush()
        site_scope.assign_new_project(db, row)
        db.commit()
        db.refresh(row)
        return ok(ProjectResponse.model_validate(row))
    finally:
        db.close()


@router.put("/projects/{project_id}", response_model=ApiResponse[ProjectResponse])
def update_project(project_id: int, payload: ProjectUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Project).filter(Project.id == int(project_id)).with_for_update().first()
        if row is None:
            raise NotFound("Project not found")

        changes = payload.model_dump(exclude_unset=True)
        if "assigned_manager_id" in changes:
            site_scope.move_project_manager(db, row, row.assigned_manager_id, changes["assigned_manager_id"])

        for field, value in changes.items():
            setattr(row, field, value)

        db.commit()
        db.refresh(row)
        return ok(ProjectResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/projects/{project_id}")
def delete_project(project_id: int, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(Project).filter(Project.id == int(project_id)).first()
        if row is None:
            raise NotFound("Project not found")

        db.query(Expense).filter(Expense.project_id == row.id).delete(synchronize_session=False)
        db.query(Labour).filter(Labour.assigned_site_id == row.id).update(
            {Labour.assigned_site_id: None}, synchronize_session=False
        )
        for user in db.query(User).all():
            if row in user.assigned_sites:
                user.assigned_sites.remove(row)

        db.delete(row)
        db.commit()
        return ok({"id": int(project_id)}, message="Project deleted successfully")
    finally:
        db.close()


# ---- users ----


@router.get("/users", response_model=ApiResponse[list[UserResponse]])
def list_users(role: Optional[str] = Query(None), _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        q = db.query(User)
        if role:
            q = q.filter(User.role == role)
        rows = q.order_by(User.id.asc()).all()
        return ok([UserResponse.model_validate(r) for r in rows])
    finally:
        db.close()


@router.post("/users", status_code=201, response_model=ApiResponse[UserResponse])
def create_user(payload: UserCreate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        if db.query(User.id).filter(User.email == payload.email).first() is not None:
            raise BusinessRuleViolation("User with this email already exists")

        row = User(**payload.model_dump())
        db.add(row)
        db.flush()
        if row.role == "sitemanager":
            site_scope.assign_all_projects(db, row)
        db.commit()
        db.refresh(row)
        return ok(UserResponse.model_validate(row))
    finally:
        db.close()


@router.put("/users/{user_id}", response_model=ApiResponse[UserResponse])
def update_user(user_id: int, payload: UserUpdate, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        row = db.query(User).filter(User.id == int(user_id)).first()
        if row is None:
            raise NotFound("User not found")

        changes = payload.model_dump(exclude_unset=True)
        site_ids = changes.pop("assigned_site_ids", None)
        for field, value in changes.items():
            setattr(row, field, value)

        if site_ids is not None:
            projects = db.query(Project).filter(Project.id.in_(site_ids)).all()
            if len(projects) != len(set(site_ids)):
                raise NotFound("Project not found")
            row.assigned_sites = projects

        db.commit()
        db.refresh(row)
        return ok(UserResponse.model_validate(row))
    finally:
        db.close()


@router.delete("/users/{user_id}")
def delete_user(user_id: int, request: Request, _role=Depends(admin_only)):
    db = SessionLocal()
    try:
        if int(user_id) == int(request.state.user_id):
            raise BusinessRuleViolation("You cannot delete your own account")
        row = db.query(User).filter(User.id == int(user_id)).first()
        if row is None:
            raise NotFound("User not found")
        db.delete(row)
        db.commit()
        return ok({"id": int(user_id)}, message="User deleted successfully")
    finally:
        db.close()
