"""Visibility rules for site managers.

A site manager may only observe or mutate rows whose owning project is in
their ``assigned_sites``. Admin handlers skip these checks.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFound, ScopeViolation
from app.models.project import Project
from app.models.user import User

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise NotFound("User not found")
    return user


def assigned_site_ids(db: Session, user_id: int) -> list[int]:
    return get_user(db, user_id).assigned_site_ids


def ensure_site(db: Session, user_id: int, project_id: Optional[int]) -> int:
    if project_id is None:
        raise ScopeViolation("Project is required")
    if int(project_id) not in assigned_site_ids(db, user_id):
        raise ScopeViolation("Access denied. Project not assigned to you.")
    return int(project_id)


def ensure_row_in_scope(db: Session, user_id: int, row, label: str, project_attr: str = "project_id"):
    if row is None:
        raise NotFound(f"{label} not found")
    if getattr(row, project_attr, None) not in assigned_site_ids(db, user_id):
        raise ScopeViolation("Access denied. Project not assigned to you.")
    return row


def assign_new_project(db: Session, project: Project) -> None:
    """A new project is visible to every active site manager and its own manager."""
    managers = (
        db.query(User)
        .filter(User.role == "sitemanager", User.active.is_(True))
        .all()
    )
    if project.assigned_manager_id is not None:
        own = db.query(User).filter(User.id == project.assigned_manager_id).first()
        if own is not None and own not in managers:
            managers.append(own)

    for manager in managers:
        if project not in manager.assigned_sites:
            manager.assigned_sites.append(project)

    logger.info("project assigned", extra={"project_id": project.id, "managers": len(managers)})


def assign_all_projects(db: Session, user: User) -> None:
    for project in db.query(Project).order_by(Project.id.asc()).all():
        if project not in user.assigned_sites:
            user.assigned_sites.append(project)


def move_project_manager(db: Session, project: Project, old_manager_id: Optional[int], new_manager_id: Optional[int]) -> None:
    if old_manager_id == new_manager_id:
        return

    if old_manager_id is not None:
        old = db.query(User).filter(User.id == old_manager_id).first()
        if old is not None and project in old.assigned_sites:
            old.assigned_sites.remove(project)

    if new_manager_id is not None:
        new = db.query(User).filter(User.id == new_manager_id).first()
        if new is None:
            raise NotFound("Site manager not found")
        if project not in new.assigned_sites:
            new.assigned_sites.append(project)
