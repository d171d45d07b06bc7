from fastapi import APIRouter, Depends, Query, Request

from app.core.authorization import Role, require_role
from app.database import SessionLocal
from app.schemas.common import ApiResponse, ok
from app.schemas.notification import NotificationResponse
from app.services import notification_service

router = APIRouter(tags=["Notifications"])


def _list(request: Request, unread_only: bool):
    db = SessionLocal()
    try:
        rows = notification_service.list_notifications(db, request.state.user_id, unread_only=unread_only)
        return ok([NotificationResponse.model_validate(r) for r in rows])
    finally:
        db.close()


def _mark(request: Request, notification_id: int):
    db = SessionLocal()
    try:
        row = notification_service.mark_read(
            db=db, recipient_id=request.state.user_id, notification_id=notification_id
        )
        db.commit()
        return ok(NotificationResponse.model_validate(row))
    finally:
        db.close()


def _mark_all(request: Request):
    db = SessionLocal()
    try:
        updated = notification_service.mark_all_read(db=db, recipient_id=request.state.user_id)
        db.commit()
        return ok({"updated": updated})
    finally:
        db.close()


@router.get("/admin/notifications", response_model=ApiResponse[list[NotificationResponse]])
def admin_notifications(request: Request, unread_only: bool = Query(False), _role=Depends(require_role(Role.ADMIN))):
    return _list(request, unread_only)


@router.put("/admin/notifications/read-all")
def admin_mark_all(request: Request, _role=Depends(require_role(Role.ADMIN))):
    return _mark_all(request)


@router.put("/admin/notifications/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
def admin_mark_read(notification_id: int, request: Request, _role=Depends(require_role(Role.ADMIN))):
    return _mark(request, notification_id)


@router.get("/site/notifications", response_model=ApiResponse[list[NotificationResponse]])
def site_notifications(
    request: Request, unread_only: bool = Query(False), _role=Depends(require_role(Role.SITE_MANAGER))
):
    return _list(request, unread_only)


@router.put("/site/notifications/read-all")
def site_mark_all(request: Request, _role=Depends(require_role(Role.SITE_MANAGER))):
    return _mark_all(request)


@router.put("/site/notifications/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
def site_mark_read(notification_id: int, request: Request, _role=Depends(require_role(Role.SITE_MANAGER))):
    return _mark(request, notification_id)
