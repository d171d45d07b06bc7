import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.models.notification import Notification
from app.models.user import User

logger = logging.getLogger(__name__)


def notify(
    *,
    db: Session,
    recipient_id: int,
    title: str,
    message: str,
    type: str = "info",
    link: Optional[str] = None,
    related_id: Optional[int] = None,
    related_model: Optional[str] = None,
) -> Notification:
    row = Notification(
        recipient_id=int(recipient_id),
        title=title,
        message=message,
        type=type,
        link=link,
        related_id=related_id,
        related_model=related_model,
    )
    db.add(row)
    return row


def notify_admins(
    *,
    db: Session,
    title: str,
    message: str,
    type: str = "info",
    related_id: Optional[int] = None,
    related_model: Optional[str] = None,
) -> list[Notification]:
    admins = (
        db.query(User)
        .filter(User.role == "admin", User.active.is_(True))
        .order_by(User.id.asc())
        .all()
    )
    rows = [
        notify(
            db=db,
            recipient_id=admin.id,
            title=title,
            message=message,
            type=type,
            related_id=related_id,
            related_model=related_model,
        )
        for admin in admins
    ]
    logger.info("admins notified", extra={"title": title, "recipients": len(rows)})
    return rows


def list_notifications(db: Session, recipient_id: int, *, unread_only: bool = False) -> list[Notification]:
    q = db.query(Notification).filter(Notification.recipient_id == int(recipient_id))
    if unread_only:
        q = q.filter(Notification.read.is_(False))
    return q.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def mark_read(*, db: Session, recipient_id: int, notification_id: int) -> Notification:
    row = (
        db.query(Notification)
        .filter(
            Notification.id == int(notification_id),
            Notification.recipient_id == int(recipient_id),
        )
        .first()
    )
    if row is None:
        raise NotFound("Notification not found")
    row.read = True
    return row


def mark_all_read(*, db: Session, recipient_id: int) -> int:
    return (
        db.query(Notification)
        .filter(
            Notification.recipient_id == int(recipient_id),
            Notification.read.is_(False),
        )
        .update({Notification.read: True}, synchronize_session=False)
    )
