from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import Principal, get_current_user
from app.core.db import get_db
from app.core.permissions import require
from app.core.tracking_config import NOTIFICATION_LIST_LIMIT
from app.models.notification import Notification
from app.models.push_token import PushSubscription
from app.schemas.enums import Action
from app.schemas.notifications import (
    BroadcastRequest,
    BroadcastResponse,
    NotificationOut,
    PushSubscribeRequest,
)
from app.services.dispatch import dispatch_notifications

router = APIRouter()


# ----------------------------
# INBOX
# ----------------------------
@router.get("", response_model=list[NotificationOut])
def list_notifications(
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    return (
        db.query(Notification)
        .filter(Notification.user_id == user.id)
        .order_by(Notification.created_at.desc())
        .limit(NOTIFICATION_LIST_LIMIT)
        .all()
    )


@router.put("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    row = db.get(Notification, notification_id)
    if not row:
        raise HTTPException(status_code=404, detail="Notification not found")

    if row.user_id != user.id:
        raise HTTPException(status_code=403, detail="Unauthorized access to notification")

    row.is_read = True
    db.commit()
    db.refresh(row)
    return row


# ----------------------------
# BROADCAST (staff)
# ----------------------------
@router.post("", response_model=BroadcastResponse)
def broadcast(
    payload: BroadcastRequest,
    db: Session = Depends(get_db),
    sender: Principal = Depends(require(Action.broadcast)),
):
    recipients = payload.recipients()
    if not recipients:
        raise HTTPException(status_code=400, detail="No recipients specified")

    logger.info(f"Broadcast | from={sender.id} type={payload.type.value} recipients={len(recipients)}")
    result = dispatch_notifications(db, recipients, payload.title, payload.message, payload.type)
    return BroadcastResponse(success=True, count=result.count, pushed_to=result.pushed_to)


# ----------------------------
# PUSH SUBSCRIPTION
# ----------------------------
@router.post("/subscribe")
def subscribe(
    payload: PushSubscribeRequest,
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    row = db.query(PushSubscription).filter(PushSubscription.token == payload.token).first()
    if row:
        row.user_id = user.id
        row.platform = payload.platform
    else:
        row = PushSubscription(user_id=user.id, token=payload.token, platform=payload.platform)
        db.add(row)

    db.commit()
    logger.info(f"Registered push token | user={user.id}")
    return {"success": True}
