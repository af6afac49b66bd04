from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import requests
from loguru import logger
from sqlalchemy.orm import Session

from app.core.config import EXPO_PUSH_URL
from app.models.notification import Notification
from app.models.push_token import PushSubscription
from app.schemas.enums import NotificationType


@dataclass
class DispatchResult:
    count: int
    pushed_to: int


# ----------------------------
# Helper: send to Expo
# ----------------------------
def _send_expo_push(messages: List[Dict[str, Any]]) -> dict:
    r = requests.post(EXPO_PUSH_URL, json=messages, timeout=15)
    try:
        data = r.json()
    except ValueError:
        raise RuntimeError(f"Expo returned non-JSON: {r.text[:200]}")

    if r.status_code >= 400:
        raise RuntimeError(f"Expo push error: {data}")

    return data


def _push_messages(
    subscriptions: List[PushSubscription],
    title: str,
    message: str,
    notification_type: NotificationType,
) -> List[Dict[str, Any]]:
    return [
        {
            "to": sub.token,
            "sound": "default",
            "title": title,
            "body": message[:120],
            "data": {"type": notification_type.value},
            "priority": "high",
        }
        for sub in subscriptions
        if sub.token
    ]


def dispatch_notifications(
    db: Session,
    user_ids: List[str],
    title: str,
    message: str,
    notification_type: NotificationType = NotificationType.info,
) -> DispatchResult:
    """
    Store one notification per recipient, then push to their devices.
    Push is best effort: the stored notifications stand even if Expo fails.
    """
    if not user_ids:
        raise ValueError("No recipients specified")

    db.add_all(
        [
            Notification(user_id=uid, title=title, message=message, type=notification_type)
            for uid in user_ids
        ]
    )
    db.commit()

    subscriptions = (
        db.query(PushSubscription)
        .filter(PushSubscription.user_id.in_(user_ids))
        .all()
    )
    messages = _push_messages(subscriptions, title, message, notification_type)

    pushed_to = 0
    if messages:
        try:
            _send_expo_push(messages)
            pushed_to = len(messages)
        except (requests.RequestException, RuntimeError) as e:
            logger.error(f"Push delivery failed | recipients={len(user_ids)} error={e}")

    logger.info(f"Notifications dispatched | count={len(user_ids)} pushed_to={pushed_to}")
    return DispatchResult(count=len(user_ids), pushed_to=pushed_to)
