from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List

from loguru import logger
from sqlalchemy import exists
from sqlalchemy.orm import Session

from app.core.tracking_config import LOCATION_HISTORY_LIMIT, UNKNOWN_CLASS, UNKNOWN_NAME
from app.models.location_log import LocationLog
from app.models.presence import Presence
from app.models.school import SchoolClass, StudentProfile
from app.models.user import User
from app.schemas.enums import Role
from app.schemas.presence import PresenceEntry, TrailPoint


@dataclass
class UserLocationRecord:
    """Raw material for one map entry, logs newest first."""

    user: Any
    logs: List[Any] = field(default_factory=list)
    is_sharing: bool = False
    profile_class: str | None = None


def _class_name(record: UserLocationRecord) -> str:
    return record.profile_class or record.user.student_class or UNKNOWN_CLASS


def summarize_user(record: UserLocationRecord) -> PresenceEntry:
    current = record.logs[0]
    history = [
        TrailPoint(lat=log.lat, lng=log.lng, timestamp=log.timestamp)
        for log in reversed(record.logs)
    ]

    return PresenceEntry(
        id=str(record.user.id),
        name=record.user.name or UNKNOWN_NAME,
        lat=current.lat,
        lng=current.lng,
        timestamp=current.timestamp,
        class_name=_class_name(record),
        is_sharing=bool(record.is_sharing),
        image=record.user.image,
        school=record.user.school,
        history=history,
    )


def build_presence_view(records: Iterable[UserLocationRecord]) -> list[PresenceEntry]:
    """
    Users without samples cannot be plotted and are left out.
    A record that fails to summarize is skipped, never the whole batch.
    """
    view: list[PresenceEntry] = []

    for record in records:
        if not record.logs:
            continue

        try:
            view.append(summarize_user(record))
        except (ValueError, TypeError, AttributeError) as e:
            user_id = getattr(record.user, "id", None)
            logger.warning(f"Skipping user in presence view | user={user_id} error={e}")

    return view


# ------------------------------------------------------------------
# DB loading
# ------------------------------------------------------------------

def _latest_logs(db: Session, user_id: str, limit: int) -> list[LocationLog]:
    return (
        db.query(LocationLog)
        .filter(LocationLog.user_id == user_id)
        .order_by(LocationLog.timestamp.desc(), LocationLog.id.desc())
        .limit(limit)
        .all()
    )


def load_trackable_records(db: Session, limit: int = LOCATION_HISTORY_LIMIT) -> list[UserLocationRecord]:
    has_logs = exists().where(LocationLog.user_id == User.id)
    users = db.query(User).filter(User.role == Role.STUDENT, has_logs).all()
    if not users:
        return []

    user_ids = [u.id for u in users]

    sharing = {
        p.user_id: p.is_sharing
        for p in db.query(Presence).filter(Presence.user_id.in_(user_ids)).all()
    }

    class_by_user = {
        user_id: class_name
        for user_id, class_name in db.query(StudentProfile.user_id, SchoolClass.name)
        .join(SchoolClass, SchoolClass.id == StudentProfile.class_id)
        .filter(StudentProfile.user_id.in_(user_ids))
        .all()
    }

    return [
        UserLocationRecord(
            user=u,
            logs=_latest_logs(db, u.id, limit),
            is_sharing=sharing.get(u.id, False),
            profile_class=class_by_user.get(u.id),
        )
        for u in users
    ]


def aggregate_presence(db: Session, limit: int = LOCATION_HISTORY_LIMIT) -> list[PresenceEntry]:
    view = build_presence_view(load_trackable_records(db, limit))
    logger.debug(f"Presence view built | users={len(view)}")
    return view
