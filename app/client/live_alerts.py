from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence

from app.core.tracking_config import LIVE_ALERT_TTL
from app.schemas.enums import AlertSeverity
from app.schemas.presence import PresenceEntry


@dataclass(frozen=True)
class LiveAlert:
    user_id: str
    title: str
    message: str
    severity: AlertSeverity
    created_at: datetime
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


def diff_presence(
    previous: Optional[Sequence[PresenceEntry]],
    current: Sequence[PresenceEntry],
    now: datetime,
) -> List[LiveAlert]:
    """
    Alerts for users whose sharing flag flipped between two polls.
    No previous snapshot (None) means no poll happened yet: a baseline that
    yields nothing. An empty snapshot is a real poll and is diffed.
    """
    if previous is None:
        return []

    before: Dict[str, bool] = {entry.id: entry.is_sharing for entry in previous}
    alerts: List[LiveAlert] = []

    for entry in current:
        was_sharing = before.get(entry.id)

        if entry.is_sharing and not was_sharing:
            alerts.append(
                LiveAlert(
                    user_id=entry.id,
                    title="Live session started",
                    message=f"{entry.name} started sharing their location.",
                    severity=AlertSeverity.success,
                    created_at=now,
                )
            )
        elif not entry.is_sharing and was_sharing:
            alerts.append(
                LiveAlert(
                    user_id=entry.id,
                    title="Live session ended",
                    message=f"{entry.name} stopped sharing their location.",
                    severity=AlertSeverity.warning,
                    created_at=now,
                )
            )

    return alerts


class AlertBoard:
    """Visible alerts; each one expires after the ttl unless dismissed first."""

    def __init__(self, ttl: timedelta = LIVE_ALERT_TTL, clock: Callable[[], datetime] = datetime.now):
        self.ttl = ttl
        self.clock = clock
        self._alerts: List[LiveAlert] = []

    def push(self, alert: LiveAlert) -> None:
        self.prune()
        self._alerts.append(alert)

    def dismiss(self, alert_id: str) -> bool:
        before = len(self._alerts)
        self._alerts = [a for a in self._alerts if a.id != alert_id]
        return len(self._alerts) != before

    def prune(self) -> None:
        now = self.clock()
        self._alerts = [a for a in self._alerts if now - a.created_at < self.ttl]

    def visible(self) -> List[LiveAlert]:
        self.prune()
        return list(self._alerts)
