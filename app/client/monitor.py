from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Set

import httpx
from apscheduler.schedulers.base import BaseScheduler
from loguru import logger

from app.client.api import TrackerClient
from app.client.live_alerts import AlertBoard, LiveAlert, diff_presence
from app.client.polling import PollingTask
from app.client.weather_watch import BroadcastProposal, WeatherAlertClassifier, WeatherAutoMode
from app.core.tracking_config import LOCATION_POLL_SECONDS, NOTIFICATION_POLL_SECONDS
from app.schemas.presence import PresenceEntry


class AdminMonitor:
    """
    Staff side: polls the live view, raises presence alerts, and holds weather
    proposals until someone confirms them.
    """

    def __init__(
        self,
        api: TrackerClient,
        board: Optional[AlertBoard] = None,
        scheduler: Optional[BaseScheduler] = None,
        clock: Callable[[], datetime] = datetime.now,
        poll_seconds: float = LOCATION_POLL_SECONDS,
    ):
        self.api = api
        self.clock = clock
        self.board = board or AlertBoard(clock=clock)

        # None until the first successful poll
        self.snapshot: Optional[List[PresenceEntry]] = None
        self.last_refreshed: Optional[datetime] = None
        self.pending_proposals: List[BroadcastProposal] = []

        self._task = PollingTask(
            "admin-locations",
            poll_seconds,
            self.poll_once,
            scheduler=scheduler,
            run_immediately=True,
        )
        self.weather = WeatherAutoMode(
            WeatherAlertClassifier(api.fetch_weather_alerts, clock=clock),
            self._hold_proposal,
            scheduler=scheduler,
        )

    # ---------- lifecycle ----------

    @property
    def is_active(self) -> bool:
        return self._task.is_active

    def start(self) -> None:
        self._task.start()

    def stop(self) -> None:
        self._task.stop()
        self.weather.disable()

    # ---------- live view ----------

    def poll_once(self) -> List[LiveAlert]:
        try:
            current = self.api.fetch_locations()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch student locations | error={e}")
            return []

        now = self.clock()
        alerts = diff_presence(self.snapshot, current, now)
        for alert in alerts:
            self.board.push(alert)

        self.snapshot = current
        self.last_refreshed = now
        return alerts

    def markers(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": entry.id,
                "label": entry.name,
                "position": (entry.lat, entry.lng),
                "trail": [(p.lat, p.lng) for p in entry.history],
                "is_sharing": entry.is_sharing,
                "last_seen": entry.timestamp,
            }
            for entry in self.snapshot or []
        ]

    # ---------- weather proposals ----------

    def _hold_proposal(self, proposal: BroadcastProposal) -> None:
        self.pending_proposals.append(proposal)

    def dismiss_proposal(self, proposal: BroadcastProposal) -> None:
        if proposal in self.pending_proposals:
            self.pending_proposals.remove(proposal)

    def confirm_broadcast(
        self,
        proposal: BroadcastProposal,
        user_ids: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        recipients = user_ids if user_ids is not None else [e.id for e in self.snapshot or []]
        result = self.api.broadcast(recipients, proposal.title, proposal.message, proposal.type)
        self.dismiss_proposal(proposal)
        logger.info(f"Broadcast confirmed | title={proposal.title} recipients={len(recipients)}")
        return result


class InboxWatcher:
    """Reports each unread notification once."""

    def __init__(
        self,
        api: TrackerClient,
        on_new: Callable[[Dict[str, Any]], None],
        scheduler: Optional[BaseScheduler] = None,
        poll_seconds: float = NOTIFICATION_POLL_SECONDS,
    ):
        self.api = api
        self.on_new = on_new
        self._seen: Set[str] = set()
        self._task = PollingTask(
            "inbox",
            poll_seconds,
            self.poll_once,
            scheduler=scheduler,
            run_immediately=True,
        )

    @property
    def is_active(self) -> bool:
        return self._task.is_active

    def start(self) -> None:
        self._task.start()

    def stop(self) -> None:
        self._task.stop()

    def poll_once(self) -> int:
        try:
            rows = self.api.fetch_notifications()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch notifications | error={e}")
            return 0

        fresh = [n for n in rows if n["id"] not in self._seen and not n.get("is_read")]
        for n in reversed(fresh):
            self._seen.add(n["id"])
            self.on_new(n)

        # only ids still in the inbox window can come back
        self._seen &= {n["id"] for n in rows}
        return len(fresh)
