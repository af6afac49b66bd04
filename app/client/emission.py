from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

import httpx
from loguru import logger

from app.client.api import TrackerClient
from app.client.positioning import PositionError, PositionFix, PositionSource, Subscription
from app.core.tracking_config import HEARTBEAT_INTERVAL, MOVEMENT_THRESHOLD_DEGREES

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class Transmission:
    fix: PositionFix
    at: datetime


class EmissionPolicy:
    """
    Decides whether a fresh fix is worth sending.

    A fix goes out when nothing was sent yet, when it moved more than the
    threshold on either axis, or when the heartbeat interval has elapsed.
    Only successful sends count as the reference point.
    """

    def __init__(
        self,
        movement_threshold: float = MOVEMENT_THRESHOLD_DEGREES,
        heartbeat: timedelta = HEARTBEAT_INTERVAL,
    ):
        self.movement_threshold = movement_threshold
        self.heartbeat = heartbeat
        self.last_sent: Optional[Transmission] = None

    def reason(self, fix: PositionFix, now: datetime) -> Optional[str]:
        last = self.last_sent
        if last is None:
            return "first"

        if (
            abs(fix.lat - last.fix.lat) > self.movement_threshold
            or abs(fix.lng - last.fix.lng) > self.movement_threshold
        ):
            return "moved"

        if now - last.at >= self.heartbeat:
            return "heartbeat"

        return None

    def should_transmit(self, fix: PositionFix, now: datetime) -> bool:
        return self.reason(fix, now) is not None

    def record(self, fix: PositionFix, now: datetime) -> None:
        self.last_sent = Transmission(fix=fix, at=now)

    def reset(self) -> None:
        self.last_sent = None


class TrackingSession:
    """Student side: presence on, watch positions, gate and send samples."""

    def __init__(
        self,
        api: TrackerClient,
        source: PositionSource,
        policy: Optional[EmissionPolicy] = None,
        clock: Clock = datetime.now,
    ):
        self.api = api
        self.source = source
        self.policy = policy or EmissionPolicy()
        self.clock = clock

        self.is_tracking = False
        self.error: Optional[str] = None
        self.last_fix: Optional[PositionFix] = None
        self.last_sync: Optional[datetime] = None
        self._subscription: Optional[Subscription] = None

    def start(self) -> None:
        if self.is_tracking:
            return

        self.error = None
        self.policy.reset()
        self._write_presence(True)

        self.is_tracking = True
        self._subscription = self.source.watch(self._on_fix, self._on_error)
        logger.info("Live sharing started")

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

        self.is_tracking = False
        self._write_presence(False)
        logger.info("Live sharing stopped")

    def _write_presence(self, is_sharing: bool) -> None:
        try:
            self.api.set_sharing(is_sharing)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to update sharing status | is_sharing={is_sharing} error={e}")

    def _on_fix(self, fix: PositionFix) -> None:
        if not self.is_tracking:
            return

        self.last_fix = fix
        now = self.clock()

        reason = self.policy.reason(fix, now)
        if reason is None:
            return

        try:
            self.api.send_location(fix)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to sync location | reason={reason} error={e}")
            return

        self.policy.record(fix, now)
        self.last_sync = now
        logger.debug(f"Location synced | reason={reason} lat={fix.lat} lng={fix.lng}")

    def _on_error(self, err: PositionError) -> None:
        self.error = err.user_message
        logger.warning(f"Positioning failed | code={err.code.value}")
        self.stop()
