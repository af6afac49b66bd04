from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, List, Mapping, Optional

import httpx
from apscheduler.schedulers.base import BaseScheduler
from loguru import logger

from app.client.polling import PollingTask
from app.core.tracking_config import WEATHER_ALERT_COOLDOWN, WEATHER_POLL_SECONDS
from app.schemas.enums import NotificationType
from app.schemas.weather import WeatherAlertCandidate
from app.services.weather import filter_alerts

FALLBACK_EVENT = "Severe Weather Warning"
FALLBACK_DESCRIPTION = "A severe weather alert has been issued for our area."


@dataclass(frozen=True)
class BroadcastProposal:
    title: str
    message: str
    type: NotificationType = NotificationType.typhoon
    source: Optional[WeatherAlertCandidate] = None


def build_proposal(alert: WeatherAlertCandidate) -> BroadcastProposal:
    return BroadcastProposal(
        title=f"AUTOMATED ALERT: {alert.event or FALLBACK_EVENT}",
        message=(
            f"{alert.description or FALLBACK_DESCRIPTION} "
            "Please stay indoors, keep your phone charged and follow school advisories."
        ),
        type=NotificationType.typhoon,
        source=alert,
    )


class WeatherAlertClassifier:
    """Turns a feed of weather alerts into at most one proposal per cooldown."""

    def __init__(
        self,
        fetch: Callable[[], Iterable[Mapping[str, Any]]],
        cooldown: timedelta = WEATHER_ALERT_COOLDOWN,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.fetch = fetch
        self.cooldown = cooldown
        self.clock = clock
        self.last_triggered_at: Optional[datetime] = None

    def in_cooldown(self, now: datetime) -> bool:
        if self.last_triggered_at is None:
            return False
        return now - self.last_triggered_at < self.cooldown

    def fetch_candidates(self) -> List[WeatherAlertCandidate]:
        try:
            return filter_alerts(list(self.fetch()))
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.warning(f"Weather check failed, skipping cycle | error={e}")
            return []

    def evaluate(self, candidates: List[WeatherAlertCandidate], now: datetime) -> Optional[BroadcastProposal]:
        if not candidates:
            return None

        # first match only; the rest wait for a later cycle
        alert = candidates[0]

        if self.in_cooldown(now):
            logger.debug(f"Weather alert suppressed by cooldown | event={alert.event}")
            return None

        self.last_triggered_at = now
        logger.info(f"Weather alert triggered | event={alert.event}")
        return build_proposal(alert)

    def poll(self) -> Optional[BroadcastProposal]:
        return self.evaluate(self.fetch_candidates(), self.clock())


class WeatherAutoMode:
    """
    Checks right away when enabled, then every interval, until disabled.
    A check still running when the mode is disabled is allowed to finish but
    its result is dropped.
    """

    def __init__(
        self,
        classifier: WeatherAlertClassifier,
        on_proposal: Callable[[BroadcastProposal], None],
        scheduler: Optional[BaseScheduler] = None,
        interval_seconds: float = WEATHER_POLL_SECONDS,
    ):
        self.classifier = classifier
        self.on_proposal = on_proposal
        self._task = PollingTask(
            "weather-auto",
            interval_seconds,
            self.check,
            scheduler=scheduler,
            run_immediately=True,
        )

    @property
    def enabled(self) -> bool:
        return self._task.is_active

    def enable(self) -> None:
        logger.info("Weather auto mode enabled")
        self._task.start()

    def disable(self) -> None:
        self._task.stop()
        logger.info("Weather auto mode disabled")

    def check(self) -> None:
        candidates = self.classifier.fetch_candidates()
        if not self.enabled:
            return

        proposal = self.classifier.evaluate(candidates, self.classifier.clock())
        if proposal is not None:
            self.on_proposal(proposal)
