from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from loguru import logger

_SCHEDULER: BackgroundScheduler | None = None


def get_scheduler() -> BackgroundScheduler:
    global _SCHEDULER
    if _SCHEDULER is not None:
        return _SCHEDULER

    _SCHEDULER = BackgroundScheduler(daemon=True)
    return _SCHEDULER


class PollingTask:
    """
    One repeating job with an explicit lifecycle.

    Errors raised by the callable are logged and swallowed so the loop keeps
    running; the next tick is the retry.
    """

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        fn: Callable[[], None],
        scheduler: Optional[BaseScheduler] = None,
        run_immediately: bool = False,
    ):
        self.name = name
        self.interval_seconds = interval_seconds
        self.fn = fn
        self.run_immediately = run_immediately
        self._scheduler = scheduler or get_scheduler()
        self._job = None

    @property
    def is_active(self) -> bool:
        return self._job is not None

    def start(self) -> None:
        if self._job is not None:
            return

        if not self._scheduler.running:
            self._scheduler.start()

        extra = {}
        if self.run_immediately:
            extra["next_run_time"] = datetime.now(timezone.utc)

        self._job = self._scheduler.add_job(
            self.run_now,
            "interval",
            seconds=self.interval_seconds,
            id=f"{self.name}-{uuid.uuid4().hex[:8]}",
            max_instances=1,
            coalesce=True,
            **extra,
        )
        logger.debug(f"Polling task started | task={self.name} every={self.interval_seconds}s")

    def stop(self) -> None:
        if self._job is None:
            return

        job, self._job = self._job, None
        try:
            job.remove()
        except JobLookupError:
            pass
        logger.debug(f"Polling task stopped | task={self.name}")

    def run_now(self) -> None:
        try:
            self.fn()
        except Exception:
            logger.exception(f"Polling task failed | task={self.name}")
