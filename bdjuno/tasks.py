"""Background execution of fallible methods and a simple job scheduler."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Callable

logger = logging.getLogger(__name__)


def watch_method(method: Callable[[], object]) -> threading.Thread:
    """Run method in a background thread, logging any error it raises."""

    def run() -> None:
        try:
            method()
        except Exception:
            logger.exception("error while running %s", getattr(method, "__name__", method))

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread


@dataclass
class _Job:
    job: Callable[[], object]
    interval: timedelta | None = None
    at: time | None = None
    next_run: datetime | None = None

    def schedule_next(self, now: datetime) -> None:
        if self.interval is not None:
            self.next_run = now + self.interval
            return
        assert self.at is not None
        candidate = datetime.combine(now.date(), self.at, tzinfo=now.tzinfo)
        if candidate <= now:
            candidate += timedelta(days=1)
        self.next_run = candidate

    def first_run(self, now: datetime) -> datetime:
        if self.interval is not None:
            return now
        assert self.at is not None
        candidate = datetime.combine(now.date(), self.at, tzinfo=now.tzinfo)
        if candidate < now:
            candidate += timedelta(days=1)
        return candidate


def _parse_time_of_day(value: str) -> time:
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"invalid time of day: {value!r}")


class Scheduler:
    """Runs jobs at fixed intervals or at a fixed time of day."""

    def __init__(self) -> None:
        self._jobs: list[_Job] = []

    def every(self, seconds: float, job: Callable[[], object]) -> None:
        """Run job on the first check and then every given number of seconds."""
        if seconds <= 0:
            raise ValueError("interval must be positive")
        self._jobs.append(_Job(job, interval=timedelta(seconds=seconds)))

    def daily(self, at: str, job: Callable[[], object]) -> None:
        """Run job every day at the given HH:MM or HH:MM:SS time."""
        self._jobs.append(_Job(job, at=_parse_time_of_day(at)))

    def run_pending(self, now: datetime | None = None) -> int:
        """Run every job that is due at now; return how many ran."""
        now = now or datetime.now()
        ran = 0
        for job in self._jobs:
            if job.next_run is None:
                job.next_run = job.first_run(now)
            if job.next_run > now:
                continue
            try:
                job.job()
            except Exception:
                logger.exception("scheduled job failed")
            job.schedule_next(now)
            ran += 1
        return ran