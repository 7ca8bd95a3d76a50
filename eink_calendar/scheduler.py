"""Hourly refresh loop for the calendar image."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

LOGGER = logging.getLogger(__name__)


def next_hour_boundary(moment: datetime) -> datetime:
    """Return the next ``HH:00:00`` at or after ``moment``.

    A ``moment`` already on the hour is returned as is, so a refresh that
    finishes early never skips its own slot. The tzinfo of ``moment`` is kept.
    """

    truncated = moment.replace(minute=0, second=0, microsecond=0)
    if truncated == moment:
        return moment
    return truncated + timedelta(hours=1)


@dataclass
class Scheduler:
    """Regenerates the calendar at the top of every hour.

    ``time_provider`` and ``sleep_func`` are injectable so tests can drive the
    loop with a fake clock.
    """

    callback: Callable[[], object]
    time_provider: Callable[[], datetime] = datetime.now
    sleep_func: Callable[[float], None] = time.sleep

    def run(
        self,
        *,
        immediate: bool = False,
        iterations: Optional[int] = None,
    ) -> None:
        """Call ``callback`` on each hour boundary.

        Args:
            immediate: Refresh once right away; this counts towards
                ``iterations``.
            iterations: Number of refreshes before returning. ``None`` keeps
                refreshing until interrupted.
        """

        remaining = iterations

        if immediate:
            LOGGER.debug("Refreshing immediately before the first hour boundary")
            self.callback()
            if remaining is not None:
                remaining -= 1
                if remaining <= 0:
                    return

        while remaining is None or remaining > 0:
            target = self.wait_until_next_boundary()
            LOGGER.debug("Hourly refresh due at %s", target.isoformat())
            self.callback()
            if remaining is not None:
                remaining -= 1

    def wait_until_next_boundary(self) -> datetime:
        """Sleep until the coming hour boundary and return it.

        The target is computed after the previous refresh, so a refresh that
        overruns an hour resumes on the following boundary instead of firing
        twice.
        """

        target = next_hour_boundary(self.time_provider())
        while True:
            remaining = (target - self.time_provider()).total_seconds()
            if remaining <= 0:
                return target
            LOGGER.debug("Sleeping %.0f seconds until %s", remaining, target.isoformat())
            self.sleep_func(remaining)
