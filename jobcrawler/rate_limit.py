"""Global request pacing for the crawl loop."""

from __future__ import annotations

import time


class RequestPacer:
    """Pause a fixed number of seconds after every processed queue entry.

    The pace is global, not per domain: one spider never has two fetches
    closer together than *interval* seconds.
    """

    def __init__(self, interval: float) -> None:
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self._interval = float(interval)

    @property
    def interval(self) -> float:
        return self._interval

    def wait(self) -> None:
        if self._interval > 0:
            time.sleep(self._interval)
