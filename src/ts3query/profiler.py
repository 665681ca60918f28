"""Runtime accounting for query connections.

Each adapter owns a scope in the profiler, keyed by the adapter's identity.
A scope accumulates the wall time between start() and stop() calls.
"""

from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass
class Timer:
    """Accumulating stopwatch."""

    name: str
    runtime: float = 0.0
    started_at: float | None = None
    starts: int = 0

    @property
    def is_running(self) -> bool:
        return self.started_at is not None

    def start(self) -> None:
        if self.is_running:
            return
        self.started_at = time.perf_counter()
        self.starts += 1

    def stop(self) -> None:
        if self.started_at is None:
            return
        self.runtime += time.perf_counter() - self.started_at
        self.started_at = None

    def get_runtime(self) -> float:
        """Accumulated seconds, including a currently running interval."""
        if self.started_at is None:
            return self.runtime
        return self.runtime + (time.perf_counter() - self.started_at)


class Profiler:
    """Registry of named timers."""

    def __init__(self) -> None:
        self._timers: dict[str, Timer] = {}

    def init(self, key: str) -> Timer:
        """Create (or reset) the timer for a scope."""
        timer = Timer(name=key)
        self._timers[key] = timer
        return timer

    def get(self, key: str) -> Timer:
        """Get the timer for a scope, creating it on first use."""
        if key not in self._timers:
            return self.init(key)
        return self._timers[key]

    def start(self, key: str) -> None:
        self.get(key).start()

    def stop(self, key: str) -> None:
        self.get(key).stop()

    def get_runtime(self, key: str) -> float:
        timer = self._timers.get(key)
        return timer.get_runtime() if timer else 0.0

    def remove(self, key: str) -> None:
        self._timers.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._timers

