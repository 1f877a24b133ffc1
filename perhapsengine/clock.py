"""Frame timing: delta time, one-second average and running time."""

from __future__ import annotations

import time
from collections.abc import Callable


class Clock:
    """Measures time between frames; call update() once per frame."""

    def __init__(self, time_source: Callable[[], float] = time.perf_counter) -> None:
        self._time_source = time_source
        self._last: float | None = None
        self._deltas: list[float] = []
        self._frame_timer = 0.0
        self._delta_time = 0.0
        self._avg_delta = 0.0
        self._start_timer = 0.0

    @property
    def delta_time(self) -> float:
        """Seconds the last frame took."""
        return self._delta_time

    @property
    def avg_delta(self) -> float:
        """Average delta time over the previous second."""
        return self._avg_delta

    @property
    def start_timer(self) -> float:
        """Seconds since the first update."""
        return self._start_timer

    def update(self) -> None:
        now = self._time_source()
        started = self._last is not None
        if started:
            self._delta_time = now - self._last
        self._calc_avg_delta()
        if started:
            self._start_timer += self._delta_time
        self._last = now

    def _calc_avg_delta(self) -> None:
        if self._frame_timer >= 1:
            self._frame_timer = 0.0
            self._avg_delta = sum(self._deltas) / len(self._deltas)
            self._deltas.clear()
        else:
            self._deltas.append(self._delta_time)
            self._frame_timer += self._delta_time