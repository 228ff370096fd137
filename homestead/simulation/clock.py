"""TickClock — decides when the next production tick is due.

There is no background timer.  The frame loop hands the clock the
current monotonic time once per frame and the clock answers how many
whole intervals have elapsed since the last tick.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class TickClock:
    """Fixed-interval cadence driven by an external time source.

    Attributes:
        interval: Seconds between ticks.
        now: Monotonic time source (seconds).
        last_tick: Time of the most recent tick.
    """

    interval: float = 3.0
    now: Callable[[], float] = time.monotonic
    last_tick: float = field(init=False)

    def __post_init__(self) -> None:
        """Start counting from the moment of creation."""
        if self.interval <= 0:
            msg = f"tick interval must be positive, got {self.interval}"
            raise ValueError(msg)
        self.last_tick = self.now()

    def due(self, current: float | None = None) -> int:
        """Return how many ticks are due and consume them.

        Args:
            current: Time to check against; defaults to ``now()``.

        Returns:
            Number of whole intervals elapsed since the last tick.
        """
        current = self.now() if current is None else current
        ticks = int((current - self.last_tick) // self.interval)
        if ticks > 0:
            self.last_tick += ticks * self.interval
        return ticks

    def progress(self, current: float | None = None) -> float:
        """Return the fraction (0.0-1.0) of the current interval elapsed."""
        current = self.now() if current is None else current
        return min(1.0, max(0.0, (current - self.last_tick) / self.interval))
