"""GameEngine — the per-frame update and the production tick order.

Owns the World and the tick clock.  Each production tick runs in a
fixed order:

1. Produce resources (capacity phase, then apply phase)
2. Retry planned buildings that may now be affordable
3. Unlock stages whose thresholds are met
4. Autosave, if enabled
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from homestead.catalog.resources import Resource
from homestead.economy.production import production_tick
from homestead.persistence.saves import save_path_for, save_world
from homestead.simulation.clock import TickClock
from homestead.simulation.config import GameConfig
from homestead.world.world import World

logger = logging.getLogger(__name__)


@dataclass
class GameEngine:
    """Drives a World forward on a real-time cadence.

    Attributes:
        config: Loaded game configuration.
        world: The game state being simulated.
        clock: Decides when production ticks are due.
        save_path: Where autosaves go; derived from the world name.
        tick: Number of production ticks run so far.
    """

    config: GameConfig
    world: World | None = None
    clock: TickClock = field(init=False)
    save_path: Path = field(init=False)
    tick: int = 0

    def __post_init__(self) -> None:
        """Create a fresh world if none was given, and start the clock."""
        if self.world is None:
            self.world = World(config=self.config)
        self.clock = TickClock(interval=self.config.tick_interval)
        self.save_path = save_path_for(self.config.save_dir, self.world.name)

    def update(self, now: float | None = None) -> int:
        """Run any production ticks that are due.  Call once per frame.

        Args:
            now: Current monotonic time; defaults to the clock's source.

        Returns:
            Number of ticks run.
        """
        due = self.clock.due(now)
        for _ in range(due):
            self.step()
        if due and self.config.autosave:
            self.save()
        return due

    def step(self) -> None:
        """Run one production tick and its follow-up checks."""
        production_tick(self.world)
        self.world.retry_planned()
        self.world.check_stages()
        self.tick += 1

    def run(self, ticks: int) -> None:
        """Run a fixed number of production ticks immediately."""
        for _ in range(ticks):
            self.step()

    def per_second(self) -> dict[Resource, float]:
        """Return last tick's production as a rate per second."""
        interval = self.config.tick_interval
        return {r: n / interval for r, n in self.world.last_production.items()}

    def save(self) -> bool:
        """Save the world; failures are logged, never raised."""
        try:
            save_world(self.world, self.save_path)
        except OSError:
            logger.exception("Could not save %s", self.save_path)
            return False
        return True
