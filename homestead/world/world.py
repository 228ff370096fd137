"""World — every owned parcel plus the shared ledger and stages.

The World is the single owner of mutable game state.  It buys new land
along the frontier, routes player edits to the right parcel, and keeps
each parcel's ``outside_counts`` in step with its neighbours through a
worklist:

- ``Dirty.LOCAL_COUNTS``: a parcel's own counts changed, so refresh the
  outside counts of the parcels around it.
- ``Dirty.NEIGHBOR_COUNTS``: a parcel's outside counts changed, so sweep
  it for buildings that lost their requirements.

A parcel only goes back on the queue as ``LOCAL_COUNTS`` after its sweep
demolished something, so the worklist drains after at most one round per
building.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from homestead.catalog.buildings import GROUND, Building, BuildingType, derive
from homestead.catalog.resources import Resource
from homestead.catalog.stages import Stage, default_stages
from homestead.economy.ledger import Capacity, Ledger
from homestead.economy.production import compute_capacity
from homestead.simulation.config import GameConfig
from homestead.world.parcel import Parcel, merge_counts
from homestead.world.pos import Pos

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

ORIGIN = Pos(0, 0)


class Dirty(Enum):
    """Why a parcel is waiting in the propagation worklist."""

    LOCAL_COUNTS = auto()
    NEIGHBOR_COUNTS = auto()


@dataclass
class World:
    """All state of one game.

    Attributes:
        name: Save name.
        config: Loaded game configuration.
        parcels: Owned parcels keyed by world position.
        ledger: Resources held by the player.
        stages: Progression gates, in order.
        last_production: Output of the most recent production tick.
    """

    name: str = "New World"
    config: GameConfig = field(default_factory=GameConfig)
    parcels: dict[Pos, Parcel] = field(default_factory=dict)
    ledger: Ledger = field(init=False)
    stages: list[Stage] = field(default_factory=default_stages)
    last_production: dict[Resource, int] = field(default_factory=dict)
    _frontier: set[Pos] = field(init=False, repr=False, default_factory=set)

    def __post_init__(self) -> None:
        """Grant starting resources and the first parcel."""
        self.ledger = Ledger(self.config.starting_ledger())
        if not self.parcels:
            self.parcels[ORIGIN] = self.new_parcel(ORIGIN)
        self.rebuild_caches()

    def new_parcel(self, pos: Pos) -> Parcel:
        """Create a bare parcel configured for this world."""
        return Parcel(
            position=pos,
            refund_ratio=self.config.refund_ratio,
            tile_scope=self.config.tile_scope,
            capacity_source=self.refresh_capacity,
        )

    def parcel_at(self, pos: Pos) -> Parcel | None:
        """Return the owned parcel at *pos*, if any."""
        return self.parcels.get(pos)

    def rebuild_caches(self) -> None:
        """Recompute every cached count, the frontier and capacity."""
        for parcel in self.parcels.values():
            parcel.recount()
        for pos, parcel in self.parcels.items():
            parcel.outside_counts = self._outside_counts(pos)
        self._update_frontier()
        self.refresh_capacity()

    def refresh_capacity(self) -> Capacity:
        """Recompute storage capacity and store it on the ledger."""
        capacity = compute_capacity(self.parcels.values(), self.config.base_storage)
        self.ledger.capacity = capacity
        return capacity

    # -- Land ------------------------------------------------------------

    def frontier(self) -> Iterator[Pos]:
        """Yield unowned positions next to an owned parcel."""
        yield from sorted(self._frontier)

    def land_cost(self, pos: Pos) -> int:
        """Return the tax price of the parcel at *pos*."""
        return (pos.chebyshev() + 1) ** 3 * self.config.land_cost_base

    def can_purchase(self, pos: Pos) -> bool:
        """Return True if *pos* is on the frontier and affordable."""
        return pos in self._frontier and self.ledger[Resource.TAX] >= self.land_cost(pos)

    def affordable_frontier(self) -> list[Pos]:
        """Return the frontier positions the ledger can pay for now."""
        return [pos for pos in self.frontier() if self.can_purchase(pos)]

    def purchase(self, pos: Pos) -> bool:
        """Buy the frontier parcel at *pos* with tax.

        Returns:
            True if the parcel was bought; False if *pos* is not on the
            frontier or the ledger lacks the tax.
        """
        if pos not in self._frontier:
            logger.debug("Cannot buy %s: not on the frontier", pos)
            return False
        price = self.land_cost(pos)
        if not self.ledger.debit(((Resource.TAX, price),)):
            logger.debug("Cannot buy %s: costs %d tax", pos, price)
            return False

        parcel = self.new_parcel(pos)
        self.parcels[pos] = parcel
        parcel.outside_counts = self._outside_counts(pos)
        self._update_frontier()
        self.propagate(pos)
        logger.info("Bought parcel %s for %d tax", pos, price)
        return True

    def _update_frontier(self) -> None:
        reachable = {adj for pos in self.parcels for adj in pos.adjacent()}
        self._frontier = reachable - set(self.parcels)

    # -- Stages ----------------------------------------------------------

    def is_unlocked(self, building_type: BuildingType) -> bool:
        """Return True if an unlocked stage offers *building_type*."""
        if building_type is BuildingType.GROUND:
            return True
        return any(
            stage.enabled and building_type in stage.buildings for stage in self.stages
        )

    def unlocked_buildings(self) -> list[BuildingType]:
        """Return every building type currently on offer, in stage order."""
        return [bt for stage in self.stages if stage.enabled for bt in stage.buildings]

    def check_stages(self) -> list[Stage]:
        """Unlock every stage whose thresholds are met.

        Returns:
            Stages unlocked by this call.
        """
        unlocked = [stage for stage in self.stages if stage.try_unlock(self.ledger)]
        for stage in unlocked:
            logger.info("Stage %d unlocked: %s", stage.num, stage.title)
        return unlocked

    def unlock_early(self, num: int) -> bool:
        """Force stage *num* open regardless of its thresholds."""
        for stage in self.stages:
            if stage.num == num:
                stage.force_unlock()
                return True
        return False

    # -- Edits -----------------------------------------------------------

    def apply(self, parcel_pos: Pos, cell_pos: Pos, building: Building) -> bool:
        """Apply an edit to one cell and propagate its effects.

        Returns:
            True if any cell changed.
        """
        parcel = self.parcels.get(parcel_pos)
        if parcel is None:
            logger.debug("Edit ignored: parcel %s is not owned", parcel_pos)
            return False
        if not parcel.apply(cell_pos, building, self.ledger):
            return False
        self.propagate(parcel_pos)
        self.refresh_capacity()
        self.retry_planned()
        return True

    def place(self, parcel_pos: Pos, cell_pos: Pos, building_type: BuildingType) -> bool:
        """Build *building_type* if its stage is unlocked."""
        if not self.is_unlocked(building_type):
            logger.debug("Rejected %s: stage locked", building_type.name)
            return False
        return self.apply(parcel_pos, cell_pos, derive(building_type))

    def demolish(self, parcel_pos: Pos, cell_pos: Pos) -> bool:
        """Clear one cell back to ground, refunding its cost."""
        return self.apply(parcel_pos, cell_pos, GROUND)

    def plan(self, parcel_pos: Pos, cell_pos: Pos, building_type: BuildingType) -> bool:
        """Mark a cell to be built later, without spending anything."""
        parcel = self.parcels.get(parcel_pos)
        if parcel is None or not self.is_unlocked(building_type):
            return False
        parcel.plan(cell_pos, building_type)
        return True

    def retry_planned(self) -> bool:
        """Retry every planned marker in every parcel.

        Returns:
            True if anything was built.
        """
        changed = False
        for pos, parcel in list(self.parcels.items()):
            if parcel.planned and parcel.retry_planned(self.ledger):
                self.propagate(pos)
                changed = True
        if changed:
            self.refresh_capacity()
        return changed

    # -- Propagation -----------------------------------------------------

    def propagate(self, origin: Pos) -> None:
        """Bring neighbour caches up to date after *origin* changed."""
        queue: deque[tuple[Pos, Dirty]] = deque([(origin, Dirty.LOCAL_COUNTS)])
        pending = {(origin, Dirty.LOCAL_COUNTS)}

        while queue:
            item = queue.popleft()
            pending.discard(item)
            pos, reason = item

            follow_ups: list[tuple[Pos, Dirty]] = []
            if reason is Dirty.LOCAL_COUNTS:
                for npos in pos.neighbours():
                    neighbour = self.parcels.get(npos)
                    if neighbour is None:
                        continue
                    fresh = self._outside_counts(npos)
                    if fresh != neighbour.outside_counts:
                        neighbour.outside_counts = fresh
                        follow_ups.append((npos, Dirty.NEIGHBOR_COUNTS))
            elif self.parcels[pos].sweep(self.ledger):
                follow_ups.append((pos, Dirty.LOCAL_COUNTS))

            for follow_up in follow_ups:
                if follow_up not in pending:
                    pending.add(follow_up)
                    queue.append(follow_up)

    def _outside_counts(self, pos: Pos) -> dict[BuildingType, int]:
        return merge_counts(
            *(
                self.parcels[npos].local_counts
                for npos in pos.neighbours()
                if npos in self.parcels
            ),
        )
