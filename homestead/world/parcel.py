"""Parcel — an owned 8x8 grid of building cells.

A parcel keeps its cells as building-type codes in a NumPy array and
caches how many of each type it holds (``local_counts``).  The owning
World fills ``outside_counts`` with the summed local counts of the four
orthogonally adjacent parcels; ``neighbor_counts`` is both together.

Every mutation follows the same order: change the cell, recount, then
run the consistency sweep, which demolishes (with refund) any building
whose placement rules no longer hold and remembers it in ``planned`` so
it can be rebuilt later.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from homestead.catalog.buildings import Building, BuildingType, cost, derive
from homestead.world.pos import Pos

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from homestead.economy.ledger import Capacity, Ledger

logger = logging.getLogger(__name__)

PARCEL_SIZE = 8

_BY_CODE: dict[int, BuildingType] = {bt.value: bt for bt in BuildingType}
_MAX_CODE = max(_BY_CODE)


class TileScope(Enum):
    """Where tile-adjacency requirements are looked up."""

    PARCEL = "parcel"
    NEIGHBORHOOD = "neighborhood"


def merge_counts(*counts: dict[BuildingType, int]) -> dict[BuildingType, int]:
    """Sum several count maps, dropping zero entries."""
    total: dict[BuildingType, int] = {}
    for mapping in counts:
        for bt, n in mapping.items():
            total[bt] = total.get(bt, 0) + n
    return {bt: n for bt, n in total.items() if n}


@dataclass
class Parcel:
    """One 8x8 placement grid at a world position.

    Attributes:
        position: Parcel coordinate in world space.
        refund_ratio: Share of a building's cost returned on demolition.
        tile_scope: Whether tile adjacency looks at this parcel only or
            at the parcel plus its neighbours.
        grid: Building-type codes indexed as ``grid[y, x]``.
        local_counts: Number of cells of each type (zero entries omitted).
        outside_counts: Summed local counts of adjacent owned parcels.
        planned: Cells whose building is waiting to be (re)built.
        capacity_source: Recomputes storage capacity once a cell has
            been cleared, so refunds are capped by what is left.
    """

    position: Pos
    refund_ratio: float = 1.0
    tile_scope: TileScope = TileScope.PARCEL
    grid: NDArray[np.int64] = field(init=False, repr=False)
    local_counts: dict[BuildingType, int] = field(init=False)
    outside_counts: dict[BuildingType, int] = field(default_factory=dict)
    planned: dict[Pos, BuildingType] = field(default_factory=dict)
    capacity_source: Callable[[], Capacity] | None = field(
        default=None,
        repr=False,
        compare=False,
    )

    def __post_init__(self) -> None:
        """Start as bare land."""
        self.grid = np.full(
            (PARCEL_SIZE, PARCEL_SIZE),
            BuildingType.GROUND.value,
            dtype=np.int64,
        )
        self.recount()

    # -- Queries ---------------------------------------------------------

    @property
    def neighbor_counts(self) -> dict[BuildingType, int]:
        """Counts over this parcel and its four adjacent parcels."""
        return merge_counts(self.local_counts, self.outside_counts)

    @property
    def cells(self) -> list[list[Building]]:
        """Building values indexed as ``cells[y][x]``."""
        return [[derive(_BY_CODE[int(code)]) for code in row] for row in self.grid]

    @staticmethod
    def positions() -> Iterator[Pos]:
        """Yield every cell position in row-major order."""
        for y in range(PARCEL_SIZE):
            for x in range(PARCEL_SIZE):
                yield Pos(x, y)

    def type_at(self, pos: Pos) -> BuildingType:
        """Return the building type occupying *pos*.

        Raises:
            IndexError: If *pos* lies outside the grid.
        """
        if not pos.in_bounds(PARCEL_SIZE):
            msg = f"{pos} out of bounds for {PARCEL_SIZE}x{PARCEL_SIZE} parcel"
            raise IndexError(msg)
        return _BY_CODE[int(self.grid[pos.y, pos.x])]

    def building_at(self, pos: Pos) -> Building:
        """Return the Building value occupying *pos*."""
        return derive(self.type_at(pos))

    def count(self, building_type: BuildingType) -> int:
        """Return how many cells hold *building_type*."""
        return self.local_counts.get(building_type, 0)

    def adjacent_types(self, pos: Pos) -> list[BuildingType]:
        """Return the types in the in-bounds orthogonal neighbours of *pos*."""
        return [self.type_at(n) for n in pos.neighbours() if n.in_bounds(PARCEL_SIZE)]

    def is_valid(self, pos: Pos, building: Building) -> bool:
        """Return True if *building* may stand at *pos*.

        Ground is always valid.  Otherwise every tile-adjacency type must
        be present, every required type must be an orthogonal neighbour,
        and no neighbour may fall outside the building's allow-list.
        This never mutates the parcel.
        """
        if building.is_ground:
            return True

        counts = (
            self.local_counts
            if self.tile_scope is TileScope.PARCEL
            else self.neighbor_counts
        )
        if any(counts.get(t, 0) == 0 for t in building.tile_adj):
            return False

        adj_types = self.adjacent_types(pos)
        if not all(r in adj_types for r in building.required_adj):
            return False
        return all(building.allows_neighbour(t) for t in adj_types)

    def render_text(self) -> str:
        """Return the grid as rows of building symbols."""
        rows = ("".join(_BY_CODE[int(c)].symbol for c in row) for row in self.grid)
        return "\n".join(rows).rstrip()

    # -- Mutation --------------------------------------------------------

    def recount(self) -> None:
        """Recompute ``local_counts`` from the grid."""
        counts = np.bincount(self.grid.ravel(), minlength=_MAX_CODE + 1)
        self.local_counts = {
            bt: int(counts[bt.value]) for bt in BuildingType if counts[bt.value]
        }

    def apply(self, pos: Pos, building: Building, ledger: Ledger) -> bool:
        """Try to put *building* at *pos*, paying from or refunding to *ledger*.

        Placing the type already there only clears a planned marker.
        Ground demolishes the current building with a capped refund and
        always succeeds.  Any other building must be valid and fully
        affordable, otherwise nothing is charged.  A successful change is
        followed by the consistency sweep.

        Args:
            pos: Cell position inside this parcel.
            building: The building to place (Ground to demolish).
            ledger: Resources to charge or refund.

        Returns:
            True if the grid changed.
        """
        current = self.type_at(pos)
        if building.building_type is current:
            self.planned.pop(pos, None)
            return False

        if building.is_ground:
            self._demolish(pos, ledger)
        else:
            if not self.is_valid(pos, building):
                logger.debug(
                    "Rejected %s at %s in parcel %s: invalid placement",
                    building.building_type.name,
                    pos,
                    self.position,
                )
                return False
            if not ledger.debit(building.cost):
                logger.debug(
                    "Rejected %s at %s in parcel %s: insufficient resources",
                    building.building_type.name,
                    pos,
                    self.position,
                )
                return False
            self.planned.pop(pos, None)
            self._put(pos, building.building_type)

        self.sweep(ledger)
        return True

    def plan(self, pos: Pos, building_type: BuildingType) -> None:
        """Mark *pos* to receive *building_type* once it can be built.

        Planning Ground, or the type already there, clears the marker.
        """
        if building_type is BuildingType.GROUND or self.type_at(pos) is building_type:
            self.planned.pop(pos, None)
        else:
            self.planned[pos] = building_type

    def retry_planned(self, ledger: Ledger) -> bool:
        """Build every planned marker on bare land that is now possible.

        Returns:
            True if any cell changed.
        """
        changed = False
        for pos, building_type in sorted(self.planned.items()):
            if self.type_at(pos) is not BuildingType.GROUND:
                continue
            building = derive(building_type)
            if self.is_valid(pos, building) and ledger.debit(building.cost):
                del self.planned[pos]
                self._put(pos, building_type)
                changed = True
        if changed:
            self.sweep(ledger)
        return changed

    def sweep(self, ledger: Ledger) -> list[Pos]:
        """Demolish every building whose placement is no longer valid.

        Demolished buildings are refunded (capped) and recorded in
        ``planned``.  After a demolition, its neighbours are checked again;
        if it was the last of its type, every cell is.  The sweep ends
        when the queue drains, so an immediate second sweep removes
        nothing.

        Returns:
            Positions demolished, in order.
        """
        pending: deque[Pos] = deque(self.positions())
        queued = set(pending)
        removed: list[Pos] = []

        while pending:
            pos = pending.popleft()
            queued.discard(pos)
            building_type = self.type_at(pos)
            if building_type is BuildingType.GROUND:
                continue
            if self.is_valid(pos, derive(building_type)):
                continue

            self._demolish(pos, ledger)
            self.planned[pos] = building_type
            removed.append(pos)
            logger.info(
                "Demolished %s at %s in parcel %s: placement no longer valid",
                building_type.name,
                pos,
                self.position,
            )

            if self.count(building_type) == 0:
                recheck = list(self.positions())
            else:
                recheck = [n for n in pos.neighbours() if n.in_bounds(PARCEL_SIZE)]
            for n in recheck:
                if n not in queued:
                    pending.append(n)
                    queued.add(n)

        return removed

    def _put(self, pos: Pos, building_type: BuildingType) -> None:
        self.grid[pos.y, pos.x] = building_type.value
        self.recount()

    def _demolish(self, pos: Pos, ledger: Ledger) -> None:
        refund = cost(self.type_at(pos))
        self._put(pos, BuildingType.GROUND)
        if self.capacity_source is not None:
            ledger.capacity = self.capacity_source()
        ledger.refund(refund, self.refund_ratio)
