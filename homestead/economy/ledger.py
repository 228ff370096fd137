"""Ledger — per-resource quantities with capacity-aware credits.

Amounts are whole numbers and never negative.  Debits are
all-or-nothing: either every cost component is affordable and all are
charged, or nothing changes.  Credits saturate at the capacity snapshot
the world last computed, silently discarding any surplus.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from homestead.catalog.resources import Resource, ResourceAmount

DEFAULT_BASE_STORAGE = 100


@dataclass(frozen=True)
class Capacity:
    """Storage ceilings derived from the buildings a world owns.

    Attributes:
        storage: Cap for ordinary resources and for Storage itself.
        cash: Extra headroom added on top of ``storage`` for Tax and
            CashStorage.
    """

    storage: int = DEFAULT_BASE_STORAGE
    cash: int = 0

    def cap(self, resource: Resource) -> int:
        """Return the ceiling for *resource*."""
        if resource in (Resource.TAX, Resource.CASH_STORAGE):
            return self.storage + self.cash
        return self.storage


class Ledger:
    """Quantity of every resource the player holds.

    Args:
        initial: Optional starting amounts; unlisted resources start
            at zero.
        capacity: Starting capacity snapshot.
    """

    def __init__(
        self,
        initial: Mapping[Resource, int] | None = None,
        capacity: Capacity | None = None,
    ) -> None:
        self._amounts: dict[Resource, int] = {r: 0 for r in Resource}
        self.capacity = capacity or Capacity()
        if initial:
            for resource, amount in initial.items():
                self[resource] = amount

    def __getitem__(self, resource: Resource) -> int:
        return self._amounts[resource]

    def __setitem__(self, resource: Resource, amount: int) -> None:
        self._amounts[resource] = max(0, int(amount))

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._amounts)

    def __repr__(self) -> str:
        held = ", ".join(f"{r.name}={a}" for r, a in self._amounts.items() if a)
        return f"Ledger({held})"

    def snapshot(self) -> dict[Resource, int]:
        """Return a copy of every amount."""
        return dict(self._amounts)

    def cap(self, resource: Resource) -> int:
        """Return the current ceiling for *resource*."""
        return self.capacity.cap(resource)

    def can_afford(self, cost: Iterable[ResourceAmount]) -> bool:
        """Return True if every cost component is covered."""
        return all(self._amounts[resource] >= amount for resource, amount in cost)

    def debit(self, cost: Iterable[ResourceAmount]) -> bool:
        """Charge *cost* in full, or charge nothing.

        Returns:
            True if the cost was charged.
        """
        cost = tuple(cost)
        if not self.can_afford(cost):
            return False
        for resource, amount in cost:
            self._amounts[resource] -= amount
        return True

    def credit(self, resource: Resource, amount: int, cap: int | None = None) -> int:
        """Add *amount* of *resource*, saturating at a ceiling.

        Args:
            resource: Resource to credit.
            amount: Quantity to add.
            cap: Ceiling to apply; defaults to the capacity snapshot.

        Returns:
            The amount actually kept after capping.  An amount already
            above the ceiling is left untouched.
        """
        ceiling = self.cap(resource) if cap is None else cap
        before = self._amounts[resource]
        self[resource] = max(before, min(before + amount, ceiling))
        return self._amounts[resource] - before

    def refund(self, cost: Iterable[ResourceAmount], ratio: float = 1.0) -> None:
        """Credit back a building cost, each part capped by capacity.

        Excess above capacity is discarded, never queued.
        """
        for resource, amount in cost:
            back = round(amount * ratio)
            if back > 0:
                self.credit(resource, back)
