"""Production — the periodic two-phase resource tick.

1. Capacity phase: sum Storage and CashStorage outputs over every parcel
   (plus the base storage) into one ``Capacity``.
2. Apply phase: add every parcel's weighted output to the ledger,
   saturating at that capacity.

Capacity is fixed before any resource is written, so the order in which
parcels are visited never changes the outcome.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from homestead.catalog.buildings import BuildingType, output
from homestead.catalog.resources import Resource
from homestead.economy.ledger import DEFAULT_BASE_STORAGE, Capacity

if TYPE_CHECKING:
    from homestead.world.parcel import Parcel
    from homestead.world.world import World


def weighted_output(parcel: Parcel) -> Iterator[tuple[Resource, int]]:
    """Yield ``(resource, amount * count)`` for each building type held."""
    for building_type, count in parcel.local_counts.items():
        if building_type is BuildingType.GROUND:
            continue
        for resource, amount in output(building_type):
            yield resource, amount * count


def compute_capacity(
    parcels: Iterable[Parcel],
    base_storage: int = DEFAULT_BASE_STORAGE,
) -> Capacity:
    """Sum storage capacity over all parcels.

    Args:
        parcels: Every owned parcel.
        base_storage: Storage granted with no buildings at all.

    Returns:
        The combined capacity.
    """
    storage = base_storage
    cash = 0
    for parcel in parcels:
        for resource, amount in weighted_output(parcel):
            if resource is Resource.STORAGE:
                storage += amount
            elif resource is Resource.CASH_STORAGE:
                cash += amount
    return Capacity(storage=storage, cash=cash)


def production_tick(world: World) -> dict[Resource, int]:
    """Run one production tick over the whole world.

    Args:
        world: The world whose ledger receives the output.

    Returns:
        Amount produced per resource this tick, before capping.
    """
    capacity = compute_capacity(world.parcels.values(), world.config.base_storage)
    ledger = world.ledger
    ledger.capacity = capacity

    produced: dict[Resource, int] = {}
    for parcel in world.parcels.values():
        for resource, amount in weighted_output(parcel):
            produced[resource] = produced.get(resource, 0) + amount
            ledger[resource] = min(ledger[resource] + amount, capacity.cap(resource))

    world.last_production = produced
    return produced
