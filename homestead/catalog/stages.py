"""Stages — progression gates that unlock groups of buildings.

A stage is either locked or unlocked.  It unlocks once every resource
threshold in ``unlock_at`` is met, or when the player unlocks it early.
Nothing ever locks it again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from homestead.catalog.buildings import BuildingType
from homestead.catalog.resources import Resource, ResourceAmount

if TYPE_CHECKING:
    from homestead.economy.ledger import Ledger

STAGE_COUNT = 6

_B = BuildingType
_R = Resource

_BUILDINGS: dict[int, tuple[BuildingType, ...]] = {
    1: (_B.HOUSE, _B.GRAIN),
    2: (_B.TREE, _B.SHOP, _B.WAREHOUSE),
    3: (_B.FACTORY, _B.BATTERY, _B.STEEL_PRODUCTION),
    4: (
        _B.BASIC_RESEARCH_FACILITY,
        _B.CONCRETE_MIXER,
        _B.GAUGE,
        _B.ASPHALT,
        _B.CARROT,
    ),
    5: (
        _B.BANK,
        _B.APARTMENT,
        _B.FIRE_STATION,
        _B.POLICE_STATION,
        _B.HOSPITAL,
        _B.FOOD_TRUCK,
        _B.CPU,
    ),
    6: (
        _B.LIGHTNING,
        _B.SIREN,
        _B.AIR_TRAFFIC_CONTROL,
        _B.RUNWAY,
        _B.STAIRS_INTO_THE_VOID,
        _B.GARAGE,
        _B.LIGHT_HOUSE,
        _B.LIGHTBULB,
        _B.MOSQUE,
        _B.NUCLEAR_POWER_PLANT,
        _B.ROCKET,
        _B.ROBOT_FACTORY,
        _B.COOKIE,
        _B.DATABASE,
        _B.PALM_TREE,
        _B.TURRET,
    ),
}

_TITLES: dict[int, str] = {
    1: "Just a simple farmer",
    2: "Power Up",
    3: "Industrial Revolution",
    4: "Research",
    5: "City",
    6: "Wonders",
}

_DESCRIPTIONS: dict[int, str] = {
    1: (
        "Plop down your house and some crops, separated by at least "
        "one land tile."
    ),
    2: "Plant trees, open a shop and build a warehouse.",
    3: (
        "The industrial revolution has arrived! Factories run steel "
        "mills and batteries."
    ),
    4: (
        "Build a basic research facility, a concrete mixer, a gauge "
        "and some asphalt."
    ),
    5: "Expand into a city. Everything in a city needs road access.",
    6: "Experimental buildings with no economy yet.",
}

_UNLOCK_AT: dict[int, tuple[ResourceAmount, ...]] = {
    1: (),
    2: ((_R.SEED, 50),),
    3: ((_R.WOOD, 100),),
    4: ((_R.STORAGE, 200),),
    5: ((_R.CONCRETE, 50),),
}

# Stages without a threshold entry are effectively out of reach.
_UNREACHABLE = 999_999


@dataclass
class Stage:
    """One progression gate.

    Attributes:
        num: 1-based stage number.
        title: Short heading.
        description: Hint shown to the player.
        buildings: Building types this stage unlocks.
        unlock_at: Thresholds that must all be met to unlock.
        enabled: Whether the stage is unlocked.
    """

    num: int
    title: str = ""
    description: str = ""
    buildings: tuple[BuildingType, ...] = ()
    unlock_at: tuple[ResourceAmount, ...] = ()
    enabled: bool = False

    @classmethod
    def numbered(cls, num: int) -> Stage:
        """Build stage *num* from the catalog tables.

        Unknown numbers give an empty, unreachable stage.
        """
        return cls(
            num=num,
            title=_TITLES.get(num, f"Stage {num}"),
            description=_DESCRIPTIONS.get(num, f"Stage {num} has no description"),
            buildings=_BUILDINGS.get(num, ()),
            unlock_at=_UNLOCK_AT.get(
                num,
                tuple((r, _UNREACHABLE) for r in Resource),
            ),
            enabled=num == 1,
        )

    def thresholds_met(self, ledger: Ledger) -> bool:
        """Return True if the ledger meets every unlock threshold."""
        return all(ledger[resource] >= amount for resource, amount in self.unlock_at)

    def try_unlock(self, ledger: Ledger) -> bool:
        """Unlock the stage if its thresholds are met.

        Args:
            ledger: Current resource amounts.

        Returns:
            True only if this call moved the stage from locked to
            unlocked.
        """
        if self.enabled or not self.thresholds_met(ledger):
            return False
        self.enabled = True
        return True

    def force_unlock(self) -> None:
        """Unlock the stage early, ignoring its thresholds."""
        self.enabled = True


def default_stages() -> list[Stage]:
    """Return fresh copies of every stage, only the first unlocked."""
    return [Stage.numbered(n) for n in range(1, STAGE_COUNT + 1)]
