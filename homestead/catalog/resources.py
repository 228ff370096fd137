"""Resource — the closed set of quantities tracked by the ledger.

``STORAGE`` and ``CASH_STORAGE`` are special: buildings that output them
raise the capacity ceilings of the ledger rather than filling a stock.
"""

from __future__ import annotations

from enum import Enum, auto


class Resource(Enum):
    """Every kind of resource a building can cost or produce."""

    FOOD = auto()
    TAX = auto()
    WOOD = auto()
    SEED = auto()
    STORAGE = auto()
    CASH_STORAGE = auto()
    STEEL = auto()
    BASIC_SCIENCE = auto()
    CONCRETE = auto()
    COMPUTATION = auto()

    @property
    def symbol(self) -> str:
        """Short glyph used by the renderer."""
        return _SYMBOLS[self]

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return _NAMES[self]


_SYMBOLS: dict[Resource, str] = {
    Resource.FOOD: "Fd",
    Resource.TAX: "$",
    Resource.WOOD: "Wd",
    Resource.SEED: "Sd",
    Resource.STORAGE: "St",
    Resource.CASH_STORAGE: "C$",
    Resource.STEEL: "Fe",
    Resource.BASIC_SCIENCE: "Sc",
    Resource.CONCRETE: "Cc",
    Resource.COMPUTATION: "Cp",
}

_NAMES: dict[Resource, str] = {
    Resource.FOOD: "Food",
    Resource.TAX: "Tax",
    Resource.WOOD: "Wood",
    Resource.SEED: "Seeds",
    Resource.STORAGE: "Storage",
    Resource.CASH_STORAGE: "Cash Storage",
    Resource.STEEL: "Steel",
    Resource.BASIC_SCIENCE: "Basic Science",
    Resource.CONCRETE: "Concrete",
    Resource.COMPUTATION: "Computation",
}

# (resource, amount) pair used for costs, outputs and unlock thresholds.
ResourceAmount = tuple[Resource, int]
