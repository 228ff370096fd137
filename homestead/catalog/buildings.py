"""Building catalog — pure lookups from a BuildingType to its rules.

Nothing here holds state.  ``derive`` combines the per-type cost table
with the three adjacency rule sets into an immutable ``Building`` value:

- **required_adj**: every listed type must sit in an orthogonally
  adjacent cell.
- **optional_adj**: the allow-list of other neighbour types.  A neighbour
  outside ``required_adj | optional_adj`` makes the placement invalid.
  Empty land (``GROUND``) is always tolerated.
- **tile_adj**: types that must exist *somewhere* in the same parcel.

Types without an entry in the cost or output tables have no economic
effect yet; they cost nothing and produce nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from homestead.catalog.resources import Resource, ResourceAmount


class BuildingType(Enum):
    """Every kind of building, including empty land."""

    GROUND = auto()
    HOUSE = auto()
    GRAIN = auto()
    TREE = auto()
    SHOP = auto()
    WAREHOUSE = auto()
    BATTERY = auto()
    FACTORY = auto()
    STEEL_PRODUCTION = auto()
    BANK = auto()
    BASIC_RESEARCH_FACILITY = auto()
    CONCRETE_MIXER = auto()
    GAUGE = auto()
    ASPHALT = auto()
    APARTMENT = auto()
    FIRE_STATION = auto()
    POLICE_STATION = auto()
    CARROT = auto()
    HOSPITAL = auto()
    FOOD_TRUCK = auto()
    LIGHTNING = auto()
    SIREN = auto()
    AIR_TRAFFIC_CONTROL = auto()
    RUNWAY = auto()
    CPU = auto()
    STAIRS_INTO_THE_VOID = auto()
    GARAGE = auto()
    LIGHT_HOUSE = auto()
    LIGHTBULB = auto()
    MOSQUE = auto()
    NUCLEAR_POWER_PLANT = auto()
    ROCKET = auto()
    ROBOT_FACTORY = auto()
    COOKIE = auto()
    DATABASE = auto()
    PALM_TREE = auto()
    TURRET = auto()

    @property
    def symbol(self) -> str:
        """Two-character glyph drawn inside a cell."""
        return _SYMBOLS[self]

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return _NAMES[self]


_B = BuildingType
_R = Resource

_SYMBOLS: dict[BuildingType, str] = {
    _B.GROUND: "  ",
    _B.HOUSE: "Ho",
    _B.GRAIN: "Gr",
    _B.TREE: "Tr",
    _B.SHOP: "Sh",
    _B.WAREHOUSE: "Wh",
    _B.BATTERY: "Bt",
    _B.FACTORY: "Fa",
    _B.STEEL_PRODUCTION: "SM",
    _B.BANK: "Bk",
    _B.BASIC_RESEARCH_FACILITY: "Rs",
    _B.CONCRETE_MIXER: "CM",
    _B.GAUGE: "Ga",
    _B.ASPHALT: "##",
    _B.APARTMENT: "Ap",
    _B.FIRE_STATION: "FS",
    _B.POLICE_STATION: "PS",
    _B.CARROT: "Ca",
    _B.HOSPITAL: "+H",
    _B.FOOD_TRUCK: "FT",
    _B.LIGHTNING: "Li",
    _B.SIREN: "Si",
    _B.AIR_TRAFFIC_CONTROL: "AT",
    _B.RUNWAY: "Rw",
    _B.CPU: "CR",
    _B.STAIRS_INTO_THE_VOID: "SV",
    _B.GARAGE: "Gg",
    _B.LIGHT_HOUSE: "LH",
    _B.LIGHTBULB: "Lb",
    _B.MOSQUE: "Mq",
    _B.NUCLEAR_POWER_PLANT: "NP",
    _B.ROCKET: "Rk",
    _B.ROBOT_FACTORY: "RF",
    _B.COOKIE: "Ck",
    _B.DATABASE: "DB",
    _B.PALM_TREE: "PT",
    _B.TURRET: "Tu",
}

_NAMES: dict[BuildingType, str] = {
    _B.GROUND: "Ground",
    _B.HOUSE: "House",
    _B.GRAIN: "Grain",
    _B.TREE: "Tree",
    _B.SHOP: "Shop",
    _B.WAREHOUSE: "Warehouse",
    _B.BATTERY: "Battery",
    _B.FACTORY: "Factory",
    _B.STEEL_PRODUCTION: "Steel Mill",
    _B.BANK: "Bank",
    _B.BASIC_RESEARCH_FACILITY: "Basic Research Facility",
    _B.CONCRETE_MIXER: "Concrete Mixer",
    _B.GAUGE: "Gauge",
    _B.ASPHALT: "Asphalt",
    _B.APARTMENT: "Apartment",
    _B.FIRE_STATION: "Fire Station",
    _B.POLICE_STATION: "Police Station",
    _B.CARROT: "Carrot",
    _B.HOSPITAL: "Hospital",
    _B.FOOD_TRUCK: "Food Truck",
    _B.LIGHTNING: "Lightning",
    _B.SIREN: "Siren",
    _B.AIR_TRAFFIC_CONTROL: "Air Traffic Control",
    _B.RUNWAY: "Runway",
    _B.CPU: "Computational Research Facility",
    _B.STAIRS_INTO_THE_VOID: "Stairs Into The Void",
    _B.GARAGE: "Garage",
    _B.LIGHT_HOUSE: "Light House",
    _B.LIGHTBULB: "Lightbulb",
    _B.MOSQUE: "Mosque",
    _B.NUCLEAR_POWER_PLANT: "Nuclear Power Plant",
    _B.ROCKET: "Rocket",
    _B.ROBOT_FACTORY: "Robot Factory",
    _B.COOKIE: "Cookie",
    _B.DATABASE: "Database",
    _B.PALM_TREE: "Palm Tree",
    _B.TURRET: "Turret",
}

_COSTS: dict[BuildingType, tuple[ResourceAmount, ...]] = {
    _B.HOUSE: ((_R.WOOD, 10), (_R.FOOD, 10)),
    _B.GRAIN: ((_R.SEED, 5),),
    _B.TREE: ((_R.SEED, 5),),
    _B.CARROT: ((_R.SEED, 50),),
    _B.SHOP: ((_R.WOOD, 50), (_R.FOOD, 50)),
    _B.WAREHOUSE: ((_R.WOOD, 100),),
    _B.BATTERY: ((_R.STEEL, 20), (_R.FOOD, 200)),
    _B.FACTORY: ((_R.WOOD, 100), (_R.FOOD, 100), (_R.SEED, 100)),
    _B.STEEL_PRODUCTION: ((_R.WOOD, 150),),
    _B.BANK: ((_R.WOOD, 200), (_R.FOOD, 200), (_R.STEEL, 30), (_R.TAX, 300)),
    _B.BASIC_RESEARCH_FACILITY: (
        (_R.WOOD, 100),
        (_R.FOOD, 100),
        (_R.SEED, 100),
        (_R.STEEL, 100),
    ),
    _B.CONCRETE_MIXER: ((_R.STEEL, 100), (_R.BASIC_SCIENCE, 100)),
    _B.GAUGE: ((_R.STEEL, 50), (_R.BASIC_SCIENCE, 300)),
    _B.ASPHALT: ((_R.CONCRETE, 1),),
    _B.APARTMENT: ((_R.FOOD, 1), (_R.CONCRETE, 50), (_R.STEEL, 10)),
    _B.FIRE_STATION: ((_R.CONCRETE, 500), (_R.STEEL, 20)),
    _B.POLICE_STATION: ((_R.CONCRETE, 500), (_R.FOOD, 500)),
    _B.HOSPITAL: ((_R.CONCRETE, 1000), (_R.FOOD, 1500), (_R.BASIC_SCIENCE, 50)),
    _B.FOOD_TRUCK: ((_R.FOOD, 5000), (_R.WOOD, 1000)),
}

_OUTPUTS: dict[BuildingType, tuple[ResourceAmount, ...]] = {
    _B.GRAIN: ((_R.FOOD, 1), (_R.SEED, 1)),
    _B.CARROT: ((_R.FOOD, 3),),
    _B.TREE: ((_R.WOOD, 1),),
    _B.SHOP: ((_R.TAX, 2),),
    _B.WAREHOUSE: ((_R.STORAGE, 100),),
    _B.STEEL_PRODUCTION: ((_R.STEEL, 1),),
    _B.BANK: ((_R.CASH_STORAGE, 1000),),
    _B.BASIC_RESEARCH_FACILITY: ((_R.BASIC_SCIENCE, 1),),
    _B.CONCRETE_MIXER: ((_R.CONCRETE, 10),),
    _B.CPU: ((_R.COMPUTATION, 1),),
    _B.FOOD_TRUCK: ((_R.TAX, 25),),
}

# City tiles tolerate each other and all need road (asphalt) access.
CITY_TILES: tuple[BuildingType, ...] = (
    _B.BANK,
    _B.FIRE_STATION,
    _B.POLICE_STATION,
    _B.HOSPITAL,
    _B.APARTMENT,
    _B.FOOD_TRUCK,
    _B.CPU,
)

# Producing city tiles additionally need an apartment in the parcel.
_PRODUCTION_CITY_TILES = (_B.BANK, _B.FOOD_TRUCK, _B.CPU)

_REQUIRED: dict[BuildingType, tuple[BuildingType, ...]] = {
    _B.BATTERY: (_B.FACTORY,),
    _B.STEEL_PRODUCTION: (_B.FACTORY,),
    _B.CONCRETE_MIXER: (_B.FACTORY, _B.GAUGE),
    _B.BASIC_RESEARCH_FACILITY: (_B.HOUSE, _B.BATTERY),
}

# Symmetric pairs of types allowed next to each other.
_COMPATIBLE_PAIRS: tuple[tuple[BuildingType, BuildingType], ...] = (
    (_B.WAREHOUSE, _B.SHOP),
    (_B.BATTERY, _B.FACTORY),
    (_B.STEEL_PRODUCTION, _B.FACTORY),
    (_B.HOUSE, _B.BASIC_RESEARCH_FACILITY),
    (_B.BASIC_RESEARCH_FACILITY, _B.BATTERY),
    (_B.FACTORY, _B.CONCRETE_MIXER),
    (_B.CONCRETE_MIXER, _B.GAUGE),
    (_B.GRAIN, _B.CARROT),
)

_TILE: dict[BuildingType, tuple[BuildingType, ...]] = {
    _B.SHOP: (_B.GRAIN, _B.HOUSE, _B.TREE),
    _B.GRAIN: (_B.HOUSE,),
    _B.TREE: (_B.HOUSE,),
    _B.CARROT: (_B.HOUSE,),
    _B.APARTMENT: (_B.FIRE_STATION, _B.HOSPITAL, _B.POLICE_STATION),
}


@dataclass(frozen=True)
class Building:
    """Immutable building value derived from its type.

    Attributes:
        building_type: The kind of building.
        cost: Resources spent to construct it.
        required_adj: Types that must all be orthogonal neighbours.
        optional_adj: Other neighbour types that are tolerated.
        tile_adj: Types that must be present anywhere in the parcel.
        symbol: Glyph drawn in the cell.
    """

    building_type: BuildingType
    cost: tuple[ResourceAmount, ...] = ()
    required_adj: tuple[BuildingType, ...] = ()
    optional_adj: tuple[BuildingType, ...] = ()
    tile_adj: tuple[BuildingType, ...] = ()
    symbol: str = "  "

    @property
    def is_ground(self) -> bool:
        """Return True for an empty cell."""
        return self.building_type is BuildingType.GROUND

    def allows_neighbour(self, neighbour: BuildingType) -> bool:
        """Return True if *neighbour* may sit orthogonally next to this."""
        return neighbour in self.required_adj or neighbour in self.optional_adj


def cost(building_type: BuildingType) -> tuple[ResourceAmount, ...]:
    """Return the construction cost of *building_type* (may be empty)."""
    return _COSTS.get(building_type, ())


def output(building_type: BuildingType) -> tuple[ResourceAmount, ...]:
    """Return what one building of *building_type* produces per tick."""
    return _OUTPUTS.get(building_type, ())


def _append_unique(
    items: list[BuildingType],
    new: BuildingType | tuple[BuildingType, ...],
) -> None:
    for item in new if isinstance(new, tuple) else (new,):
        if item not in items:
            items.append(item)


def _build(building_type: BuildingType) -> Building:
    """Assemble the adjacency rule sets for one type."""
    if building_type is BuildingType.GROUND:
        return Building(building_type=building_type, symbol=_SYMBOLS[building_type])

    required: list[BuildingType] = list(_REQUIRED.get(building_type, ()))
    optional: list[BuildingType] = [BuildingType.GROUND, building_type]
    tile: list[BuildingType] = list(_TILE.get(building_type, ()))

    for a, b in _COMPATIBLE_PAIRS:
        if a is building_type:
            _append_unique(optional, b)
        if b is building_type:
            _append_unique(optional, a)

    if building_type in CITY_TILES:
        _append_unique(optional, CITY_TILES)
        _append_unique(required, BuildingType.ASPHALT)
    if building_type is BuildingType.ASPHALT:
        _append_unique(optional, CITY_TILES)
    if building_type in _PRODUCTION_CITY_TILES:
        _append_unique(tile, BuildingType.APARTMENT)

    return Building(
        building_type=building_type,
        cost=cost(building_type),
        required_adj=tuple(required),
        optional_adj=tuple(optional),
        tile_adj=tuple(tile),
        symbol=_SYMBOLS[building_type],
    )


_CATALOG: dict[BuildingType, Building] = {bt: _build(bt) for bt in BuildingType}


def derive(building_type: BuildingType) -> Building:
    """Return the Building value for *building_type*.

    Args:
        building_type: Any member of ``BuildingType``.

    Returns:
        The shared immutable Building for that type.
    """
    return _CATALOG[building_type]


GROUND = derive(BuildingType.GROUND)
