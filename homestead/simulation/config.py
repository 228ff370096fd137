"""Config — load game parameters from YAML files.

Tunable constants (tick cadence, base storage, land prices, starting
resources) live in YAML and are parsed into a typed dataclass here.
The building catalog itself stays in code so every building type is
guaranteed an entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from homestead.catalog.resources import Resource
from homestead.world.parcel import TileScope


def _default_starting_resources() -> dict[str, int]:
    # Just enough for a house and some farmland.
    return {"seed": 10, "food": 10, "wood": 10, "storage": 100}


@dataclass
class GameConfig:
    """Top-level game configuration.

    Attributes:
        tick_interval: Real-time seconds between production ticks.
        base_storage: Storage capacity every world has with no buildings.
        refund_ratio: Share of a building's cost returned on demolition.
        land_cost_base: Multiplier of the cubic land price.
        tile_adjacency: ``"parcel"`` to look up tile-adjacency
            requirements in the same parcel only, ``"neighborhood"`` to
            include the four adjacent parcels.
        starting_resources: Resource name to starting amount.
        save_dir: Directory for save files.
        autosave: Whether to save after every production tick.
    """

    tick_interval: float = 3.0
    base_storage: int = 100
    refund_ratio: float = 1.0
    land_cost_base: int = 100
    tile_adjacency: str = "parcel"
    starting_resources: dict[str, int] = field(
        default_factory=_default_starting_resources,
    )
    save_dir: str = "saves"
    autosave: bool = True

    @property
    def tile_scope(self) -> TileScope:
        """The tile-adjacency scope as an enum.

        Raises:
            ValueError: If ``tile_adjacency`` is not a known scope.
        """
        return TileScope(self.tile_adjacency)

    def starting_ledger(self) -> dict[Resource, int]:
        """Return ``starting_resources`` keyed by Resource.

        Raises:
            KeyError: If a resource name is unknown.
        """
        return {
            Resource[name.upper()]: int(amount)
            for name, amount in self.starting_resources.items()
        }

    @classmethod
    def from_yaml(cls, path: str | Path) -> GameConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated GameConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            tick_interval=float(data.get("tick_interval", cls.tick_interval)),
            base_storage=data.get("base_storage", cls.base_storage),
            refund_ratio=float(data.get("refund_ratio", cls.refund_ratio)),
            land_cost_base=data.get("land_cost_base", cls.land_cost_base),
            tile_adjacency=data.get("tile_adjacency", cls.tile_adjacency),
            starting_resources=data.get(
                "starting_resources",
                _default_starting_resources(),
            ),
            save_dir=data.get("save_dir", cls.save_dir),
            autosave=data.get("autosave", cls.autosave),
        )
