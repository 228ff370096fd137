"""Shared fixtures for the Homestead test suite."""

from __future__ import annotations

import pytest

from homestead.catalog.resources import Resource
from homestead.economy.ledger import Capacity, Ledger
from homestead.simulation.config import GameConfig
from homestead.world.parcel import Parcel
from homestead.world.pos import Pos
from homestead.world.world import World


@pytest.fixture
def parcel() -> Parcel:
    """A bare parcel at the origin."""
    return Parcel(position=Pos(0, 0))


@pytest.fixture
def ledger() -> Ledger:
    """The starting resources of a new game."""
    return Ledger(
        {
            Resource.FOOD: 10,
            Resource.WOOD: 10,
            Resource.SEED: 10,
            Resource.STORAGE: 100,
        },
    )


@pytest.fixture
def rich_ledger() -> Ledger:
    """Plenty of everything, with room to take refunds."""
    return Ledger(
        {r: 10_000 for r in Resource},
        capacity=Capacity(storage=100_000),
    )


@pytest.fixture
def default_config() -> GameConfig:
    """Default game config (no YAML file needed), autosave off."""
    return GameConfig(autosave=False)


@pytest.fixture
def world(default_config: GameConfig) -> World:
    """A new world with the default starting resources."""
    return World(config=default_config)


@pytest.fixture
def rich_world() -> World:
    """A new world with every resource at 10 000 and all stages open."""
    config = GameConfig(
        autosave=False,
        starting_resources={r.name.lower(): 10_000 for r in Resource},
    )
    world = World(config=config)
    for stage in world.stages:
        stage.force_unlock()
    return world
