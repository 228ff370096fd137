"""Tests for homestead.persistence - YAML save files."""

import os
from pathlib import Path

import yaml

from homestead.catalog.buildings import BuildingType
from homestead.catalog.resources import Resource
from homestead.persistence.saves import (
    list_saves,
    load_latest,
    load_world,
    save_path_for,
    save_world,
    world_to_dict,
)
from homestead.simulation.config import GameConfig
from homestead.world.pos import Pos
from homestead.world.world import ORIGIN, World


def _built_world(config: GameConfig) -> World:
    world = World(name="Farm", config=config)
    world.ledger[Resource.TAX] = 900
    world.purchase(Pos(0, 1))
    world.place(ORIGIN, Pos(0, 0), BuildingType.HOUSE)
    world.place(ORIGIN, Pos(2, 0), BuildingType.GRAIN)
    world.plan(Pos(0, 1), Pos(5, 5), BuildingType.HOUSE)
    world.unlock_early(3)
    return world


class TestSavePath:
    """Tests for save file naming."""

    def test_slug(self, tmp_path: Path) -> None:
        assert save_path_for(tmp_path, "My World!") == tmp_path / "My_World.yaml"

    def test_blank_name(self, tmp_path: Path) -> None:
        assert save_path_for(tmp_path, "???").name == "world.yaml"


class TestRoundTrip:
    """Tests for writing and reading a whole world."""

    def test_round_trip(self, tmp_path: Path, default_config: GameConfig) -> None:
        world = _built_world(default_config)
        path = save_world(world, tmp_path / "farm.yaml")
        loaded = load_world(path, default_config)

        assert loaded.name == "Farm"
        assert set(loaded.parcels) == {ORIGIN, Pos(0, 1)}
        origin = loaded.parcels[ORIGIN]
        assert origin.type_at(Pos(0, 0)) is BuildingType.HOUSE
        assert origin.type_at(Pos(2, 0)) is BuildingType.GRAIN
        assert loaded.parcels[Pos(0, 1)].planned == {Pos(5, 5): BuildingType.HOUSE}
        assert loaded.ledger.snapshot() == world.ledger.snapshot()
        assert [s.enabled for s in loaded.stages] == [s.enabled for s in world.stages]

    def test_caches_rebuilt_on_load(self, tmp_path: Path, default_config: GameConfig) -> None:
        world = _built_world(default_config)
        loaded = load_world(save_world(world, tmp_path / "farm.yaml"), default_config)
        for pos, parcel in world.parcels.items():
            assert loaded.parcels[pos].local_counts == parcel.local_counts
            assert loaded.parcels[pos].outside_counts == parcel.outside_counts
        assert set(loaded.frontier()) == set(world.frontier())

    def test_file_is_plain_yaml(self, tmp_path: Path, default_config: GameConfig) -> None:
        path = save_world(_built_world(default_config), tmp_path / "farm.yaml")
        data = yaml.safe_load(path.read_text())
        assert data == world_to_dict(load_world(path, default_config))
        assert data["parcels"][0]["cells"][0][0] == "house"

    def test_creates_missing_directory(
        self,
        tmp_path: Path,
        default_config: GameConfig,
    ) -> None:
        path = save_world(World(config=default_config), tmp_path / "a" / "b" / "w.yaml")
        assert path.exists()


class TestBrokenSaves:
    """A save that cannot be read yields a fresh world."""

    def test_missing_file(self, tmp_path: Path, default_config: GameConfig) -> None:
        world = load_world(tmp_path / "nope.yaml", default_config)
        assert list(world.parcels) == [ORIGIN]
        assert world.ledger[Resource.SEED] == 10

    def test_corrupt_yaml(self, tmp_path: Path, default_config: GameConfig) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("name: [unclosed\n")
        world = load_world(path, default_config)
        assert world.name == "New World"

    def test_not_a_mapping(self, tmp_path: Path, default_config: GameConfig) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        assert load_world(path, default_config).name == "New World"

    def test_unknown_building(self, tmp_path: Path, default_config: GameConfig) -> None:
        data = world_to_dict(World(name="Odd", config=default_config))
        data["parcels"][0]["cells"][3][3] = "spaceport"
        path = tmp_path / "odd.yaml"
        path.write_text(yaml.safe_dump(data))
        world = load_world(path, default_config)
        assert world.name == "New World"

    def test_non_string_building(self, tmp_path: Path, default_config: GameConfig) -> None:
        data = world_to_dict(World(name="Odd", config=default_config))
        data["parcels"][0]["cells"][3][3] = 7
        path = tmp_path / "odd.yaml"
        path.write_text(yaml.safe_dump(data))
        assert load_world(path, default_config).name == "New World"

    def test_non_string_planned_building(
        self,
        tmp_path: Path,
        default_config: GameConfig,
    ) -> None:
        data = world_to_dict(World(name="Odd", config=default_config))
        data["parcels"][0]["planned"] = [{"x": 1, "y": 1, "building": None}]
        path = tmp_path / "odd.yaml"
        path.write_text(yaml.safe_dump(data))
        assert load_world(path, default_config).name == "New World"

    def test_resources_not_a_mapping(
        self,
        tmp_path: Path,
        default_config: GameConfig,
    ) -> None:
        data = world_to_dict(World(name="Odd", config=default_config))
        data["resources"] = [1, 2]
        path = tmp_path / "odd.yaml"
        path.write_text(yaml.safe_dump(data))
        assert load_world(path, default_config).name == "New World"

    def test_parcel_entry_not_a_mapping(
        self,
        tmp_path: Path,
        default_config: GameConfig,
    ) -> None:
        data = world_to_dict(World(name="Odd", config=default_config))
        data["parcels"] = ["origin"]
        path = tmp_path / "odd.yaml"
        path.write_text(yaml.safe_dump(data))
        assert load_world(path, default_config).name == "New World"

    def test_wrong_grid_shape(self, tmp_path: Path, default_config: GameConfig) -> None:
        data = world_to_dict(World(name="Short", config=default_config))
        data["parcels"][0]["cells"].pop()
        path = tmp_path / "short.yaml"
        path.write_text(yaml.safe_dump(data))
        assert load_world(path, default_config).name == "New World"

    def test_changed_stage_list_resets(
        self,
        tmp_path: Path,
        default_config: GameConfig,
    ) -> None:
        world = _built_world(default_config)
        data = world_to_dict(world)
        data["stages"] = data["stages"][:3]
        path = tmp_path / "old.yaml"
        path.write_text(yaml.safe_dump(data))

        loaded = load_world(path, default_config)
        assert loaded.name == "Farm"
        assert [s.enabled for s in loaded.stages] == [True] + [False] * 5


class TestLatest:
    """Tests for picking the newest save."""

    def test_empty_dir(self, tmp_path: Path, default_config: GameConfig) -> None:
        assert list_saves(tmp_path) == []
        assert list_saves(tmp_path / "missing") == []
        assert load_latest(tmp_path, default_config).name == "New World"

    def test_newest_first(self, tmp_path: Path, default_config: GameConfig) -> None:
        old = save_world(World(name="Old", config=default_config), tmp_path / "old.yaml")
        new = save_world(World(name="New", config=default_config), tmp_path / "new.yaml")
        (tmp_path / "notes.txt").write_text("ignored")
        os.utime(old, (1_000_000, 1_000_000))
        os.utime(new, (2_000_000, 2_000_000))

        assert list_saves(tmp_path) == [new, old]
        assert load_latest(tmp_path, default_config).name == "New"
