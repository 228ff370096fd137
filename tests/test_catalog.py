"""Tests for homestead.catalog - buildings, resources and stages."""

import pytest

from homestead.catalog.buildings import (
    CITY_TILES,
    GROUND,
    BuildingType,
    cost,
    derive,
    output,
)
from homestead.catalog.resources import Resource
from homestead.catalog.stages import STAGE_COUNT, Stage, default_stages
from homestead.economy.ledger import Ledger


class TestLookupTables:
    """Every enum member must have an entry in every display table."""

    @pytest.mark.parametrize("building_type", list(BuildingType))
    def test_building_symbol_and_name(self, building_type: BuildingType) -> None:
        assert len(building_type.symbol) == 2
        assert building_type.display_name

    @pytest.mark.parametrize("resource", list(Resource))
    def test_resource_symbol_and_name(self, resource: Resource) -> None:
        assert resource.symbol
        assert resource.display_name

    def test_symbols_are_distinct(self) -> None:
        symbols = [bt.symbol for bt in BuildingType]
        assert len(set(symbols)) == len(symbols)


class TestDerive:
    """Tests for the pure Building derivation."""

    def test_total_over_enum(self) -> None:
        for bt in BuildingType:
            assert derive(bt).building_type is bt

    def test_same_type_gives_equal_values(self) -> None:
        assert derive(BuildingType.HOUSE) == derive(BuildingType.HOUSE)

    def test_ground_has_no_rules(self) -> None:
        assert GROUND.is_ground
        assert GROUND.cost == ()
        assert GROUND.required_adj == ()
        assert GROUND.tile_adj == ()

    def test_never_requires_itself(self) -> None:
        for bt in BuildingType:
            assert bt not in derive(bt).required_adj

    def test_ground_neighbour_always_tolerated(self) -> None:
        for bt in BuildingType:
            if bt is not BuildingType.GROUND:
                assert derive(bt).allows_neighbour(BuildingType.GROUND)

    def test_house(self) -> None:
        house = derive(BuildingType.HOUSE)
        assert house.cost == ((Resource.WOOD, 10), (Resource.FOOD, 10))
        assert house.required_adj == ()
        assert house.allows_neighbour(BuildingType.HOUSE)
        assert house.allows_neighbour(BuildingType.BASIC_RESEARCH_FACILITY)
        assert not house.allows_neighbour(BuildingType.GRAIN)

    def test_concrete_mixer_requires_factory_and_gauge(self) -> None:
        mixer = derive(BuildingType.CONCRETE_MIXER)
        assert mixer.required_adj == (BuildingType.FACTORY, BuildingType.GAUGE)

    def test_research_requires_house_and_battery(self) -> None:
        lab = derive(BuildingType.BASIC_RESEARCH_FACILITY)
        assert set(lab.required_adj) == {BuildingType.HOUSE, BuildingType.BATTERY}

    def test_compatible_pairs_are_symmetric(self) -> None:
        assert derive(BuildingType.WAREHOUSE).allows_neighbour(BuildingType.SHOP)
        assert derive(BuildingType.SHOP).allows_neighbour(BuildingType.WAREHOUSE)
        assert derive(BuildingType.GRAIN).allows_neighbour(BuildingType.CARROT)
        assert derive(BuildingType.CARROT).allows_neighbour(BuildingType.GRAIN)

    def test_city_tiles_need_asphalt_and_each_other(self) -> None:
        for tile in CITY_TILES:
            building = derive(tile)
            assert BuildingType.ASPHALT in building.required_adj
            for other in CITY_TILES:
                assert building.allows_neighbour(other)
        assert derive(BuildingType.ASPHALT).allows_neighbour(BuildingType.BANK)

    def test_tile_adjacency(self) -> None:
        assert derive(BuildingType.GRAIN).tile_adj == (BuildingType.HOUSE,)
        assert set(derive(BuildingType.SHOP).tile_adj) == {
            BuildingType.GRAIN,
            BuildingType.HOUSE,
            BuildingType.TREE,
        }
        assert BuildingType.APARTMENT in derive(BuildingType.BANK).tile_adj
        assert BuildingType.APARTMENT not in derive(BuildingType.HOSPITAL).tile_adj


class TestCostAndOutput:
    """Tests for the economic tables."""

    def test_grain_output(self) -> None:
        assert output(BuildingType.GRAIN) == ((Resource.FOOD, 1), (Resource.SEED, 1))

    def test_storage_outputs(self) -> None:
        assert output(BuildingType.WAREHOUSE) == ((Resource.STORAGE, 100),)
        assert output(BuildingType.BANK) == ((Resource.CASH_STORAGE, 1000),)

    def test_unmapped_types_are_free_and_idle(self) -> None:
        assert cost(BuildingType.ROCKET) == ()
        assert output(BuildingType.ROCKET) == ()
        assert output(BuildingType.HOUSE) == ()

    def test_derive_uses_cost_table(self) -> None:
        for bt in BuildingType:
            assert derive(bt).cost == cost(bt)


class TestStages:
    """Tests for the progression gates."""

    def test_only_first_stage_starts_unlocked(self) -> None:
        stages = default_stages()
        assert len(stages) == STAGE_COUNT
        assert [s.enabled for s in stages] == [True] + [False] * (STAGE_COUNT - 1)

    def test_first_stage_buildings(self) -> None:
        assert default_stages()[0].buildings == (BuildingType.HOUSE, BuildingType.GRAIN)

    def test_every_building_belongs_to_one_stage(self) -> None:
        offered = [bt for stage in default_stages() for bt in stage.buildings]
        assert len(offered) == len(set(offered))
        assert set(offered) == set(BuildingType) - {BuildingType.GROUND}

    def test_try_unlock_waits_for_threshold(self) -> None:
        stage = Stage.numbered(2)
        assert not stage.try_unlock(Ledger({Resource.SEED: 49}))
        assert not stage.enabled

    def test_try_unlock_reports_transition_once(self) -> None:
        stage = Stage.numbered(2)
        ledger = Ledger({Resource.SEED: 50})
        assert stage.try_unlock(ledger)
        assert stage.enabled
        assert not stage.try_unlock(ledger)
        assert stage.enabled

    def test_unlock_is_monotonic(self) -> None:
        stage = Stage.numbered(3)
        stage.force_unlock()
        assert not stage.try_unlock(Ledger())
        assert stage.enabled

    def test_last_stage_is_out_of_reach(self) -> None:
        stage = Stage.numbered(6)
        assert len(stage.unlock_at) == len(Resource)
        assert not stage.try_unlock(Ledger({r: 500_000 for r in Resource}))

    def test_unknown_stage_is_empty(self) -> None:
        stage = Stage.numbered(42)
        assert stage.buildings == ()
        assert not stage.enabled
