"""Tests for homestead.economy.ledger."""

from homestead.catalog.resources import Resource
from homestead.economy.ledger import Capacity, Ledger


class TestCapacity:
    """Tests for per-resource ceilings."""

    def test_default_base_storage(self) -> None:
        capacity = Capacity()
        assert capacity.cap(Resource.FOOD) == 100
        assert capacity.cap(Resource.STORAGE) == 100

    def test_cash_headroom(self) -> None:
        capacity = Capacity(storage=300, cash=1000)
        assert capacity.cap(Resource.TAX) == 1300
        assert capacity.cap(Resource.CASH_STORAGE) == 1300
        assert capacity.cap(Resource.STORAGE) == 300
        assert capacity.cap(Resource.WOOD) == 300


class TestLedger:
    """Tests for the resource ledger."""

    def test_every_resource_starts_at_zero(self) -> None:
        ledger = Ledger()
        assert all(ledger[r] == 0 for r in Resource)
        assert set(ledger) == set(Resource)

    def test_amounts_never_negative(self) -> None:
        ledger = Ledger()
        ledger[Resource.FOOD] = -5
        assert ledger[Resource.FOOD] == 0

    def test_debit_is_all_or_nothing(self) -> None:
        ledger = Ledger({Resource.WOOD: 10, Resource.FOOD: 5})
        assert not ledger.debit(((Resource.WOOD, 10), (Resource.FOOD, 10)))
        assert ledger[Resource.WOOD] == 10
        assert ledger[Resource.FOOD] == 5

    def test_debit_charges_every_component(self) -> None:
        ledger = Ledger({Resource.WOOD: 10, Resource.FOOD: 15})
        assert ledger.debit(((Resource.WOOD, 10), (Resource.FOOD, 10)))
        assert ledger[Resource.WOOD] == 0
        assert ledger[Resource.FOOD] == 5

    def test_empty_cost_is_always_affordable(self) -> None:
        assert Ledger().debit(())

    def test_credit_saturates_at_capacity(self) -> None:
        ledger = Ledger({Resource.WOOD: 95})
        kept = ledger.credit(Resource.WOOD, 20)
        assert kept == 5
        assert ledger[Resource.WOOD] == 100

    def test_credit_never_lowers_an_amount(self) -> None:
        ledger = Ledger({Resource.WOOD: 150})
        assert ledger.credit(Resource.WOOD, 10) == 0
        assert ledger[Resource.WOOD] == 150

    def test_credit_with_explicit_cap(self) -> None:
        ledger = Ledger()
        ledger.credit(Resource.TAX, 500, cap=250)
        assert ledger[Resource.TAX] == 250

    def test_refund_ratio(self) -> None:
        ledger = Ledger()
        ledger.refund(((Resource.WOOD, 10), (Resource.FOOD, 10)), ratio=0.5)
        assert ledger[Resource.WOOD] == 5
        assert ledger[Resource.FOOD] == 5

    def test_snapshot_is_a_copy(self) -> None:
        ledger = Ledger({Resource.SEED: 3})
        snap = ledger.snapshot()
        snap[Resource.SEED] = 99
        assert ledger[Resource.SEED] == 3
