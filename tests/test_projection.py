"""Tests for engine/projection.py and engine/orchestrator.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cng_fleet.config import (
    Assumptions,
    DeploymentConfig,
    FuelPrices,
    Scenario,
    StationConfig,
    VehicleParameters,
)
from cng_fleet.engine.distribution import distribute_vehicles
from cng_fleet.engine.orchestrator import run_calculation
from cng_fleet.engine.projection import active_fleet, annual_tariff, project
from cng_fleet.engine.station_cost import BASE_COSTS
from cng_fleet.errors import InvalidConfigurationError, UnreachableStateError
from cng_fleet.models.results import VehicleDistribution


def _run(vehicles, station, fuel, horizon=5, strategy="phased", assumptions=None):
    dist = distribute_vehicles(vehicles, horizon, strategy)
    return project(vehicles, station, fuel, horizon, strategy, dist, assumptions)


def _first_year_fuel_savings(vehicles: VehicleParameters, fuel: FuelPrices) -> float:
    """Hand calculation for the whole fleet in its first year at nominal prices."""
    light = 10 * 15_000 * (fuel.gasoline_price / 12 - fuel.cng_price / (12 * 0.95))
    medium = 5 * 20_000 * (fuel.diesel_price / 10 - fuel.cng_price / (10 * 0.925))
    heavy = 2 * 40_000 * (fuel.diesel_price / 5 - fuel.cng_price / (5 * 0.90))
    return light + medium + heavy


# ═══════════════════════════════════════════════════════════════════════════
# Investment
# ═══════════════════════════════════════════════════════════════════════════

class TestInvestment:

    def test_turnkey_station_in_first_year(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel)
        assert r.cumulative_investment[0] == 1_800_000 + 95_000
        assert r.upfront_investment == 1_800_000 + 325_000
        assert r.total_investment == r.cumulative_investment[-1] == 1_800_000 + 325_000
        assert r.yearly_tariff_fees == [0] * 5

    def test_tariff_charged_every_year(self, vehicles, fuel):
        station = StationConfig(station_type="fast", business_type="cgc", turnkey=False)
        r = _run(vehicles, station, fuel)
        assert r.station.cost == 1_710_000
        assert r.yearly_tariff_fees == [328_320] * 5
        assert r.cumulative_investment[0] == 95_000 + 328_320
        assert r.upfront_investment == 325_000
        assert r.total_investment == 325_000 + 5 * 328_320

    @pytest.mark.parametrize("business_type, expected", [
        ("aglc", 1_800_000 * 0.015 * 12),
        ("cgc", 1_800_000 * 0.016 * 12),
        ("vng", 1_800_000 * 0.016 * 12),
    ])
    def test_annual_tariff_rates(self, business_type, expected):
        assert annual_tariff(1_800_000, business_type) == pytest.approx(expected)

    def test_annual_tariff_unknown_ldc(self):
        with pytest.raises(UnreachableStateError):
            annual_tariff(1_000_000, "acme")

    def test_cumulative_investment_non_decreasing(self, vehicles, fuel):
        for turnkey in (True, False):
            station = StationConfig(turnkey=turnkey)
            for strategy in ("immediate", "phased", "aggressive", "deferred"):
                r = _run(vehicles, station, fuel, 7, strategy)
                ci = r.cumulative_investment
                assert all(b >= a for a, b in zip(ci, ci[1:]))


# ═══════════════════════════════════════════════════════════════════════════
# Savings
# ═══════════════════════════════════════════════════════════════════════════

class TestSavings:

    def test_first_year_hand_calculation(self, vehicles, station, flat_fuel):
        r = _run(vehicles, station, flat_fuel, 5, "immediate")
        expected = _first_year_fuel_savings(vehicles, flat_fuel)
        assert r.yearly_fuel_savings[0] == pytest.approx(expected, abs=1)
        assert r.yearly_maintenance_savings[0] == pytest.approx(expected * 0.10, abs=1)
        assert r.yearly_savings[0] == pytest.approx(expected * 1.10, abs=1)

    def test_flat_prices_flat_savings(self, vehicles, station, flat_fuel):
        r = _run(vehicles, station, flat_fuel, 5, "immediate")
        assert len(set(r.yearly_savings)) == 1

    def test_escalation_compounds(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel, 5, "immediate")
        assert r.yearly_fuel_savings[1] == pytest.approx(r.yearly_fuel_savings[0] * 1.025, rel=1e-4)
        assert r.yearly_fuel_savings[4] == pytest.approx(r.yearly_fuel_savings[0] * 1.025 ** 4, rel=1e-4)

    def test_savings_follow_rollout(self, vehicles, station, flat_fuel):
        immediate = _run(vehicles, station, flat_fuel, 5, "immediate")
        deferred = _run(vehicles, station, flat_fuel, 5, "deferred")
        assert immediate.yearly_savings[0] > deferred.yearly_savings[0]
        assert immediate.cumulative_savings[-1] > deferred.cumulative_savings[-1]

    def test_cumulative_savings_is_running_sum(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel)
        running = 0
        for yearly, cumulative in zip(r.yearly_savings, r.cumulative_savings):
            running += yearly
            assert cumulative == running

    def test_active_counts_recorded(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel)
        assert [row.active_light for row in r.vehicle_distribution] == [2, 4, 6, 8, 10]
        assert [row.active_heavy for row in r.vehicle_distribution] == [1, 2, 2, 2, 2]

    def test_input_distribution_untouched(self, vehicles, station, fuel):
        dist = distribute_vehicles(vehicles, 5, "phased")
        project(vehicles, station, fuel, 5, "phased", dist)
        assert all(row.active_light == 0 for row in dist)

    def test_short_distribution_padded(self, vehicles, station, fuel):
        dist = distribute_vehicles(vehicles, 3, "phased")
        r = project(vehicles, station, fuel, 6, "phased", dist)
        assert len(r.vehicle_distribution) == 6
        assert len(r.cumulative_savings) == 6
        assert r.vehicle_distribution[5].year == 6


# ═══════════════════════════════════════════════════════════════════════════
# Retirement
# ═══════════════════════════════════════════════════════════════════════════

class TestRetirement:

    def test_off_by_default(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel, 12, "immediate")
        assert r.vehicle_distribution[11].active_light == 10

    def test_cohort_leaves_after_lifespan(self, vehicles):
        dist = distribute_vehicles(vehicles, 12, "immediate")
        active, retired = active_fleet(vehicles, dist, 10, retire=True)
        assert active["light"] == 0
        assert retired["light"] == 10
        assert active["heavy"] == 2

        active, retired = active_fleet(vehicles, dist, 11, retire=True)
        assert retired["light"] == 0

    def test_retirement_reduces_late_savings(self, vehicles, station, flat_fuel):
        keep = _run(vehicles, station, flat_fuel, 12, "immediate")
        retire = _run(vehicles, station, flat_fuel, 12, "immediate", Assumptions(retire_vehicles=True))
        assert retire.yearly_savings[9] == keep.yearly_savings[9]
        assert retire.yearly_savings[10] < keep.yearly_savings[10]


# ═══════════════════════════════════════════════════════════════════════════
# Headline metrics
# ═══════════════════════════════════════════════════════════════════════════

class TestMetrics:

    def test_roi_and_net_cash_flow(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel)
        assert r.net_cash_flow == r.cumulative_savings[-1] - r.total_investment
        assert r.roi == pytest.approx(r.cumulative_savings[-1] / r.total_investment * 100)
        ratio = r.cumulative_savings[-1] / r.total_investment
        assert r.annual_rate_of_return == pytest.approx(((1 + ratio) ** (1 / 5) - 1) * 100)
        assert r.annual_fuel_savings == pytest.approx(r.cumulative_savings[-1] / 5)

    def test_payback_period_mirrors_outcome(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel, 30, "immediate")
        assert r.payback.achieved
        assert r.payback_period == r.payback.years
        assert 1.0 <= r.payback_period <= 30

    def test_payback_not_achieved_is_none(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel, 1, "immediate")
        assert not r.payback.achieved
        assert r.payback_period is None

    def test_cost_per_mile(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel)
        assert r.cost_per_mile_gasoline == pytest.approx(3.85 / 12)
        assert r.cost_per_mile_cng == pytest.approx(2.15 / 11.4)
        assert r.cost_reduction == pytest.approx(41.22, abs=0.01)

    def test_zero_gasoline_price(self, vehicles, station):
        free = FuelPrices(gasoline_price=0.0)
        r = _run(vehicles, station, free)
        assert r.cost_per_mile_gasoline == 0
        assert r.cost_reduction is None

    def test_emissions(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel, 5, "immediate")
        assert all(e > 0 for e in r.yearly_emissions_saved)
        assert r.total_emissions_saved == r.cumulative_emissions_saved[-1]
        assert 0 < r.co2_reduction < 100

    def test_series_lengths(self, vehicles, station, fuel):
        r = _run(vehicles, station, fuel, 8)
        for series in (
            r.yearly_fuel_savings, r.yearly_maintenance_savings, r.yearly_savings,
            r.yearly_tariff_fees, r.cumulative_savings, r.cumulative_investment,
            r.yearly_emissions_saved, r.cumulative_emissions_saved, r.vehicle_distribution,
        ):
            assert len(series) == 8


# ═══════════════════════════════════════════════════════════════════════════
# Degenerate inputs
# ═══════════════════════════════════════════════════════════════════════════

class TestDegenerate:

    def test_empty_fleet_turnkey(self, empty_fleet, station, fuel):
        r = _run(empty_fleet, station, fuel)
        assert r.yearly_savings == [0] * 5
        assert r.total_investment == 1_800_000
        assert r.roi == 0
        assert r.co2_reduction is None
        assert not r.payback.achieved

    def test_zero_investment_has_no_roi(self, empty_fleet, station, fuel, monkeypatch):
        monkeypatch.setitem(BASE_COSTS["fast"], "small", 0)
        r = _run(empty_fleet, station, fuel)
        assert r.total_investment == 0
        assert r.roi is None
        assert r.annual_rate_of_return is None
        assert r.net_cash_flow == 0

    def test_uneconomic_cng_loses_money(self, vehicles, station):
        pricey = FuelPrices(cng_price=10.0)
        r = _run(vehicles, station, pricey)
        assert r.cumulative_savings[-1] < 0
        assert r.net_cash_flow < 0
        assert not r.payback.achieved
        assert r.roi < 0

    def test_non_positive_horizon(self, vehicles, station, fuel):
        with pytest.raises(InvalidConfigurationError):
            project(vehicles, station, fuel, 0, "phased", [])

    def test_zero_mpg(self, station, fuel):
        bad = VehicleParameters.model_construct(**{**VehicleParameters().model_dump(), "light_duty_mpg": 0})
        with pytest.raises(InvalidConfigurationError):
            project(bad, station, fuel, 5, "phased", [])

    def test_negative_price(self, vehicles, station):
        bad = FuelPrices.model_construct(**{**FuelPrices().model_dump(), "cng_price": -1.0})
        with pytest.raises(InvalidConfigurationError):
            project(vehicles, station, bad, 5, "phased", [])

    def test_negative_vehicle_cost(self, station, fuel):
        bad = VehicleParameters.model_construct(**{**VehicleParameters().model_dump(), "heavy_duty_cost": -75_000.0})
        with pytest.raises(InvalidConfigurationError):
            project(bad, station, fuel, 5, "phased", [])

    def test_negative_row_rejected_by_model(self):
        with pytest.raises(ValidationError):
            VehicleDistribution(year=1, light=-5, investment=-75_000)

    def test_negative_row_rejected_by_projector(self, vehicles, station, fuel):
        row = VehicleDistribution.model_construct(
            year=1, light=-5, medium=0, heavy=0, investment=-75_000.0,
        )
        with pytest.raises(InvalidConfigurationError):
            project(vehicles, station, fuel, 3, "manual", [row])

    def test_negative_row_after_copy_rejected(self, vehicles, station, fuel):
        row = VehicleDistribution(year=2).model_copy(update={"heavy": -1})
        with pytest.raises(InvalidConfigurationError):
            project(vehicles, station, fuel, 3, "manual", [VehicleDistribution(year=1), row])


# ═══════════════════════════════════════════════════════════════════════════
# Orchestrator
# ═══════════════════════════════════════════════════════════════════════════

class TestRunCalculation:

    def test_matches_manual_pipeline(self, scenario: Scenario):
        r = run_calculation(scenario)
        direct = _run(scenario.vehicles, scenario.station, scenario.fuel, 5, "phased")
        assert r.model_dump() == direct.model_dump()

    def test_deterministic(self, scenario: Scenario):
        assert run_calculation(scenario).model_dump() == run_calculation(scenario).model_dump()

    def test_scenario_not_mutated(self, scenario: Scenario):
        before = scenario.model_dump()
        run_calculation(scenario)
        assert scenario.model_dump() == before

    def test_manual_strategy(self, scenario: Scenario):
        scenario.deployment = DeploymentConfig(
            strategy="manual", time_horizon=3,
            manual_distribution=[{"light": 10, "medium": 5, "heavy": 2}],
        )
        r = run_calculation(scenario)
        assert r.strategy == "manual"
        assert r.vehicle_distribution[0].light == 10
        assert r.vehicle_distribution[2].active_light == 10


class TestPaybackConsistency:

    def test_crossover_index_matches_series(self, scenario: Scenario):
        for strategy in ("immediate", "phased", "aggressive", "deferred"):
            scenario.deployment = DeploymentConfig(strategy=strategy, time_horizon=30)
            r = run_calculation(scenario)
            cs, ci = r.cumulative_savings, r.cumulative_investment
            if r.payback.achieved:
                i = r.payback.year_index
                assert cs[i] >= ci[i]
                assert all(s < inv for s, inv in zip(cs[:i], ci[:i]))
            else:
                assert all(s < inv for s, inv in zip(cs, ci))


# ═══════════════════════════════════════════════════════════════════════════
# Escalation and cumulative series
# ═══════════════════════════════════════════════════════════════════════════

class TestEscalationAndSeries:

    @pytest.mark.parametrize("year", [0, 1, 2, 5, 10, 25, 49])
    def test_zero_increase_keeps_prices_nominal(self, flat_fuel, year):
        assert flat_fuel.escalation_factor(year) == 1.0

    def test_zero_increase_same_savings_every_operating_year(self, vehicles, station, flat_fuel):
        r = _run(vehicles, station, flat_fuel, 8, "immediate")
        assert r.yearly_fuel_savings == [r.yearly_fuel_savings[0]] * 8

    @pytest.mark.parametrize("strategy", ["immediate", "phased", "aggressive", "deferred"])
    @pytest.mark.parametrize("turnkey", [True, False])
    def test_cumulative_series_non_decreasing(self, vehicles, fuel, strategy, turnkey):
        r = _run(vehicles, StationConfig(turnkey=turnkey), fuel, 10, strategy)
        assert all(s >= 0 for s in r.yearly_savings)
        cs, ci = r.cumulative_savings, r.cumulative_investment
        assert all(b >= a for a, b in zip(cs, cs[1:]))
        assert all(b >= a for a, b in zip(ci, ci[1:]))

    @pytest.mark.parametrize("strategy", ["immediate", "phased", "aggressive", "deferred"])
    def test_cumulative_steps_equal_yearly_values(self, vehicles, station, fuel, strategy):
        r = _run(vehicles, station, fuel, 10, strategy)
        steps = [r.cumulative_savings[0]] + [
            b - a for a, b in zip(r.cumulative_savings, r.cumulative_savings[1:])
        ]
        assert steps == r.yearly_savings
        emission_steps = [r.cumulative_emissions_saved[0]] + [
            b - a for a, b in zip(r.cumulative_emissions_saved, r.cumulative_emissions_saved[1:])
        ]
        assert emission_steps == r.yearly_emissions_saved
