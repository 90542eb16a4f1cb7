"""Financial projector — yearly savings, investment, payback, ROI and emissions.

Year loop (0-indexed, year 0 = first operating year):

  active[c]        = Σ deployed[c] up to this year  (− retired cohorts, if modelled)
  price multiplier = (1 + annual_increase/100) ** year, applied to every fuel
  fuel savings     = Σ active × miles × (conv_price/mpg − cng_price/cng_mpg)
  maintenance      = maintenance_savings_pct × fuel savings
  investment       = station (turnkey, year 0) + vehicles this year + tariff (non-turnkey)

Tariff: a non-turnkey station is never capitalised; the LDC charges a monthly
percentage of its cost, booked as an annual outflow in every year.
"""

from __future__ import annotations

import logging
from typing import Sequence

from cng_fleet.config.assumptions import Assumptions
from cng_fleet.config.fuel import FuelPrices
from cng_fleet.config.station import BUSINESS_TYPES, StationConfig
from cng_fleet.config.vehicle import VEHICLE_CLASSES, VehicleParameters
from cng_fleet.engine.station_cost import estimate_station_cost
from cng_fleet.errors import InvalidConfigurationError, UnreachableStateError
from cng_fleet.finance.payback import compute_payback
from cng_fleet.models.results import CalculationResults, VehicleDistribution

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12

# LDC investment tariff — monthly fee as a fraction of station cost.
MONTHLY_TARIFF_RATES: dict[str, float] = {
    "aglc": 0.015,
    "cgc": 0.016,
    "vng": 0.016,
}


def annual_tariff(station_cost: float, business_type: str) -> float:
    """Yearly LDC tariff for a financed (non-turnkey) station."""
    if business_type not in MONTHLY_TARIFF_RATES:
        raise UnreachableStateError("business type", business_type, BUSINESS_TYPES)
    return station_cost * MONTHLY_TARIFF_RATES[business_type] * MONTHS_PER_YEAR


def cng_mpg(vehicles: VehicleParameters, assumptions: Assumptions, vehicle_class: str) -> float:
    """Fuel economy on CNG (miles per GGE) after the class efficiency loss."""
    return vehicles.mpg(vehicle_class) * (1.0 - assumptions.cng_efficiency_loss(vehicle_class))


def _conventional_price(fuel_prices: FuelPrices, fuel: str) -> float:
    return fuel_prices.gasoline_price if fuel == "gasoline" else fuel_prices.diesel_price


def active_fleet(
    vehicles: VehicleParameters,
    distribution: Sequence[VehicleDistribution],
    year: int,
    retire: bool,
) -> tuple[dict[str, int], dict[str, int]]:
    """Vehicles in operation in ``year`` and vehicles retiring in ``year``.

    Without retirement every deployed vehicle stays in operation for the rest
    of the horizon.  With retirement a cohort deployed in year i leaves in
    year i + lifespan.
    """
    active: dict[str, int] = {}
    retired: dict[str, int] = {}
    for c in VEHICLE_CLASSES:
        lifespan = vehicles.lifespan(c)
        count = 0
        leaving = 0
        for i in range(min(year + 1, len(distribution))):
            deployed = getattr(distribution[i], c)
            if retire and year >= i + lifespan:
                if year == i + lifespan:
                    leaving += deployed
                continue
            count += deployed
        active[c] = count
        retired[c] = leaving
    return active, retired


def _validate(
    vehicles: VehicleParameters,
    fuel_prices: FuelPrices,
    time_horizon: int,
    distribution: Sequence[VehicleDistribution],
) -> None:
    if time_horizon <= 0:
        raise InvalidConfigurationError(f"time horizon must be positive, got {time_horizon}")
    for c in VEHICLE_CLASSES:
        if vehicles.count(c) < 0:
            raise InvalidConfigurationError(f"{c}-duty count must be non-negative")
        if vehicles.mpg(c) <= 0:
            raise InvalidConfigurationError(f"{c}-duty MPG must be positive")
        if vehicles.cost(c) < 0 or vehicles.annual_miles(c) < 0:
            raise InvalidConfigurationError(f"{c}-duty cost and annual miles must be non-negative")
    for name in ("gasoline_price", "diesel_price", "cng_price"):
        if getattr(fuel_prices, name) < 0:
            raise InvalidConfigurationError(f"{name} must be non-negative")
    for row in distribution:
        for c in VEHICLE_CLASSES:
            if getattr(row, c) < 0:
                raise InvalidConfigurationError(
                    f"year {row.year} deploys a negative number of {c}-duty vehicles"
                )


def project(
    vehicles: VehicleParameters,
    station_config: StationConfig,
    fuel_prices: FuelPrices,
    time_horizon: int,
    strategy: str,
    distribution: Sequence[VehicleDistribution],
    assumptions: Assumptions | None = None,
) -> CalculationResults:
    """Project savings, investment and returns over the horizon.

    ``distribution`` is zero-padded to ``time_horizon`` if short.  The input
    rows are not modified; the returned distribution carries the active and
    retired counts for each year.
    """
    if assumptions is None:
        assumptions = Assumptions()
    _validate(vehicles, fuel_prices, time_horizon, distribution)

    rows = [row.model_copy() for row in distribution[:time_horizon]]
    while len(rows) < time_horizon:
        rows.append(VehicleDistribution(year=len(rows) + 1))

    station = estimate_station_cost(station_config, vehicles, rows, assumptions)
    tariff = 0.0 if station_config.turnkey else annual_tariff(station.cost, station_config.business_type)

    vehicle_investment = sum(row.investment for row in rows)
    upfront_investment = vehicle_investment + (station.cost if station_config.turnkey else 0.0)

    cng_mpgs = {c: cng_mpg(vehicles, assumptions, c) for c in VEHICLE_CLASSES}

    yearly_fuel: list[float] = []
    yearly_maintenance: list[float] = []
    yearly_savings: list[float] = []
    yearly_tariffs: list[float] = []
    cumulative_savings: list[float] = []
    cumulative_investment: list[float] = []
    yearly_emissions: list[float] = []
    cumulative_emissions: list[float] = []

    savings_to_date = 0.0
    investment_to_date = station.cost if station_config.turnkey else 0.0
    emissions_to_date = 0.0
    conventional_emissions_total = 0.0

    for year in range(time_horizon):
        active, retired = active_fleet(vehicles, rows, year, assumptions.retire_vehicles)
        rows[year] = rows[year].model_copy(update={
            "active_light": active["light"],
            "active_medium": active["medium"],
            "active_heavy": active["heavy"],
            "retired_light": retired["light"],
            "retired_medium": retired["medium"],
            "retired_heavy": retired["heavy"],
        })

        multiplier = fuel_prices.escalation_factor(year)
        cng_price = fuel_prices.cng_price * multiplier

        fuel_savings = 0.0
        conventional_kg = 0.0
        cng_kg = 0.0
        for c in VEHICLE_CLASSES:
            miles = active[c] * vehicles.annual_miles(c)
            fuel = vehicles.fuel_type(c)
            conv_price = _conventional_price(fuel_prices, fuel) * multiplier
            fuel_savings += miles * (conv_price / vehicles.mpg(c) - cng_price / cng_mpgs[c])

            conventional_kg += miles * assumptions.emission_factor(fuel) / vehicles.mpg(c)
            cng_kg += miles * assumptions.cng_emission_factor / cng_mpgs[c]

        maintenance_savings = fuel_savings * assumptions.maintenance_savings_pct
        year_savings = fuel_savings + maintenance_savings

        savings_to_date += round(year_savings)
        investment_to_date += rows[year].investment + tariff

        yearly_fuel.append(round(fuel_savings))
        yearly_maintenance.append(round(maintenance_savings))
        yearly_savings.append(round(year_savings))
        yearly_tariffs.append(round(tariff))
        cumulative_savings.append(savings_to_date)
        cumulative_investment.append(round(investment_to_date))

        saved_kg = conventional_kg - cng_kg
        conventional_emissions_total += conventional_kg
        emissions_to_date += round(saved_kg)
        yearly_emissions.append(round(saved_kg))
        cumulative_emissions.append(emissions_to_date)

    payback = compute_payback(cumulative_savings, cumulative_investment)

    total_investment = cumulative_investment[-1]
    final_savings = cumulative_savings[-1]

    if total_investment > 0:
        ratio = final_savings / total_investment
        roi: float | None = ratio * 100
        # A loss of the whole investment or more has no real CAGR.
        annual_rate: float | None = (
            ((ratio + 1) ** (1 / time_horizon) - 1) * 100 if ratio > -1 else -100.0
        )
    else:
        logger.info("Total investment is zero; ROI and annual rate of return are not applicable")
        roi = None
        annual_rate = None

    co2_reduction = (
        emissions_to_date / conventional_emissions_total * 100
        if conventional_emissions_total > 0 else None
    )

    # Light duty at nominal prices.
    cost_per_mile_gasoline = fuel_prices.gasoline_price / vehicles.light_duty_mpg
    cost_per_mile_cng = fuel_prices.cng_price / cng_mpgs["light"]
    cost_reduction = (
        (cost_per_mile_gasoline - cost_per_mile_cng) / cost_per_mile_gasoline * 100
        if cost_per_mile_gasoline > 0 else None
    )

    logger.debug(
        "Projected %s over %d years: investment $%.0f, savings $%.0f, payback %s",
        strategy, time_horizon, total_investment, final_savings, payback.years,
    )

    return CalculationResults(
        strategy=strategy,
        time_horizon=time_horizon,
        station=station,
        upfront_investment=round(upfront_investment),
        total_investment=total_investment,
        yearly_fuel_savings=yearly_fuel,
        yearly_maintenance_savings=yearly_maintenance,
        yearly_savings=yearly_savings,
        yearly_tariff_fees=yearly_tariffs,
        cumulative_savings=cumulative_savings,
        cumulative_investment=cumulative_investment,
        payback=payback,
        payback_period=payback.years,
        roi=roi,
        annual_rate_of_return=annual_rate,
        net_cash_flow=final_savings - total_investment,
        annual_fuel_savings=final_savings / time_horizon,
        co2_reduction=co2_reduction,
        yearly_emissions_saved=yearly_emissions,
        cumulative_emissions_saved=cumulative_emissions,
        total_emissions_saved=cumulative_emissions[-1],
        cost_per_mile_gasoline=cost_per_mile_gasoline,
        cost_per_mile_cng=cost_per_mile_cng,
        cost_reduction=cost_reduction,
        vehicle_distribution=rows,
    )
