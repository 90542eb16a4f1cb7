"""Shared test fixtures — sample configs matching scenarios/base_case.yaml."""

from __future__ import annotations

import pytest

from cng_fleet.config import (
    Assumptions,
    DeploymentConfig,
    FuelPrices,
    Scenario,
    StationConfig,
    VehicleParameters,
)


@pytest.fixture
def vehicles() -> VehicleParameters:
    return VehicleParameters(
        light_duty_count=10,
        medium_duty_count=5,
        heavy_duty_count=2,
        light_duty_cost=15_000,
        medium_duty_cost=15_000,
        heavy_duty_cost=50_000,
        light_duty_mpg=12,
        medium_duty_mpg=10,
        heavy_duty_mpg=5,
        light_duty_annual_miles=15_000,
        medium_duty_annual_miles=20_000,
        heavy_duty_annual_miles=40_000,
    )


@pytest.fixture
def empty_fleet() -> VehicleParameters:
    return VehicleParameters(light_duty_count=0, medium_duty_count=0, heavy_duty_count=0)


@pytest.fixture
def station() -> StationConfig:
    return StationConfig(
        station_type="fast",
        business_type="aglc",
        turnkey=True,
        sizing_method="total",
    )


@pytest.fixture
def fuel() -> FuelPrices:
    return FuelPrices(
        gasoline_price=3.85,
        diesel_price=4.25,
        cng_price=2.15,
        annual_increase=2.5,
    )


@pytest.fixture
def flat_fuel() -> FuelPrices:
    """Same prices with no escalation."""
    return FuelPrices(
        gasoline_price=3.85,
        diesel_price=4.25,
        cng_price=2.15,
        annual_increase=0.0,
    )


@pytest.fixture
def assumptions() -> Assumptions:
    return Assumptions()


@pytest.fixture
def deployment() -> DeploymentConfig:
    return DeploymentConfig(strategy="phased", time_horizon=5)


@pytest.fixture
def scenario(
    vehicles: VehicleParameters,
    station: StationConfig,
    fuel: FuelPrices,
    deployment: DeploymentConfig,
    assumptions: Assumptions,
) -> Scenario:
    return Scenario(
        name="Test fleet",
        vehicles=vehicles,
        station=station,
        fuel=fuel,
        deployment=deployment,
        assumptions=assumptions,
    )
