"""Station cost estimator — tiered capacity lookup.

Sizing chain:
  daily_gge = Σ count × gge_per_day / (1 − cng_efficiency_loss)
  tier      = first threshold the throughput falls under (small → xlarge)
  cost      = round(BASE_COSTS[station_type][tier] × BUSINESS_MULTIPLIERS[business_type])

With ``sizing_method == "peak"`` the counts are the largest single-year
deployment of each class instead of the fleet totals.
"""

from __future__ import annotations

import logging
from typing import Sequence

from cng_fleet.config.assumptions import Assumptions
from cng_fleet.config.station import BUSINESS_TYPES, SIZING_METHODS, STATION_TYPES, StationConfig
from cng_fleet.config.vehicle import VEHICLE_CLASSES, VehicleParameters
from cng_fleet.errors import InvalidConfigurationError, UnreachableStateError
from cng_fleet.models.results import CapacityTier, StationCostEstimate, VehicleDistribution

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365

# Upper bounds (exclusive, GGE/day); the last tier is open-ended.
TIER_THRESHOLDS: tuple[tuple[CapacityTier, float], ...] = (
    ("small", 200.0),
    ("medium", 500.0),
    ("large", 800.0),
    ("xlarge", float("inf")),
)

BASE_COSTS: dict[str, dict[CapacityTier, float]] = {
    "fast": {
        "small": 1_800_000,
        "medium": 2_200_000,
        "large": 2_700_000,
        "xlarge": 3_100_000,
    },
    "time": {
        "small": 491_000,
        "medium": 1_200_000,
        "large": 2_100_000,
        "xlarge": 3_500_000,
    },
}

BUSINESS_MULTIPLIERS: dict[str, float] = {
    "aglc": 1.0,
    "cgc": 0.95,
    "vng": 0.95,
}

# Reference maximum throughput (GGE/day) used for the utilisation gauge.
MAX_CAPACITY_GGE: dict[str, float] = {
    "fast": 1000.0,
    "time": 800.0,
}


def _check_tables() -> None:
    """Fail at import if a lookup table is missing a (type, tier) entry."""
    bounds = [b for _, b in TIER_THRESHOLDS]
    if bounds != sorted(bounds) or len(set(bounds)) != len(bounds) or bounds[-1] != float("inf"):
        raise RuntimeError("TIER_THRESHOLDS must be strictly increasing and end open-ended")
    tiers = {t for t, _ in TIER_THRESHOLDS}
    for station_type in STATION_TYPES:
        missing = tiers - set(BASE_COSTS.get(station_type, {}))
        if missing:
            raise RuntimeError(f"BASE_COSTS[{station_type!r}] is missing tiers {sorted(missing)}")
        if station_type not in MAX_CAPACITY_GGE:
            raise RuntimeError(f"MAX_CAPACITY_GGE is missing {station_type!r}")
    for business_type in BUSINESS_TYPES:
        if business_type not in BUSINESS_MULTIPLIERS:
            raise RuntimeError(f"BUSINESS_MULTIPLIERS is missing {business_type!r}")


_check_tables()


def classify_tier(daily_gge: float) -> CapacityTier:
    """Map a daily throughput (GGE) onto its capacity tier."""
    if daily_gge < 0:
        raise InvalidConfigurationError(f"daily throughput must be non-negative, got {daily_gge}")
    for tier, upper in TIER_THRESHOLDS:
        if daily_gge < upper:
            return tier
    # Only NaN reaches here.
    raise InvalidConfigurationError(f"daily throughput is not a number: {daily_gge}")


def compute_daily_gge(
    counts: dict[str, int],
    assumptions: Assumptions,
) -> float:
    """Daily fuel demand of ``counts`` vehicles, grossed up for CNG efficiency loss."""
    total = 0.0
    for vehicle_class in VEHICLE_CLASSES:
        efficiency = 1.0 - assumptions.cng_efficiency_loss(vehicle_class)
        total += counts[vehicle_class] * assumptions.gge_per_day(vehicle_class) / efficiency
    return total


def peak_counts(distribution: Sequence[VehicleDistribution]) -> dict[str, int]:
    """Largest single-year deployment of each class across the distribution."""
    return {
        vehicle_class: max((getattr(row, vehicle_class) for row in distribution), default=0)
        for vehicle_class in VEHICLE_CLASSES
    }


def _sizing_counts(
    config: StationConfig,
    vehicles: VehicleParameters,
    distribution: Sequence[VehicleDistribution] | None,
) -> dict[str, int]:
    if config.sizing_method == "total":
        return {c: vehicles.count(c) for c in VEHICLE_CLASSES}
    if config.sizing_method == "peak":
        if not distribution:
            logger.warning("Peak sizing requested without a distribution; sizing on fleet totals")
            return {c: vehicles.count(c) for c in VEHICLE_CLASSES}
        return peak_counts(distribution)
    raise UnreachableStateError("sizing method", config.sizing_method, SIZING_METHODS)


def estimate_station_cost(
    config: StationConfig,
    vehicles: VehicleParameters,
    distribution: Sequence[VehicleDistribution] | None = None,
    assumptions: Assumptions | None = None,
) -> StationCostEstimate:
    """Size the station for the fleet and look up its capital cost.

    Parameters
    ----------
    config : StationConfig
        Fill type, LDC, payment mode and sizing method.
    vehicles : VehicleParameters
        Fleet totals (used directly for ``total`` sizing).
    distribution : list[VehicleDistribution] | None
        Year-by-year rollout; required for meaningful ``peak`` sizing.
    assumptions : Assumptions | None
        GGE factors and efficiency loss. None = defaults.

    Returns
    -------
    StationCostEstimate
        Throughput, tier, base cost, multiplier and the rounded cost.
    """
    if assumptions is None:
        assumptions = Assumptions()

    if config.station_type not in BASE_COSTS:
        raise UnreachableStateError("station type", config.station_type, STATION_TYPES)
    if config.business_type not in BUSINESS_MULTIPLIERS:
        raise UnreachableStateError("business type", config.business_type, BUSINESS_TYPES)

    counts = _sizing_counts(config, vehicles, distribution)
    daily_gge = compute_daily_gge(counts, assumptions)
    tier = classify_tier(daily_gge)

    base_cost = BASE_COSTS[config.station_type][tier]
    multiplier = BUSINESS_MULTIPLIERS[config.business_type]
    cost = float(round(base_cost * multiplier))

    max_capacity = MAX_CAPACITY_GGE[config.station_type]
    utilisation = min(round(daily_gge / max_capacity * 100, 1), 100.0)

    logger.debug(
        "Station sized at %.1f GGE/day (%s tier, %s-fill, %s): $%.0f",
        daily_gge, tier, config.station_type, config.business_type, cost,
    )

    return StationCostEstimate(
        daily_gge=round(daily_gge, 2),
        annual_gge=round(daily_gge * DAYS_PER_YEAR, 2),
        tier=tier,
        sized_on_light=counts["light"],
        sized_on_medium=counts["medium"],
        sized_on_heavy=counts["heavy"],
        base_cost=base_cost,
        business_multiplier=multiplier,
        cost=cost,
        capacity_utilisation_pct=utilisation,
    )


def station_cost(
    config: StationConfig,
    vehicles: VehicleParameters,
    distribution: Sequence[VehicleDistribution] | None = None,
    assumptions: Assumptions | None = None,
) -> float:
    """Capital cost of the station in whole dollars."""
    return estimate_station_cost(config, vehicles, distribution, assumptions).cost
