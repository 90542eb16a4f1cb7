"""Deployment distributor — year-by-year vehicle rollout per strategy.

Every algorithmic strategy phases counts with ceiling division against a
shrinking "remaining" counter, so a class is never over-allocated and the
per-class totals are conserved:

  immediate   100 % in year 1
  phased      ceil(n / T) per year until exhausted
  aggressive  ceil(n / 2) in year 1, the rest phased over years 2..T
  deferred    the rest phased over years 1..T−1, ceil(n / 2) in year T
  manual      user rows, kept as given and zero-padded to T

The result always has exactly ``time_horizon`` rows.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Sequence

from cng_fleet.config.deployment import DEPLOYMENT_STRATEGIES, MAX_TIME_HORIZON, ManualYear
from cng_fleet.config.vehicle import VEHICLE_CLASSES, VehicleParameters
from cng_fleet.errors import InvalidConfigurationError, UnreachableStateError
from cng_fleet.models.results import VehicleDistribution

logger = logging.getLogger(__name__)

# class -> per-year counts, one entry per year of the horizon
YearlyCounts = dict[str, list[int]]
Distributor = Callable[[VehicleParameters, int], YearlyCounts]


# ═══════════════════════════════════════════════════════════════════════════
# Splitting helpers
# ═══════════════════════════════════════════════════════════════════════════

def phase_evenly(count: int, years: int) -> list[int]:
    """Split ``count`` over ``years`` with ceil(count/years) per year, clamped to what remains."""
    if years <= 0:
        return []
    per_year = math.ceil(count / years)
    remaining = count
    split: list[int] = []
    for _ in range(years):
        this_year = min(per_year, remaining)
        split.append(this_year)
        remaining -= this_year
    return split


def half_up(count: int) -> int:
    """ceil(count × 0.5) — the share front- or back-loaded by the lopsided strategies."""
    return math.ceil(count * 0.5)


# ═══════════════════════════════════════════════════════════════════════════
# One distributor per strategy
# ═══════════════════════════════════════════════════════════════════════════

def _immediate(vehicles: VehicleParameters, time_horizon: int) -> YearlyCounts:
    return {
        c: [vehicles.count(c)] + [0] * (time_horizon - 1)
        for c in VEHICLE_CLASSES
    }


def _phased(vehicles: VehicleParameters, time_horizon: int) -> YearlyCounts:
    return {c: phase_evenly(vehicles.count(c), time_horizon) for c in VEHICLE_CLASSES}


def _aggressive(vehicles: VehicleParameters, time_horizon: int) -> YearlyCounts:
    if time_horizon == 1:
        return _immediate(vehicles, time_horizon)
    counts: YearlyCounts = {}
    for c in VEHICLE_CLASSES:
        n = vehicles.count(c)
        first = half_up(n)
        counts[c] = [first] + phase_evenly(n - first, time_horizon - 1)
    return counts


def _deferred(vehicles: VehicleParameters, time_horizon: int) -> YearlyCounts:
    if time_horizon == 1:
        return _immediate(vehicles, time_horizon)
    counts: YearlyCounts = {}
    for c in VEHICLE_CLASSES:
        n = vehicles.count(c)
        final = half_up(n)
        counts[c] = phase_evenly(n - final, time_horizon - 1) + [final]
    return counts


DISTRIBUTORS: dict[str, Distributor] = {
    "immediate": _immediate,
    "phased": _phased,
    "aggressive": _aggressive,
    "deferred": _deferred,
}


def _manual(
    vehicles: VehicleParameters,
    time_horizon: int,
    manual_overrides: Sequence[ManualYear | dict] | None,
) -> YearlyCounts:
    """Take user rows as given; with no rows, fall back to the phased split."""
    if not manual_overrides:
        logger.info("Manual strategy without per-year rows; seeding with the phased split")
        return _phased(vehicles, time_horizon)

    rows = [ManualYear.model_validate(r) for r in manual_overrides]
    if len(rows) > time_horizon:
        raise InvalidConfigurationError(
            f"manual distribution has {len(rows)} years but the horizon is {time_horizon}"
        )
    padding = time_horizon - len(rows)
    return {c: [getattr(r, c) for r in rows] + [0] * padding for c in VEHICLE_CLASSES}


# ═══════════════════════════════════════════════════════════════════════════
# Public entry point
# ═══════════════════════════════════════════════════════════════════════════

def year_investment(vehicles: VehicleParameters, light: int, medium: int, heavy: int) -> float:
    """Vehicle capital for one year at the configured per-class costs."""
    return (
        light * vehicles.light_duty_cost
        + medium * vehicles.medium_duty_cost
        + heavy * vehicles.heavy_duty_cost
    )


def distribute_vehicles(
    vehicles: VehicleParameters,
    time_horizon: int,
    strategy: str,
    manual_overrides: Sequence[ManualYear | dict] | None = None,
) -> list[VehicleDistribution]:
    """Spread the fleet across the horizon according to ``strategy``.

    Parameters
    ----------
    vehicles : VehicleParameters
        Fleet totals and per-class costs.
    time_horizon : int
        Number of years; the result has exactly this many rows.
    strategy : str
        One of ``DEPLOYMENT_STRATEGIES``.
    manual_overrides : list[ManualYear | dict] | None
        Per-year rows for the ``manual`` strategy (ignored otherwise).

    Raises
    ------
    InvalidConfigurationError
        Horizon outside 1..MAX_TIME_HORIZON, or too many manual rows.
    UnreachableStateError
        Unknown strategy.
    """
    if isinstance(time_horizon, bool) or not isinstance(time_horizon, int):
        raise InvalidConfigurationError(f"time horizon must be an integer, got {time_horizon!r}")
    if time_horizon <= 0:
        raise InvalidConfigurationError(f"time horizon must be positive, got {time_horizon}")
    if time_horizon > MAX_TIME_HORIZON:
        raise InvalidConfigurationError(
            f"time horizon must be at most {MAX_TIME_HORIZON} years, got {time_horizon}"
        )

    if strategy == "manual":
        counts = _manual(vehicles, time_horizon, manual_overrides)
    elif strategy in DISTRIBUTORS:
        counts = DISTRIBUTORS[strategy](vehicles, time_horizon)
    else:
        raise UnreachableStateError("deployment strategy", strategy, DEPLOYMENT_STRATEGIES)

    distribution: list[VehicleDistribution] = []
    for i in range(time_horizon):
        light, medium, heavy = (counts[c][i] for c in VEHICLE_CLASSES)
        distribution.append(VehicleDistribution(
            year=i + 1,
            light=light,
            medium=medium,
            heavy=heavy,
            investment=year_investment(vehicles, light, medium, heavy),
        ))

    logger.debug(
        "Distributed %d vehicles over %d years (%s)",
        sum(row.total for row in distribution), time_horizon, strategy,
    )
    return distribution
