"""Sensitivity analysis — one-at-a-time sweeps, tornado bars and 2-D grids.

Every point is a full recalculation of the perturbed scenario:

  value(pct) = base_value × (1 + pct/100)

Supported variables (``annual_miles`` scales all three classes together):
  gasoline_price, diesel_price, cng_price,
  light_duty_cost, medium_duty_cost, heavy_duty_cost, annual_miles
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Literal

import numpy as np

from cng_fleet.config.scenario import Scenario
from cng_fleet.engine.orchestrator import run_calculation
from cng_fleet.errors import InvalidConfigurationError, UnreachableStateError
from cng_fleet.models.results import CalculationResults

logger = logging.getLogger(__name__)

Metric = Literal["payback", "roi", "net_cash_flow"]
METRICS: tuple[str, ...] = ("payback", "roi", "net_cash_flow")

# Every point is a full recalculation; a grid runs points² of them.
MAX_SWEEP_POINTS = 201
MAX_GRID_POINTS = 41

# variable -> (label, dot-paths into Scenario)
VARIABLES: dict[str, tuple[str, tuple[str, ...]]] = {
    "gasoline_price": ("Gasoline Price ($/gallon)", ("fuel.gasoline_price",)),
    "diesel_price": ("Diesel Price ($/gallon)", ("fuel.diesel_price",)),
    "cng_price": ("CNG Price ($/GGE)", ("fuel.cng_price",)),
    "light_duty_cost": ("Light Duty Vehicle Cost", ("vehicles.light_duty_cost",)),
    "medium_duty_cost": ("Medium Duty Vehicle Cost", ("vehicles.medium_duty_cost",)),
    "heavy_duty_cost": ("Heavy Duty Vehicle Cost", ("vehicles.heavy_duty_cost",)),
    "annual_miles": (
        "Annual Miles Driven",
        (
            "vehicles.light_duty_annual_miles",
            "vehicles.medium_duty_annual_miles",
            "vehicles.heavy_duty_annual_miles",
        ),
    ),
}

# Default tornado sweeps: (variable, low_pct, high_pct)
DEFAULT_SWEEPS: list[tuple[str, float, float]] = [
    ("gasoline_price", -20.0, 20.0),
    ("diesel_price", -20.0, 20.0),
    ("cng_price", -20.0, 20.0),
    ("light_duty_cost", -20.0, 20.0),
    ("medium_duty_cost", -20.0, 20.0),
    ("heavy_duty_cost", -20.0, 20.0),
    ("annual_miles", -20.0, 20.0),
]


@dataclass(frozen=True)
class SensitivityPoint:
    """Headline metrics at one perturbation of one variable."""

    pct: float
    """Perturbation applied to the base value (%)."""

    payback_years: float | None
    roi: float | None
    net_cash_flow: float


@dataclass
class SensitivityCurve:
    """One variable swept across a range of perturbations."""

    variable: str
    label: str
    points: list[SensitivityPoint] = field(default_factory=list)


@dataclass(frozen=True)
class TornadoBar:
    """One bar in the tornado chart."""

    variable: str
    label: str
    low_pct: float
    high_pct: float
    net_cash_flow_at_low: float
    net_cash_flow_at_high: float
    delta: float
    """abs(high − low) — total swing width."""


@dataclass
class TornadoResult:
    """Tornado output — bars sorted by swing, widest first."""

    base_net_cash_flow: float
    bars: list[TornadoBar] = field(default_factory=list)


@dataclass
class SensitivityGrid:
    """2-D sweep of one metric; ``values[y][x]`` pairs y_pcts[y] with x_pcts[x]."""

    x_variable: str
    y_variable: str
    metric: str
    x_pcts: list[float]
    y_pcts: list[float]
    values: list[list[float | None]]


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _check_variable(variable: str) -> None:
    if variable not in VARIABLES:
        raise UnreachableStateError("sensitivity variable", variable, tuple(VARIABLES))


def _check_metric(metric: str) -> None:
    if metric not in METRICS:
        raise UnreachableStateError("sensitivity metric", metric, METRICS)


def _check_range(low_pct: float, high_pct: float) -> None:
    if low_pct > high_pct:
        raise InvalidConfigurationError(f"low ({low_pct}) must not exceed high ({high_pct})")
    if low_pct < -100:
        raise InvalidConfigurationError(f"low must be at least -100%, got {low_pct}")


def _percentages(
    low_pct: float,
    high_pct: float,
    step_pct: float,
    max_points: int = MAX_SWEEP_POINTS,
) -> list[float]:
    if step_pct <= 0:
        raise InvalidConfigurationError(f"step must be positive, got {step_pct}")
    _check_range(low_pct, high_pct)
    n_points = math.floor((high_pct - low_pct) / step_pct + 0.5) + 1
    if n_points > max_points:
        raise InvalidConfigurationError(
            f"{n_points} steps requested; at most {max_points} are allowed, use a larger step"
        )
    return [round(float(p), 6) for p in np.arange(low_pct, high_pct + step_pct / 2, step_pct)]


def _scale_nested_attr(obj: object, path: str, factor: float) -> None:
    """Multiply a nested attribute, addressed by dot-path, by ``factor``."""
    parts = path.split(".")
    current = obj
    for part in parts[:-1]:
        current = getattr(current, part)
    setattr(current, parts[-1], getattr(current, parts[-1]) * factor)


def perturb(scenario: Scenario, perturbations: dict[str, float]) -> Scenario:
    """Copy of ``scenario`` with each variable scaled by (1 + pct/100).

    The copy is re-validated, so a perturbation that breaks a field
    constraint (e.g. a negative vehicle cost) raises ``ValidationError``.
    """
    perturbed = scenario.model_copy(deep=True)
    for variable, pct in perturbations.items():
        _check_variable(variable)
        for path in VARIABLES[variable][1]:
            _scale_nested_attr(perturbed, path, 1 + pct / 100)
    return Scenario.model_validate(perturbed.model_dump())


def metric_value(results: CalculationResults, metric: str) -> float | None:
    """Read one headline metric from a result."""
    _check_metric(metric)
    if metric == "payback":
        return results.payback_period
    if metric == "roi":
        return results.roi
    return results.net_cash_flow


# ═══════════════════════════════════════════════════════════════════════════
# Analyses
# ═══════════════════════════════════════════════════════════════════════════

def run_sensitivity(
    scenario: Scenario,
    variable: str,
    low_pct: float = -50.0,
    high_pct: float = 50.0,
    step_pct: float = 5.0,
) -> SensitivityCurve:
    """Sweep one variable and record payback, ROI and net cash flow at each step."""
    _check_variable(variable)
    curve = SensitivityCurve(variable=variable, label=VARIABLES[variable][0])
    for pct in _percentages(low_pct, high_pct, step_pct):
        results = run_calculation(perturb(scenario, {variable: pct}))
        curve.points.append(SensitivityPoint(
            pct=pct,
            payback_years=results.payback_period,
            roi=results.roi,
            net_cash_flow=results.net_cash_flow,
        ))
    logger.debug("Swept %s over %d points", variable, len(curve.points))
    return curve


def run_tornado(
    scenario: Scenario,
    sweeps: list[tuple[str, float, float]] | None = None,
) -> TornadoResult:
    """One-at-a-time low/high runs per variable, sorted by net cash flow swing."""
    if sweeps is None:
        sweeps = DEFAULT_SWEEPS

    base = run_calculation(scenario)
    bars: list[TornadoBar] = []

    for variable, low_pct, high_pct in sweeps:
        _check_variable(variable)
        _check_range(low_pct, high_pct)
        low = run_calculation(perturb(scenario, {variable: low_pct}))
        high = run_calculation(perturb(scenario, {variable: high_pct}))
        bars.append(TornadoBar(
            variable=variable,
            label=VARIABLES[variable][0],
            low_pct=low_pct,
            high_pct=high_pct,
            net_cash_flow_at_low=round(low.net_cash_flow, 2),
            net_cash_flow_at_high=round(high.net_cash_flow, 2),
            delta=round(abs(high.net_cash_flow - low.net_cash_flow), 2),
        ))

    # Largest swing first
    bars.sort(key=lambda b: b.delta, reverse=True)
    return TornadoResult(base_net_cash_flow=round(base.net_cash_flow, 2), bars=bars)


def run_sensitivity_grid(
    scenario: Scenario,
    x_variable: str,
    y_variable: str,
    metric: str = "net_cash_flow",
    low_pct: float = -50.0,
    high_pct: float = 50.0,
    step_pct: float = 10.0,
) -> SensitivityGrid:
    """Vary two variables together and record ``metric`` on the full grid."""
    _check_variable(x_variable)
    _check_variable(y_variable)
    _check_metric(metric)
    if x_variable == y_variable:
        raise InvalidConfigurationError("grid variables must differ")

    pcts = _percentages(low_pct, high_pct, step_pct, MAX_GRID_POINTS)
    grid = np.full((len(pcts), len(pcts)), np.nan)

    for yi, y_pct in enumerate(pcts):
        for xi, x_pct in enumerate(pcts):
            results = run_calculation(perturb(scenario, {x_variable: x_pct, y_variable: y_pct}))
            value = metric_value(results, metric)
            if value is not None:
                grid[yi, xi] = value

    values = [[None if np.isnan(v) else float(v) for v in row] for row in grid]
    return SensitivityGrid(
        x_variable=x_variable,
        y_variable=y_variable,
        metric=metric,
        x_pcts=pcts,
        y_pcts=pcts,
        values=values,
    )
