"""Result types — the contract between the engine and its consumers.

Charts, reports and the API only ever read these records.  Fields that have
no meaningful value for a degenerate input (zero investment, zero gasoline
cost per mile, no conventional emissions) are ``None`` — never NaN or inf.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


# ═══════════════════════════════════════════════════════════════════════════
# Station sizing & cost
# ═══════════════════════════════════════════════════════════════════════════

CapacityTier = Literal["small", "medium", "large", "xlarge"]


class StationCostEstimate(BaseModel):
    """Capital cost of the CNG station and how it was sized."""

    daily_gge: float
    """Fuel throughput the station must deliver per day (GGE), after CNG efficiency loss."""

    annual_gge: float
    """daily_gge × 365."""

    tier: CapacityTier
    """Capacity tier the throughput falls into."""

    sized_on_light: int
    sized_on_medium: int
    sized_on_heavy: int
    """Vehicle counts used for sizing — fleet totals, or peak single-year counts."""

    base_cost: float
    """Table cost for (station_type, tier) before the business adjustment."""

    business_multiplier: float
    """LDC-specific adjustment applied to base_cost."""

    cost: float
    """base_cost × business_multiplier, rounded to whole dollars."""

    capacity_utilisation_pct: float
    """daily_gge as a share of the reference maximum for the station type, capped at 100."""


# ═══════════════════════════════════════════════════════════════════════════
# Deployment
# ═══════════════════════════════════════════════════════════════════════════

class VehicleDistribution(BaseModel):
    """One year of the rollout.  ``light``/``medium``/``heavy`` are deployed *that year*."""

    year: int
    """1-based year of the analysis horizon."""

    light: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    heavy: int = Field(default=0, ge=0)

    investment: float = 0.0
    """Vehicle capital spent this year = Σ count × per-class cost."""

    # --- Filled in by the projector ---
    active_light: int = 0
    active_medium: int = 0
    active_heavy: int = 0
    """Vehicles in operation this year (deployed to date, minus retired)."""

    retired_light: int = 0
    retired_medium: int = 0
    retired_heavy: int = 0
    """Vehicles leaving operation this year (only when retirement is modelled)."""

    @property
    def total(self) -> int:
        return self.light + self.medium + self.heavy


# ═══════════════════════════════════════════════════════════════════════════
# Payback
# ═══════════════════════════════════════════════════════════════════════════

class Payback(BaseModel):
    """Payback outcome — either achieved inside the horizon or not.

    Consumers must branch on ``status``; ``years`` is ``None`` whenever the
    investment is not recovered within the horizon.
    """

    status: Literal["achieved", "never_within_horizon"]

    year_index: int | None = None
    """0-based year in which cumulative savings first cover cumulative investment."""

    years: float | None = None
    """Fractional payback period (years), interpolated within the crossover year."""

    projected_years: float | None = None
    """Extrapolated payback beyond the horizon from the final year's savings growth.
    Only set when never achieved, savings still growing, and the projection ≤ 50 years."""

    @property
    def achieved(self) -> bool:
        return self.status == "achieved"


# ═══════════════════════════════════════════════════════════════════════════
# Full calculation result
# ═══════════════════════════════════════════════════════════════════════════

class CalculationResults(BaseModel):
    """Everything the calculator produces for one scenario."""

    strategy: str
    time_horizon: int

    station: StationCostEstimate

    # --- Investment ---
    upfront_investment: float
    """Vehicle capital over the horizon + station cost if turnkey (excludes tariffs)."""

    total_investment: float
    """All outflows over the horizon = cumulative_investment[-1] (includes tariff fees)."""

    # --- Yearly series (length == time_horizon) ---
    yearly_fuel_savings: list[float]
    yearly_maintenance_savings: list[float]
    yearly_savings: list[float]
    yearly_tariff_fees: list[float]
    cumulative_savings: list[float]
    cumulative_investment: list[float]

    # --- Headline metrics ---
    payback: Payback
    payback_period: float | None
    """Shortcut for payback.years — None when never achieved within the horizon."""

    roi: float | None
    """final cumulative savings / total investment × 100; None when investment is 0."""

    annual_rate_of_return: float | None
    """CAGR-style return over the horizon (%); None when investment is 0."""

    net_cash_flow: float
    """final cumulative savings − total investment."""

    annual_fuel_savings: float
    """Average yearly savings over the horizon."""

    # --- Emissions (kg CO₂) ---
    co2_reduction: float | None
    """Emissions avoided as a share of conventional-fuel emissions (%)."""

    yearly_emissions_saved: list[float]
    cumulative_emissions_saved: list[float]
    total_emissions_saved: float

    # --- Cost per mile (light duty, nominal prices) ---
    cost_per_mile_gasoline: float
    cost_per_mile_cng: float
    cost_reduction: float | None

    vehicle_distribution: list[VehicleDistribution]
