"""Narrative generator — plain-English interpretation of calculation results.

Turns ``CalculationResults`` into a sectioned text block a fleet manager (or
an LLM) can read without parsing the yearly series.
"""

from __future__ import annotations

from cng_fleet.config.scenario import Scenario
from cng_fleet.finance.comparison import STRATEGY_NAMES
from cng_fleet.finance.payback import format_payback_period
from cng_fleet.models.results import CalculationResults

KG_PER_TONNE = 1000


def _heading(title: str) -> list[str]:
    return ["=" * 60, title, "=" * 60]


def generate_narrative(scenario: Scenario, results: CalculationResults) -> str:
    """Generate a plain-English narrative for one calculation.

    Sections: fleet & station, investment, savings & payback, environment,
    cost per mile, verdict.
    """
    v = scenario.vehicles
    st = results.station
    strategy_name = STRATEGY_NAMES.get(results.strategy, results.strategy)

    sections: list[str] = []

    # ── 1. Fleet & station ──
    sections += _heading("FLEET & STATION")
    sections.append(
        f"Scenario: {scenario.name}\n"
        f"Fleet: {v.light_duty_count} light, {v.medium_duty_count} medium, "
        f"{v.heavy_duty_count} heavy ({v.total_count} vehicles)\n"
        f"Deployment: {strategy_name} over {results.time_horizon} years\n"
        f"Station: {scenario.station.station_type}-fill, {scenario.station.business_type.upper()}, "
        f"{st.tier} tier ({st.daily_gge:,.0f} GGE/day, {st.capacity_utilisation_pct:.0f}% of reference capacity)\n"
        f"Station cost: ${st.cost:,.0f} "
        + ("(paid upfront)" if scenario.station.turnkey else "(financed through the LDC tariff)")
    )

    # ── 2. Investment ──
    sections.append("")
    sections += _heading("INVESTMENT")
    tariffs = sum(results.yearly_tariff_fees)
    lines = [
        f"Upfront capital: ${results.upfront_investment:,.0f}",
        f"Total outflows over the horizon: ${results.total_investment:,.0f}",
    ]
    if tariffs > 0:
        lines.append(f"  of which LDC tariff fees: ${tariffs:,.0f} (${results.yearly_tariff_fees[0]:,.0f}/year)")
    sections.append("\n".join(lines))

    # ── 3. Savings & payback ──
    sections.append("")
    sections += _heading("SAVINGS & PAYBACK")
    final_savings = results.cumulative_savings[-1] if results.cumulative_savings else 0.0
    lines = [
        f"Cumulative savings: ${final_savings:,.0f}",
        f"Average yearly savings: ${results.annual_fuel_savings:,.0f}",
        f"Net cash flow: ${results.net_cash_flow:,.0f}",
    ]
    if results.roi is not None:
        lines.append(f"ROI: {results.roi:.1f}%  (annual rate of return {results.annual_rate_of_return:.1f}%)")
    else:
        lines.append("ROI: not applicable (no investment)")

    payback = results.payback
    if payback.achieved:
        lines.append(f"Payback: {format_payback_period(payback.years)}")
    elif payback.projected_years is not None:
        lines.append(
            f"Payback: not within {results.time_horizon} years "
            f"(projected at {format_payback_period(payback.projected_years)})"
        )
    else:
        lines.append(f"Payback: not within {results.time_horizon} years")
    sections.append("\n".join(lines))

    # ── 4. Environment ──
    sections.append("")
    sections += _heading("ENVIRONMENT")
    tonnes = results.total_emissions_saved / KG_PER_TONNE
    if results.co2_reduction is not None:
        sections.append(
            f"CO₂ avoided: {tonnes:,.1f} t over the horizon "
            f"({results.co2_reduction:.1f}% below conventional fuel)"
        )
    else:
        sections.append("CO₂ avoided: none (no vehicles in operation)")

    # ── 5. Cost per mile ──
    sections.append("")
    sections += _heading("COST PER MILE (LIGHT DUTY)")
    lines = [
        f"Gasoline: ${results.cost_per_mile_gasoline:.3f}/mile",
        f"CNG:      ${results.cost_per_mile_cng:.3f}/mile",
    ]
    if results.cost_reduction is not None:
        lines.append(f"Reduction: {results.cost_reduction:.1f}%")
    sections.append("\n".join(lines))

    # ── 6. Verdict ──
    sections.append("")
    sections += _heading("VERDICT")
    if payback.achieved and results.net_cash_flow >= 0:
        verdict = "The conversion pays for itself within the analysis horizon."
    elif payback.projected_years is not None:
        verdict = ("The conversion does not pay back within the horizon but is on track to; "
                   "consider a longer horizon or an earlier deployment.")
    else:
        verdict = ("The conversion does not pay back on current assumptions; "
                   "check fuel prices, mileage and vehicle costs.")
    sections.append(verdict)

    return "\n".join(sections)
