"""Payback period — break-even detection on cumulative series.

  year_index = first i where cumulative_savings[i] ≥ cumulative_investment[i]
  years      = max(1, i − gap[i−1] / (gap[i−1] + surplus[i]))   for i > 0
             = 1                                                for i == 0

When the crossover never happens inside the horizon the result is
``never_within_horizon``; if savings are still growing in the final year, the
remaining gap is extrapolated at that growth rate (``projected_years``),
reported only when it lands within ``MAX_PROJECTED_PAYBACK_YEARS``.
"""

from __future__ import annotations

from typing import Sequence

from cng_fleet.models.results import Payback

MAX_PROJECTED_PAYBACK_YEARS = 50.0


def find_crossover(
    cumulative_savings: Sequence[float],
    cumulative_investment: Sequence[float],
) -> int | None:
    """First year index where savings cover investment, or None."""
    for i, (saved, invested) in enumerate(zip(cumulative_savings, cumulative_investment)):
        if saved >= invested:
            return i
    return None


def project_payback(
    cumulative_savings: Sequence[float],
    cumulative_investment: Sequence[float],
) -> float | None:
    """Extrapolate payback beyond the horizon from the final year's savings growth."""
    horizon = len(cumulative_savings)
    if horizon < 2:
        return None
    growth = cumulative_savings[-1] - cumulative_savings[-2]
    if growth <= 0:
        return None
    gap = cumulative_investment[-1] - cumulative_savings[-1]
    projected = horizon + gap / growth
    if projected > MAX_PROJECTED_PAYBACK_YEARS:
        return None
    return projected


def compute_payback(
    cumulative_savings: Sequence[float],
    cumulative_investment: Sequence[float],
) -> Payback:
    """Payback outcome for a pair of equal-length cumulative series."""
    if len(cumulative_savings) != len(cumulative_investment):
        raise ValueError("cumulative series must have the same length")

    i = find_crossover(cumulative_savings, cumulative_investment)
    if i is None:
        return Payback(
            status="never_within_horizon",
            projected_years=project_payback(cumulative_savings, cumulative_investment),
        )

    if i == 0:
        years = 1.0
    else:
        prior_gap = cumulative_investment[i - 1] - cumulative_savings[i - 1]
        surplus = cumulative_savings[i] - cumulative_investment[i]
        years = max(1.0, i - prior_gap / (prior_gap + surplus))

    return Payback(status="achieved", year_index=i, years=years)


def format_payback_period(years: float | None) -> str:
    """Render a payback period as "X Years, Y Months" ("N/A" when not achieved)."""
    if years is None or years != years or years < 0:
        return "N/A"

    whole = int(years)
    months = round((years - whole) * 12)
    if months == 12:
        whole += 1
        months = 0

    year_text = "Year" if whole == 1 else "Years"
    month_text = "Month" if months == 1 else "Months"
    return f"{whole} {year_text}, {months} {month_text}"
