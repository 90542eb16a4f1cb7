"""Yearly results as a table — for CSV export and tabular UIs."""

from __future__ import annotations

import pandas as pd

from cng_fleet.models.results import CalculationResults

COLUMNS = [
    "year",
    "light_deployed",
    "medium_deployed",
    "heavy_deployed",
    "active_vehicles",
    "vehicle_investment",
    "tariff_fees",
    "fuel_savings",
    "maintenance_savings",
    "total_savings",
    "cumulative_investment",
    "cumulative_savings",
    "net_position",
    "emissions_saved_kg",
    "cumulative_emissions_saved_kg",
]


def yearly_table(results: CalculationResults) -> pd.DataFrame:
    """One row per year of the horizon, indexed by 1-based year."""
    records = []
    for i, row in enumerate(results.vehicle_distribution):
        records.append({
            "year": row.year,
            "light_deployed": row.light,
            "medium_deployed": row.medium,
            "heavy_deployed": row.heavy,
            "active_vehicles": row.active_light + row.active_medium + row.active_heavy,
            "vehicle_investment": row.investment,
            "tariff_fees": results.yearly_tariff_fees[i],
            "fuel_savings": results.yearly_fuel_savings[i],
            "maintenance_savings": results.yearly_maintenance_savings[i],
            "total_savings": results.yearly_savings[i],
            "cumulative_investment": results.cumulative_investment[i],
            "cumulative_savings": results.cumulative_savings[i],
            "net_position": results.cumulative_savings[i] - results.cumulative_investment[i],
            "emissions_saved_kg": results.yearly_emissions_saved[i],
            "cumulative_emissions_saved_kg": results.cumulative_emissions_saved[i],
        })
    return pd.DataFrame.from_records(records, columns=COLUMNS).set_index("year")


def to_csv(results: CalculationResults) -> str:
    """Yearly table rendered as CSV text."""
    return yearly_table(results).to_csv()
