"""Result models — calculation output contracts."""

from cng_fleet.models.results import (
    CalculationResults,
    Payback,
    StationCostEstimate,
    VehicleDistribution,
)

__all__ = [
    "CalculationResults",
    "Payback",
    "StationCostEstimate",
    "VehicleDistribution",
]
