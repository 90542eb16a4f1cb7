"""CNG fleet conversion calculator — deployment, station cost and ROI engine."""

from cng_fleet.config import Scenario, load_scenario
from cng_fleet.engine import (
    distribute_vehicles,
    estimate_station_cost,
    project,
    run_calculation,
)
from cng_fleet.errors import (
    CalculatorError,
    InvalidConfigurationError,
    UnreachableStateError,
)

__version__ = "1.0.0"

__all__ = [
    "Scenario",
    "load_scenario",
    "distribute_vehicles",
    "estimate_station_cost",
    "project",
    "run_calculation",
    "CalculatorError",
    "InvalidConfigurationError",
    "UnreachableStateError",
]
