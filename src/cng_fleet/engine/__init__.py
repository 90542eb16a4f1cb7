"""Engine — station sizing, deployment distribution and financial projection."""

from cng_fleet.engine.station_cost import estimate_station_cost, station_cost
from cng_fleet.engine.distribution import distribute_vehicles
from cng_fleet.engine.projection import project
from cng_fleet.engine.orchestrator import run_calculation

__all__ = [
    "estimate_station_cost",
    "station_cost",
    "distribute_vehicles",
    "project",
    "run_calculation",
]
