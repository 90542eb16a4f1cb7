"""Configuration models — every calculator input type."""

from cng_fleet.config.vehicle import VEHICLE_CLASSES, VehicleParameters
from cng_fleet.config.station import StationConfig
from cng_fleet.config.fuel import FuelPrices
from cng_fleet.config.deployment import DEPLOYMENT_STRATEGIES, DeploymentConfig, ManualYear
from cng_fleet.config.assumptions import Assumptions
from cng_fleet.config.scenario import Scenario, build_scenario, load_scenario

__all__ = [
    "VEHICLE_CLASSES",
    "VehicleParameters",
    "StationConfig",
    "FuelPrices",
    "DEPLOYMENT_STRATEGIES",
    "DeploymentConfig",
    "ManualYear",
    "Assumptions",
    "Scenario",
    "build_scenario",
    "load_scenario",
]
