"""Top-level scenario — bundles every calculator input."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from cng_fleet.config.assumptions import Assumptions
from cng_fleet.config.deployment import DeploymentConfig
from cng_fleet.config.fuel import FuelPrices
from cng_fleet.config.station import StationConfig
from cng_fleet.config.vehicle import VehicleParameters


class Scenario(BaseModel):
    """Complete, immutable input snapshot for one calculation."""

    name: str = Field(default="Base case", description="Human label for this scenario")
    vehicles: VehicleParameters = Field(default_factory=VehicleParameters)
    station: StationConfig = Field(default_factory=StationConfig)
    fuel: FuelPrices = Field(default_factory=FuelPrices)
    deployment: DeploymentConfig = Field(default_factory=DeploymentConfig)
    assumptions: Assumptions = Field(default_factory=Assumptions)


def deep_merge(base: dict, overrides: dict) -> dict:
    """Recursively merge overrides into base dict."""
    for key, val in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(val, dict):
            deep_merge(base[key], val)
        else:
            base[key] = val
    return base


def build_scenario(overrides: dict[str, Any] | None = None) -> Scenario:
    """Build a Scenario from partial overrides merged onto defaults."""
    defaults = Scenario().model_dump()
    if overrides:
        deep_merge(defaults, overrides)
    return Scenario(**defaults)


def load_scenario(path: str | Path) -> Scenario:
    """Load a YAML scenario file; missing sections and fields use defaults."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return build_scenario(data)
