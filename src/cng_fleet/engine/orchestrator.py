"""Calculation entry point — distribute, then project.

``run_calculation(scenario)`` is the only function the comparison, sensitivity
and API layers call.  It is a pure function of the scenario snapshot: no state
is kept between calls, and the scenario is never modified.
"""

from __future__ import annotations

import logging

from cng_fleet.config.scenario import Scenario
from cng_fleet.engine.distribution import distribute_vehicles
from cng_fleet.engine.projection import project
from cng_fleet.models.results import CalculationResults

logger = logging.getLogger(__name__)


def run_calculation(scenario: Scenario) -> CalculationResults:
    """Run the full calculation for one scenario."""
    dep = scenario.deployment

    distribution = distribute_vehicles(
        scenario.vehicles,
        dep.time_horizon,
        dep.strategy,
        dep.manual_distribution,
    )

    results = project(
        scenario.vehicles,
        scenario.station,
        scenario.fuel,
        dep.time_horizon,
        dep.strategy,
        distribution,
        scenario.assumptions,
    )

    logger.debug(
        "Scenario %r: total investment $%.0f, net cash flow $%.0f",
        scenario.name, results.total_investment, results.net_cash_flow,
    )
    return results
