"""FastAPI server — the calculator as a stateless HTTP service.

Run with:
    uvicorn cng_fleet.api.server:app --reload --port 8000

Or:
    cng-fleet-api

Endpoints:
    GET  /health               — liveness probe
    GET  /schema               — JSON Schema for Scenario inputs
    GET  /scenario/defaults    — complete default scenario as JSON
    POST /calculate            — full calculation + narrative (partial or full Scenario)
    POST /calculate/csv        — yearly table as CSV
    POST /station/cost         — station sizing and cost only
    POST /distribution         — year-by-year rollout only
    POST /compare              — several deployment strategies side by side
    POST /sensitivity          — one-variable sweep
    POST /sensitivity/tornado  — one-at-a-time swings, sorted by impact
    POST /sensitivity/grid     — two-variable heat-map data

Every request is a pure function of its body; nothing is shared between calls.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field, ValidationError

from cng_fleet import __version__
from cng_fleet.config.scenario import Scenario, build_scenario
from cng_fleet.engine.distribution import distribute_vehicles
from cng_fleet.engine.orchestrator import run_calculation
from cng_fleet.engine.station_cost import estimate_station_cost
from cng_fleet.errors import CalculatorError, InvalidConfigurationError
from cng_fleet.finance.comparison import ManualVariant, compare_strategies
from cng_fleet.finance.sensitivity import run_sensitivity, run_sensitivity_grid, run_tornado
from cng_fleet.report.narrative import generate_narrative
from cng_fleet.report.tables import to_csv

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="CNG Fleet Conversion Calculator API",
    version=__version__,
    description=(
        "Stateless API for the CNG fleet conversion calculator. Configure a fleet, "
        "a fueling station, fuel prices and a deployment strategy; get back "
        "investment, savings, payback, ROI and emissions."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CalculatorError)
async def calculator_error_handler(request: Request, exc: CalculatorError) -> JSONResponse:
    logger.info("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"error": exc.kind, "detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected %s: %d validation error(s)", request.url.path, exc.error_count())
    return JSONResponse(
        status_code=422,
        content={
            "error": InvalidConfigurationError.kind,
            "detail": exc.errors(include_url=False, include_context=False),
        },
    )


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class ScenarioRequest(BaseModel):
    """Request body carrying a partial scenario. Missing fields use defaults."""
    scenario: dict[str, Any] = Field(
        default_factory=dict,
        description="Partial or full Scenario JSON. "
                    "Example: {'vehicles': {'heavy_duty_count': 20}, 'deployment': {'strategy': 'aggressive'}}",
    )


class CalculateResponse(BaseModel):
    """Response from /calculate."""
    results: dict[str, Any]
    narrative: str = ""


class CompareRequest(BaseModel):
    """Request body for /compare."""
    scenario: dict[str, Any] = Field(default_factory=dict)
    strategies: list[str] | None = Field(
        default=None,
        description="Strategies to compare. Default: immediate, phased, aggressive, deferred.",
    )
    manual_variants: list[ManualVariant] = Field(
        default_factory=list,
        description="Named manual rollouts, e.g. [{'name': 'Pilot first', 'rows': [{'light': 2}]}]",
    )


class SensitivityRequest(BaseModel):
    """Request body for /sensitivity."""
    scenario: dict[str, Any] = Field(default_factory=dict)
    variable: str = Field(default="gasoline_price")
    low_pct: float = Field(default=-50.0)
    high_pct: float = Field(default=50.0)
    step_pct: float = Field(default=5.0, gt=0)


class TornadoRequest(BaseModel):
    """Request body for /sensitivity/tornado."""
    scenario: dict[str, Any] = Field(default_factory=dict)
    sweeps: list[dict[str, Any]] | None = Field(
        default=None,
        description="Format: [{'variable': 'cng_price', 'low_pct': -20, 'high_pct': 20}]",
    )


class GridRequest(BaseModel):
    """Request body for /sensitivity/grid."""
    scenario: dict[str, Any] = Field(default_factory=dict)
    x_variable: str = Field(default="gasoline_price")
    y_variable: str = Field(default="cng_price")
    metric: str = Field(default="net_cash_flow")
    low_pct: float = Field(default=-50.0)
    high_pct: float = Field(default=50.0)
    step_pct: float = Field(default=10.0, gt=0)


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    """Health check for deployment platforms."""
    return {"status": "ok"}


@app.get("/")
def root():
    """API root — returns a welcome message and pointer to the docs."""
    return {
        "name": "CNG Fleet Conversion Calculator API",
        "version": __version__,
        "start_here": "GET /scenario/defaults, then POST /calculate",
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/schema")
def get_schema():
    """Full JSON Schema for Scenario — all inputs with types, defaults, constraints."""
    return Scenario.model_json_schema()


@app.get("/scenario/defaults")
def get_defaults():
    """Complete default Scenario as JSON. Use as a starting point for modifications."""
    return Scenario().model_dump()


@app.post("/calculate", response_model=CalculateResponse)
def calculate(req: ScenarioRequest):
    """Run the full calculation and return results plus a narrative."""
    scenario = build_scenario(req.scenario)
    results = run_calculation(scenario)
    return CalculateResponse(
        results=results.model_dump(),
        narrative=generate_narrative(scenario, results),
    )


@app.post("/calculate/csv", response_class=PlainTextResponse)
def calculate_csv(req: ScenarioRequest):
    """Run the calculation and return the yearly table as CSV."""
    scenario = build_scenario(req.scenario)
    return PlainTextResponse(to_csv(run_calculation(scenario)), media_type="text/csv")


@app.post("/station/cost")
def station_cost(req: ScenarioRequest):
    """Station sizing and cost for the scenario's fleet and rollout."""
    scenario = build_scenario(req.scenario)
    dep = scenario.deployment
    distribution = distribute_vehicles(
        scenario.vehicles, dep.time_horizon, dep.strategy, dep.manual_distribution,
    )
    estimate = estimate_station_cost(
        scenario.station, scenario.vehicles, distribution, scenario.assumptions,
    )
    return estimate.model_dump()


@app.post("/distribution")
def distribution(req: ScenarioRequest):
    """Year-by-year vehicle rollout for the scenario's strategy."""
    scenario = build_scenario(req.scenario)
    dep = scenario.deployment
    rows = distribute_vehicles(
        scenario.vehicles, dep.time_horizon, dep.strategy, dep.manual_distribution,
    )
    return {"strategy": dep.strategy, "distribution": [r.model_dump() for r in rows]}


@app.post("/compare")
def compare(req: CompareRequest):
    """Compare deployment strategies for the same fleet, ranked by net cash flow."""
    scenario = build_scenario(req.scenario)
    comparison = compare_strategies(scenario, req.strategies, req.manual_variants)
    return comparison.model_dump()


@app.post("/sensitivity")
def sensitivity(req: SensitivityRequest):
    """Sweep one variable and return payback / ROI / net cash flow per step."""
    scenario = build_scenario(req.scenario)
    curve = run_sensitivity(scenario, req.variable, req.low_pct, req.high_pct, req.step_pct)
    return asdict(curve)


@app.post("/sensitivity/tornado")
def sensitivity_tornado(req: TornadoRequest):
    """One-at-a-time low/high runs, sorted by net cash flow swing."""
    scenario = build_scenario(req.scenario)
    sweeps = None
    if req.sweeps:
        sweeps = [
            (sp.get("variable", ""), sp.get("low_pct", -20.0), sp.get("high_pct", 20.0))
            for sp in req.sweeps
        ]
    return asdict(run_tornado(scenario, sweeps))


@app.post("/sensitivity/grid")
def sensitivity_grid(req: GridRequest):
    """Two-variable grid of one metric (heat-map data)."""
    scenario = build_scenario(req.scenario)
    grid = run_sensitivity_grid(
        scenario, req.x_variable, req.y_variable, req.metric,
        req.low_pct, req.high_pct, req.step_pct,
    )
    return asdict(grid)


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn

    from cng_fleet.log import configure_logging

    configure_logging()
    uvicorn.run(
        "cng_fleet.api.server:app",
        host=os.environ.get("CNG_FLEET_HOST", "0.0.0.0"),
        port=int(os.environ.get("CNG_FLEET_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
