"""Strategy comparison — same fleet, different rollouts, side by side.

Each item is a full recalculation of the scenario with the deployment
strategy swapped (manual variants carry their own per-year rows).  At most
``MAX_COMPARISON_ITEMS`` items are compared at once.
"""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import BaseModel, Field

from cng_fleet.config.deployment import DEPLOYMENT_STRATEGIES, ManualYear
from cng_fleet.config.scenario import Scenario
from cng_fleet.engine.orchestrator import run_calculation
from cng_fleet.errors import InvalidConfigurationError, UnreachableStateError
from cng_fleet.models.results import CalculationResults

logger = logging.getLogger(__name__)

MAX_COMPARISON_ITEMS = 6

STRATEGY_NAMES: dict[str, str] = {
    "immediate": "Immediate Deployment",
    "phased": "Phased Deployment",
    "aggressive": "Aggressive Early",
    "deferred": "Deferred Deployment",
    "manual": "Manual Distribution",
}

DEFAULT_COMPARED_STRATEGIES: tuple[str, ...] = ("immediate", "phased", "aggressive", "deferred")


class ManualVariant(BaseModel):
    """A named manual rollout to include in a comparison."""

    name: str | None = None
    rows: list[ManualYear] = Field(default_factory=list)


class ComparisonItem(BaseModel):
    """One strategy's results in a comparison."""

    strategy: str
    name: str
    results: CalculationResults


class RankingRow(BaseModel):
    """Headline metrics for one comparison item, in rank order."""

    rank: int
    name: str
    strategy: str
    total_investment: float
    net_cash_flow: float
    payback_period: float | None
    roi: float | None
    total_emissions_saved: float


class StrategyComparison(BaseModel):
    """Comparison output: every item plus a ranking by net cash flow."""

    items: list[ComparisonItem]
    ranking: list[RankingRow]

    @property
    def best(self) -> ComparisonItem | None:
        if not self.ranking:
            return None
        top = self.ranking[0].name
        return next(item for item in self.items if item.name == top)


def display_name(strategy: str, existing: Sequence[str], custom_name: str | None = None) -> str:
    """Label for a new item; repeated strategies get a numeric suffix."""
    if custom_name:
        return custom_name
    base = STRATEGY_NAMES[strategy]
    count = sum(1 for s in existing if s == strategy)
    return f"{base} {count + 1}" if count else base


def _rank(items: Sequence[ComparisonItem]) -> list[RankingRow]:
    def sort_key(item: ComparisonItem) -> tuple[float, float]:
        payback = item.results.payback_period
        return (-item.results.net_cash_flow, payback if payback is not None else float("inf"))

    ordered = sorted(items, key=sort_key)
    return [
        RankingRow(
            rank=i,
            name=item.name,
            strategy=item.strategy,
            total_investment=item.results.total_investment,
            net_cash_flow=item.results.net_cash_flow,
            payback_period=item.results.payback_period,
            roi=item.results.roi,
            total_emissions_saved=item.results.total_emissions_saved,
        )
        for i, item in enumerate(ordered, start=1)
    ]


def compare_strategies(
    scenario: Scenario,
    strategies: Sequence[str] | None = None,
    manual_variants: Sequence[ManualVariant] | None = None,
) -> StrategyComparison:
    """Run ``scenario`` under several deployment strategies.

    Parameters
    ----------
    scenario : Scenario
        Base scenario; its own strategy is ignored unless listed.
    strategies : list[str] | None
        Strategies to compare. None = every non-manual strategy.
    manual_variants : list[ManualVariant] | None
        Extra manual rollouts, each compared as its own item.

    Raises
    ------
    InvalidConfigurationError
        More than ``MAX_COMPARISON_ITEMS`` items requested.
    UnreachableStateError
        Unknown strategy name.
    """
    if strategies is None:
        strategies = DEFAULT_COMPARED_STRATEGIES
    manual_variants = list(manual_variants or [])

    requested = len(strategies) + len(manual_variants)
    if requested > MAX_COMPARISON_ITEMS:
        raise InvalidConfigurationError(
            f"at most {MAX_COMPARISON_ITEMS} strategies can be compared, got {requested}"
        )

    runs: list[tuple[str, str | None, list[ManualYear] | None]] = []
    for strategy in strategies:
        if strategy not in DEPLOYMENT_STRATEGIES:
            raise UnreachableStateError("deployment strategy", strategy, DEPLOYMENT_STRATEGIES)
        manual_rows = scenario.deployment.manual_distribution if strategy == "manual" else None
        runs.append((strategy, None, manual_rows))
    for variant in manual_variants:
        runs.append(("manual", variant.name, variant.rows))

    items: list[ComparisonItem] = []
    for strategy, custom_name, manual_rows in runs:
        variant = scenario.model_copy(deep=True)
        variant.deployment = variant.deployment.model_copy(update={
            "strategy": strategy,
            "manual_distribution": manual_rows,
        })
        name = display_name(strategy, [item.strategy for item in items], custom_name)
        items.append(ComparisonItem(strategy=strategy, name=name, results=run_calculation(variant)))

    logger.debug("Compared %d strategies for scenario %r", len(items), scenario.name)
    return StrategyComparison(items=items, ranking=_rank(items))
