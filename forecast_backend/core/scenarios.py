from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import Field, field_validator

from forecast_backend.core.errors import ScenarioError
from forecast_backend.core.forecast import project
from forecast_backend.schemas.forecast import (
    CamelModel,
    ForecastAssumptions,
    ForecastResult,
    merge_with_defaults,
)

logger = logging.getLogger(__name__)


class NamedScenario(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    assumptions: ForecastAssumptions

    @field_validator("assumptions", mode="before")
    @classmethod
    def fill_defaults(cls, value: Any) -> Any:
        return merge_with_defaults(value)


class CompareRequest(CamelModel):
    scenarios: List[NamedScenario]


class ScenarioOutcome(CamelModel):
    name: str
    description: Optional[str] = None
    result: ForecastResult


class OverlayPoint(CamelModel):
    """Savings of every scenario that simulates this age."""

    age: int
    savings: Dict[str, float]


class ScenarioComparison(CamelModel):
    scenarios: List[ScenarioOutcome]
    overlay: List[OverlayPoint]


def compare_scenarios(
    scenarios: Sequence[NamedScenario], max_scenarios: Optional[int] = None
) -> ScenarioComparison:
    """
    Project each scenario on its own and line the savings series up by age.

    Scenarios need not share an age range; the overlay covers the union of
    ages and only lists the scenarios that reach a given age.
    """
    if not scenarios:
        raise ScenarioError("at least one scenario is required")
    if max_scenarios is not None and len(scenarios) > max_scenarios:
        raise ScenarioError(f"at most {max_scenarios} scenarios can be compared, got {len(scenarios)}")

    names = [scenario.name for scenario in scenarios]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ScenarioError(f"scenario names must be unique: {', '.join(duplicates)}")

    outcomes: List[ScenarioOutcome] = []
    by_age: Dict[int, Dict[str, float]] = {}
    for scenario in scenarios:
        result = project(scenario.assumptions)
        outcomes.append(
            ScenarioOutcome(name=scenario.name, description=scenario.description, result=result)
        )
        for point in result.chart_data:
            by_age.setdefault(point.age, {})[scenario.name] = point.projected_savings

    logger.info("compared %d scenarios over %d ages", len(outcomes), len(by_age))

    overlay = [OverlayPoint(age=age, savings=by_age[age]) for age in sorted(by_age)]
    return ScenarioComparison(scenarios=outcomes, overlay=overlay)


__all__ = [
    "CompareRequest",
    "NamedScenario",
    "OverlayPoint",
    "ScenarioComparison",
    "ScenarioOutcome",
    "compare_scenarios",
]
