from __future__ import annotations

import math
from math import isclose

from forecast_backend.core.forecast import project
from forecast_backend.core.insights import (
    RecommendationKind,
    income_breakdown,
    outlook,
    recommendations,
    shortfall,
)
from forecast_backend.schemas.forecast import DEFAULT_ASSUMPTIONS, ForecastAssumptions


def with_savings(amount: float) -> ForecastAssumptions:
    return DEFAULT_ASSUMPTIONS.model_copy(update={"current_savings": amount})


def test_income_breakdown_at_retirement():
    assumptions = with_savings(100000.0)
    breakdown = income_breakdown(assumptions, project(assumptions))

    factor = 1.03**30
    assert breakdown is not None
    assert breakdown.age == 65
    assert isclose(breakdown.expenses, 60000 * factor)
    assert isclose(breakdown.retirement_income, 24000 * factor)
    assert isclose(breakdown.portfolio_withdrawal, 36000 * factor)
    assert isclose(breakdown.total_income, 60000 * factor)
    assert isclose(breakdown.monthly_expenses, 5000 * factor)
    assert isclose(breakdown.monthly_portfolio_withdrawal, 3000 * factor)
    assert isclose(breakdown.portfolio_share_pct, 60.0)
    assert isclose(breakdown.retirement_income_share_pct, 40.0)


def test_income_breakdown_without_expenses_has_zero_shares():
    assumptions = DEFAULT_ASSUMPTIONS.model_copy(
        update={"monthly_expenses": 0.0, "monthly_retirement_income": 0.0}
    )
    breakdown = income_breakdown(assumptions, project(assumptions))

    assert breakdown.total_income == 0.0
    assert breakdown.portfolio_share_pct == 0.0
    assert breakdown.retirement_income_share_pct == 0.0


def test_income_breakdown_outside_series_is_none():
    fields = DEFAULT_ASSUMPTIONS.model_dump()
    fields.update(retirement_age=95)
    assumptions = ForecastAssumptions.model_construct(**fields)

    assert income_breakdown(assumptions, project(assumptions)) is None


def test_shortfall_recommendations():
    assumptions = with_savings(100000.0)
    result = project(assumptions)
    gap = shortfall(result)

    assert gap > 0
    advice = {rec.kind: rec for rec in recommendations(assumptions, result)}
    assert list(advice) == [
        RecommendationKind.INCREASE_CONTRIBUTIONS,
        RecommendationKind.RAISE_RETURNS,
        RecommendationKind.REDUCE_EXPENSES,
        RecommendationKind.DELAY_RETIREMENT,
    ]
    assert advice[RecommendationKind.INCREASE_CONTRIBUTIONS].amount == math.ceil(gap / 30 / 12)
    assert isclose(advice[RecommendationKind.RAISE_RETURNS].amount, 100000.0 * 0.01 * 1.01**30)
    assert advice[RecommendationKind.REDUCE_EXPENSES].amount == math.ceil(gap * 0.04 / 12)
    assert advice[RecommendationKind.DELAY_RETIREMENT].age == result.can_retire_age


def test_delay_advice_without_crossing_age():
    assumptions = DEFAULT_ASSUMPTIONS.model_copy(
        update={"monthly_contributions": 0.0, "current_savings": 1000.0}
    )
    result = project(assumptions)

    assert result.can_retire_age is None
    delay = recommendations(assumptions, result)[-1]
    assert delay.kind is RecommendationKind.DELAY_RETIREMENT
    assert delay.age is None
    assert "a few more years" in delay.detail


def test_surplus_recommendations():
    assumptions = with_savings(2_000_000.0)
    result = project(assumptions)

    assert shortfall(result) < 0
    early, legacy = recommendations(assumptions, result)
    assert early.kind is RecommendationKind.EARLY_RETIREMENT
    assert early.age == result.can_retire_age == 36
    assert "as early as age 36" in early.detail
    assert legacy.kind is RecommendationKind.LEGACY_PLAN
    assert isclose(legacy.amount, -shortfall(result))


def test_outlook_bundles_analysis():
    assumptions = with_savings(100000.0)
    result = project(assumptions)
    summary = outlook(assumptions, result)

    assert summary.has_shortfall is True
    assert isclose(summary.shortfall, result.retirement_target - result.savings_at_retirement)
    assert summary.income == income_breakdown(assumptions, result)
    assert len(summary.recommendations) == 4

    dumped = summary.model_dump(mode="json", by_alias=True)
    assert dumped["hasShortfall"] is True
    assert dumped["recommendations"][0]["kind"] == "increase_contributions"
    assert "portfolioSharePct" in dumped["income"]
