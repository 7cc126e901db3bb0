"""Retirement income analysis and recommendations derived from a forecast."""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional

from forecast_backend.schemas.forecast import CamelModel, ForecastAssumptions, ForecastResult


class RecommendationKind(str, Enum):
    INCREASE_CONTRIBUTIONS = "increase_contributions"
    RAISE_RETURNS = "raise_returns"
    REDUCE_EXPENSES = "reduce_expenses"
    DELAY_RETIREMENT = "delay_retirement"
    EARLY_RETIREMENT = "early_retirement"
    LEGACY_PLAN = "legacy_plan"


class IncomeBreakdown(CamelModel):
    """Annual income sources in the retirement year, with monthly equivalents."""

    age: int
    portfolio_withdrawal: float
    retirement_income: float
    total_income: float
    expenses: float
    monthly_portfolio_withdrawal: float
    monthly_retirement_income: float
    monthly_total_income: float
    monthly_expenses: float
    portfolio_share_pct: float
    retirement_income_share_pct: float


class Recommendation(CamelModel):
    kind: RecommendationKind
    title: str
    detail: str
    amount: Optional[float] = None
    age: Optional[int] = None


class RetirementOutlook(CamelModel):
    shortfall: float
    has_shortfall: bool
    income: Optional[IncomeBreakdown] = None
    recommendations: List[Recommendation]


def shortfall(result: ForecastResult) -> float:
    """Positive when savings at retirement fall short of the target, negative for a surplus."""
    return result.retirement_target - result.savings_at_retirement


def income_breakdown(
    assumptions: ForecastAssumptions, result: ForecastResult
) -> Optional[IncomeBreakdown]:
    index = assumptions.retirement_age - assumptions.current_age
    if not 0 <= index < len(result.chart_data):
        return None
    point = result.chart_data[index]

    withdrawal = max(0.0, point.inflation_adjusted_expenses - point.inflation_adjusted_retirement_income)
    income = point.inflation_adjusted_retirement_income
    total = withdrawal + income
    if total > 0:
        portfolio_share = withdrawal / total * 100
        income_share = income / total * 100
    else:
        portfolio_share = income_share = 0.0

    return IncomeBreakdown(
        age=point.age,
        portfolio_withdrawal=withdrawal,
        retirement_income=income,
        total_income=total,
        expenses=point.inflation_adjusted_expenses,
        monthly_portfolio_withdrawal=withdrawal / 12,
        monthly_retirement_income=income / 12,
        monthly_total_income=total / 12,
        monthly_expenses=point.inflation_adjusted_expenses / 12,
        portfolio_share_pct=portfolio_share,
        retirement_income_share_pct=income_share,
    )


def _gap_recommendations(
    assumptions: ForecastAssumptions, result: ForecastResult, gap: float
) -> List[Recommendation]:
    years = max(assumptions.years_to_retirement, 1)
    extra_contribution = math.ceil(gap / years / 12)
    return_uplift = assumptions.current_savings * 0.01 * 1.01 ** assumptions.years_to_retirement
    expense_cut = math.ceil(gap * (assumptions.safe_withdrawal_rate_pct / 100) / 12)

    if result.can_retire_age is not None:
        delay_detail = f"Working until age {result.can_retire_age} could help you reach your retirement goal."
    else:
        delay_detail = "Working a few more years could help you reach your retirement goal."

    return [
        Recommendation(
            kind=RecommendationKind.INCREASE_CONTRIBUTIONS,
            title="Increase monthly contributions",
            detail=f"Adding {extra_contribution} per month could close the gap by retirement.",
            amount=float(extra_contribution),
        ),
        Recommendation(
            kind=RecommendationKind.RAISE_RETURNS,
            title="Optimize investment strategy",
            detail=f"A 1% increase in returns could add {return_uplift:.2f} by retirement.",
            amount=return_uplift,
        ),
        Recommendation(
            kind=RecommendationKind.REDUCE_EXPENSES,
            title="Reduce retirement expenses",
            detail=f"Lowering monthly expenses by {expense_cut} could eliminate the shortfall.",
            amount=float(expense_cut),
        ),
        Recommendation(
            kind=RecommendationKind.DELAY_RETIREMENT,
            title="Delay retirement",
            detail=delay_detail,
            age=result.can_retire_age,
        ),
    ]


def _surplus_recommendations(
    assumptions: ForecastAssumptions, result: ForecastResult, surplus: float
) -> List[Recommendation]:
    early_age = result.can_retire_age
    if early_age is not None and early_age < assumptions.retirement_age:
        early_detail = f"You could potentially retire as early as age {early_age}."
    else:
        early_age = None
        early_detail = "You may be able to retire earlier than planned."

    return [
        Recommendation(
            kind=RecommendationKind.EARLY_RETIREMENT,
            title="Consider early retirement",
            detail=early_detail,
            age=early_age,
        ),
        Recommendation(
            kind=RecommendationKind.LEGACY_PLAN,
            title="Create a legacy or charitable plan",
            detail="Your surplus could support estate planning or charitable giving goals.",
            amount=surplus,
        ),
    ]


def recommendations(
    assumptions: ForecastAssumptions, result: ForecastResult
) -> List[Recommendation]:
    gap = shortfall(result)
    if gap > 0:
        return _gap_recommendations(assumptions, result, gap)
    return _surplus_recommendations(assumptions, result, abs(gap))


def outlook(assumptions: ForecastAssumptions, result: ForecastResult) -> RetirementOutlook:
    gap = shortfall(result)
    return RetirementOutlook(
        shortfall=gap,
        has_shortfall=gap > 0,
        income=income_breakdown(assumptions, result),
        recommendations=recommendations(assumptions, result),
    )


__all__ = [
    "IncomeBreakdown",
    "Recommendation",
    "RecommendationKind",
    "RetirementOutlook",
    "income_breakdown",
    "outlook",
    "recommendations",
    "shortfall",
]
