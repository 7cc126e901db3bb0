from __future__ import annotations

import logging
import math
from typing import List, Optional

from forecast_backend.core.errors import ForecastInputError
from forecast_backend.schemas.forecast import (
    ForecastAssumptions,
    ForecastResult,
    YearlyProjectionPoint,
)

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _withdrawal_rate(assumptions: ForecastAssumptions) -> float:
    rate = assumptions.safe_withdrawal_rate_pct / 100
    if rate <= 0:
        raise ForecastInputError(
            f"safe withdrawal rate must be positive, got {assumptions.safe_withdrawal_rate_pct}%"
        )
    return rate


def _check_finite(age: int, *values: float) -> None:
    if not all(math.isfinite(value) for value in values):
        raise ForecastInputError(
            f"amounts overflow at age {age}; currency values are too large to project"
        )


def retirement_target(assumptions: ForecastAssumptions) -> float:
    """
    Portfolio needed on the retirement date.

    Expenses and fixed income are both inflated to the retirement date; the
    gap between them is sized with the safe withdrawal rate (the "4% rule").
    """
    annual = assumptions.annualized()
    inflation_factor = (1 + assumptions.annual_inflation_rate_pct / 100) ** (
        assumptions.retirement_age - assumptions.current_age
    )
    expenses_at_retirement = annual.expenses * inflation_factor
    income_at_retirement = annual.retirement_income * inflation_factor
    withdrawal_needed = max(0.0, expenses_at_retirement - income_at_retirement)
    return withdrawal_needed / _withdrawal_rate(assumptions)


def success_rate(
    target: float,
    funded_at_retirement: bool,
    final_savings: float,
    current_savings: float,
) -> int:
    """
    Heuristic confidence score in percent; not a statistical probability.

    The two branches use different bases and exponents on purpose and must
    not be merged into one curve.
    """
    if target <= 0:
        # nothing to withdraw from the portfolio
        return 100
    if funded_at_retirement:
        try:
            score = 100 - 100 / (1 + (final_savings / target) ** 2)
        except OverflowError:
            # ratio beyond ~1e154; the curve is already flat at 100
            return 100
    else:
        score = 100 - 100 / (1 + (current_savings / target) ** 0.5)
    return min(100, _round_half_up(score))


def project(assumptions: ForecastAssumptions) -> ForecastResult:
    """
    Simulate savings year by year from current age to life expectancy.

    Order of operations (per age):
      - before retirement: growth on the balance, then the year's contribution;
      - from the retirement age on: withdrawal first, then growth, floored at 0.

    canRetireAge is the first age whose end-of-year savings cover that year's
    target, plus one. needGap is the first age at or after retirement where
    savings are exhausted.
    """
    annual = assumptions.annualized()
    withdrawal_rate = _withdrawal_rate(assumptions)
    target = retirement_target(assumptions)
    _check_finite(assumptions.retirement_age, target)

    growth = 1 + assumptions.annual_investment_return_pct / 100
    inflation = 1 + assumptions.annual_inflation_rate_pct / 100
    retirement_age = assumptions.retirement_age

    savings = float(assumptions.current_savings)
    need_gap: Optional[int] = None
    can_retire_age: Optional[int] = None
    funded_at_retirement = False

    chart_data: List[YearlyProjectionPoint] = []
    for age in range(assumptions.current_age, assumptions.life_expectancy + 1):
        inflation_factor = inflation ** (age - assumptions.current_age)
        expenses = annual.expenses * inflation_factor
        income = annual.retirement_income * inflation_factor
        withdrawal = max(0.0, expenses - income)
        target_this_year = withdrawal / withdrawal_rate

        if age < retirement_age:
            savings = savings * growth + annual.contributions
            if can_retire_age is None and savings >= target_this_year:
                can_retire_age = age + 1
        else:
            if age == retirement_age:
                funded_at_retirement = savings >= target
            savings = max(0.0, (savings - withdrawal) * growth)
        _check_finite(age, savings, expenses, income, target_this_year)

        chart_data.append(
            YearlyProjectionPoint(
                age=age,
                projected_savings=savings,
                inflation_adjusted_target=target_this_year,
                inflation_adjusted_expenses=expenses,
                inflation_adjusted_retirement_income=income,
                is_retirement_year=age == retirement_age,
            )
        )

        if age >= retirement_age and need_gap is None and savings <= 0:
            need_gap = retirement_age + (age - retirement_age)

    index = retirement_age - assumptions.current_age
    savings_at_retirement = (
        chart_data[index].projected_savings if 0 <= index < len(chart_data) else 0.0
    )

    rate = success_rate(
        target=target,
        funded_at_retirement=funded_at_retirement,
        final_savings=savings,
        current_savings=assumptions.current_savings,
    )

    logger.debug(
        "projected ages %s-%s: target=%.2f at_retirement=%.2f need_gap=%s can_retire=%s success=%s",
        assumptions.current_age,
        assumptions.life_expectancy,
        target,
        savings_at_retirement,
        need_gap,
        can_retire_age,
        rate,
    )

    return ForecastResult(
        chart_data=chart_data,
        retirement_target=target,
        savings_at_retirement=savings_at_retirement,
        need_gap=need_gap,
        can_retire_age=can_retire_age,
        success_rate=rate,
    )


__all__ = ["project", "retirement_target", "success_rate"]
