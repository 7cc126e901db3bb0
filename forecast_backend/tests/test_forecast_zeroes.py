from __future__ import annotations

from math import isclose

from forecast_backend.core.forecast import project
from forecast_backend.schemas.forecast import ForecastAssumptions


def test_forecast_zeroes_produces_zero_rows():
    """
    Sanity check: with zero savings, contributions, spending and growth, all outputs stay at zero.
    """
    assumptions = ForecastAssumptions(
        current_age=25,
        retirement_age=26,
        life_expectancy=27,
        current_savings=0.0,
        monthly_expenses=0.0,
        monthly_contributions=0.0,
        annual_investment_return_pct=0.0,
        annual_inflation_rate_pct=0.0,
        monthly_retirement_income=0.0,
        safe_withdrawal_rate_pct=4.0,
    )

    result = project(assumptions)

    assert len(result.chart_data) == 3
    #just check all are zeros, don't need to go line by line
    for point in result.chart_data:
        assert isclose(point.projected_savings, 0.0, abs_tol=0.0)
        assert isclose(point.inflation_adjusted_target, 0.0, abs_tol=0.0)
        assert isclose(point.inflation_adjusted_expenses, 0.0, abs_tol=0.0)
        assert isclose(point.inflation_adjusted_retirement_income, 0.0, abs_tol=0.0)

    # an empty portfolio counts as depleted the moment retirement starts
    assert result.need_gap == 26
    # 0 >= 0 meets the (zero) target straight away
    assert result.can_retire_age == 26
    assert result.retirement_target == 0.0
    assert result.success_rate == 100
