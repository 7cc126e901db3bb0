"""Data contracts for retirement forecasts."""

from __future__ import annotations

from functools import partial
from typing import Annotated, Any, Dict, List, NamedTuple, Optional, Tuple

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    TypeAdapter,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# (low, high, message below low, message above high); None means unbounded
_BOUNDS: Dict[str, Tuple[Optional[float], Optional[float], str, str]] = {
    "current_age": (18, 90, "Age must be 18 or older", "Age must be 90 or below"),
    "retirement_age": (
        20,
        100,
        "Retirement age must be 20 or older",
        "Retirement age must be 100 or below",
    ),
    "life_expectancy": (
        20,
        120,
        "Life expectancy must be 20 or older",
        "Life expectancy must be 120 or below",
    ),
    "current_savings": (0, None, "Savings must be 0 or positive", ""),
    "monthly_expenses": (0, None, "Monthly expenses must be 0 or positive", ""),
    "monthly_contributions": (0, None, "Monthly contributions must be 0 or positive", ""),
    "annual_investment_return_pct": (
        0,
        30,
        "Return must be 0 or positive",
        "Return must be 30% or below",
    ),
    "annual_inflation_rate_pct": (
        0,
        20,
        "Inflation must be 0 or positive",
        "Inflation must be 20% or below",
    ),
    "monthly_retirement_income": (0, None, "Retirement income must be 0 or positive", ""),
    "safe_withdrawal_rate_pct": (
        2,
        10,
        "Safe withdrawal rate must be at least 2%",
        "Safe withdrawal rate must be 10% or below",
    ),
}


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; immutable once built."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class AnnualFigures(NamedTuple):
    expenses: float
    contributions: float
    retirement_income: float


class ForecastAssumptions(CamelModel):
    """User-chosen planning assumptions; monthly amounts, percentages as 7 for 7%."""

    # NaN slips past every range comparison
    model_config = ConfigDict(allow_inf_nan=False)

    current_age: int
    retirement_age: int
    life_expectancy: int
    current_savings: float
    monthly_expenses: float
    monthly_contributions: float
    annual_investment_return_pct: float
    annual_inflation_rate_pct: float
    monthly_retirement_income: float
    safe_withdrawal_rate_pct: float

    @field_validator(*_BOUNDS)
    @classmethod
    def check_range(cls, value: float, info: ValidationInfo) -> float:
        low, high, low_message, high_message = _BOUNDS[info.field_name]
        if low is not None and value < low:
            raise ValueError(low_message)
        if high is not None and value > high:
            raise ValueError(high_message)
        return value

    @model_validator(mode="after")
    def check_age_order(self) -> "ForecastAssumptions":
        if self.retirement_age <= self.current_age:
            raise ValueError("retirementAge must be greater than currentAge")
        if self.life_expectancy < self.retirement_age:
            raise ValueError("lifeExpectancy must be at least retirementAge")
        return self

    @property
    def years_to_retirement(self) -> int:
        return self.retirement_age - self.current_age

    def annualized(self) -> AnnualFigures:
        return AnnualFigures(
            expenses=self.monthly_expenses * 12,
            contributions=self.monthly_contributions * 12,
            retirement_income=self.monthly_retirement_income * 12,
        )


class YearlyProjectionPoint(CamelModel):
    """One simulated age; savings are end-of-year after growth or withdrawal."""

    age: int
    projected_savings: float
    inflation_adjusted_target: float
    inflation_adjusted_expenses: float
    inflation_adjusted_retirement_income: float
    is_retirement_year: bool


class ForecastResult(CamelModel):
    chart_data: List[YearlyProjectionPoint]
    retirement_target: float
    savings_at_retirement: float
    need_gap: Optional[int] = None
    can_retire_age: Optional[int] = None
    success_rate: int

    @property
    def retirement_point(self) -> Optional[YearlyProjectionPoint]:
        for point in self.chart_data:
            if point.is_retirement_year:
                return point
        return None

    @property
    def final_savings(self) -> float:
        return self.chart_data[-1].projected_savings if self.chart_data else 0.0


DEFAULT_ASSUMPTIONS = ForecastAssumptions(
    current_age=35,
    retirement_age=65,
    life_expectancy=90,
    current_savings=0.0,  # normally replaced by the caller's total assets
    monthly_expenses=5000.0,
    monthly_contributions=1000.0,
    annual_investment_return_pct=7.0,
    annual_inflation_rate_pct=3.0,
    monthly_retirement_income=2000.0,  # pension, social security, ...
    safe_withdrawal_rate_pct=4.0,
)


def merge_with_defaults(
    payload: Any, defaults: ForecastAssumptions = DEFAULT_ASSUMPTIONS
) -> Any:
    """
    Overlay a partial assumptions mapping on ``defaults`` without validating it.

    Keys may be camelCase or snake_case; the merged mapping uses camelCase.
    Giving one field under both spellings raises ``ValueError``. Anything that
    is not a mapping is returned unchanged.
    """
    if not isinstance(payload, dict):
        return payload

    aliases = {name: field.alias for name, field in ForecastAssumptions.model_fields.items()}
    merged = defaults.model_dump(by_alias=True)
    seen: Dict[str, str] = {}
    for key, value in payload.items():
        alias = aliases.get(key, key)
        if alias in seen:
            raise ValueError(f"{alias} given twice, as {seen[alias]} and {key}")
        seen[alias] = key
        merged[alias] = value
    return merged


def _partial_adapter(defaults: ForecastAssumptions) -> TypeAdapter[ForecastAssumptions]:
    fill = BeforeValidator(partial(merge_with_defaults, defaults=defaults))
    return TypeAdapter(Annotated[ForecastAssumptions, fill])


_default_adapter = _partial_adapter(DEFAULT_ASSUMPTIONS)


def assumptions_from_payload(
    payload: Any, defaults: ForecastAssumptions = DEFAULT_ASSUMPTIONS
) -> ForecastAssumptions:
    """
    Validate a (possibly partial) payload, filling gaps from ``defaults``.

    Merge problems, such as a key sent under both spellings, surface as a
    ``ValidationError`` like any other bad input.
    """
    adapter = _default_adapter if defaults is DEFAULT_ASSUMPTIONS else _partial_adapter(defaults)
    return adapter.validate_python(payload)


__all__ = [
    "AnnualFigures",
    "CamelModel",
    "DEFAULT_ASSUMPTIONS",
    "ForecastAssumptions",
    "ForecastResult",
    "YearlyProjectionPoint",
    "assumptions_from_payload",
    "merge_with_defaults",
]
