from __future__ import annotations

import logging
import math
from numbers import Real
from typing import List

from pydantic import BaseModel, ConfigDict

from bdinvest.core.errors import InvalidHorizonError, InvalidInputError

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12
# below this the annuity formula divides by ~0, treat the rate as zero
_ZERO_RATE_EPS = 1e-12


class ProjectionInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    principal: float
    annualRatePercent: float
    horizonYears: int
    monthlyContribution: float = 0.0


class YearBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    # cumulative amount paid in by the end of this year
    investment: int
    value: int


class ProjectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    futureValue: int
    totalInvestment: int
    totalReturn: int
    yearlyBreakdown: List[YearBreakdown]


def round_currency(amount: float) -> int:
    """Round to the nearest whole taka, halves away from zero."""
    return int(math.copysign(math.floor(abs(amount) + 0.5), amount))


def _check_number(field: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(field, value, "must be a number")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInputError(field, value, "must be finite")
    return value


def _check_horizon(horizon_years: object) -> int:
    horizon = _check_number("horizonYears", horizon_years)
    if horizon <= 0:
        raise InvalidHorizonError(horizon_years)
    if not horizon.is_integer():
        raise InvalidInputError("horizonYears", horizon_years, "must be a whole number of years")
    return int(horizon)


def lump_sum_value(principal: float, annual_rate_percent: float, years: int) -> float:
    """Principal compounded once a year for `years` years."""
    return principal * (1 + annual_rate_percent / 100) ** years


def annuity_value(monthly_contribution: float, monthly_rate: float, months: int) -> float:
    """Future value of an ordinary annuity of equal monthly payments."""
    if monthly_contribution == 0:
        return 0.0
    if abs(monthly_rate) < _ZERO_RATE_EPS:
        return monthly_contribution * months
    return monthly_contribution * ((1 + monthly_rate) ** months - 1) / monthly_rate


def _value_at(
    principal: float,
    annual_rate_percent: float,
    monthly_contribution: float,
    years: int,
) -> float:
    monthly_rate = annual_rate_percent / 100 / MONTHS_PER_YEAR
    try:
        value = lump_sum_value(principal, annual_rate_percent, years) + annuity_value(
            monthly_contribution, monthly_rate, years * MONTHS_PER_YEAR
        )
    except OverflowError:
        raise InvalidInputError(
            "annualRatePercent", annual_rate_percent, "projected value is out of range"
        ) from None
    if not math.isfinite(value):
        raise InvalidInputError(
            "annualRatePercent", annual_rate_percent, "projected value is out of range"
        )
    return value


def project(
    principal: float,
    annual_rate_percent: float,
    horizon_years: int,
    monthly_contribution: float = 0.0,
) -> ProjectionResult:
    """
    Forecast a lump sum plus optional monthly contributions.

    The principal compounds annually at annual_rate_percent; contributions are an
    ordinary annuity compounding monthly at annual_rate_percent / 12. Each row of
    the yearly breakdown is the same closed-form calculation evaluated at that
    year, so the last row always equals the totals.

    Amounts are rounded to whole taka only when the result is built, and
    totalReturn is derived from the rounded figures so that
    futureValue == totalInvestment + totalReturn holds exactly.

    With a positive rate the unrounded yearly values rise strictly, but the
    rounded rows only rise once a year's growth reaches half a taka. Tiny
    amounts can repeat a value: project(1, 1, 3) gives rows of 1, 1, 1.

    Raises InvalidHorizonError for a horizon <= 0 and InvalidInputError for
    non-finite, negative or out-of-range inputs.
    """
    horizon = _check_horizon(horizon_years)
    principal = _check_number("principal", principal)
    rate = _check_number("annualRatePercent", annual_rate_percent)
    monthly = _check_number("monthlyContribution", monthly_contribution)

    if principal < 0:
        raise InvalidInputError("principal", principal, "must not be negative")
    if monthly < 0:
        raise InvalidInputError("monthlyContribution", monthly, "must not be negative")
    if rate < -100:
        raise InvalidInputError("annualRatePercent", rate, "cannot lose more than 100% a year")

    breakdown: List[YearBreakdown] = []
    for year in range(1, horizon + 1):
        breakdown.append(
            YearBreakdown(
                year=year,
                investment=round_currency(principal + monthly * year * MONTHS_PER_YEAR),
                value=round_currency(_value_at(principal, rate, monthly, year)),
            )
        )

    future_value = round_currency(_value_at(principal, rate, monthly, horizon))
    total_investment = round_currency(principal + monthly * horizon * MONTHS_PER_YEAR)

    logger.debug(
        "projection principal=%s rate=%s years=%s monthly=%s -> fv=%s",
        principal,
        rate,
        horizon,
        monthly,
        future_value,
    )

    return ProjectionResult(
        futureValue=future_value,
        totalInvestment=total_investment,
        totalReturn=future_value - total_investment,
        yearlyBreakdown=breakdown,
    )


def project_input(projection_input: ProjectionInput) -> ProjectionResult:
    return project(
        projection_input.principal,
        projection_input.annualRatePercent,
        projection_input.horizonYears,
        projection_input.monthlyContribution,
    )


__all__ = [
    "MONTHS_PER_YEAR",
    "ProjectionInput",
    "ProjectionResult",
    "YearBreakdown",
    "annuity_value",
    "lump_sum_value",
    "project",
    "project_input",
    "round_currency",
]
