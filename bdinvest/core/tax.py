"""
Advisory tax estimates per investment category.

Rules (rates in percent of the expected annual return):
  government-certificate -> 5 up to 5,00,000 invested, 10 above
  fixed-deposit          -> 10 with a TIN, 15 without (or an explicit rate)
  equity                 -> 0, capital gains exempt for individual investors
  other                  -> 0, no information

annualTax = amount * expectedReturn/100 * taxRate/100, rounded to whole taka.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

from bdinvest.config import DEFAULT_TAX_SETTINGS, TaxSettings
from bdinvest.core.errors import InvalidInputError, UnknownCategoryError
from bdinvest.core.projection import round_currency

logger = logging.getLogger(__name__)


class TaxCategory(str, Enum):
    GOVERNMENT_CERTIFICATE = "government-certificate"
    FIXED_DEPOSIT = "fixed-deposit"
    EQUITY = "equity"
    OTHER = "other"

    @classmethod
    def parse(cls, tag: Union["TaxCategory", str]) -> "TaxCategory":
        """Accept enum members or tags in any case, with '-' or '_' separators."""
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            normalized = tag.strip().lower().replace("_", "-").replace(" ", "-")
            for member in cls:
                if member.value == normalized:
                    return member
        raise UnknownCategoryError(tag)


class TaxInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: TaxCategory
    taxRate: float
    annualTax: int
    description: str


@dataclass(frozen=True)
class TaxRule:
    category: TaxCategory
    # (amount, has_tin, settings) -> rate in percent
    rate: Callable[[float, bool, TaxSettings], float]
    describe: Callable[[float, bool, TaxSettings], str]


def _certificate_rate(amount: float, has_tin: bool, settings: TaxSettings) -> float:
    if amount <= settings.certificate_tier_threshold:
        return settings.certificate_rate_low
    return settings.certificate_rate_high


def _certificate_description(amount: float, has_tin: bool, settings: TaxSettings) -> str:
    threshold = f"{settings.certificate_tier_threshold:,.0f}"
    if amount <= settings.certificate_tier_threshold:
        return f"{settings.certificate_rate_low:g}% source tax on profit up to {threshold} taka invested"
    return f"{settings.certificate_rate_high:g}% source tax on profit above {threshold} taka invested"


def _fixed_deposit_rate(amount: float, has_tin: bool, settings: TaxSettings) -> float:
    return settings.fd_rate_with_tin if has_tin else settings.fd_rate_without_tin


def _fixed_deposit_description(amount: float, has_tin: bool, settings: TaxSettings) -> str:
    return (
        f"{settings.fd_rate_with_tin:g}% source tax with a TIN, "
        f"{settings.fd_rate_without_tin:g}% without"
    )


TAX_RULES: Dict[TaxCategory, TaxRule] = {
    TaxCategory.GOVERNMENT_CERTIFICATE: TaxRule(
        category=TaxCategory.GOVERNMENT_CERTIFICATE,
        rate=_certificate_rate,
        describe=_certificate_description,
    ),
    TaxCategory.FIXED_DEPOSIT: TaxRule(
        category=TaxCategory.FIXED_DEPOSIT,
        rate=_fixed_deposit_rate,
        describe=_fixed_deposit_description,
    ),
    TaxCategory.EQUITY: TaxRule(
        category=TaxCategory.EQUITY,
        rate=lambda amount, has_tin, settings: 0.0,
        describe=lambda amount, has_tin, settings: (
            "capital gains are tax free for individual investors"
        ),
    ),
    TaxCategory.OTHER: TaxRule(
        category=TaxCategory.OTHER,
        rate=lambda amount, has_tin, settings: 0.0,
        describe=lambda amount, has_tin, settings: "no tax information available",
    ),
}


def resolve_category(tag: Union[TaxCategory, str]) -> TaxCategory:
    """Map a tag onto the closed category set; unknown tags fall back to OTHER."""
    try:
        return TaxCategory.parse(tag)
    except UnknownCategoryError as exc:
        logger.warning("%s, using %s", exc, TaxCategory.OTHER.value)
        return TaxCategory.OTHER


def estimate_tax(
    category: Union[TaxCategory, str],
    amount: float,
    expected_return_percent: float,
    *,
    has_tin: bool = True,
    tax_rate: Optional[float] = None,
    settings: TaxSettings = DEFAULT_TAX_SETTINGS,
) -> TaxInfo:
    """
    Estimate the yearly tax withheld on an investment's expected profit.

    tax_rate, when given, replaces the fixed-deposit rate that would otherwise be
    picked from has_tin. It is ignored for the other categories, whose rates are
    fixed by the rule table.
    """
    for field, value in (("amount", amount), ("expectedReturnPercent", expected_return_percent)):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidInputError(field, value, "must be a finite number")
    if amount < 0:
        raise InvalidInputError("amount", amount, "must not be negative")
    if tax_rate is not None and (not math.isfinite(tax_rate) or tax_rate < 0):
        raise InvalidInputError("taxRate", tax_rate, "must be a finite non-negative percent")

    resolved = resolve_category(category)
    rule = TAX_RULES[resolved]

    if resolved is TaxCategory.FIXED_DEPOSIT and tax_rate is not None:
        rate = float(tax_rate)
    else:
        rate = float(rule.rate(amount, has_tin, settings))

    # nothing is withheld on an expected loss
    annual_tax = max(amount * expected_return_percent / 100 * rate / 100, 0.0)
    return TaxInfo(
        category=resolved,
        taxRate=rate,
        annualTax=round_currency(annual_tax),
        description=rule.describe(amount, has_tin, settings),
    )


__all__ = [
    "TAX_RULES",
    "TaxCategory",
    "TaxInfo",
    "TaxRule",
    "estimate_tax",
    "resolve_category",
]
