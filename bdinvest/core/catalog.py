"""
Static catalog of Bangladeshi retail investment products.

Each product carries an expected-return range; the headline projection uses
the range's average and the quote's scenarios re-run it at min and max.
quote() applies the product's own limits before running the
projection and tax estimate, so callers only hand over the user's numbers.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from bdinvest.config import DEFAULT_TAX_SETTINGS, TaxSettings
from bdinvest.core.errors import ProductNotFoundError, ProductRuleError
from bdinvest.core.projection import MONTHS_PER_YEAR, ProjectionResult, project, round_currency
from bdinvest.core.tax import TaxCategory, TaxInfo, estimate_tax
from bdinvest.models import InvestmentType

logger = logging.getLogger(__name__)


class PaymentStructure(str, Enum):
    LUMP_SUM = "lump-sum"
    MONTHLY = "monthly"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReturnRange(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    min: float
    max: float
    average: float

    @model_validator(mode="after")
    def ensure_order(self) -> "ReturnRange":
        if not self.min <= self.average <= self.max:
            raise ValueError("expected return must satisfy min <= average <= max")
        return self

    @classmethod
    def fixed(cls, rate: float) -> "ReturnRange":
        return cls(min=rate, max=rate, average=rate)


class TenureRange(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    min: int = Field(ge=1)
    max: int = Field(ge=1)

    def contains(self, years: int) -> bool:
        return self.min <= years <= self.max


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    type: InvestmentType
    name: str
    nameBn: str
    tenure: TenureRange
    expectedReturn: ReturnRange
    minInvestment: float = Field(ge=0)
    maxInvestment: Optional[float] = None
    paymentStructure: PaymentStructure = PaymentStructure.LUMP_SUM
    riskLevel: RiskLevel = RiskLevel.LOW

    @computed_field  # type: ignore[misc]
    @property
    def taxCategory(self) -> TaxCategory:
        return tax_category_for(self.type)


class Scenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    annualRatePercent: float
    firstYearReturn: int
    futureValue: int


class ReturnScenarios(BaseModel):
    """The quote re-run at each end of the product's expected-return range."""

    model_config = ConfigDict(frozen=True)

    min: Scenario
    average: Scenario
    max: Scenario


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True)

    productId: str
    years: int
    expectedReturnPercent: float
    projection: ProjectionResult
    tax: TaxInfo
    scenarios: ReturnScenarios
    # profit paid out each month by savings certificates; None for other products
    monthlyPayout: Optional[int] = None
    totalPayout: Optional[int] = None


_TAX_CATEGORY_BY_TYPE: Dict[InvestmentType, TaxCategory] = {
    InvestmentType.SANCHAYAPATRA: TaxCategory.GOVERNMENT_CERTIFICATE,
    InvestmentType.FIXED_DEPOSIT: TaxCategory.FIXED_DEPOSIT,
    InvestmentType.STOCK: TaxCategory.EQUITY,
}


def tax_category_for(investment_type: InvestmentType) -> TaxCategory:
    return _TAX_CATEGORY_BY_TYPE.get(investment_type, TaxCategory.OTHER)


PRODUCTS: List[Product] = [
    Product(
        id="sanchayapatra-5y",
        type=InvestmentType.SANCHAYAPATRA,
        name="5-Year Sanchayapatra",
        nameBn="৫ বছর মেয়াদী সঞ্চয়পত্র",
        tenure=TenureRange(min=5, max=5),
        expectedReturn=ReturnRange.fixed(8.5),
        minInvestment=1_000,
        maxInvestment=3_000_000,
    ),
    Product(
        id="sanchayapatra-3y",
        type=InvestmentType.SANCHAYAPATRA,
        name="3-Year Sanchayapatra",
        nameBn="৩ বছর মেয়াদী সঞ্চয়পত্র",
        tenure=TenureRange(min=3, max=3),
        expectedReturn=ReturnRange.fixed(8.0),
        minInvestment=1_000,
        maxInvestment=2_000_000,
    ),
    Product(
        id="sanchayapatra-pensioner",
        type=InvestmentType.SANCHAYAPATRA,
        name="Pensioner Sanchayapatra",
        nameBn="পেনশনার সঞ্চয়পত্র",
        tenure=TenureRange(min=5, max=5),
        expectedReturn=ReturnRange.fixed(9.0),
        minInvestment=1_000,
        maxInvestment=5_000_000,
    ),
    Product(
        id="sanchayapatra-family",
        type=InvestmentType.SANCHAYAPATRA,
        name="Family Sanchayapatra",
        nameBn="পারিবারিক সঞ্চয়পত্র",
        tenure=TenureRange(min=5, max=5),
        expectedReturn=ReturnRange.fixed(8.75),
        minInvestment=1_000,
        maxInvestment=4_500_000,
    ),
    Product(
        id="dps",
        type=InvestmentType.DPS,
        name="Deposit Pension Scheme",
        nameBn="ডিপিএস",
        tenure=TenureRange(min=5, max=20),
        expectedReturn=ReturnRange(min=6.5, max=8.0, average=7.2),
        minInvestment=500,
        paymentStructure=PaymentStructure.MONTHLY,
    ),
    Product(
        id="fixed-deposit",
        type=InvestmentType.FIXED_DEPOSIT,
        name="Fixed Deposit",
        nameBn="ফিক্সড ডিপোজিট",
        tenure=TenureRange(min=1, max=5),
        expectedReturn=ReturnRange(min=6.0, max=9.0, average=7.5),
        minInvestment=10_000,
    ),
    Product(
        id="mutual-fund",
        type=InvestmentType.MUTUAL_FUND,
        name="Mutual Fund",
        nameBn="মিউচুয়াল ফান্ড",
        tenure=TenureRange(min=1, max=20),
        expectedReturn=ReturnRange(min=8.0, max=16.0, average=12.0),
        minInvestment=5_000,
        riskLevel=RiskLevel.MEDIUM,
    ),
    Product(
        id="stock",
        type=InvestmentType.STOCK,
        name="Stock Market",
        nameBn="শেয়ার বাজার",
        tenure=TenureRange(min=1, max=30),
        expectedReturn=ReturnRange(min=-10.0, max=40.0, average=15.0),
        minInvestment=1_000,
        riskLevel=RiskLevel.HIGH,
    ),
]

_PRODUCTS_BY_ID: Dict[str, Product] = {product.id: product for product in PRODUCTS}


def list_products(investment_type: Optional[InvestmentType] = None) -> List[Product]:
    if investment_type is None:
        return list(PRODUCTS)
    return [product for product in PRODUCTS if product.type == investment_type]


def get_product(product_id: str) -> Product:
    try:
        return _PRODUCTS_BY_ID[product_id]
    except KeyError:
        raise ProductNotFoundError(product_id) from None


def quote(
    product: Product,
    amount: float = 0.0,
    years: Optional[int] = None,
    monthly_contribution: float = 0.0,
    has_tin: bool = True,
    settings: TaxSettings = DEFAULT_TAX_SETTINGS,
) -> Quote:
    """
    Project and tax-estimate an investment in one catalog product.

    Lump-sum products need minInvestment <= amount <= maxInvestment and ignore
    monthly_contribution. Monthly products (DPS) need a positive
    monthly_contribution of at least minInvestment and start from a zero
    principal. years defaults to the shortest tenure and must lie inside the
    product's tenure range.
    """
    years = product.tenure.min if years is None else years
    if not product.tenure.contains(years):
        raise ProductRuleError(
            "years",
            years,
            f"{product.name} runs for {product.tenure.min}-{product.tenure.max} years",
        )

    if product.paymentStructure is PaymentStructure.MONTHLY:
        if monthly_contribution <= 0:
            raise ProductRuleError(
                "monthlyContribution", monthly_contribution, f"{product.name} needs a monthly installment"
            )
        if monthly_contribution < product.minInvestment:
            raise ProductRuleError(
                "monthlyContribution",
                monthly_contribution,
                f"minimum installment is {product.minInvestment:,.0f}",
            )
        principal, monthly = 0.0, monthly_contribution
    else:
        if amount < product.minInvestment:
            raise ProductRuleError("amount", amount, f"minimum investment is {product.minInvestment:,.0f}")
        if product.maxInvestment is not None and amount > product.maxInvestment:
            raise ProductRuleError("amount", amount, f"maximum investment is {product.maxInvestment:,.0f}")
        principal, monthly = amount, 0.0

    rate = product.expectedReturn.average
    projection = project(principal, rate, years, monthly)
    taxed_amount = principal if principal > 0 else float(projection.totalInvestment)
    tax = estimate_tax(product.taxCategory, taxed_amount, rate, has_tin=has_tin, settings=settings)

    monthly_payout = total_payout = None
    if product.type is InvestmentType.SANCHAYAPATRA:
        payout = principal * rate / MONTHS_PER_YEAR / 100
        monthly_payout = round_currency(payout)
        total_payout = round_currency(payout * years * MONTHS_PER_YEAR)

    logger.debug("quote product=%s years=%s fv=%s", product.id, years, projection.futureValue)
    return Quote(
        productId=product.id,
        years=years,
        expectedReturnPercent=rate,
        projection=projection,
        tax=tax,
        scenarios=ReturnScenarios(
            min=_scenario(principal, product.expectedReturn.min, years, monthly),
            average=_scenario(principal, rate, years, monthly),
            max=_scenario(principal, product.expectedReturn.max, years, monthly),
        ),
        monthlyPayout=monthly_payout,
        totalPayout=total_payout,
    )


def _scenario(principal: float, rate: float, years: int, monthly: float) -> Scenario:
    return Scenario(
        annualRatePercent=rate,
        firstYearReturn=project(principal, rate, 1, monthly).totalReturn,
        futureValue=project(principal, rate, years, monthly).futureValue,
    )
