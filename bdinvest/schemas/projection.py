"""Request contracts for the calculation endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProjectionRequest(BaseModel):
    """Inputs for a single projection; the rate may come from a catalog product."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    principal: float = Field(0.0, ge=0, description="Lump sum invested at the start, in taka.")
    annualRatePercent: Optional[float] = Field(
        None,
        ge=-100,
        description="Expected yearly return in percent (e.g. 8.5). Negative models a loss.",
    )
    horizonYears: int = Field(..., ge=1, description="Years to project; the app caps it at MAX_HORIZON_YEARS.")
    monthlyContribution: float = Field(0.0, ge=0, description="Installment paid at each month end.")
    productId: Optional[str] = Field(
        None,
        description="Catalog product whose average expected return is used when no rate is given.",
    )

    @model_validator(mode="after")
    def ensure_rate_source(self) -> "ProjectionRequest":
        if self.annualRatePercent is None and self.productId is None:
            raise ValueError("either annualRatePercent or productId is required")
        return self


class TaxRequest(BaseModel):
    """Inputs for a tax estimate."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    category: str = Field(..., description="government-certificate, fixed-deposit, equity or other.")
    amount: float = Field(..., ge=0)
    expectedReturnPercent: float
    hasTin: bool = True
    taxRate: Optional[float] = Field(None, ge=0, le=100, description="Pre-resolved fixed-deposit rate.")


class QuoteRequest(BaseModel):
    """User numbers for a quote on one catalog product."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    amount: float = Field(0.0, ge=0)
    years: Optional[int] = Field(None, ge=1)
    monthlyContribution: float = Field(0.0, ge=0)
    hasTin: bool = True
