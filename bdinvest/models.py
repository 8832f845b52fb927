from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InvestmentType(str, Enum):
    SANCHAYAPATRA = "sanchayapatra"
    DPS = "dps"
    FIXED_DEPOSIT = "fixed-deposit"
    MUTUAL_FUND = "mutual-fund"
    STOCK = "stock"
    BOND = "bond"
    OTHER = "other"


class InvestmentStatus(str, Enum):
    ACTIVE = "active"
    MATURED = "matured"
    WITHDRAWN = "withdrawn"


class RiskTolerance(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class EmploymentType(str, Enum):
    SALARIED = "salaried"
    BUSINESS = "business"
    SELF_EMPLOYED = "self-employed"
    RETIRED = "retired"
    STUDENT = "student"
    OTHER = "other"


class IncomeStability(str, Enum):
    STABLE = "stable"
    VARIABLE = "variable"
    IRREGULAR = "irregular"


class Investment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str
    type: InvestmentType
    amount: float = Field(ge=0)
    currentValue: float = Field(ge=0)
    # flat annual percent; catalog ranges are collapsed to their average before this point
    expectedReturn: float = Field(ge=-100, le=100)
    startDate: date
    maturityDate: Optional[date] = None
    status: InvestmentStatus = InvestmentStatus.ACTIVE
    details: Dict[str, str] = Field(default_factory=dict)
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def ensure_dates(self) -> "Investment":
        if self.maturityDate is not None and self.maturityDate < self.startDate:
            raise ValueError("maturityDate must not be before startDate")
        return self


class FinancialProfile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monthlyIncome: float = Field(ge=0)
    monthlyExpenses: float = Field(ge=0)
    currentSavings: float = Field(default=0.0, ge=0)
    dependents: int = Field(default=0, ge=0, le=20)
    employmentType: EmploymentType = EmploymentType.SALARIED
    incomeStability: IncomeStability = IncomeStability.STABLE
    investmentHorizonYears: int = Field(default=5, ge=1, le=30)
    updatedAt: datetime = Field(default_factory=utcnow)

    @property
    def monthlySavings(self) -> float:
        return self.monthlyIncome - self.monthlyExpenses


class FinancialGoal(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    title: str
    targetAmount: float = Field(gt=0)
    targetDate: date
    currentAmount: float = Field(default=0.0, ge=0)
    progress: float = Field(default=0.0, ge=0, le=100)
    isActive: bool = True
    createdAt: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def derive_progress(self) -> "FinancialGoal":
        self.progress = round(min(self.currentAmount / self.targetAmount, 1.0) * 100, 2)
        return self


class RiskAssessment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    score: float = Field(ge=0, le=100)
    tolerance: RiskTolerance
    assessedAt: datetime = Field(default_factory=utcnow)
