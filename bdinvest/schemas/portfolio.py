"""Request contracts for the portfolio endpoints."""

from datetime import date
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from bdinvest.models import InvestmentStatus, InvestmentType


class InvestmentUpdate(BaseModel):
    """Partial update; only the fields sent are applied."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    type: Optional[InvestmentType] = None
    amount: Optional[float] = Field(None, ge=0)
    currentValue: Optional[float] = Field(None, ge=0)
    expectedReturn: Optional[float] = Field(None, ge=-100, le=100)
    startDate: Optional[date] = None
    maturityDate: Optional[date] = None
    status: Optional[InvestmentStatus] = None
    details: Optional[Dict[str, str]] = None


class GoalCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    targetAmount: float = Field(..., gt=0)
    targetDate: date
    currentAmount: float = Field(0.0, ge=0)


class GoalUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1)
    targetAmount: Optional[float] = Field(None, gt=0)
    targetDate: Optional[date] = None
    currentAmount: Optional[float] = Field(None, ge=0)
    isActive: Optional[bool] = None
