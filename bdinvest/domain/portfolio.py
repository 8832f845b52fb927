from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from bdinvest.core.projection import MONTHS_PER_YEAR, round_currency
from bdinvest.models import (
    FinancialGoal,
    FinancialProfile,
    Investment,
    InvestmentStatus,
    InvestmentType,
    RiskAssessment,
    utcnow,
)

logger = logging.getLogger(__name__)


class InvestmentNotFoundError(LookupError):
    def __init__(self, investment_id: str):
        super().__init__(f"no investment with id {investment_id!r}")
        self.investment_id = investment_id


class GoalNotFoundError(LookupError):
    def __init__(self, goal_id: str):
        super().__init__(f"no goal with id {goal_id!r}")
        self.goal_id = goal_id


class DuplicateInvestmentError(ValueError):
    def __init__(self, investment_id: str):
        super().__init__(f"investment {investment_id!r} already exists")
        self.investment_id = investment_id


class PortfolioSnapshot(BaseModel):
    """The persisted part of the store: everything except derived figures."""

    model_config = ConfigDict(extra="forbid")

    profile: Optional[FinancialProfile] = None
    investments: List[Investment] = []
    goals: List[FinancialGoal] = []
    riskAssessment: Optional[RiskAssessment] = None


class PortfolioSummary(BaseModel):
    totalInvestment: float
    totalValue: float
    totalGain: float
    count: int
    activeCount: int


class AllocationSlice(BaseModel):
    type: InvestmentType
    value: float
    # percent of total current value
    share: float


class PerformanceEntry(BaseModel):
    id: str
    type: InvestmentType
    # gain over the amount invested, in percent
    returnPercent: float


class GrowthPoint(BaseModel):
    month: int
    values: Dict[str, int]
    total: int


class PortfolioStore:
    """
    Explicit container for the user's on-device state.

    Every mutation goes through a method here; readers get copies of the
    records, never the internal lists.
    """

    def __init__(self, snapshot: Optional[PortfolioSnapshot] = None) -> None:
        self._profile: Optional[FinancialProfile] = None
        self._investments: List[Investment] = []
        self._goals: List[FinancialGoal] = []
        self._risk: Optional[RiskAssessment] = None
        if snapshot is not None:
            self.restore(snapshot)

    # ---------- investments ----------

    @property
    def investments(self) -> List[Investment]:
        return list(self._investments)

    def get_investment(self, investment_id: str) -> Investment:
        return self._investments[self._index_of(investment_id)]

    def add_investment(self, investment: Union[Investment, Mapping[str, Any]]) -> Investment:
        record = Investment.model_validate(investment)
        if any(existing.id == record.id for existing in self._investments):
            raise DuplicateInvestmentError(record.id)
        self._investments.append(record)
        logger.info("added investment %s (%s, %.2f)", record.id, record.type.value, record.amount)
        return record

    def update_investment(self, investment_id: str, **changes: Any) -> Investment:
        if "id" in changes and changes["id"] != investment_id:
            raise ValueError("investment id cannot be changed")
        index = self._index_of(investment_id)
        current = self._investments[index]
        merged = {**current.model_dump(), **changes, "id": investment_id, "updatedAt": utcnow()}
        updated = Investment.model_validate(merged)
        self._investments[index] = updated
        logger.info("updated investment %s fields=%s", investment_id, sorted(changes))
        return updated

    def delete_investment(self, investment_id: str) -> Investment:
        removed = self._investments.pop(self._index_of(investment_id))
        logger.info("deleted investment %s", investment_id)
        return removed

    def _index_of(self, investment_id: str) -> int:
        for index, investment in enumerate(self._investments):
            if investment.id == investment_id:
                return index
        raise InvestmentNotFoundError(investment_id)

    # ---------- profile / risk ----------

    @property
    def profile(self) -> Optional[FinancialProfile]:
        return self._profile

    def update_profile(self, form: Union[FinancialProfile, Mapping[str, Any]]) -> FinancialProfile:
        data = form.model_dump() if isinstance(form, FinancialProfile) else dict(form)
        data["updatedAt"] = utcnow()
        self._profile = FinancialProfile.model_validate(data)
        logger.info("updated financial profile (monthly savings %.2f)", self._profile.monthlySavings)
        return self._profile

    @property
    def risk_assessment(self) -> Optional[RiskAssessment]:
        return self._risk

    def set_risk_assessment(self, assessment: Union[RiskAssessment, Mapping[str, Any]]) -> RiskAssessment:
        self._risk = RiskAssessment.model_validate(assessment)
        logger.info("risk tolerance set to %s", self._risk.tolerance.value)
        return self._risk

    # ---------- goals ----------

    @property
    def goals(self) -> List[FinancialGoal]:
        return list(self._goals)

    def add_goal(
        self,
        title: str,
        target_amount: float,
        target_date: date,
        current_amount: float = 0.0,
    ) -> FinancialGoal:
        goal = FinancialGoal(
            id=uuid.uuid4().hex,
            title=title,
            targetAmount=target_amount,
            targetDate=target_date,
            currentAmount=current_amount,
        )
        self._goals.append(goal)
        logger.info("added goal %s (%s)", goal.id, title)
        return goal

    def update_goal(self, goal_id: str, **changes: Any) -> FinancialGoal:
        index = self._goal_index(goal_id)
        merged = {**self._goals[index].model_dump(), **changes, "id": goal_id}
        self._goals[index] = FinancialGoal.model_validate(merged)
        return self._goals[index]

    def delete_goal(self, goal_id: str) -> FinancialGoal:
        return self._goals.pop(self._goal_index(goal_id))

    def _goal_index(self, goal_id: str) -> int:
        for index, goal in enumerate(self._goals):
            if goal.id == goal_id:
                return index
        raise GoalNotFoundError(goal_id)

    # ---------- derived views ----------

    def summary(self) -> PortfolioSummary:
        total_investment = sum(inv.amount for inv in self._investments)
        total_value = sum(inv.currentValue for inv in self._investments)
        return PortfolioSummary(
            totalInvestment=round(total_investment, 2),
            totalValue=round(total_value, 2),
            totalGain=round(total_value - total_investment, 2),
            count=len(self._investments),
            activeCount=sum(1 for inv in self._investments if inv.status is InvestmentStatus.ACTIVE),
        )

    def allocation(self) -> List[AllocationSlice]:
        """Current value grouped by investment type, largest first."""
        by_type: Dict[InvestmentType, float] = {}
        for inv in self._investments:
            by_type[inv.type] = by_type.get(inv.type, 0.0) + inv.currentValue

        total = sum(by_type.values())
        slices = [
            AllocationSlice(
                type=kind,
                value=round(value, 2),
                share=round(value / total * 100, 2) if total > 0 else 0.0,
            )
            for kind, value in by_type.items()
        ]
        return sorted(slices, key=lambda s: s.value, reverse=True)

    def performance(self) -> List[PerformanceEntry]:
        """Return on each investment so far; a zero amount counts as 0%."""
        entries: List[PerformanceEntry] = []
        for inv in self._investments:
            gain = (inv.currentValue - inv.amount) / inv.amount * 100 if inv.amount > 0 else 0.0
            entries.append(PerformanceEntry(id=inv.id, type=inv.type, returnPercent=round(gain, 2)))
        return entries

    def growth_series(self, months: int = MONTHS_PER_YEAR) -> List[GrowthPoint]:
        """
        Month-by-month value of each investment's amount compounding monthly at
        expectedReturn / 12, for the portfolio growth chart.
        """
        if months < 1:
            raise ValueError("months must be at least 1")

        points: List[GrowthPoint] = []
        for month in range(1, months + 1):
            values = {
                inv.id: round_currency(inv.amount * (1 + inv.expectedReturn / MONTHS_PER_YEAR / 100) ** month)
                for inv in self._investments
            }
            points.append(GrowthPoint(month=month, values=values, total=sum(values.values())))
        return points

    # ---------- snapshot ----------

    def snapshot(self) -> PortfolioSnapshot:
        return PortfolioSnapshot(
            profile=self._profile,
            investments=list(self._investments),
            goals=list(self._goals),
            riskAssessment=self._risk,
        )

    def restore(self, snapshot: PortfolioSnapshot) -> None:
        self._profile = snapshot.profile
        self._investments = list(snapshot.investments)
        self._goals = list(snapshot.goals)
        self._risk = snapshot.riskAssessment

    def reset(self) -> None:
        self.restore(PortfolioSnapshot())
