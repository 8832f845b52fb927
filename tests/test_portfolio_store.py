from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from bdinvest.domain.portfolio import (
    DuplicateInvestmentError,
    GoalNotFoundError,
    InvestmentNotFoundError,
    PortfolioStore,
)
from bdinvest.models import InvestmentStatus, InvestmentType, RiskTolerance


def certificate() -> dict:
    return {
        "id": "1",
        "name": "5-Year Sanchayapatra",
        "type": "sanchayapatra",
        "amount": 100000,
        "currentValue": 108500,
        "expectedReturn": 8.5,
        "startDate": "2023-01-01",
        "maturityDate": "2028-01-01",
        "details": {"institution": "Bangladesh Bank"},
    }


def monthly_dps() -> dict:
    return {
        "id": "2",
        "name": "Monthly DPS",
        "type": "dps",
        "amount": 60000,
        "currentValue": 65000,
        "expectedReturn": 7.2,
        "startDate": "2023-03-01",
        "maturityDate": "2028-03-01",
    }


@pytest.fixture()
def store() -> PortfolioStore:
    store = PortfolioStore()
    store.add_investment(certificate())
    store.add_investment(monthly_dps())
    return store


def test_add_and_list_investments(store):
    assert [inv.id for inv in store.investments] == ["1", "2"]
    assert store.get_investment("1").type is InvestmentType.SANCHAYAPATRA


def test_listing_returns_a_copy(store):
    store.investments.clear()
    assert len(store.investments) == 2


def test_duplicate_id_is_rejected(store):
    with pytest.raises(DuplicateInvestmentError):
        store.add_investment(certificate())


def test_invalid_record_is_rejected():
    bad = certificate()
    bad["maturityDate"] = "2020-01-01"

    with pytest.raises(ValidationError):
        PortfolioStore().add_investment(bad)


def test_update_merges_fields_and_stamps_time(store):
    before = store.get_investment("1")

    updated = store.update_investment("1", currentValue=112000, status=InvestmentStatus.MATURED)

    assert updated.currentValue == 112000
    assert updated.status is InvestmentStatus.MATURED
    assert updated.name == before.name
    assert updated.updatedAt >= before.updatedAt
    assert store.get_investment("1") == updated


def test_update_cannot_change_id(store):
    with pytest.raises(ValueError):
        store.update_investment("1", id="99")


def test_update_is_validated(store):
    with pytest.raises(ValidationError):
        store.update_investment("1", amount=-5)
    assert store.get_investment("1").amount == 100000


def test_delete_and_missing_ids(store):
    removed = store.delete_investment("2")

    assert removed.id == "2"
    assert [inv.id for inv in store.investments] == ["1"]
    with pytest.raises(InvestmentNotFoundError):
        store.delete_investment("2")
    with pytest.raises(InvestmentNotFoundError):
        store.update_investment("404", amount=1)


def test_summary_totals(store):
    summary = store.summary()

    assert summary.totalInvestment == 160000
    assert summary.totalValue == 173500
    assert summary.totalGain == 13500
    assert summary.count == 2
    assert summary.activeCount == 2


def test_allocation_by_type(store):
    slices = store.allocation()

    assert [s.type for s in slices] == [InvestmentType.SANCHAYAPATRA, InvestmentType.DPS]
    assert slices[0].share == pytest.approx(62.54)
    assert slices[1].share == pytest.approx(37.46)


def test_empty_store_views():
    store = PortfolioStore()

    assert store.summary().totalValue == 0
    assert store.allocation() == []
    assert all(point.total == 0 for point in store.growth_series(3))


def test_growth_series_compounds_monthly(store):
    points = store.growth_series()

    assert len(points) == 12
    assert points[0].values == {"1": 100708, "2": 60360}
    assert points[0].total == 161068
    assert all(later.total > earlier.total for earlier, later in zip(points, points[1:]))


def test_growth_series_needs_a_month(store):
    with pytest.raises(ValueError):
        store.growth_series(0)


def test_profile_derives_monthly_savings():
    store = PortfolioStore()
    profile = store.update_profile({"monthlyIncome": 50000, "monthlyExpenses": 38000, "dependents": 2})

    assert store.profile == profile
    assert profile.monthlySavings == 12000


def test_goals_track_progress():
    store = PortfolioStore()
    goal = store.add_goal("Hajj", 200000, date(2030, 1, 1), current_amount=50000)

    assert goal.progress == 25.0

    updated = store.update_goal(goal.id, currentAmount=250000)
    assert updated.progress == 100.0
    assert updated.createdAt == goal.createdAt

    store.delete_goal(goal.id)
    assert store.goals == []
    with pytest.raises(GoalNotFoundError):
        store.update_goal(goal.id, title="again")


def test_risk_assessment():
    store = PortfolioStore()
    assessment = store.set_risk_assessment({"score": 42, "tolerance": "moderate"})

    assert store.risk_assessment.tolerance is RiskTolerance.MODERATE
    assert assessment.score == 42


def test_snapshot_restore_and_reset(store):
    store.update_profile({"monthlyIncome": 50000, "monthlyExpenses": 40000})
    snapshot = store.snapshot()

    copy = PortfolioStore(snapshot)
    assert copy.investments == store.investments
    assert copy.profile == store.profile

    store.reset()
    assert store.investments == []
    assert store.profile is None
    assert copy.summary().count == 2


def test_performance_per_investment(store):
    store.add_investment(
        {
            **certificate(),
            "id": "3",
            "name": "DSE shares",
            "type": "stock",
            "amount": 10000,
            "currentValue": 9000,
            "expectedReturn": 15,
        }
    )

    entries = {entry.id: entry for entry in store.performance()}

    assert entries["1"].returnPercent == pytest.approx(8.5)
    assert entries["2"].returnPercent == pytest.approx(8.33)
    assert entries["3"].returnPercent == pytest.approx(-10.0)
    assert entries["3"].type is InvestmentType.STOCK


def test_performance_of_zero_amount_is_zero():
    store = PortfolioStore()
    store.add_investment({**certificate(), "amount": 0, "currentValue": 500})

    assert store.performance()[0].returnPercent == 0.0


def test_timestamps_are_timezone_aware(store):
    record = store.update_investment("1", currentValue=110000)
    profile = store.update_profile({"monthlyIncome": 50000, "monthlyExpenses": 30000})

    assert record.createdAt.tzinfo is not None
    assert record.updatedAt.tzinfo is not None
    assert profile.updatedAt.tzinfo is not None
