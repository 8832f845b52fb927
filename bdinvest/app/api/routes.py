"""HTTP routes for the Flask API."""

import uuid
from http import HTTPStatus
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from bdinvest import __version__
from bdinvest.config import TaxSettings
from bdinvest.core.catalog import get_product, list_products, quote
from bdinvest.core.errors import EngineError, ProductNotFoundError
from bdinvest.core.projection import project
from bdinvest.core.tax import estimate_tax
from bdinvest.domain.portfolio import (
    DuplicateInvestmentError,
    GoalNotFoundError,
    InvestmentNotFoundError,
    PortfolioStore,
)
from bdinvest.domain.storage import SnapshotRepository
from bdinvest.models import FinancialProfile, InvestmentType
from bdinvest.schemas.health import PingResponse
from bdinvest.schemas.portfolio import GoalCreate, GoalUpdate, InvestmentUpdate
from bdinvest.schemas.projection import ProjectionRequest, QuoteRequest, TaxRequest

api_bp = Blueprint("api", __name__)

STORE_KEY = "bdinvest.store"
REPOSITORY_KEY = "bdinvest.repository"


def _store() -> PortfolioStore:
    return current_app.extensions[STORE_KEY]


def _persist() -> None:
    repository: Optional[SnapshotRepository] = current_app.extensions.get(REPOSITORY_KEY)
    if repository is not None:
        repository.save(_store().snapshot())


def _tax_settings() -> TaxSettings:
    return current_app.config["TAX_SETTINGS"]


def _payload() -> Dict[str, Any]:
    return request.get_json(force=True, silent=False)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    return jsonify({"detail": errors}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(EngineError)
def _handle_engine_error(exc: EngineError):
    current_app.logger.info("rejected calculation: %s", exc)
    return jsonify({"error": type(exc).__name__, "detail": str(exc)}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(ProductNotFoundError)
@api_bp.errorhandler(InvestmentNotFoundError)
@api_bp.errorhandler(GoalNotFoundError)
def _handle_not_found(exc: LookupError):
    return jsonify({"error": type(exc).__name__, "detail": str(exc)}), HTTPStatus.NOT_FOUND


@api_bp.errorhandler(DuplicateInvestmentError)
def _handle_duplicate(exc: DuplicateInvestmentError):
    return jsonify({"error": type(exc).__name__, "detail": str(exc)}), HTTPStatus.CONFLICT


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong", version=__version__)
    return jsonify(response.model_dump())


# ---------- calculations ----------


@api_bp.post("/calc/projection")
def projection() -> Any:
    """Project a lump sum and/or monthly installments over a horizon."""
    payload = ProjectionRequest.model_validate(_payload())

    max_years = current_app.config["MAX_HORIZON_YEARS"]
    if payload.horizonYears > max_years:
        return (
            jsonify({"error": "InvalidHorizonError", "detail": f"horizon is capped at {max_years} years"}),
            HTTPStatus.BAD_REQUEST,
        )

    rate = payload.annualRatePercent
    if rate is None:
        rate = get_product(payload.productId).expectedReturn.average

    result = project(payload.principal, rate, payload.horizonYears, payload.monthlyContribution)
    return jsonify({"annualRatePercent": rate, **result.model_dump(mode="json")})


@api_bp.post("/calc/tax")
def tax() -> Any:
    payload = TaxRequest.model_validate(_payload())
    info = estimate_tax(
        payload.category,
        payload.amount,
        payload.expectedReturnPercent,
        has_tin=payload.hasTin,
        tax_rate=payload.taxRate,
        settings=_tax_settings(),
    )
    return jsonify(info.model_dump(mode="json"))


# ---------- catalog ----------


@api_bp.get("/products")
def products() -> Any:
    raw_type = request.args.get("type")
    if raw_type is None:
        found = list_products()
    else:
        try:
            investment_type = InvestmentType(raw_type)
        except ValueError:
            return jsonify({"detail": f"unknown investment type {raw_type!r}"}), HTTPStatus.BAD_REQUEST
        found = list_products(investment_type)
    return jsonify([product.model_dump(mode="json") for product in found])


@api_bp.get("/products/<product_id>")
def product_detail(product_id: str) -> Any:
    return jsonify(get_product(product_id).model_dump(mode="json"))


@api_bp.post("/products/<product_id>/quote")
def product_quote(product_id: str) -> Any:
    product = get_product(product_id)
    payload = QuoteRequest.model_validate(_payload())
    result = quote(
        product,
        amount=payload.amount,
        years=payload.years,
        monthly_contribution=payload.monthlyContribution,
        has_tin=payload.hasTin,
        settings=_tax_settings(),
    )
    return jsonify(result.model_dump(mode="json"))


# ---------- portfolio ----------


@api_bp.get("/investments")
def investments() -> Any:
    return jsonify([inv.model_dump(mode="json") for inv in _store().investments])


@api_bp.post("/investments")
def add_investment() -> Any:
    raw = _payload()
    if isinstance(raw, dict):
        raw.setdefault("id", uuid.uuid4().hex)
    record = _store().add_investment(raw)
    _persist()
    return jsonify(record.model_dump(mode="json")), HTTPStatus.CREATED


@api_bp.get("/investments/<investment_id>")
def investment_detail(investment_id: str) -> Any:
    return jsonify(_store().get_investment(investment_id).model_dump(mode="json"))


@api_bp.patch("/investments/<investment_id>")
def update_investment(investment_id: str) -> Any:
    changes = InvestmentUpdate.model_validate(_payload()).model_dump(exclude_unset=True)
    record = _store().update_investment(investment_id, **changes)
    _persist()
    return jsonify(record.model_dump(mode="json"))


@api_bp.delete("/investments/<investment_id>")
def delete_investment(investment_id: str) -> Any:
    _store().delete_investment(investment_id)
    _persist()
    return "", HTTPStatus.NO_CONTENT


@api_bp.get("/portfolio/summary")
def portfolio_summary() -> Any:
    store = _store()
    return jsonify(
        {
            "summary": store.summary().model_dump(mode="json"),
            "allocation": [item.model_dump(mode="json") for item in store.allocation()],
        }
    )


@api_bp.get("/portfolio/performance")
def portfolio_performance() -> Any:
    return jsonify([entry.model_dump(mode="json") for entry in _store().performance()])


@api_bp.get("/portfolio/growth")
def portfolio_growth() -> Any:
    months = request.args.get("months", 12, type=int)
    if months < 1 or months > current_app.config["MAX_HORIZON_YEARS"] * 12:
        return jsonify({"detail": "months out of range"}), HTTPStatus.BAD_REQUEST
    return jsonify([point.model_dump(mode="json") for point in _store().growth_series(months)])


@api_bp.get("/profile")
def profile() -> Any:
    current = _store().profile
    if current is None:
        return jsonify({"detail": "no financial profile yet"}), HTTPStatus.NOT_FOUND
    return jsonify({**current.model_dump(mode="json"), "monthlySavings": current.monthlySavings})


@api_bp.put("/profile")
def update_profile() -> Any:
    updated = _store().update_profile(FinancialProfile.model_validate(_payload()))
    _persist()
    return jsonify({**updated.model_dump(mode="json"), "monthlySavings": updated.monthlySavings})


@api_bp.post("/goals")
def add_goal() -> Any:
    payload = GoalCreate.model_validate(_payload())
    goal = _store().add_goal(
        payload.title,
        payload.targetAmount,
        payload.targetDate,
        current_amount=payload.currentAmount,
    )
    _persist()
    return jsonify(goal.model_dump(mode="json")), HTTPStatus.CREATED


@api_bp.patch("/goals/<goal_id>")
def update_goal(goal_id: str) -> Any:
    changes = GoalUpdate.model_validate(_payload()).model_dump(exclude_unset=True)
    goal = _store().update_goal(goal_id, **changes)
    _persist()
    return jsonify(goal.model_dump(mode="json"))


@api_bp.delete("/goals/<goal_id>")
def delete_goal(goal_id: str) -> Any:
    _store().delete_goal(goal_id)
    _persist()
    return "", HTTPStatus.NO_CONTENT
