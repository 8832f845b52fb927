"""Error types raised by the projection engine, tax rules and catalog."""

from __future__ import annotations


class EngineError(ValueError):
    """Base class for calculation errors; always raised to the immediate caller."""


class InvalidInputError(EngineError):
    def __init__(self, field: str, value: object, reason: str):
        super().__init__(f"{field}={value!r}: {reason}")
        self.field = field
        self.value = value
        self.reason = reason


class InvalidHorizonError(EngineError):
    def __init__(self, horizon_years: object):
        super().__init__(f"horizon must be a positive number of years, got {horizon_years!r}")
        self.horizon_years = horizon_years


class UnknownCategoryError(EngineError):
    def __init__(self, category: object):
        super().__init__(f"unknown tax category {category!r}")
        self.category = category


class ProductNotFoundError(LookupError):
    def __init__(self, product_id: str):
        super().__init__(f"no product with id {product_id!r}")
        self.product_id = product_id


class ProductRuleError(InvalidInputError):
    """A quote violated the product's investment limits or payment structure."""
