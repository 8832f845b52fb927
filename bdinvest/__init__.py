"""Investment projection engine for Bangladeshi retail savings products."""

from bdinvest.core.projection import ProjectionResult, project
from bdinvest.core.tax import TaxCategory, TaxInfo, estimate_tax

__version__ = "0.1.0"

__all__ = [
    "ProjectionResult",
    "TaxCategory",
    "TaxInfo",
    "estimate_tax",
    "project",
]
