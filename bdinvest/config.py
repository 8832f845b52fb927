"""
Configuration defaults.

Flask config keys are declared on DefaultConfig; create_app() loads them,
then an optional override mapping, then BDINVEST_* environment variables.
Engine tax parameters are pulled out of that mapping into TaxSettings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

MAX_HORIZON_YEARS = 30


class DefaultConfig:
    CORS_ORIGINS = [
        "http://localhost:8081",
        "http://localhost:19006",
        "http://127.0.0.1:8081",
    ]
    MAX_HORIZON_YEARS = MAX_HORIZON_YEARS
    # snapshot persistence is off unless a path is configured
    DB_PATH = None
    LOG_LEVEL = "INFO"

    CERTIFICATE_TIER_THRESHOLD = 500_000.0
    CERTIFICATE_TAX_RATE_LOW = 5.0
    CERTIFICATE_TAX_RATE_HIGH = 10.0
    FD_TAX_RATE_WITH_TIN = 10.0
    FD_TAX_RATE_WITHOUT_TIN = 15.0


@dataclass(frozen=True)
class TaxSettings:
    certificate_tier_threshold: float = DefaultConfig.CERTIFICATE_TIER_THRESHOLD
    certificate_rate_low: float = DefaultConfig.CERTIFICATE_TAX_RATE_LOW
    certificate_rate_high: float = DefaultConfig.CERTIFICATE_TAX_RATE_HIGH
    fd_rate_with_tin: float = DefaultConfig.FD_TAX_RATE_WITH_TIN
    fd_rate_without_tin: float = DefaultConfig.FD_TAX_RATE_WITHOUT_TIN

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "TaxSettings":
        """Build settings from a Flask-style config mapping, keeping defaults for missing keys."""
        defaults = cls()
        return cls(
            certificate_tier_threshold=float(
                config.get("CERTIFICATE_TIER_THRESHOLD", defaults.certificate_tier_threshold)
            ),
            certificate_rate_low=float(
                config.get("CERTIFICATE_TAX_RATE_LOW", defaults.certificate_rate_low)
            ),
            certificate_rate_high=float(
                config.get("CERTIFICATE_TAX_RATE_HIGH", defaults.certificate_rate_high)
            ),
            fd_rate_with_tin=float(config.get("FD_TAX_RATE_WITH_TIN", defaults.fd_rate_with_tin)),
            fd_rate_without_tin=float(
                config.get("FD_TAX_RATE_WITHOUT_TIN", defaults.fd_rate_without_tin)
            ),
        )


DEFAULT_TAX_SETTINGS = TaxSettings()
