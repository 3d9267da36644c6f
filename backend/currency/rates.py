# currency/rates.py
"""
Point-in-time market rate lookup.

rate_at() selects the latest observation dated on or before the reference
date. A missing observation yields the neutral result (rate 1, divisor 1)
with found=False; it never raises for missing data.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from django.db import DEFAULT_DB_ALIAS

from currency.models import CurrencyRate, RateStatus

logger = logging.getLogger(__name__)

RATE_QUANTUM = Decimal("1e-10")

ONE = Decimal("1")


def quantize_rate(value: Decimal) -> Decimal:
    return value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class RateResult:
    rate: Decimal
    divisor: Decimal
    status: int
    found: bool = True

    @classmethod
    def neutral(cls, status: int = RateStatus.MARKET) -> "RateResult":
        """Rate 1 / divisor 1 placeholder for a conversion that could not be resolved."""
        return cls(rate=ONE, divisor=ONE, status=status, found=False)

    @classmethod
    def identity(cls) -> "RateResult":
        return cls(rate=ONE, divisor=ONE, status=RateStatus.MARKET)

    @classmethod
    def fixed(cls, rate: Decimal) -> "RateResult":
        return cls(rate=rate, divisor=ONE, status=RateStatus.FIXED)


def rate_at(
    rate_type: int,
    source_currency: str,
    destination_currency: str,
    as_of: date,
    using: str = DEFAULT_DB_ALIAS,
) -> RateResult:
    """
    Market rate for source/destination on `as_of`, in source units per destination unit.

    The rate is divisor / inverse_rate rounded half-up to 10 decimal places.
    """
    observation = (
        CurrencyRate.objects.using(using)
        .filter(
            rate_type=rate_type,
            source_currency=source_currency,
            destination_currency=destination_currency,
            rate_date__lte=as_of,
        )
        .order_by("-rate_date")
        .values("rate_date", "inverse_rate", "divisor")
        .first()
    )

    lookup = {
        "rate_type": rate_type,
        "source_currency": source_currency,
        "destination_currency": destination_currency,
        "as_of": as_of.isoformat(),
    }

    if observation is None:
        logger.warning("No currency rate found", extra=lookup)
        return RateResult.neutral()

    inverse_rate = observation["inverse_rate"]
    if not inverse_rate:
        logger.warning(
            "Currency rate observation has a zero inverse rate",
            extra={**lookup, "rate_date": observation["rate_date"].isoformat()},
        )
        return RateResult.neutral()

    divisor = observation["divisor"] or ONE
    return RateResult(
        rate=quantize_rate(divisor / inverse_rate),
        divisor=divisor,
        status=RateStatus.MARKET,
    )
