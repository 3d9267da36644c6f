# currency/resolution.py
"""
Currency rate resolution through a pivot currency.

resolve_currency_rate(pivot, organization, destination, ...) returns the
number of destination units per organization unit. Three topologies:

1. organization is the pivot: the destination's fixed legacy rate when it
   applies, otherwise the market rate destination/pivot.
2. destination is the pivot: the inverse of the organization's fixed rate
   when it applies, otherwise the market rate pivot/organization.
3. neither is the pivot (triangulation): the ratio of both fixed rates
   when both currencies are locked to the pivot; otherwise a direct market
   observation between the two, falling back to two hops through the pivot.

Excluded currencies short-circuit with SOURCE_EXCLUDED or
DESTINATION_EXCLUDED. When no path resolves the result is the neutral
rate 1 / divisor 1 with status MARKET and found=False. Only database
errors are raised.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db import DEFAULT_DB_ALIAS

from currency.dates import greatest_valid_date
from currency.models import RateStatus, RateType
from currency.rates import ONE, RateResult, quantize_rate, rate_at
from currency.registry import CurrencyInfo, get_currency
from ops.metrics import record_rate_resolution

logger = logging.getLogger(__name__)


def resolve_currency_rate(
    pivot: str,
    organization_currency: str,
    destination_currency: str,
    rate_type: Optional[int] = None,
    reference_date: Optional[date] = None,
    using: str = DEFAULT_DB_ALIAS,
) -> RateResult:
    """
    Resolve the conversion rate from organization_currency to destination_currency.

    Args:
        pivot: Pivot currency code all pairs triangulate through
        organization_currency: Currency converted from
        destination_currency: Currency converted to
        rate_type: RateType; None or 0 means DAILY
        reference_date: Rate date; None means the greatest valid date
        using: Database alias

    Returns:
        RateResult; check `status` and `found` before posting with it.
    """
    as_of = reference_date or greatest_valid_date()
    rate_type = rate_type or RateType.DAILY

    if organization_currency == destination_currency:
        result = RateResult.identity()
    elif organization_currency == pivot:
        result = _from_pivot(pivot, destination_currency, rate_type, as_of, using)
    elif destination_currency == pivot:
        result = _to_pivot(pivot, organization_currency, rate_type, as_of, using)
    else:
        result = _triangulate(pivot, organization_currency, destination_currency, rate_type, as_of, using)

    record_rate_resolution(result.status, result.found)
    if not result.found:
        logger.info(
            "Currency rate not resolved, using neutral rate",
            extra={
                "pivot": pivot,
                "organization_currency": organization_currency,
                "destination_currency": destination_currency,
                "rate_type": int(rate_type),
                "reference_date": as_of.isoformat(),
                "status": int(result.status),
            },
        )
    return result


def _inverse(rate: Decimal) -> Decimal:
    return quantize_rate(ONE / rate) if rate else ONE


def _from_pivot(pivot, destination_currency, rate_type, as_of, using) -> RateResult:
    destination = get_currency(destination_currency, using=using)

    if destination.is_excluded:
        return RateResult.neutral(RateStatus.DESTINATION_EXCLUDED)
    if destination.fixed_rate_applies(as_of):
        return RateResult.fixed(destination.legacy_rate or ONE)
    return rate_at(rate_type, destination_currency, pivot, as_of, using=using)


def _to_pivot(pivot, organization_currency, rate_type, as_of, using) -> RateResult:
    organization = get_currency(organization_currency, using=using)

    if organization.is_excluded:
        return RateResult.neutral(RateStatus.SOURCE_EXCLUDED)
    if organization.fixed_rate_applies(as_of):
        return RateResult.fixed(_inverse(organization.legacy_rate))
    return rate_at(rate_type, pivot, organization_currency, as_of, using=using)


def _pivot_per_unit(info: CurrencyInfo, pivot, rate_type, as_of, using) -> RateResult:
    """Pivot units per one unit of `info`."""
    if info.fixed_rate_applies(as_of):
        return RateResult.fixed(_inverse(info.legacy_rate))
    return rate_at(rate_type, pivot, info.code, as_of, using=using)


def _units_per_pivot(info: CurrencyInfo, pivot, rate_type, as_of, using) -> RateResult:
    """Units of `info` per one pivot unit."""
    if info.fixed_rate_applies(as_of):
        return RateResult.fixed(info.legacy_rate or ONE)
    return rate_at(rate_type, info.code, pivot, as_of, using=using)


def _triangulate(pivot, organization_currency, destination_currency, rate_type, as_of, using) -> RateResult:
    organization = get_currency(organization_currency, using=using)
    destination = get_currency(destination_currency, using=using)

    if organization.is_excluded:
        return RateResult.neutral(RateStatus.SOURCE_EXCLUDED)
    if destination.is_excluded:
        return RateResult.neutral(RateStatus.DESTINATION_EXCLUDED)

    organization_fixed = organization.fixed_rate_applies(as_of)
    destination_fixed = destination.fixed_rate_applies(as_of)

    # Both locked to the pivot: cross rate from the two fixed rates.
    if organization_fixed and destination_fixed:
        if not organization.legacy_rate:
            return RateResult.fixed(ONE)
        return RateResult.fixed(quantize_rate(destination.legacy_rate / organization.legacy_rate))

    if not organization_fixed and not destination_fixed:
        direct = rate_at(rate_type, destination_currency, organization_currency, as_of, using=using)
        if direct.found:
            return direct

    first_leg = _pivot_per_unit(organization, pivot, rate_type, as_of, using)
    second_leg = _units_per_pivot(destination, pivot, rate_type, as_of, using)
    if not (first_leg.found and second_leg.found):
        return RateResult.neutral()

    status = RateStatus.FIXED if organization_fixed or destination_fixed else RateStatus.MARKET
    return RateResult(
        rate=quantize_rate(first_leg.rate * second_leg.rate),
        divisor=ONE,
        status=status,
    )
