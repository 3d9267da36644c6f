# tests/conftest.py
"""
Pytest fixtures for the erpcore tests.

Reference data mirrors a small installation:
- Companies PT01 / ES01 and sites LIS01 (legal company PT01),
  MAD01 (legal company ES99, which has no company record)
- EUR pivot; DEM and FRF fixed to EUR since 1999-01-01; USD, GBP, CHF and
  JPY floating; XXX excluded from conversion
- Daily market observations for USD, GBP and CHF against EUR
"""

from datetime import date
from decimal import Decimal

import pytest

from currency.models import Currency, CurrencyRate, PivotFlag, RateType
from numbering.choices import ChronologicalControl, DefinitionLevel, RtzLevel, SequenceType
from numbering.models import CounterComponent, CounterDefinition
from organization.models import Company, Site


# =============================================================================
# Organization Fixtures
# =============================================================================

@pytest.fixture
def companies(db):
    return [
        Company.objects.create(code="PT01", name="Portugal", currency="EUR"),
        Company.objects.create(code="ES01", name="Spain", currency="EUR"),
    ]


@pytest.fixture
def sites(db, companies):
    return [
        Site.objects.create(code="LIS01", name="Lisbon", legal_company="PT01"),
        Site.objects.create(code="MAD01", name="Madrid", legal_company="ES99"),
    ]


# =============================================================================
# Counter Definition Fixtures
# =============================================================================

@pytest.fixture
def make_counter(db):
    """
    Factory for counter definitions.

    components is a list of (component_type, length) or
    (component_type, length, constant) tuples in template order.
    """

    def _make(
        code,
        components,
        rtz_level=RtzLevel.NONE,
        definition_level=DefinitionLevel.GLOBAL,
        sequence_type=SequenceType.ALPHANUMERIC,
        chronological_control=ChronologicalControl.NONE,
    ):
        definition = CounterDefinition.objects.create(
            code=code,
            rtz_level=rtz_level,
            definition_level=definition_level,
            sequence_type=sequence_type,
            chronological_control=chronological_control,
        )
        for position, entry in enumerate(components, start=1):
            component_type, length, *rest = entry
            CounterComponent.objects.create(
                definition=definition,
                position=position,
                component_type=component_type,
                length=length,
                constant=rest[0] if rest else "",
            )
        return definition

    return _make


# =============================================================================
# Currency Fixtures
# =============================================================================

@pytest.fixture
def currencies(db):
    changeover = date(1999, 1, 1)
    return {
        "EUR": Currency.objects.create(code="EUR", name="Euro", pivot_flag=PivotFlag.FLOATING),
        "DEM": Currency.objects.create(
            code="DEM",
            name="Deutsche Mark",
            pivot_flag=PivotFlag.FIXED,
            legacy_rate=Decimal("1.95583"),
            changeover_date=changeover,
        ),
        "FRF": Currency.objects.create(
            code="FRF",
            name="French Franc",
            pivot_flag=PivotFlag.FIXED,
            legacy_rate=Decimal("6.55957"),
            changeover_date=changeover,
        ),
        "USD": Currency.objects.create(code="USD", name="US Dollar", pivot_flag=PivotFlag.FLOATING),
        "GBP": Currency.objects.create(code="GBP", name="Pound Sterling", pivot_flag=PivotFlag.FLOATING),
        "CHF": Currency.objects.create(code="CHF", name="Swiss Franc", pivot_flag=PivotFlag.FLOATING),
        "JPY": Currency.objects.create(code="JPY", name="Yen", pivot_flag=PivotFlag.FLOATING),
        "XXX": Currency.objects.create(code="XXX", name="No currency", pivot_flag=PivotFlag.EXCLUDED),
    }


@pytest.fixture
def make_rate(db):
    """Factory for market observations; `rate` is source units per destination unit."""

    def _make(source, destination, rate_date, inverse_rate, divisor="1", rate_type=RateType.DAILY):
        return CurrencyRate.objects.create(
            rate_type=rate_type,
            source_currency=source,
            destination_currency=destination,
            rate_date=rate_date,
            inverse_rate=Decimal(inverse_rate),
            divisor=Decimal(divisor),
        )

    return _make


@pytest.fixture
def market_rates(currencies, make_rate):
    """
    Consistent market data on 2025-01-01:
    1 EUR = 1.25 USD = 0.8 GBP, and a direct USD->CHF quote of 0.8 CHF per USD.
    """
    day = date(2025, 1, 1)
    return [
        make_rate("USD", "EUR", day, "0.8"),    # 1.25 USD per EUR
        make_rate("EUR", "USD", day, "1.25"),   # 0.8 EUR per USD
        make_rate("GBP", "EUR", day, "1.25"),   # 0.8 GBP per EUR
        make_rate("EUR", "GBP", day, "0.8"),    # 1.25 EUR per GBP
        make_rate("CHF", "USD", day, "1.25"),   # 0.8 CHF per USD
        make_rate("CHF", "EUR", day, "0.5"),    # 2 CHF per EUR
    ]
