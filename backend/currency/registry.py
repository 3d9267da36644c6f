# currency/registry.py
"""
Currency registry lookups.

get_currency() never fails for an unknown code: it returns
CurrencyInfo.missing(code), which is excluded from conversion and has
exists=False. Callers treat it as "no conversion available".
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.db import DEFAULT_DB_ALIAS

from currency.dates import DEFAULT_LEGACY_DATE
from currency.models import Currency, PivotFlag


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    pivot_flag: int
    legacy_rate: Decimal
    changeover_date: date
    exists: bool = True

    @classmethod
    def missing(cls, code: str) -> "CurrencyInfo":
        return cls(
            code=code,
            pivot_flag=PivotFlag.EXCLUDED,
            legacy_rate=Decimal("0"),
            changeover_date=DEFAULT_LEGACY_DATE,
            exists=False,
        )

    @property
    def is_excluded(self) -> bool:
        return self.pivot_flag == PivotFlag.EXCLUDED

    def fixed_rate_applies(self, as_of: date) -> bool:
        """True when the legacy fixed rate replaces market rates on `as_of`."""
        if self.pivot_flag != PivotFlag.FIXED:
            return False
        return self.changeover_date == DEFAULT_LEGACY_DATE or self.changeover_date <= as_of


def get_currency(code: str, using: str = DEFAULT_DB_ALIAS) -> CurrencyInfo:
    row = (
        Currency.objects.using(using)
        .filter(code=code)
        .values("code", "pivot_flag", "legacy_rate", "changeover_date")
        .first()
    )
    if row is None:
        return CurrencyInfo.missing(code)
    return CurrencyInfo(**row)


def currency_exists(code: str, using: str = DEFAULT_DB_ALIAS) -> bool:
    if not code:
        return False
    return Currency.objects.using(using).filter(code=code).exists()
