# currency/models.py
"""
Currency reference data.

Models:
- Currency: one row per currency code with its relationship to the pivot
- CurrencyRate: market rate observations, one per (type, source, destination, date)

Both tables are maintained out-of-band; the rate engines only read them.
"""

from decimal import Decimal

from django.db import models

from currency.dates import DEFAULT_LEGACY_DATE


class PivotFlag(models.IntegerChoices):
    EXCLUDED = 0, "Excluded from conversion"
    FLOATING = 1, "Floating against pivot"
    FIXED = 2, "Fixed legacy rate"


class RateType(models.IntegerChoices):
    DAILY = 1, "Daily rate"
    MONTHLY = 2, "Monthly rate"
    AVERAGE = 3, "Average rate"
    CUSTOMS = 4, "Customs document rate"


class RateStatus(models.IntegerChoices):
    """Which resolution path produced a rate."""
    MARKET = 0, "Market rate"
    FIXED = 1, "Fixed legacy rate"
    SOURCE_EXCLUDED = 2, "Source currency excluded"
    DESTINATION_EXCLUDED = 3, "Destination currency excluded"


class RateDatePolicy(models.IntegerChoices):
    """Which document date drives the rate lookup."""
    JOURNAL_ENTRY_DATE = 1, "Journal entry date"
    SOURCE_DOCUMENT_DATE = 2, "Source document date"


class Currency(models.Model):
    code = models.CharField(max_length=3, unique=True)
    name = models.CharField(max_length=50, blank=True, default="")
    pivot_flag = models.PositiveSmallIntegerField(
        choices=PivotFlag.choices,
        default=PivotFlag.FLOATING,
    )
    # Units of this currency per one unit of the pivot, when FIXED.
    legacy_rate = models.DecimalField(
        max_digits=20,
        decimal_places=10,
        default=Decimal("0"),
    )
    changeover_date = models.DateField(default=DEFAULT_LEGACY_DATE)

    class Meta:
        verbose_name_plural = "Currencies"
        ordering = ["code"]

    def __str__(self):
        return self.code


class CurrencyRate(models.Model):
    """
    One market observation.

    `inverse_rate` is destination units per `divisor` source units, so the
    effective rate (source units per destination unit) is
    divisor / inverse_rate.
    """

    rate_type = models.PositiveSmallIntegerField(
        choices=RateType.choices,
        default=RateType.DAILY,
    )
    source_currency = models.CharField(max_length=3)
    destination_currency = models.CharField(max_length=3)
    rate_date = models.DateField()
    inverse_rate = models.DecimalField(max_digits=24, decimal_places=12)
    divisor = models.DecimalField(max_digits=20, decimal_places=6, default=Decimal("1"))

    class Meta:
        ordering = ["rate_type", "source_currency", "destination_currency", "-rate_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["rate_type", "source_currency", "destination_currency", "rate_date"],
                name="uniq_currency_rate_observation",
            ),
        ]
        indexes = [
            models.Index(
                fields=["rate_type", "source_currency", "destination_currency", "-rate_date"],
                name="currency_rate_lookup_idx",
            ),
        ]

    def __str__(self):
        return f"{self.source_currency}/{self.destination_currency}@{self.rate_date} ({self.rate_type})"
