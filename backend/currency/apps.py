"""Currency app configuration."""

from django.apps import AppConfig


class CurrencyConfig(AppConfig):
    """Configuration for the currency app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "currency"
    verbose_name = "Currencies & Rates"
