from django.contrib import admin

from .models import Currency, CurrencyRate


@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "pivot_flag", "legacy_rate", "changeover_date"]
    list_filter = ["pivot_flag"]
    search_fields = ["code", "name"]


@admin.register(CurrencyRate)
class CurrencyRateAdmin(admin.ModelAdmin):
    list_display = [
        "rate_type",
        "source_currency",
        "destination_currency",
        "rate_date",
        "inverse_rate",
        "divisor",
    ]
    list_filter = ["rate_type", "source_currency", "destination_currency"]
    date_hierarchy = "rate_date"
