"""
Currency app - currency registry and conversion rates.

This app provides:
- Currency: pivot relationship of each currency (floating, fixed legacy rate, excluded)
- CurrencyRate: time series of market rate observations
- resolve_currency_rate: rate between any two currencies through the pivot
- resolve_ledger_rates: one rate per target ledger, resolved concurrently

Rate resolution never raises for a missing rate; inspect RateResult.status
and RateResult.found.
"""
