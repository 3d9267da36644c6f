# currency/ledgers.py
"""
Per-ledger rate resolution for a document.

A document posts into up to ten ledgers, each possibly kept in its own
currency. resolve_ledger_rates() resolves the rate from the document
currency to every ledger currency concurrently and returns the results in
slot order. Slots with a blank currency, or the document's own currency,
get rate 1 without a lookup.

Each lookup runs on a worker thread with its own database connection, so
it reads committed reference data only; rows written in the caller's open
transaction are not visible to it.

Usage:
    rates = ledger_rates(
        [LedgerSlot("LEGAL", "EUR"), LedgerSlot("MGMT", "USD")],
        source_currency="GBP",
        rate_type=RateType.DAILY,
        reference_date=entry_date,
    )
"""

import asyncio
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from asgiref.sync import async_to_sync, sync_to_async
from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, connections

from currency.models import RateDatePolicy
from currency.rates import RateResult
from currency.resolution import resolve_currency_rate

MAX_LEDGERS = 10


def _resolve_in_worker(*args, using: str = DEFAULT_DB_ALIAS) -> RateResult:
    """Run one resolution on an executor thread and release its connection."""
    try:
        return resolve_currency_rate(*args, using=using)
    finally:
        connections[using].close()


@dataclass(frozen=True)
class LedgerSlot:
    ledger: str = ""
    currency: str = ""


@dataclass(frozen=True)
class LedgerRate:
    ledger: str
    source_currency: str
    destination_currency: str
    rate: Decimal
    divisor: Decimal
    status: int
    found: bool

    @classmethod
    def from_result(cls, slot: LedgerSlot, source_currency: str, result: RateResult) -> "LedgerRate":
        return cls(
            ledger=slot.ledger,
            source_currency=source_currency,
            destination_currency=slot.currency,
            rate=result.rate,
            divisor=result.divisor,
            status=result.status,
            found=result.found,
        )


async def resolve_ledger_rates(
    slots: Sequence[LedgerSlot],
    source_currency: str,
    rate_type: Optional[int] = None,
    reference_date: Optional[date] = None,
    *,
    pivot: Optional[str] = None,
    using: str = DEFAULT_DB_ALIAS,
) -> List[LedgerRate]:
    """
    Resolve one rate per ledger slot, concurrently.

    Slots share no state; each non-trivial slot is an independent
    resolve_currency_rate() call. Database errors propagate.
    """
    if len(slots) > MAX_LEDGERS:
        raise ValueError(f"A document posts into at most {MAX_LEDGERS} ledgers, got {len(slots)}.")

    pivot = pivot or settings.CURRENCY_PIVOT
    resolve = sync_to_async(_resolve_in_worker, thread_sensitive=False)

    async def _resolve_slot(slot: LedgerSlot) -> LedgerRate:
        destination = (slot.currency or "").strip()
        if not destination or destination == source_currency:
            return LedgerRate.from_result(slot, source_currency, RateResult.identity())
        result = await resolve(
            pivot,
            source_currency,
            destination,
            rate_type,
            reference_date,
            using=using,
        )
        return LedgerRate.from_result(slot, source_currency, result)

    return list(await asyncio.gather(*(_resolve_slot(slot) for slot in slots)))


def ledger_rates(
    slots: Sequence[LedgerSlot],
    source_currency: str,
    rate_type: Optional[int] = None,
    reference_date: Optional[date] = None,
    *,
    pivot: Optional[str] = None,
    using: str = DEFAULT_DB_ALIAS,
) -> List[LedgerRate]:
    """Synchronous entry point for resolve_ledger_rates()."""
    return async_to_sync(resolve_ledger_rates)(
        slots,
        source_currency,
        rate_type,
        reference_date,
        pivot=pivot,
        using=using,
    )


def document_rate_date(
    policy: int,
    accounting_date: date,
    source_document_date: Optional[date] = None,
    rate_date: Optional[date] = None,
    intercompany: bool = False,
) -> date:
    """
    Pick the date a document's rates are looked up on.

    An explicit rate_date wins. Intercompany documents always use the
    accounting date. Otherwise the document type's policy decides; the
    source document date is then mandatory and may not be later than the
    accounting date.
    """
    if rate_date is not None:
        return rate_date
    if intercompany or policy != RateDatePolicy.SOURCE_DOCUMENT_DATE:
        return accounting_date
    if source_document_date is None:
        raise ValueError("Source document date is required for the selected document type.")
    if source_document_date > accounting_date:
        raise ValueError("Source document date cannot be later than the accounting date.")
    return source_document_date
