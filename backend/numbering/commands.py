# numbering/commands.py
"""
Document numbering engine.

next_counter() is the single entry point. It loads the counter definition,
resolves the period and scope that partition the counter, reserves a value
under a row lock, and renders the formatted number.

Transactions:
- Called outside any transaction, it opens its own and applies the
  configured lock-wait and statement timeouts (PostgreSQL).
- Called inside a caller's transaction.atomic(), it joins that transaction
  without a savepoint. Any failure marks the caller's whole transaction for
  rollback, including the caller's own writes, even if the exception is
  caught.

Usage:
    with transaction.atomic():
        number = next_counter("VENDA_NF", company="ACME", site="LIS01", date=doc_date)
        Invoice.objects.create(number=number, ...)
"""

import logging
from datetime import date as date_type
from typing import Optional

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, IntegrityError, OperationalError, connections, transaction
from django.utils import timezone

from numbering.exceptions import CounterDefinitionNotFound, CounterTransactionConflict, SequenceOverflow
from numbering.formatting import render_counter
from numbering.models import CounterDefinition, SequenceCounter
from numbering.periods import period_bucket
from numbering.scopes import resolve_scope
from ops.metrics import record_allocation, record_numbering_failure

logger = logging.getLogger(__name__)


def next_counter(
    counter_code: str,
    company: str = "",
    site: str = "",
    date: Optional[date_type] = None,
    complement: str = "",
    *,
    using: str = DEFAULT_DB_ALIAS,
) -> str:
    """
    Allocate and render the next document number for a counter.

    Args:
        counter_code: Counter definition code (e.g. "VENDA_NF")
        company: Company code, used by LEGAL_ENTITY scope and COMPANY components
        site: Site code, used by LEGAL_ENTITY/SITE scope and SITE components
        date: Reference date for period and date components (default: today)
        complement: Free partition key; ignored unless the template has a COMPLEMENT
        using: Database alias of the transaction to run in

    Returns:
        The formatted number, or "" when the template has no sequence component.

    Raises:
        CounterDefinitionNotFound: no definition for counter_code
        SequenceOverflow: the counter ran out of digits
        CounterTransactionConflict: lock wait, timeout or serialization failure
    """
    if not counter_code:
        raise ValueError("counter_code is required")

    day = date or timezone.localdate()
    connection = connections[using]
    owns_transaction = not connection.in_atomic_block

    try:
        with transaction.atomic(using=using, savepoint=False):
            if owns_transaction:
                _apply_timeouts(connection)

            definition = (
                CounterDefinition.objects.using(using)
                .prefetch_related("components")
                .filter(code=counter_code)
                .first()
            )
            if definition is None:
                record_numbering_failure(counter_code, "not_found")
                raise CounterDefinitionNotFound(counter_code)

            template = definition.template()
            if template.sequence_index is None:
                return ""

            if not template.has_complement:
                complement = ""

            width = template.sequence_width
            period = period_bucket(definition.rtz_level, day)
            scope = resolve_scope(definition.definition_level, company, site, using=using)

            sequence = _reserve_value(counter_code, scope, period, complement, width, using)

            number = render_counter(
                template,
                sequence,
                day,
                company=company,
                site=site,
                complement=complement,
            )
    except OperationalError as exc:
        record_numbering_failure(counter_code, "conflict")
        logger.warning(
            "Counter allocation conflict",
            extra={"counter_code": counter_code, "error": str(exc)},
        )
        raise CounterTransactionConflict(counter_code, str(exc)) from exc

    record_allocation(counter_code)
    logger.debug(
        "Allocated document number",
        extra={"counter_code": counter_code, "scope": scope, "period": period, "number": number},
    )
    return number


def _reserve_value(
    counter_code: str,
    scope: str,
    period: int,
    complement: str,
    width: int,
    using: str,
) -> str:
    """
    Reserve the counter's current value and move the stored value forward.

    Uses select_for_update so concurrent allocations on the same key queue
    on the row lock. Returns the reserved value zero-padded to `width`.
    """
    key = {
        "counter_code": counter_code,
        "scope": scope,
        "period": period,
        "complement": complement,
    }
    counters = SequenceCounter.objects.using(using)

    counter = counters.select_for_update().filter(**key).first()
    if counter is None:
        try:
            with transaction.atomic(using=using):
                counter = counters.create(**key, next_value=1)
        except IntegrityError:
            # Race: another allocation created the row first
            counter = counters.select_for_update().get(**key)

    current = counter.next_value
    following = current + 1

    if len(str(following)) > width:
        record_numbering_failure(counter_code, "overflow")
        logger.warning(
            "Counter overflow",
            extra={**key, "value": following, "width": width},
        )
        raise SequenceOverflow(counter_code, following, width)

    counter.next_value = following
    counter.save(update_fields=["next_value", "updated_at"])

    return str(current).zfill(width)


def _apply_timeouts(connection) -> None:
    """Bound lock wait and execution time of the allocation transaction."""
    if connection.vendor != "postgresql":
        return
    with connection.cursor() as cursor:
        cursor.execute(f"SET LOCAL lock_timeout = {int(settings.NUMBERING_LOCK_TIMEOUT_MS)}")
        cursor.execute(f"SET LOCAL statement_timeout = {int(settings.NUMBERING_STATEMENT_TIMEOUT_MS)}")
