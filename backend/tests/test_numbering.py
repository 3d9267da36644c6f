# tests/test_numbering.py
"""
Tests for the document numbering engine.

Tests cover:
- Sequential allocation and period resets
- Scope partitioning (global, legal entity, site) and complements
- Overflow handling (counter row untouched)
- Transaction semantics: joining the caller's transaction, rollback
- Conflict translation and metrics
- Concurrent allocation (PostgreSQL only)
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from django.db import OperationalError, connection, transaction
from django.utils import timezone
from prometheus_client import REGISTRY

from numbering import commands
from numbering.choices import (
    ChronologicalControl,
    ComponentType,
    DefinitionLevel,
    RtzLevel,
    SequenceType,
)
from numbering.commands import next_counter
from numbering.exceptions import (
    CounterDefinitionNotFound,
    CounterTransactionConflict,
    NumberingError,
    SequenceOverflow,
)
from numbering.models import SequenceCounter
from numbering.periods import period_bucket
from numbering.scopes import resolve_scope
from organization.models import Company

DAY = date(2025, 3, 1)


@pytest.fixture
def invoice_counter(make_counter):
    return make_counter(
        "VENDA_NF",
        [
            (ComponentType.CONSTANT, 0, "NF"),
            (ComponentType.YEAR, 4),
            (ComponentType.SEQUENCE_NUMBER, 6),
        ],
        rtz_level=RtzLevel.ANNUAL,
    )


@pytest.fixture
def small_counter(make_counter):
    return make_counter(
        "SMALL",
        [(ComponentType.CONSTANT, 0, "S"), (ComponentType.SEQUENCE_NUMBER, 3)],
    )


# =============================================================================
# Allocation
# =============================================================================

@pytest.mark.django_db
class TestAllocation:
    """Values are handed out in order, one per call."""

    def test_first_number(self, invoice_counter):
        assert next_counter("VENDA_NF", date=DAY) == "NF2025000001"

        counter = SequenceCounter.objects.get(counter_code="VENDA_NF")
        assert counter.scope == ""
        assert counter.period == 25
        assert counter.complement == ""
        assert counter.next_value == 2

    def test_consecutive_numbers(self, invoice_counter):
        numbers = [next_counter("VENDA_NF", date=DAY) for _ in range(3)]
        assert numbers == ["NF2025000001", "NF2025000002", "NF2025000003"]

    def test_new_period_restarts_the_counter(self, invoice_counter):
        next_counter("VENDA_NF", date=DAY)
        next_counter("VENDA_NF", date=DAY)

        assert next_counter("VENDA_NF", date=date(2026, 1, 1)) == "NF2026000001"
        # The old period keeps its own value.
        assert next_counter("VENDA_NF", date=DAY) == "NF2025000003"
        assert SequenceCounter.objects.filter(counter_code="VENDA_NF").count() == 2

    def test_date_defaults_to_today(self, invoice_counter):
        number = next_counter("VENDA_NF")

        today = timezone.localdate()
        assert number == f"NF{today.year}000001"
        counter = SequenceCounter.objects.get(counter_code="VENDA_NF")
        assert counter.period == period_bucket(RtzLevel.ANNUAL, today)

    def test_existing_counter_value_is_used(self, small_counter):
        SequenceCounter.objects.create(counter_code="SMALL", next_value=41)

        assert next_counter("SMALL", date=DAY) == "S041"
        assert SequenceCounter.objects.get(counter_code="SMALL").next_value == 42

    def test_template_without_sequence_returns_empty(self, make_counter):
        make_counter("NOSEQ", [(ComponentType.CONSTANT, 0, "X"), (ComponentType.YEAR, 4)])

        assert next_counter("NOSEQ", date=DAY) == ""
        assert not SequenceCounter.objects.filter(counter_code="NOSEQ").exists()

    def test_numeric_counter(self, make_counter):
        make_counter(
            "NUM",
            [(ComponentType.YEAR, 2), (ComponentType.SEQUENCE_NUMBER, 5)],
            sequence_type=SequenceType.NUMERIC,
        )
        assert next_counter("NUM", date=DAY) == "2500001"

    def test_unknown_counter_raises(self, db):
        with pytest.raises(CounterDefinitionNotFound, match="NOPE"):
            with transaction.atomic():
                next_counter("NOPE", date=DAY)

    def test_counter_code_is_required(self, db):
        with pytest.raises(ValueError):
            next_counter("", date=DAY)


# =============================================================================
# Overflow
# =============================================================================

@pytest.mark.django_db
class TestOverflow:

    def test_last_value_that_fits(self, small_counter):
        SequenceCounter.objects.create(counter_code="SMALL", next_value=998)

        assert next_counter("SMALL", date=DAY) == "S998"

    def test_overflow_raises_and_keeps_the_value(self, small_counter):
        SequenceCounter.objects.create(counter_code="SMALL", next_value=999)

        with pytest.raises(SequenceOverflow) as exc_info:
            with transaction.atomic():
                next_counter("SMALL", date=DAY)

        assert exc_info.value.counter_code == "SMALL"
        assert exc_info.value.width == 3
        assert exc_info.value.retryable is False
        assert "exceeds the maximum length of 3 digits" in str(exc_info.value)
        assert SequenceCounter.objects.get(counter_code="SMALL").next_value == 999

    def test_zero_length_sequence_is_one_digit(self, make_counter):
        make_counter("TINY", [(ComponentType.SEQUENCE_NUMBER, 0)])

        numbers = [next_counter("TINY", date=DAY) for _ in range(8)]
        assert numbers == [str(n) for n in range(1, 9)]

        with pytest.raises(SequenceOverflow):
            with transaction.atomic():
                next_counter("TINY", date=DAY)


# =============================================================================
# Scopes and Complements
# =============================================================================

@pytest.mark.django_db
class TestScopes:

    def test_resolve_scope(self, sites):
        assert resolve_scope(DefinitionLevel.GLOBAL, "PT01", "LIS01") == ""
        assert resolve_scope(DefinitionLevel.SITE, "PT01", "LIS01") == "LIS01"
        assert resolve_scope(DefinitionLevel.LEGAL_ENTITY, "ES01", "LIS01") == "PT01"
        # ES99 has no company record, so the caller's company is used.
        assert resolve_scope(DefinitionLevel.LEGAL_ENTITY, "ES01", "MAD01") == "ES01"
        assert resolve_scope(DefinitionLevel.LEGAL_ENTITY, "ES01", "") == "ES01"
        assert resolve_scope(DefinitionLevel.LEGAL_ENTITY, "ES01", "NOSITE") == "ES01"
        assert resolve_scope(0, "PT01", "LIS01") == ""

    def test_global_counter_is_shared(self, sites, small_counter):
        assert next_counter("SMALL", company="PT01", site="LIS01", date=DAY) == "S001"
        assert next_counter("SMALL", company="ES01", site="MAD01", date=DAY) == "S002"

    def test_legal_entity_counters_are_independent(self, sites, make_counter):
        make_counter(
            "LE",
            [(ComponentType.COMPANY, 4), (ComponentType.SEQUENCE_NUMBER, 3)],
            definition_level=DefinitionLevel.LEGAL_ENTITY,
        )

        assert next_counter("LE", company="PT01", site="LIS01", date=DAY) == "PT01001"
        assert next_counter("LE", company="ES01", site="MAD01", date=DAY) == "ES01001"
        assert next_counter("LE", company="PT01", date=DAY) == "PT01002"
        assert set(SequenceCounter.objects.values_list("scope", flat=True)) == {"PT01", "ES01"}

    def test_site_counters_are_independent(self, sites, make_counter):
        make_counter(
            "BYSITE",
            [(ComponentType.SITE, 3), (ComponentType.SEQUENCE_NUMBER, 2)],
            definition_level=DefinitionLevel.SITE,
        )

        assert next_counter("BYSITE", company="PT01", site="LIS01", date=DAY) == "LIS01"
        assert next_counter("BYSITE", company="ES01", site="MAD01", date=DAY) == "MAD01"
        assert next_counter("BYSITE", company="PT01", site="LIS01", date=DAY) == "LIS02"

    def test_complement_partitions_the_counter(self, make_counter):
        make_counter(
            "COMP",
            [(ComponentType.COMPLEMENT, 2), (ComponentType.SEQUENCE_NUMBER, 3)],
        )

        assert next_counter("COMP", complement="AA", date=DAY) == "AA001"
        assert next_counter("COMP", complement="BB", date=DAY) == "BB001"
        assert next_counter("COMP", complement="AA", date=DAY) == "AA002"

    def test_complement_is_ignored_without_complement_component(self, small_counter):
        assert next_counter("SMALL", complement="AA", date=DAY) == "S001"
        assert next_counter("SMALL", complement="BB", date=DAY) == "S002"
        assert SequenceCounter.objects.get(counter_code="SMALL").complement == ""

    def test_chronological_control_pads_codes(self, companies, make_counter):
        make_counter(
            "CHRONO",
            [(ComponentType.COMPANY, 6), (ComponentType.SEQUENCE_NUMBER, 2)],
            chronological_control=ChronologicalControl.CONTROLLED,
        )
        assert next_counter("CHRONO", company="PT01", date=DAY) == "PT01__01"


# =============================================================================
# Transactions
# =============================================================================

@pytest.mark.django_db(transaction=True)
class TestTransactions:
    """The engine joins the caller's transaction instead of committing on its own."""

    def test_runs_in_its_own_transaction(self, small_counter):
        assert next_counter("SMALL", date=DAY) == "S001"
        assert next_counter("SMALL", date=DAY) == "S002"

    def test_caller_rollback_releases_the_number(self, small_counter):
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                assert next_counter("SMALL", date=DAY) == "S001"
                raise RuntimeError("document save failed")

        assert next_counter("SMALL", date=DAY) == "S001"

    def test_overflow_rolls_back_sibling_writes(self, small_counter):
        SequenceCounter.objects.create(counter_code="SMALL", next_value=999)

        with pytest.raises(SequenceOverflow):
            with transaction.atomic():
                Company.objects.create(code="FR01", name="France", currency="EUR")
                try:
                    next_counter("SMALL", date=DAY)
                except SequenceOverflow:
                    # Catching does not save the transaction.
                    assert transaction.get_connection().needs_rollback
                    raise

        assert not Company.objects.filter(code="FR01").exists()
        assert SequenceCounter.objects.get(counter_code="SMALL").next_value == 999

    def test_allocations_commit_with_the_caller(self, small_counter):
        with transaction.atomic():
            first = next_counter("SMALL", date=DAY)
            second = next_counter("SMALL", date=DAY)

        assert (first, second) == ("S001", "S002")
        assert SequenceCounter.objects.get(counter_code="SMALL").next_value == 3


# =============================================================================
# Conflicts and Metrics
# =============================================================================

@pytest.mark.django_db
class TestConflictsAndMetrics:

    def test_database_conflict_is_retryable(self, small_counter, monkeypatch):
        def _locked(*args, **kwargs):
            raise OperationalError("canceling statement due to lock timeout")

        monkeypatch.setattr(commands, "_reserve_value", _locked)

        with pytest.raises(CounterTransactionConflict) as exc_info:
            with transaction.atomic():
                next_counter("SMALL", date=DAY)

        assert exc_info.value.retryable is True
        assert isinstance(exc_info.value, NumberingError)
        assert "lock timeout" in exc_info.value.reason

    def test_allocation_is_counted(self, small_counter):
        labels = {"counter_code": "SMALL"}
        before = REGISTRY.get_sample_value("erpcore_numbers_allocated_total", labels) or 0

        next_counter("SMALL", date=DAY)

        assert REGISTRY.get_sample_value("erpcore_numbers_allocated_total", labels) == before + 1

    def test_missing_definition_is_counted(self, db):
        labels = {"counter_code": "MISSING", "reason": "not_found"}
        before = REGISTRY.get_sample_value("erpcore_numbering_failures_total", labels) or 0

        with pytest.raises(CounterDefinitionNotFound):
            with transaction.atomic():
                next_counter("MISSING", date=DAY)

        assert REGISTRY.get_sample_value("erpcore_numbering_failures_total", labels) == before + 1


# =============================================================================
# Concurrency
# =============================================================================

@pytest.mark.postgres
@pytest.mark.django_db(transaction=True)
@pytest.mark.skipif(
    connection.vendor != "postgresql",
    reason="row locks need PostgreSQL: set DATABASE_URL=postgres://... and run pytest -m postgres",
)
class TestConcurrentAllocation:

    def test_no_duplicates_under_contention(self, small_counter):
        def _allocate(_):
            try:
                return next_counter("SMALL", date=DAY)
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=8) as pool:
            numbers = list(pool.map(_allocate, range(40)))

        assert len(set(numbers)) == 40
        assert sorted(numbers) == [f"S{n:03d}" for n in range(1, 41)]
