"""
Health check endpoints for operations monitoring.

The numbering engine needs a writable database; the rate engine needs the
pivot currency in the registry. Counter definitions and currencies are
loaded out-of-band, so an empty registry reports "degraded", not down.

Endpoints:
- /_health/live    - Kubernetes liveness probe (is the process running?)
- /_health/ready   - Kubernetes readiness probe (is the database reachable?)
- /_health/full    - Full health report (for debugging/dashboards)
"""
import logging
import time
from typing import Any, Dict

from django.conf import settings
from django.db import DatabaseError, connections
from django.http import JsonResponse
from django.views import View

from currency.registry import currency_exists
from numbering.models import CounterDefinition

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
DEGRADED = "degraded"
UNHEALTHY = "unhealthy"


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)


def check_database(alias: str = "default") -> Dict[str, Any]:
    """Round-trip a trivial query on one database alias."""
    start = time.monotonic()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as e:
        logger.warning("Database health check failed", extra={"alias": alias, "error": str(e)})
        return {"status": UNHEALTHY, "alias": alias, "error": str(e), "duration_ms": _elapsed_ms(start)}
    return {"status": HEALTHY, "alias": alias, "duration_ms": _elapsed_ms(start)}


def check_databases() -> Dict[str, Any]:
    results = {alias: check_database(alias) for alias in settings.DATABASES}
    healthy = all(r["status"] == HEALTHY for r in results.values())
    return {"status": HEALTHY if healthy else UNHEALTHY, "databases": results}


def check_reference_data() -> Dict[str, Any]:
    """Counter definitions exist and the pivot currency is registered."""
    pivot = settings.CURRENCY_PIVOT
    try:
        definitions = CounterDefinition.objects.count()
        pivot_configured = currency_exists(pivot)
    except DatabaseError as e:
        return {"status": UNHEALTHY, "error": str(e)}

    return {
        "status": HEALTHY if definitions and pivot_configured else DEGRADED,
        "counter_definitions": definitions,
        "pivot_currency": pivot,
        "pivot_configured": pivot_configured,
    }


def health_report() -> Dict[str, Any]:
    checks = {
        "databases": check_databases(),
        "reference_data": check_reference_data(),
    }
    statuses = {c["status"] for c in checks.values()}
    if statuses == {HEALTHY}:
        overall = HEALTHY
    elif UNHEALTHY in statuses:
        overall = UNHEALTHY
    else:
        overall = DEGRADED

    return {
        "status": overall,
        "checks": checks,
        "version": getattr(settings, "VERSION", "unknown"),
        "pivot_currency": settings.CURRENCY_PIVOT,
    }


class LivenessView(View):
    """Kubernetes liveness probe. Returns 200 while the process is running."""

    def get(self, request):
        return JsonResponse({"status": "alive"})


class ReadinessView(View):
    """
    Kubernetes readiness probe.

    Only the default database is checked: allocation and rate lookups are
    impossible without it, while missing reference data is a configuration
    issue reported by /_health/full.
    """

    def get(self, request):
        db_check = check_database("default")
        ready = db_check["status"] == HEALTHY
        return JsonResponse(
            {"status": "ready" if ready else "not_ready", "database": db_check},
            status=200 if ready else 503,
        )


class FullHealthView(View):
    """
    Full health report for debugging and dashboards.

    Should be protected in production (internal network only).
    """

    def get(self, request):
        report = health_report()
        return JsonResponse(report, status=200 if report["status"] == HEALTHY else 503)
