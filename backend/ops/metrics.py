"""
Prometheus metrics endpoint.

Exposes application metrics in Prometheus format for scraping.

Metrics exposed:
- erpcore_numbers_allocated_total: Document numbers handed out, by counter code
- erpcore_numbering_failures_total: Failed allocations, by counter code and reason
- erpcore_rate_resolutions_total: Currency rate resolutions, by status and outcome
"""
import logging

from django.http import HttpResponse
from django.views import View
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

logger = logging.getLogger(__name__)


numbers_allocated = Counter(
    "erpcore_numbers_allocated_total",
    "Number of document numbers allocated",
    ["counter_code"],
)

numbering_failures = Counter(
    "erpcore_numbering_failures_total",
    "Number of failed document number allocations",
    ["counter_code", "reason"],
)

rate_resolutions = Counter(
    "erpcore_rate_resolutions_total",
    "Number of currency rate resolutions",
    ["status", "found"],
)


def record_allocation(counter_code: str) -> None:
    numbers_allocated.labels(counter_code=counter_code).inc()


def record_numbering_failure(counter_code: str, reason: str) -> None:
    numbering_failures.labels(counter_code=counter_code, reason=reason).inc()


def record_rate_resolution(status: int, found: bool) -> None:
    rate_resolutions.labels(status=str(int(status)), found="yes" if found else "no").inc()


def get_prometheus_response():
    """Generate Prometheus metrics response."""
    output = generate_latest()
    return HttpResponse(output, content_type=CONTENT_TYPE_LATEST)


class MetricsView(View):
    """
    Prometheus metrics endpoint.

    Exposes metrics in Prometheus format at /_metrics.
    Should be protected in production (internal network only).
    """

    def get(self, request):
        return get_prometheus_response()
