"""Prometheus metrics for monitoring analysis runs, data quality, and store access"""

from typing import Dict

from prometheus_client import Counter, Histogram

# Analysis metrics
analysis_run_counter = Counter(
    "chronos_analysis_total",
    "Complete analyses run",
    ["outcome"],  # completed | failed
)

analysis_duration_histogram = Histogram(
    "chronos_analysis_duration_seconds",
    "Time to fetch and aggregate every collection",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

analyzer_failures_counter = Counter(
    "chronos_analyzer_failures_total",
    "Analyzer runs that raised",
    ["analyzer"],
)

quality_check_counter = Counter(
    "chronos_quality_check_total",
    "Data quality check outcomes",
    ["check", "status"],  # CORRECT | NEEDS_REVIEW
)

# Document store metrics
store_fetch_failures_counter = Counter(
    "store_fetch_failures_total",
    "Failed document store collection fetches",
    ["collection"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quality_checks(statuses: Dict[str, str]) -> None:
    """Record one outcome per quality check"""
    for check, status in statuses.items():
        quality_check_counter.labels(check=check, status=status).inc()
