"""Prometheus metrics for the Loyalty Ledger.

Metrics are organized into two categories:

Business Metrics (for Product/Finance):
- loyalty_points_earned_total: Points earned by currency
- loyalty_points_redeemed_total: Points redeemed by currency
- loyalty_redemption_value_minor_units_total: Money handed out through redemptions
- loyalty_fraud_checks_total: Fraud screening outcomes
- loyalty_account_operations_total: Account operations by outcome

Technical Metrics (for Engineering/SRE):
- loyalty_rule_evaluation_latency_seconds: Earning rule evaluation latency
- loyalty_event_delivery_latency_seconds: Event webhook latency
- loyalty_event_delivery_retry_total: Event webhook retries
- loyalty_event_delivery_success_total / _failures_total: Delivery outcomes
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Finance dashboards)
# =============================================================================

points_earned_total = Counter(
    "loyalty_points_earned_total",
    "Total number of points earned",
    ["currency"],
)

points_redeemed_total = Counter(
    "loyalty_points_redeemed_total",
    "Total number of points redeemed",
    ["currency"],
)

redemption_value_total = Counter(
    "loyalty_redemption_value_minor_units_total",
    "Total value handed out through redemptions in minor currency units",
    ["currency"],
)

fraud_checks_total = Counter(
    "loyalty_fraud_checks_total",
    "Total number of fraud screenings",
    ["outcome"],  # clean, suspicious, blocked
)

account_operations_total = Counter(
    "loyalty_account_operations_total",
    "Total number of account operations",
    ["operation", "status"],  # status: success, failure
)

last_fraud_score = Gauge(
    "loyalty_last_fraud_score",
    "Score of the most recent fraud screening (0.0-1.0)",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

rule_evaluation_latency = Histogram(
    "loyalty_rule_evaluation_latency_seconds",
    "Earning rule evaluation latency in seconds",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25],
)

event_delivery_latency = Histogram(
    "loyalty_event_delivery_latency_seconds",
    "Event webhook delivery latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

event_delivery_retries = Counter(
    "loyalty_event_delivery_retry_total",
    "Total number of event delivery retries",
)

event_delivery_success = Counter(
    "loyalty_event_delivery_success_total",
    "Total number of successful event deliveries",
    ["event"],
)

event_delivery_failures = Counter(
    "loyalty_event_delivery_failures_total",
    "Total number of event delivery failures (after all retries)",
    ["event"],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_points_earned(points: int, currency: str) -> None:
    """Record points earned by a purchase."""
    points_earned_total.labels(currency=currency).inc(points)


def record_points_redeemed(points: int, value_minor_units: int, currency: str) -> None:
    """Record a redemption and the value it was worth."""
    points_redeemed_total.labels(currency=currency).inc(points)
    redemption_value_total.labels(currency=currency).inc(value_minor_units)


def record_fraud_check(score: float, suspicious: bool, blocked: bool) -> None:
    """Record the outcome of a fraud screening."""
    if blocked:
        outcome = "blocked"
    elif suspicious:
        outcome = "suspicious"
    else:
        outcome = "clean"
    fraud_checks_total.labels(outcome=outcome).inc()
    last_fraud_score.set(score)


def record_account_operation(operation: str, success: bool = True) -> None:
    """Record an account operation."""
    status = "success" if success else "failure"
    account_operations_total.labels(operation=operation, status=status).inc()


@contextmanager
def track_rule_evaluation_latency() -> Generator[None, None, None]:
    """Context manager to track earning rule evaluation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        rule_evaluation_latency.observe(duration)


@contextmanager
def track_event_delivery_latency() -> Generator[None, None, None]:
    """Context manager to track event delivery latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        event_delivery_latency.observe(duration)


def record_event_delivery_retry() -> None:
    """Record an event delivery retry attempt."""
    event_delivery_retries.inc()


def record_event_delivery_success(event: str) -> None:
    """Record a successful event delivery."""
    event_delivery_success.labels(event=event).inc()


def record_event_delivery_failure(event: str) -> None:
    """Record a failed event delivery (after all retries)."""
    event_delivery_failures.labels(event=event).inc()


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics exposition."""
    return CONTENT_TYPE_LATEST
