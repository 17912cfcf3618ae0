"""
Integration tests for metrics tracking.

These tests verify:
1. Business metrics (points, redemptions, fraud outcomes) move with operations
2. Technical metrics (rule latency, operation outcomes) are recorded
3. The exposition output is valid Prometheus text
"""

import pytest

from loyalty_ledger.core.metrics import (
    REGISTRY,
    get_metrics,
    get_metrics_content_type,
)
from loyalty_ledger.domain.exceptions import FraudDetectedException
from loyalty_ledger.domain.value_objects import Currency, Money, Points


def sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


def usd(dollars: float) -> Money:
    return Money.from_dollars(dollars, Currency.USD)


# =============================================================================
# Business Metrics Tests
# =============================================================================

class TestBusinessMetrics:
    """Tests for ledger business metrics."""

    @pytest.mark.asyncio
    async def test_points_earned_and_redeemed(self, loyalty_service, electronics_purchase):
        usd_labels = {"currency": "USD"}
        earned_before = sample("loyalty_points_earned_total", usd_labels)
        redeemed_before = sample("loyalty_points_redeemed_total", usd_labels)
        value_before = sample("loyalty_redemption_value_minor_units_total", usd_labels)

        await loyalty_service.create_account("customer-1")
        await loyalty_service.earn_points("customer-1", usd(50.00), electronics_purchase)
        await loyalty_service.confirm_pending_points("customer-1")
        await loyalty_service.redeem_points("customer-1", Points(2500))

        assert sample("loyalty_points_earned_total", usd_labels) - earned_before == 10000
        assert sample("loyalty_points_redeemed_total", usd_labels) - redeemed_before == 2500
        assert (
            sample("loyalty_redemption_value_minor_units_total", usd_labels) - value_before
            == 2500
        )

    @pytest.mark.asyncio
    async def test_fraud_outcomes(self, loyalty_service, electronics_purchase):
        clean_before = sample("loyalty_fraud_checks_total", {"outcome": "clean"})
        blocked_before = sample("loyalty_fraud_checks_total", {"outcome": "blocked"})

        await loyalty_service.create_account("customer-1")
        await loyalty_service.earn_points("customer-1", usd(10.00), electronics_purchase)

        with pytest.raises(FraudDetectedException):
            await loyalty_service.earn_points(
                "customer-1", usd(6000.00), electronics_purchase
            )

        assert sample("loyalty_fraud_checks_total", {"outcome": "clean"}) - clean_before == 1
        assert (
            sample("loyalty_fraud_checks_total", {"outcome": "blocked"}) - blocked_before
            == 1
        )
        assert sample("loyalty_last_fraud_score") == 1.0


# =============================================================================
# Technical Metrics Tests
# =============================================================================

class TestTechnicalMetrics:
    """Tests for latency and operation outcome metrics."""

    @pytest.mark.asyncio
    async def test_rule_evaluation_latency_observed(
        self, loyalty_service, electronics_purchase
    ):
        count_before = sample("loyalty_rule_evaluation_latency_seconds_count")

        await loyalty_service.create_account("customer-1")
        await loyalty_service.earn_points("customer-1", usd(10.00), electronics_purchase)

        assert sample("loyalty_rule_evaluation_latency_seconds_count") - count_before == 1

    @pytest.mark.asyncio
    async def test_operation_outcomes(self, loyalty_service):
        success = {"operation": "create_account", "status": "success"}
        failure = {"operation": "create_account", "status": "failure"}
        success_before = sample("loyalty_account_operations_total", success)
        failure_before = sample("loyalty_account_operations_total", failure)

        await loyalty_service.create_account("customer-1")
        with pytest.raises(Exception):
            await loyalty_service.create_account("customer-1")

        assert sample("loyalty_account_operations_total", success) - success_before == 1
        assert sample("loyalty_account_operations_total", failure) - failure_before == 1


# =============================================================================
# Exposition Tests
# =============================================================================

class TestExposition:
    """Tests for the Prometheus exposition output."""

    @pytest.mark.asyncio
    async def test_metrics_output_lists_ledger_metrics(
        self, loyalty_service, electronics_purchase
    ):
        await loyalty_service.create_account("customer-1")
        await loyalty_service.earn_points("customer-1", usd(10.00), electronics_purchase)

        content = get_metrics().decode("utf-8")

        assert "# HELP loyalty_points_earned_total" in content
        assert "# TYPE loyalty_points_earned_total counter" in content
        assert 'loyalty_account_operations_total{operation="earn_points",status="success"}' in content
        assert "loyalty_rule_evaluation_latency_seconds_bucket" in content

    def test_content_type_is_prometheus_text(self):
        assert get_metrics_content_type().startswith("text/plain")
