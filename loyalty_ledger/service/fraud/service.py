"""Fraud detection service combining the individual detectors."""

from typing import List, Optional

import structlog

from loyalty_ledger.domain.entities import LoyaltyAccount
from loyalty_ledger.domain.interfaces import FraudAnalyzer
from loyalty_ledger.domain.value_objects import Money, TransactionContext

from .detectors import AmountDetector, FraudDetector, VelocityDetector
from .result import FraudResult
from .settings import FraudSettings, fraud_settings

logger = structlog.get_logger(__name__)


class FraudDetectionService(FraudAnalyzer):
    """
    Runs every registered detector over a transaction.

    The overall score is the highest detector score. Only detectors whose
    own score is suspicious contribute reasons.
    """

    def __init__(
        self,
        settings: FraudSettings = fraud_settings,
        detectors: Optional[List[FraudDetector]] = None,
    ):
        self._settings = settings
        if detectors is None:
            detectors = [
                VelocityDetector(
                    max_daily_transactions=settings.max_daily_transactions,
                    max_daily_amount=settings.max_daily_amount,
                ),
                AmountDetector(
                    suspicious_amount=settings.suspicious_amount,
                    high_risk_amount=settings.high_risk_amount,
                ),
            ]
        self._detectors = list(detectors)

    def add_detector(self, detector: FraudDetector) -> None:
        self._detectors.append(detector)

    def get_detectors(self) -> List[FraudDetector]:
        return list(self._detectors)

    def analyze(
        self,
        account: LoyaltyAccount,
        amount: Money,
        context: TransactionContext,
    ) -> FraudResult:
        results = []
        reasons = []
        max_score = 0.0

        for detector in self._detectors:
            result = detector.analyze(account, amount, context)
            results.append(result)

            max_score = max(max_score, result.score)

            if result.score >= self._settings.suspicious_threshold:
                reasons.extend(result.reasons)

        overall = FraudResult(
            score=max_score,
            reasons=tuple(reasons),
            detector_results=tuple(results),
            suspicious_threshold=self._settings.suspicious_threshold,
            block_threshold=self._settings.block_threshold,
        )

        if overall.is_suspicious:
            logger.warning(
                "fraud_detection_triggered",
                account_id=str(account.id),
                customer_id=account.customer_id,
                amount=amount.to_dollars(),
                fraud_score=overall.score,
                risk_level=overall.risk_level,
                reasons=list(overall.reasons),
            )

        return overall
