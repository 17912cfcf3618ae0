"""
Fraud Screening for the Loyalty Ledger
"""

from .settings import FraudSettings, fraud_settings
from .result import FraudResult
from .detectors import AmountDetector, FraudDetector, VelocityDetector
from .service import FraudDetectionService

__all__ = [
    "FraudSettings",
    "fraud_settings",
    "FraudResult",
    "FraudDetector",
    "VelocityDetector",
    "AmountDetector",
    "FraudDetectionService",
]
