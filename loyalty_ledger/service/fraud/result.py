"""Fraud analysis result."""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class FraudResult:
    """
    Outcome of screening one transaction.

    Attributes:
        score: Risk score between 0 and 1
        reasons: Human readable reasons behind the score
        detector_results: Individual results that were combined into this one
        suspicious_threshold: Score at which the result counts as suspicious
        block_threshold: Score at which the transaction must be blocked
    """

    score: float
    reasons: Tuple[str, ...] = ()
    detector_results: Tuple["FraudResult", ...] = field(default=(), repr=False)
    suspicious_threshold: float = 0.5
    block_threshold: float = 0.8

    def __post_init__(self):
        # Detector contributions can add up past 1.0
        object.__setattr__(self, "score", min(max(float(self.score), 0.0), 1.0))
        object.__setattr__(self, "reasons", tuple(self.reasons))
        object.__setattr__(self, "detector_results", tuple(self.detector_results))

    @classmethod
    def clean(cls) -> "FraudResult":
        return cls(0.0)

    @property
    def is_suspicious(self) -> bool:
        return self.score >= self.suspicious_threshold

    @property
    def should_block(self) -> bool:
        return self.score >= self.block_threshold

    @property
    def risk_level(self) -> str:
        if self.score >= self.block_threshold:
            return "high"
        if self.score >= self.suspicious_threshold:
            return "medium"
        if self.score >= 0.2:
            return "low"
        return "negligible"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "score": self.score,
            "reasons": list(self.reasons),
            "risk_level": self.risk_level,
            "suspicious": self.is_suspicious,
            "should_block": self.should_block,
        }
