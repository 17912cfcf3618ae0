"""
Fraud Settings for the Loyalty Ledger fraud screening.

Environment variables use the FRAUD_ prefix:
    FRAUD_SUSPICIOUS_THRESHOLD=0.5
    FRAUD_BLOCK_THRESHOLD=0.8
    FRAUD_MAX_DAILY_TRANSACTIONS=50
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FraudSettings(BaseSettings):
    """
    Thresholds and detector limits for earn-time fraud screening.

    All monetary limits are in major currency units (dollars).
    All scores are 0-1.
    """

    model_config = SettingsConfigDict(
        env_prefix="FRAUD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Decision Thresholds ===
    suspicious_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Score at or above this is logged as suspicious",
    )
    block_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Score at or above this blocks the transaction",
    )

    # === Velocity Detector ===
    max_daily_transactions: int = Field(
        default=50,
        gt=0,
        description="Daily transaction count above which frequency is high",
    )
    max_daily_amount: float = Field(
        default=10_000.0,
        gt=0.0,
        description="Daily spend above which volume is high (dollars)",
    )

    # === Amount Detector ===
    suspicious_amount: float = Field(
        default=1_000.0,
        gt=0.0,
        description="Single transaction amount considered high (dollars)",
    )
    high_risk_amount: float = Field(
        default=5_000.0,
        gt=0.0,
        description="Single transaction amount considered unusually high (dollars)",
    )

    @model_validator(mode="after")
    def validate_ordering(self) -> "FraudSettings":
        """Validate that the thresholds escalate."""
        if self.block_threshold < self.suspicious_threshold:
            raise ValueError("block_threshold must not be below suspicious_threshold")
        if self.high_risk_amount < self.suspicious_amount:
            raise ValueError("high_risk_amount must not be below suspicious_amount")
        return self


@lru_cache
def get_fraud_settings() -> FraudSettings:
    """Get cached fraud settings instance."""
    return FraudSettings()


fraud_settings = get_fraud_settings()
