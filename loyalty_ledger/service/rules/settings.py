"""
Rules Settings for the Loyalty Ledger rules engine.

Default priorities, the standard conversion rate and the default
redemption rule are configurable through environment variables.

Environment variables use the RULES_ prefix:
    RULES_BASE_MULTIPLIER=1.0
    RULES_REDEMPTION_POINTS_PER_UNIT=100
    RULES_REDEMPTION_CURRENCY=USD

Usage:
    from loyalty_ledger.service.rules.settings import rules_settings

    engine = create_default_rules_engine(rules_settings)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from loyalty_ledger.domain.value_objects import ConversionRate, Currency


class RulesSettings(BaseSettings):
    """
    Configurable parameters for earning and redemption rules.

    All settings can be overridden via environment variables with RULES_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Conversion ===
    base_multiplier: float = Field(
        default=1.0,
        gt=0.0,
        description="Points earned per minor currency unit before rule multipliers",
    )

    # === Default Rule Priorities ===
    category_priority: int = Field(
        default=100,
        description="Priority of category multiplier rules",
    )
    minimum_spend_priority: int = Field(
        default=125,
        description="Priority of minimum spend rules",
    )
    time_based_priority: int = Field(
        default=150,
        description="Priority of time window promotions",
    )
    tier_bonus_priority: int = Field(
        default=200,
        description="Priority of tier bonus rules",
    )

    # === Redemption ===
    redemption_currency: str = Field(
        default="USD",
        description="Currency redemption values are expressed in",
    )
    redemption_points_per_unit: int = Field(
        default=100,
        gt=0,
        description="Points needed for one major currency unit ($1)",
    )
    redemption_minimum_points: int = Field(
        default=100,
        ge=0,
        description="Smallest redeemable amount of points",
    )

    @field_validator("redemption_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Validate that the currency code is supported."""
        return Currency.from_code(v).code

    @property
    def base_rate(self) -> ConversionRate:
        return ConversionRate.from_multiplier(self.base_multiplier)

    @property
    def currency(self) -> Currency:
        return Currency.from_code(self.redemption_currency)


@lru_cache
def get_rules_settings() -> RulesSettings:
    """Get cached rules settings instance."""
    return RulesSettings()


rules_settings = get_rules_settings()
