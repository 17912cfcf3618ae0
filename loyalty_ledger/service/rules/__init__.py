"""
Earning and Redemption Rules for the Loyalty Ledger
"""

from .settings import RulesSettings, rules_settings
from .contracts import BaseEarningRule, EarningRule, RedemptionRule
from .earning import (
    CategoryMultiplierRule,
    MinimumSpendRule,
    TierBonusRule,
    TimeBasedRule,
)
from .redemption import BasicRedemptionRule
from .composite import CompositeEarningRule
from .engine import RulesEngine, create_default_rules_engine

__all__ = [
    # Settings
    "RulesSettings",
    "rules_settings",
    # Contracts
    "EarningRule",
    "RedemptionRule",
    "BaseEarningRule",
    # Earning
    "CategoryMultiplierRule",
    "MinimumSpendRule",
    "TierBonusRule",
    "TimeBasedRule",
    # Redemption
    "BasicRedemptionRule",
    # Composition
    "CompositeEarningRule",
    "RulesEngine",
    "create_default_rules_engine",
]
