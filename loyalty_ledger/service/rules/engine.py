"""Rules engine - single entry point for pricing earn and redeem operations."""

from typing import List, Optional

import structlog

from loyalty_ledger.domain.value_objects import (
    AMOUNT_CONTEXT_KEY,
    Money,
    Points,
    TransactionContext,
)

from .composite import CompositeEarningRule
from .contracts import EarningRule, RedemptionRule
from .redemption import BasicRedemptionRule
from .settings import RulesSettings, rules_settings

logger = structlog.get_logger(__name__)


class RulesEngine:
    """
    Translates purchases into points and points into money.

    Earning sums every applicable rule; redemption uses the first rule,
    in registration order, that accepts the points. The engine does not
    validate inputs itself: invalid amounts are rejected earlier by the
    value objects.
    """

    def __init__(self):
        self._earning_rules = CompositeEarningRule()
        self._redemption_rules: List[RedemptionRule] = []

    def add_earning_rule(self, rule: EarningRule) -> None:
        self._earning_rules.add_rule(rule)

    def remove_earning_rule(self, name: str) -> None:
        self._earning_rules.remove_rule(name)

    def add_redemption_rule(self, rule: RedemptionRule) -> None:
        self._redemption_rules.append(rule)

    def calculate_earning(self, amount: Money, context: TransactionContext) -> Points:
        """
        Calculate the points a purchase earns.

        Returns:
            Sum of every applicable rule's points; zero when none applies
        """
        points = self._earning_rules.calculate_points(amount, context)

        applicable = self.get_applicable_earning_rules(context, amount)
        logger.info(
            "points_calculated",
            amount=amount.amount,
            currency=amount.currency.code,
            points=points.value,
            rules=[rule.name for rule in applicable],
        )

        return points

    def calculate_redemption(
        self,
        points: Points,
        context: TransactionContext,
    ) -> Optional[Money]:
        """
        Value points with the first redemption rule that accepts them.

        Returns:
            The redemption value, or None if no rule can redeem the points
        """
        for rule in self._redemption_rules:
            if rule.can_redeem(points, context):
                value = rule.calculate_value(points, context)
                logger.info(
                    "redemption_calculated",
                    points=points.value,
                    value=value.amount,
                    currency=value.currency.code,
                    rule=rule.name,
                )
                return value

        logger.warning("no_redemption_rule_applicable", points=points.value)
        return None

    def can_redeem(self, points: Points, context: TransactionContext) -> bool:
        return any(rule.can_redeem(points, context) for rule in self._redemption_rules)

    def get_earning_rules(self) -> List[EarningRule]:
        return self._earning_rules.get_rules()

    def get_redemption_rules(self) -> List[RedemptionRule]:
        return list(self._redemption_rules)

    def get_applicable_earning_rules(
        self,
        context: TransactionContext,
        amount: Optional[Money] = None,
    ) -> List[EarningRule]:
        """
        Earning rules that apply to a context, in priority order.

        When ``amount`` is given it is injected the same way
        ``calculate_earning`` does, so amount-based rules are considered.
        """
        if amount is not None:
            context = context.with_value(AMOUNT_CONTEXT_KEY, amount)
        return self._earning_rules.get_applicable_rules(context)


def create_default_rules_engine(settings: RulesSettings = rules_settings) -> RulesEngine:
    """
    Build an engine with the configured default redemption rule.

    Earning rules are campaign specific and registered by the caller.
    """
    engine = RulesEngine()
    engine.add_redemption_rule(
        BasicRedemptionRule(
            currency=settings.currency,
            points_per_unit=settings.redemption_points_per_unit,
            minimum_points=settings.redemption_minimum_points,
        )
    )
    return engine
