"""Priority-ordered collection of earning rules."""

from typing import List

from loyalty_ledger.domain.value_objects import (
    AMOUNT_CONTEXT_KEY,
    Money,
    Points,
    TransactionContext,
)

from .contracts import EarningRule


class CompositeEarningRule(EarningRule):
    """
    Sums the points of every applicable rule.

    Rules are kept sorted by descending priority; rules with equal
    priority stay in registration order. The purchase amount is injected
    into the context before rules are consulted so amount-based rules
    can see it.
    """

    def __init__(self, rules: List[EarningRule] = None):
        self._rules: List[EarningRule] = []
        for rule in rules or []:
            self.add_rule(rule)

    def add_rule(self, rule: EarningRule) -> None:
        self._rules.append(rule)
        self._rules.sort(key=lambda r: r.priority, reverse=True)

    def remove_rule(self, name: str) -> None:
        """Remove every rule registered under ``name``."""
        self._rules = [rule for rule in self._rules if rule.name != name]

    def calculate_points(self, amount: Money, context: TransactionContext) -> Points:
        enriched = context.with_value(AMOUNT_CONTEXT_KEY, amount)

        total = Points.zero()
        for rule in self._rules:
            if rule.is_applicable(enriched):
                total = total.add(rule.calculate_points(amount, enriched))

        return total

    def is_applicable(self, context: TransactionContext) -> bool:
        return any(rule.is_applicable(context) for rule in self._rules)

    def get_applicable_rules(self, context: TransactionContext) -> List[EarningRule]:
        return [rule for rule in self._rules if rule.is_applicable(context)]

    def get_rules(self) -> List[EarningRule]:
        return list(self._rules)

    @property
    def priority(self) -> int:
        return max((rule.priority for rule in self._rules), default=0)

    @property
    def name(self) -> str:
        return "composite_earning_rule"

    @property
    def description(self) -> str:
        return f"Combination of {len(self._rules)} earning rules"

    def __len__(self) -> int:
        return len(self._rules)
