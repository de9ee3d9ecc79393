"""
rulebase/dsl.py - Fluent Rule Construction

Example:
    rb = RuleBase("vehicles")

    rb.rule("bicycle") \
        .when("vehicle_type", "cycle") \
        .and_("num_wheels", 2) \
        .and_("motor", "no") \
        .then("vehicle", "Bicycle") \
        .done()

    rb.rule("sports_car") \
        .when("vehicle_type", "automobile") \
        .and_("num_doors", ">", 1) \
        .then("vehicle", "Sports_Car") \
        .done()
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Tuple

from .errors import RuleDefinitionError
from .rules import Rule

if TYPE_CHECKING:
    from .rule_base import RuleBase


class RuleBuilder:
    """Fluent builder for rules."""

    def __init__(self, rule_base: 'RuleBase', name: str):
        self.rule_base = rule_base
        self.name = name
        self.antecedents: List[Tuple[Any, ...]] = []
        self.consequents: List[Tuple[Any, ...]] = []

    def when(self, variable: str, *condition: Any) -> 'RuleBuilder':
        """Add first condition: when(var, value) or when(var, op, value)."""
        self.antecedents.append(_antecedent(self.name, variable, condition))
        return self

    def and_(self, variable: str, *condition: Any) -> 'RuleBuilder':
        """Add another condition (AND)."""
        self.antecedents.append(_antecedent(self.name, variable, condition))
        return self

    def then(self, variable: str, value: Any) -> 'RuleBuilder':
        """Add an assignment made when the rule fires."""
        self.consequents.append((variable, value))
        return self

    def done(self) -> Rule:
        """Finalize and add rule to the rule base."""
        if not self.consequents:
            raise RuleDefinitionError(f"Rule {self.name} needs at least one then()")
        return self.rule_base.add_rule(self.name, self.antecedents, self.consequents)


def _antecedent(rule_name: str, variable: str, condition: Tuple[Any, ...]) -> Tuple[Any, ...]:
    if len(condition) == 1:
        return (variable, condition[0])
    if len(condition) == 2:
        return (variable, condition[0], condition[1])
    raise RuleDefinitionError(
        f"Rule {rule_name}: condition on {variable} takes (value) or (operator, value)"
    )
