"""
rulebase/rules.py - Production Rules

A Rule is IF antecedent AND antecedent ... THEN consequent, ...

Each rule caches a tri-state truth value and a fired flag. The fired
flag limits a rule to one firing per inference episode and is only
cleared by reset().
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generator, Mapping

from .clauses import Clause
from .errors import PreconditionError, RuleDefinitionError
from .render import render_rule
from .truth import Truth
from .variables import RuleVariable

logger = logging.getLogger(__name__)

Variables = Mapping[str, RuleVariable]


@dataclass
class Rule:
    """An if-then production rule.

    Attributes:
        rule_id: Index of the rule in the engine, equal to declaration order
        name: Unique rule name, used as provenance for derived values
        antecedents: Conditions, tested conjunctively in declaration order
        consequents: Assignments applied when the rule fires
        truth: Cached result of the last evaluation
        fired: True once the rule has fired in the current episode
    """

    rule_id: int
    name: str
    antecedents: list[Clause] = field(default_factory=list)
    consequents: list[Clause] = field(default_factory=list)
    truth: Truth = Truth.UNKNOWN
    fired: bool = False

    def __post_init__(self):
        if not self.name:
            raise RuleDefinitionError("Rule name must be non-empty")
        if not self.consequents:
            raise RuleDefinitionError(f"Rule {self.name} has no consequent")
        if any(c.consequent for c in self.antecedents):
            raise RuleDefinitionError(f"Rule {self.name} has a consequent among its antecedents")
        if not all(c.consequent for c in self.consequents):
            raise RuleDefinitionError(f"Rule {self.name} has an antecedent among its consequents")

    @property
    def num_antecedents(self) -> int:
        """Specificity used for conflict resolution."""
        return len(self.antecedents)

    def check(self, variables: Variables) -> Truth:
        """Recompute truth from the current variable values."""
        self.truth = Truth.conjoin(
            clause.check(variables.get(clause.variable))
            for clause in self.antecedents
        )
        return self.truth

    def fire(self, variables: Variables) -> list[str]:
        """Apply every consequent and mark the rule fired.

        Returns:
            Names of the variables assigned
        """
        if self.truth is not Truth.TRUE:
            raise PreconditionError(f"Rule {self.name} fired while its truth is {self.truth}")
        if self.fired:
            raise PreconditionError(f"Rule {self.name} already fired in this episode")

        changed = []
        for clause in self.consequents:
            clause.apply(variables[clause.variable], self.name)
            changed.append(clause.variable)
        self.fired = True
        logger.debug(f"Fired {self.name}: {', '.join(str(c) for c in self.consequents)}")
        return changed

    def back_chain(self, variables: Variables) -> Generator[str, None, Truth]:
        """Try to prove every antecedent, subgoaling on unknown variables.

        A generator: it yields the name of each antecedent variable that
        is still unknown, and the caller proves that variable before
        resuming it. Stops at the first antecedent that is not TRUE and
        returns its truth. Neither fires the rule nor assigns consequents.

        Example:
            steps = rule.back_chain(variables)
            try:
                while True:
                    prove(next(steps))
            except StopIteration as done:
                truth = done.value
        """
        for clause in self.antecedents:
            variable = variables.get(clause.variable)
            if variable is not None and not variable.is_known:
                yield clause.variable
            truth = clause.check(variable)
            if truth is not Truth.TRUE:
                self.truth = truth
                return truth
        self.truth = Truth.TRUE
        return self.truth

    def reset(self) -> None:
        self.fired = False
        self.truth = Truth.UNKNOWN

    def __str__(self) -> str:
        return render_rule(self)
