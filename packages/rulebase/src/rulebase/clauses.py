"""
rulebase/clauses.py - Conditions and Actions

A Clause is one side of a rule:
- Antecedent: a test "variable <op> value", evaluated to a Truth
- Consequent: an assignment "variable := value", applied on firing

Clauses refer to their variable by name and to their rule by id, so
the engine's clause arena holds no object cycles.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .errors import PreconditionError
from .render import render_clause
from .truth import Truth
from .variables import RuleVariable


class Condition(Enum):
    """Comparison operator of an antecedent clause."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    @classmethod
    def parse(cls, symbol: Union[str, Condition]) -> Condition:
        """Map an operator symbol to a Condition.

        Accepts "==" as an alias for "=".
        """
        if isinstance(symbol, Condition):
            return symbol
        symbol = str(symbol).strip()
        if symbol == "==":
            return cls.EQ
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Unknown condition operator: {symbol!r}") from None

    def compare(self, lhs: Any, rhs: Any) -> bool:
        """Apply the operator to lhs and rhs.

        Ordered comparisons are numeric when both sides convert to
        float, otherwise they compare the string forms.
        """
        if self is Condition.EQ:
            return lhs == rhs
        if self is Condition.NE:
            return lhs != rhs

        a, b = _comparable(lhs, rhs)
        if self is Condition.GT:
            return a > b
        if self is Condition.LT:
            return a < b
        if self is Condition.GE:
            return a >= b
        return a <= b

    def __str__(self) -> str:
        return self.value


def _comparable(lhs: Any, rhs: Any) -> tuple[Any, Any]:
    try:
        return float(lhs), float(rhs)
    except (ValueError, TypeError):
        return str(lhs), str(rhs)


@dataclass(frozen=True)
class Clause:
    """A single antecedent test or consequent assignment.

    Attributes:
        clause_id: Index of the clause in the engine's clause arena
        rule_id: Index of the owning rule
        variable: Name of the variable tested or assigned
        condition: Comparison operator (always EQ for consequents)
        rhs: Expected value (antecedent) or target value (consequent)
        consequent: True for an action clause
    """

    clause_id: int
    rule_id: int
    variable: str
    condition: Condition
    rhs: Any
    consequent: bool = False

    def check(self, variable: Optional[RuleVariable]) -> Truth:
        """Evaluate the test against the variable's current value.

        An unassigned (or missing) variable gives UNKNOWN.
        """
        if self.consequent:
            raise PreconditionError(
                f"Consequent clause {self.clause_id} ({self}) cannot be tested"
            )
        if variable is None or not variable.is_known:
            return Truth.UNKNOWN
        return Truth.of(self.condition.compare(variable.value, self.rhs))

    def apply(self, variable: RuleVariable, rule_name: str) -> None:
        """Assign the target value to the variable."""
        if not self.consequent:
            raise PreconditionError(
                f"Antecedent clause {self.clause_id} ({self}) cannot be applied"
            )
        variable.set_value(self.rhs, rule_name)

    def __str__(self) -> str:
        return render_clause(self)
