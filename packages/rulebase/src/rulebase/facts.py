"""Initial assertions applied to a rule base before inference."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .render import render_fact

if TYPE_CHECKING:
    from .rule_base import RuleBase


@dataclass
class Fact:
    """A (variable, value) pair written once at initialization.

    Facts bypass rule evaluation entirely.
    """

    variable: str
    value: Any
    asserted: bool = False

    def assert_into(self, rule_base: RuleBase) -> bool:
        """Write the value into the rule base.

        Returns:
            True if the variable exists and was set
        """
        self.asserted = rule_base.set_variable_value(self.variable, self.value)
        return self.asserted

    def reset(self) -> None:
        self.asserted = False

    def __str__(self) -> str:
        return render_fact(self)
