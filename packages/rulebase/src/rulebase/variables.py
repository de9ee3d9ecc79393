"""
rulebase/variables.py - Named Variables

A RuleVariable is a named slot that rules test and assign. It also
keeps the ids of every clause that mentions it, which is how the engine
finds candidate rules for a goal and which rules to re-check after a
firing.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from .truth import UNKNOWN, is_known

logger = logging.getLogger(__name__)


class RuleVariable:
    """Named variable holding UNKNOWN or an assigned value.

    Example:
        fever = RuleVariable("fever")
        fever.set_value(True)
        fever.is_known  # True
    """

    __slots__ = ("_name", "value", "rule_name", "description", "clause_refs")

    def __init__(self, name: str, description: str = ""):
        if not name:
            raise ValueError("Variable name must be non-empty")
        self._name = name
        self.value: Any = UNKNOWN
        self.rule_name: Optional[str] = None
        self.description = description
        self.clause_refs: list[int] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_known(self) -> bool:
        return is_known(self.value)

    def set_value(self, value: Any, rule_name: Optional[str] = None) -> None:
        """Assign a value and record which rule set it.

        Dependent rules are not notified; re-checking them is the
        engine's job.
        """
        self.value = value
        self.rule_name = rule_name
        logger.debug(f"{self._name} := {value!r} (by {rule_name or 'host'})")

    def clear(self) -> None:
        """Return to UNKNOWN and drop provenance."""
        self.value = UNKNOWN
        self.rule_name = None

    def add_clause_ref(self, clause_id: int) -> None:
        if clause_id not in self.clause_refs:
            self.clause_refs.append(clause_id)

    def __repr__(self) -> str:
        return f"RuleVariable({self._name!r}, value={self.value!r})"
