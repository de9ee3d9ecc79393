"""
rulebase/truth.py - Three-Valued Truth for Rule Evaluation

Rules and clauses evaluate to one of three outcomes:
- TRUE: every condition holds against the current variable values
- FALSE: at least one condition definitively fails
- UNKNOWN: nothing failed, but some variable has no value yet

Variable values use a separate sentinel, UNKNOWN, so that a stored
None is still an ordinary value.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterable


class Truth(Enum):
    """Tri-state truth value of a clause or rule."""

    UNKNOWN = "unknown"
    TRUE = "true"
    FALSE = "false"

    @classmethod
    def of(cls, value: bool) -> Truth:
        """Convert a Python bool."""
        return cls.TRUE if value else cls.FALSE

    @classmethod
    def conjoin(cls, values: Iterable[Truth]) -> Truth:
        """Three-valued AND.

        FALSE dominates, then UNKNOWN. An empty conjunction is TRUE.
        """
        result = cls.TRUE
        for value in values:
            if value is cls.FALSE:
                return cls.FALSE
            if value is cls.UNKNOWN:
                result = cls.UNKNOWN
        return result

    def __str__(self) -> str:
        return self.value


class _UnknownValue:
    """Singleton marking a variable that has not been assigned."""

    _instance: _UnknownValue | None = None

    def __new__(cls) -> _UnknownValue:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "unknown"

    def __reduce__(self):
        return (_UnknownValue, ())


UNKNOWN = _UnknownValue()


def is_known(value: Any) -> bool:
    """True if value is anything other than the UNKNOWN sentinel."""
    return value is not UNKNOWN
