"""
Error types raised by the rule base.

Name lookups that fail are host programming errors; the engine logs
them and degrades unless strict mode is on. PreconditionError marks a
broken internal invariant and is never caught by the engine.
"""


class RuleBaseError(Exception):
    """Base class for all rule base errors."""


class UnknownNameError(RuleBaseError, KeyError):
    """Raised when a name is not registered."""

    kind = "name"

    def __init__(self, name: str, owner: str = ""):
        self.name = name
        self.owner = owner
        message = f"{self.kind.capitalize()} '{name}' not found"
        if owner:
            message += f" in '{owner}'"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return self.args[0]


class UnknownVariableError(UnknownNameError):
    """Raised when a variable name is not registered."""

    kind = "variable"


class UnknownRuleError(UnknownNameError):
    """Raised when a rule name is not registered."""

    kind = "rule"


class UnknownHandleError(UnknownNameError):
    """Raised when a sensor or effector name is not registered."""

    kind = "handle"


class DuplicateNameError(RuleBaseError, ValueError):
    """Raised when registering a variable or rule name twice."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} '{name}' already registered")


class RuleDefinitionError(RuleBaseError, ValueError):
    """Raised when a rule is malformed."""


class PreconditionError(RuleBaseError):
    """Raised when an engine invariant is violated."""
