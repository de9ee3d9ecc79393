"""
rulebase - Boolean Production-Rule Inference Engine

Holds named variables and if-then rules over them, and derives variable
values with two classical strategies:
- Forward chaining (data-driven) with specificity conflict resolution
- Backward chaining (goal-driven) with recursive subgoals and a cycle guard

Example:
    from rulebase import RuleBase, ListTraceSink

    trace = ListTraceSink()
    rb = RuleBase("demo", trace=trace)

    rb.rule("R1").when("A", True).and_("B", True).then("C", True).done()
    rb.add_fact("A", True)
    rb.add_fact("B", True)

    rb.reset()
    rb.initialize_facts()
    rb.forward_chain()                # ["R1"]
    print(rb.dump_variables())
"""

from .clauses import Clause, Condition
from .config import EngineSettings, get_settings
from .dsl import RuleBuilder
from .errors import (
    DuplicateNameError,
    PreconditionError,
    RuleBaseError,
    RuleDefinitionError,
    UnknownHandleError,
    UnknownNameError,
    UnknownRuleError,
    UnknownVariableError,
)
from .facts import Fact
from .registry import HandleRegistry
from .render import (
    render_clause,
    render_conflict_set,
    render_fact,
    render_rule,
    render_rules,
    render_variables,
)
from .rule_base import RuleBase
from .rules import Rule
from .trace import ListTraceSink, LoggingTraceSink, NullTraceSink, TraceSink
from .truth import UNKNOWN, Truth, is_known
from .variables import RuleVariable

__version__ = "1.0.0"

__all__ = [
    # Values
    "Truth",
    "UNKNOWN",
    "is_known",
    # Data model
    "RuleVariable",
    "Condition",
    "Clause",
    "Rule",
    "Fact",
    # Engine
    "RuleBase",
    "RuleBuilder",
    "HandleRegistry",
    # Trace and rendering
    "TraceSink",
    "NullTraceSink",
    "LoggingTraceSink",
    "ListTraceSink",
    "render_clause",
    "render_rule",
    "render_fact",
    "render_rules",
    "render_variables",
    "render_conflict_set",
    # Configuration
    "EngineSettings",
    "get_settings",
    # Errors
    "RuleBaseError",
    "UnknownNameError",
    "UnknownVariableError",
    "UnknownRuleError",
    "UnknownHandleError",
    "DuplicateNameError",
    "RuleDefinitionError",
    "PreconditionError",
]
