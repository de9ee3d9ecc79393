"""
rulebase/render.py - Text Dumps for Debugging and Explanation

Produces readable listings of a rule base: rules in declaration order
followed by facts, the current variable values, and conflict sets.
The __str__ of clauses, rules and facts delegates here, so logs and
dumps read the same.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .clauses import Clause
    from .facts import Fact
    from .rule_base import RuleBase
    from .rules import Rule


def render_clause(clause: Clause) -> str:
    """Render a clause as 'A = True' or 'temp >= 30'."""
    return f"{clause.variable} {clause.condition} {clause.rhs}"


def render_rule(rule: Rule) -> str:
    """Render a rule as 'R1: IF A = True AND B = True THEN C = True'."""
    conditions = " AND ".join(render_clause(c) for c in rule.antecedents) or "TRUE"
    actions = " AND ".join(render_clause(c) for c in rule.consequents)
    return f"{rule.name}: IF {conditions} THEN {actions}"


def render_fact(fact: Fact) -> str:
    return f"FACT: {fact.variable} = {fact.value}"


def render_rules(rule_base: RuleBase) -> str:
    """Render every rule, then every fact."""
    lines = [f"{rule_base.name} Rule Base:"]
    lines.extend(render_rule(rule) for rule in rule_base.rules)
    lines.extend(render_fact(fact) for fact in rule_base.facts)
    return "\n".join(lines)


def render_variables(rule_base: RuleBase) -> str:
    """Render one 'name value = v' line per variable.

    Provenance and description are appended when present.
    """
    lines = []
    for variable in rule_base.get_variables().values():
        line = f"{variable.name} value = {variable.value}"
        if variable.rule_name:
            line += f" (set by {variable.rule_name})"
        if variable.description:
            line += f" -- {variable.description}"
        lines.append(line)
    return "\n".join(lines)


def render_conflict_set(rules: Iterable[Rule]) -> str:
    """Render a conflict set as '-- Rules in conflict set: R1(2), R2(1)'."""
    entries = ", ".join(f"{rule.name}({rule.num_antecedents})" for rule in rules)
    return f"-- Rules in conflict set: {entries}"
