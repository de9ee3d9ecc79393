"""
rulebase/rule_base.py - Rule Base and Inference Engine

Owns the variables, rules, clauses and facts of one rule base and runs
two classical inference strategies over them:

FORWARD CHAINING (Data-Driven):
    Evaluate every rule, collect the ones that can fire (the conflict
    set), fire the most specific one, re-check the rules that depend on
    what changed, and repeat until nothing can fire.

BACKWARD CHAINING (Goal-Driven):
    Find the rules that could set a goal variable and try to prove
    their antecedents, subgoaling on any antecedent variable that is
    still unknown. The first rule proved true sets the goal.

Rules and clauses live in arenas (lists indexed by id). Variables hold
clause ids and clauses hold rule ids, so there are no object cycles.

A RuleBase is single-owner state: every episode mutates its tables in
place, so concurrent callers need their own instance.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from .clauses import Clause, Condition
from .config import EngineSettings, get_settings
from .errors import (
    DuplicateNameError,
    PreconditionError,
    RuleDefinitionError,
    UnknownRuleError,
    UnknownVariableError,
)
from .facts import Fact
from .registry import HandleRegistry
from .render import render_conflict_set, render_rules, render_variables
from .rules import Rule
from .trace import LoggingTraceSink, NullTraceSink, TraceSink
from .truth import UNKNOWN, Truth
from .variables import RuleVariable

logger = logging.getLogger(__name__)

# (variable, value) or (variable, operator, value)
ClauseSpec = Sequence[Any]


class RuleBase:
    """A named set of variables, rules and facts with chaining engines.

    Example:
        rb = RuleBase("diagnosis")
        rb.add_rule("R1", [("A", True), ("B", True)], [("C", True)])
        rb.add_fact("A", True)
        rb.add_fact("B", True)

        rb.reset()
        rb.initialize_facts()
        rb.forward_chain()                 # ["R1"]
        rb.get_variable("C").value         # True
    """

    def __init__(
        self,
        name: str,
        trace: Optional[TraceSink] = None,
        settings: Optional[EngineSettings] = None,
    ):
        """Initialize an empty rule base.

        Args:
            name: Rule base name, used in trace and dumps
            trace: Sink for trace lines (default depends on settings)
            settings: Engine settings (cached environment settings if None)
        """
        self.name = name
        self.settings = settings or get_settings()
        if trace is None:
            if self.settings.trace_enabled:
                trace = LoggingTraceSink(logging.getLogger(self.settings.trace_logger))
            else:
                trace = NullTraceSink()
        self.trace = trace

        self._variables: Dict[str, RuleVariable] = {}
        self._rule_ids: Dict[str, int] = {}

        # Arenas, index == id
        self.rules: List[Rule] = []
        self.clauses: List[Clause] = []

        self.facts: List[Fact] = []

        # Consequent clause ids currently being proved
        self._goal_stack: List[int] = []

        self.sensors = HandleRegistry("sensors")
        self.effectors = HandleRegistry("effectors")

        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            "rules_checked": 0,
            "rules_fired": 0,
            "subgoals": 0,
            "cycles_blocked": 0,
        }

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add_variable(self, variable: Union[RuleVariable, str], description: str = "") -> RuleVariable:
        """Register a variable.

        Args:
            variable: A RuleVariable or a name to create one from
            description: Description for a variable created from a name

        Raises:
            DuplicateNameError: If the name is already registered
        """
        if isinstance(variable, str):
            variable = RuleVariable(variable, description)
        if variable.name in self._variables:
            raise DuplicateNameError("variable", variable.name)
        self._variables[variable.name] = variable
        logger.debug(f"{self.name}: added variable {variable.name}")
        return variable

    def add_rule(
        self,
        name: str,
        antecedents: Iterable[ClauseSpec],
        consequents: Iterable[ClauseSpec],
    ) -> Rule:
        """Add a rule. Declaration order is the conflict-resolution tie-break.

        Args:
            name: Unique rule name
            antecedents: (variable, value) or (variable, operator, value) tests
            consequents: (variable, value) assignments

        Returns:
            The new Rule

        Raises:
            DuplicateNameError: If a rule with this name exists
            RuleDefinitionError: If a clause spec is malformed or there is
                no consequent

        Variables referenced but not yet registered are created.
        """
        if name in self._rule_ids:
            raise DuplicateNameError("rule", name)

        rule_id = len(self.rules)
        next_id = len(self.clauses)
        conditions = []
        for spec in antecedents:
            variable, condition, rhs = _parse_antecedent(name, spec)
            conditions.append(Clause(next_id, rule_id, variable, condition, rhs))
            next_id += 1
        actions = []
        for spec in consequents:
            variable, rhs = _parse_consequent(name, spec)
            actions.append(Clause(next_id, rule_id, variable, Condition.EQ, rhs, consequent=True))
            next_id += 1

        # Validates before anything is committed
        rule = Rule(rule_id, name, conditions, actions)

        for clause in conditions + actions:
            self.clauses.append(clause)
            variable = self._variables.get(clause.variable)
            if variable is None:
                variable = self.add_variable(clause.variable)
            variable.add_clause_ref(clause.clause_id)
        self.rules.append(rule)
        self._rule_ids[name] = rule_id

        logger.debug(f"{self.name}: added rule {rule}")
        return rule

    def rule(self, name: str):
        """Start building a rule with the fluent API.

        Example:
            rb.rule("R1").when("A", True).and_("B", True).then("C", True).done()
        """
        from .dsl import RuleBuilder

        return RuleBuilder(self, name)

    def add_fact(self, variable: str, value: Any) -> Fact:
        """Add a fact, applied in order by initialize_facts()."""
        fact = Fact(variable, value)
        self.facts.append(fact)
        return fact

    def add_sensor(self, handle: Any, name: str) -> None:
        self.sensors.add(name, handle)

    def get_sensor(self, name: str) -> Any:
        """Raises UnknownHandleError if no sensor has this name."""
        return self.sensors.get(name)

    def add_effector(self, handle: Any, name: str) -> None:
        self.effectors.add(name, handle)

    def get_effector(self, name: str) -> Any:
        """Raises UnknownHandleError if no effector has this name."""
        return self.effectors.get(name)

    # -------------------------------------------------------------------------
    # Variables
    # -------------------------------------------------------------------------

    @property
    def variables(self) -> Mapping[str, RuleVariable]:
        """Read-only live view of the variable table."""
        return MappingProxyType(self._variables)

    def get_variable(self, name: str) -> RuleVariable:
        """Return the named variable.

        Raises:
            UnknownVariableError: If the name is not registered
        """
        try:
            return self._variables[name]
        except KeyError:
            raise UnknownVariableError(name, self.name) from None

    def find_variable(self, name: str) -> Optional[RuleVariable]:
        return self._variables.get(name)

    def get_variables(self) -> Dict[str, RuleVariable]:
        """Snapshot copy of the variable table."""
        return dict(self._variables)

    def get_goal_variables(self) -> List[RuleVariable]:
        """Variables that at least one rule can derive."""
        return [
            variable
            for variable in self._variables.values()
            if any(self.clauses[cid].consequent for cid in variable.clause_refs)
        ]

    def set_variable_value(self, name: str, value: Any) -> bool:
        """Set a variable's value from outside the rules.

        An unknown name is logged and ignored (raised in strict mode).

        Returns:
            True if the variable exists and was set
        """
        variable = self._variables.get(name)
        if variable is None:
            self._unknown_variable(name, "set value of")
            return False
        variable.set_value(value)
        return True

    def _unknown_variable(self, name: str, action: str) -> None:
        if self.settings.strict_names:
            raise UnknownVariableError(name, self.name)
        logger.warning(f"{self.name}: can't {action} variable {name}, it is not defined")

    def get_rule(self, name: str) -> Rule:
        """Raises UnknownRuleError if no rule has this name."""
        try:
            return self.rules[self._rule_ids[name]]
        except KeyError:
            raise UnknownRuleError(name, self.name) from None

    # -------------------------------------------------------------------------
    # Episode lifecycle
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Clear all values and fired flags for a fresh episode."""
        self.trace.write(f"--- Setting all {self.name} variables to unknown")
        for variable in self._variables.values():
            variable.clear()
        for fact in self.facts:
            fact.reset()
        for rule in self.rules:
            rule.reset()
        self._goal_stack.clear()
        self._stats = self._empty_stats()

    def initialize_facts(self) -> None:
        """Apply every fact, in declaration order."""
        for fact in self.facts:
            fact.assert_into(self)
            logger.debug(f"{self.name}: asserted {fact}")

    # -------------------------------------------------------------------------
    # Forward chaining
    # -------------------------------------------------------------------------

    def match(self, test_antecedents: bool = True) -> List[Rule]:
        """Build the conflict set.

        Args:
            test_antecedents: Re-check every rule first; otherwise use
                cached truth values

        Returns:
            Unfired rules whose truth is TRUE, in declaration order
        """
        conflict_set = []
        for rule in self.rules:
            if test_antecedents:
                self._check(rule)
            if rule.truth is Truth.TRUE and not rule.fired:
                conflict_set.append(rule)
        self.trace.write(render_conflict_set(conflict_set))
        return conflict_set

    def select_rule(self, candidates: Sequence[Rule]) -> Rule:
        """Pick the rule with the most antecedents; ties go to the earliest.

        Raises:
            PreconditionError: If candidates is empty
        """
        if not candidates:
            raise PreconditionError("select_rule called with an empty conflict set")
        # max() keeps the first of equal keys
        return max(candidates, key=lambda rule: rule.num_antecedents)

    def forward_chain(self) -> List[str]:
        """Fire rules until the conflict set is empty.

        Each rule fires at most once per episode, so this performs at
        most len(rules) firings.

        Returns:
            Names of the fired rules, in firing order
        """
        logger.info(f"{self.name}: forward chaining over {len(self.rules)} rules")
        fired = []

        conflict_set = self.match(test_antecedents=True)
        while conflict_set:
            selected = self.select_rule(conflict_set)
            changed = selected.fire(self._variables)
            self._stats["rules_fired"] += 1
            fired.append(selected.name)
            assignments = ", ".join(f"{n} := {self._variables[n].value}" for n in changed)
            self.trace.write(f"Firing rule {selected.name}: {assignments}")

            self._invalidate(changed)
            conflict_set = self.match(test_antecedents=False)

        logger.info(f"{self.name}: forward chaining fired {len(fired)} rules")
        return fired

    def _invalidate(self, variable_names: Iterable[str]) -> None:
        """Re-check every rule with an antecedent on a changed variable."""
        rule_ids = set()
        for name in variable_names:
            for clause_id in self._variables[name].clause_refs:
                clause = self.clauses[clause_id]
                if not clause.consequent:
                    rule_ids.add(clause.rule_id)
        for rule_id in sorted(rule_ids):
            self._check(self.rules[rule_id])

    def _check(self, rule: Rule) -> Truth:
        self._stats["rules_checked"] += 1
        truth = rule.check(self._variables)
        logger.debug(f"{self.name}: {rule.name} is {truth}")
        return truth

    # -------------------------------------------------------------------------
    # Backward chaining
    # -------------------------------------------------------------------------

    def backward_chain(self, goal_name: str) -> Any:
        """Try to derive a value for the named goal variable.

        Subgoals are proved depth-first from an explicit stack of
        proof generators, so the depth of a dependency chain is bounded
        by memory, not by the interpreter's recursion limit. Stops at the
        first rule proved true. An unprovable goal stays UNKNOWN; this is
        traced, not raised. Both "+++" summary lines are written for the
        outermost goal only.

        Returns:
            The goal's value, or UNKNOWN
        """
        goal = self._variables.get(goal_name)
        if goal is None:
            self._unknown_variable(goal_name, "backward chain on")
            self.trace.write(f"+++ Could not find solution for goal: {goal_name}")
            return UNKNOWN
        if goal.is_known:
            return goal.value

        stack = [self._prove(goal)]
        try:
            while stack:
                try:
                    subgoal = next(stack[-1])
                except StopIteration:
                    stack.pop()
                    continue
                stack.append(self._prove(self._variables[subgoal]))
        finally:
            # Unwinds goal-stack entries if a precondition error escapes
            while stack:
                stack.pop().close()
        return goal.value

    def _prove(self, goal: RuleVariable) -> Iterator[str]:
        """Proof of one goal, yielding the names of unknown subgoals.

        The caller proves each yielded variable before resuming.
        """
        self._stats["subgoals"] += 1
        for clause_id in list(goal.clause_refs):
            if goal.is_known:
                # Set by a nested subgoal
                break
            clause = self.clauses[clause_id]
            if not clause.consequent:
                continue
            rule = self.rules[clause.rule_id]
            if self._on_goal_stack(clause_id):
                self._stats["cycles_blocked"] += 1
                self.trace.write(f"Rule {rule.name} is already being proved, skipping for {goal.name}")
                continue

            self._goal_stack.append(clause_id)
            try:
                self._stats["rules_checked"] += 1
                truth = yield from rule.back_chain(self._variables)
            finally:
                self._goal_stack.pop()

            if truth is Truth.TRUE:
                clause.apply(goal, rule.name)
                self.trace.write(f"Rule {rule.name} is true, setting {goal.name} := {goal.value}")
                if not self._goal_stack:
                    self.trace.write(f"+++ Found solution for goal: {goal.name}")
                break
            if truth is Truth.FALSE:
                self.trace.write(f"Rule {rule.name} is false, can't set {goal.name}")
            else:
                self.trace.write(f"Rule {rule.name} is unknown, can't determine truth value")

        if not goal.is_known and not self._goal_stack:
            self.trace.write(f"+++ Could not find solution for goal: {goal.name}")

    def _on_goal_stack(self, clause_id: int) -> bool:
        """Cycle guard: is this consequent clause already being proved?"""
        return clause_id in self._goal_stack

    @property
    def goal_stack(self) -> tuple[Clause, ...]:
        """Consequent clauses currently being proved, outermost first."""
        return tuple(self.clauses[cid] for cid in self._goal_stack)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def stats(self) -> Dict[str, int]:
        """Counters for the current episode."""
        return dict(self._stats)

    def dump_rules(self) -> str:
        return render_rules(self)

    def dump_variables(self) -> str:
        return render_variables(self)

    def __len__(self) -> int:
        """Number of rules."""
        return len(self.rules)

    def __repr__(self) -> str:
        return (
            f"RuleBase({self.name!r}, variables={len(self._variables)}, "
            f"rules={len(self.rules)}, facts={len(self.facts)})"
        )


def _variable_name(rule_name: str, name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise RuleDefinitionError(f"Rule {rule_name}: invalid variable name {name!r}")
    return name


def _parse_antecedent(rule_name: str, spec: ClauseSpec) -> tuple[str, Condition, Any]:
    spec = tuple(spec)
    if len(spec) == 2:
        return _variable_name(rule_name, spec[0]), Condition.EQ, spec[1]
    if len(spec) == 3:
        try:
            condition = Condition.parse(spec[1])
        except ValueError as e:
            raise RuleDefinitionError(f"Rule {rule_name}: {e}") from e
        return _variable_name(rule_name, spec[0]), condition, spec[2]
    raise RuleDefinitionError(
        f"Rule {rule_name}: antecedent must be (variable, value) or "
        f"(variable, operator, value), got {spec!r}"
    )


def _parse_consequent(rule_name: str, spec: ClauseSpec) -> tuple[str, Any]:
    spec = tuple(spec)
    if len(spec) != 2:
        raise RuleDefinitionError(
            f"Rule {rule_name}: consequent must be (variable, value), got {spec!r}"
        )
    return _variable_name(rule_name, spec[0]), spec[1]
