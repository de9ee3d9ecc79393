"""Shared fixtures for rule base tests."""

import pytest

from rulebase import EngineSettings, ListTraceSink, RuleBase


@pytest.fixture
def settings():
    return EngineSettings(trace_enabled=False, strict_names=False)


@pytest.fixture
def trace():
    return ListTraceSink()


@pytest.fixture
def rb(trace, settings):
    """Empty rule base with an in-memory trace."""
    return RuleBase("test", trace=trace, settings=settings)


@pytest.fixture
def conjunction_rb(rb):
    """R1: A = True AND B = True -> C := True, with facts A and B."""
    rb.add_rule("R1", [("A", True), ("B", True)], [("C", True)])
    rb.add_fact("A", True)
    rb.add_fact("B", True)
    return rb


@pytest.fixture
def vehicles_rb(rb):
    """Small vehicle classification rule base."""
    rb.rule("bicycle").when("vehicle_type", "cycle").and_("num_wheels", 2) \
        .and_("motor", "no").then("vehicle", "Bicycle").done()
    rb.rule("tricycle").when("vehicle_type", "cycle").and_("num_wheels", 3) \
        .and_("motor", "no").then("vehicle", "Tricycle").done()
    rb.rule("motorcycle").when("vehicle_type", "cycle").and_("num_wheels", 2) \
        .and_("motor", "yes").then("vehicle", "Motorcycle").done()
    rb.rule("sports_car").when("vehicle_type", "automobile").and_("size", "medium") \
        .and_("num_doors", 2).then("vehicle", "Sports_Car").done()
    rb.rule("sedan").when("vehicle_type", "automobile").and_("size", "medium") \
        .and_("num_doors", 4).then("vehicle", "Sedan").done()
    rb.rule("cycle").when("num_wheels", "<", 4).then("vehicle_type", "cycle").done()
    rb.rule("automobile").when("num_wheels", 4).and_("motor", "yes") \
        .then("vehicle_type", "automobile").done()
    return rb
