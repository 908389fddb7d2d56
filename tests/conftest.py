"""
Pytest fixtures shared by the engine tests.

Provides a controllable clock for node aging and small ready-made
rule bases.
"""

import pytest

from prometheus_reasoning import ExpertSystem, Fact, Rule
from prometheus_reasoning.config import EngineSettings


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> EngineSettings:
    """Settings independent of the environment."""
    return EngineSettings(
        think_cycle_cap=100,
        rest_cycles=1,
        node_max_age=60.0,
        node_strength=1,
        output_weight_cutoff=0.0,
        search_ply=10,
    )


@pytest.fixture
def es(settings) -> ExpertSystem:
    return ExpertSystem(settings=settings)


@pytest.fixture
def chain_es(es) -> ExpertSystem:
    """A(?x) => B(?x), B(?x) => C(?x) with fact A(1)."""
    es.add_rule(Rule.parse("A(?x)=>B(?x)"))
    es.add_rule(Rule.parse("B(?x)=>C(?x)"))
    es.add_fact(Fact.parse("A(1)"))
    return es
