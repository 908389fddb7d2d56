"""
Tests for fact matching and substitution.

Validates:
- Variable bindings on either side of a match
- Wildcard tail rule for argument-count mismatches
- Bindings are explicit values, never shared between calls
- satisfy() honours bindings across several patterns
"""

from prometheus_reasoning import Fact, Recommendation, Rule, match_facts, satisfy, substitute
from prometheus_reasoning.tags import Argument


def F(text: str) -> Fact:
    return Fact.parse(text)


class TestMatchFacts:
    """Test suite for match_facts."""

    def test_variable_binds_concrete_value(self):
        result = F("P(1,2)").match_result(F("P(1,?x)"))
        assert result.matched is True
        assert result.bindings == {"x": Argument.parse("2")}

    def test_literal_mismatch(self):
        assert F("P(1,2)").matches(F("P(1,3)")) is False

    def test_predicate_names_case_sensitive(self):
        assert F("P(1)").matches(F("p(1)")) is False

    def test_variable_on_known_side_binds_too(self):
        result = match_facts(F("P(?y)"), F("P(4)"))
        assert result.matched
        assert result.bindings == {"y": Argument.parse("4")}

    def test_numeric_relation_pattern(self):
        assert F("Fever(39.5)").matches(F("Fever(>38)"))
        assert not F("Fever(37)").matches(F("Fever(>38)"))

    def test_failed_match_is_falsy(self):
        assert not F("P(1)").match_result(F("Q(1)"))


class TestWildcardTail:
    """Test suite for argument-count reconciliation."""

    def test_wildcard_matches_longer_fact(self):
        assert F("P(1,2,3)").matches(F("P(*)"))

    def test_wildcard_matches_empty_fact(self):
        assert F("P()").matches(F("P(*)"))

    def test_shorter_pattern_without_wildcard_fails(self):
        assert F("P(1,2)").matches(F("P(1)")) is False

    def test_trailing_wildcard_absorbs_rest(self):
        assert F("P(1,2,3)").matches(F("P(1,*)"))

    def test_longer_pattern_needs_wildcard_tail(self):
        assert F("P(1)").matches(F("P(1,2)")) is False
        assert F("P(1)").matches(F("P(1,*)")) is True

    def test_count_mismatch_is_not_an_error(self):
        assert match_facts(F("P(1,2,3)"), F("P(1,2)")).matched is False


class TestBindings:
    """Test suite for explicit binding context."""

    def test_existing_binding_constrains_match(self):
        theta = {"x": Argument.parse("1")}
        assert match_facts(F("P(1)"), F("P(?x)"), theta).matched
        assert not match_facts(F("P(2)"), F("P(?x)"), theta).matched

    def test_input_bindings_not_mutated(self):
        theta = {}
        result = match_facts(F("P(1)"), F("P(?x)"), theta)
        assert theta == {}
        assert result.bindings == {"x": Argument.parse("1")}

    def test_independent_calls_do_not_share_bindings(self):
        first = match_facts(F("P(1)"), F("P(?x)"))
        second = match_facts(F("Q(2)"), F("Q(?y)"))
        assert "y" not in first.bindings
        assert "x" not in second.bindings


class TestSatisfy:
    """Test suite for satisfy()."""

    def test_shared_variable_must_agree(self):
        facts = [F("Dog(rex)"), F("Dog(fido)"), F("Hungry(fido)")]
        solutions = list(satisfy([F("Dog(?x)"), F("Hungry(?x)")], facts))
        assert solutions == [{"x": Argument.parse("fido")}]

    def test_no_solution(self):
        assert list(satisfy([F("Dog(?x)"), F("Cat(?x)")], [F("Dog(rex)")])) == []

    def test_no_patterns_trivially_satisfied(self):
        assert list(satisfy([], [])) == [{}]

    def test_repeated_bare_binders_do_not_join(self):
        facts = [F("A(1)"), F("B(2)")]
        assert list(satisfy([F("A(?)"), F("B(?)")], facts)) == [{}]
        assert list(satisfy([F("A(&)"), F("B(&)")], facts)) == [{}]

    def test_bare_binder_leaves_no_binding(self):
        result = match_facts(F("P(1,2)"), F("P(?,?)"))
        assert result.matched is True
        assert result.bindings == {}


class TestSubstitute:
    """Test suite for substitute()."""

    def test_replaces_bound_variables(self):
        theta = {"x": Argument.parse("rex")}
        assert substitute(F("Fed(?x,?y)"), theta) == F("Fed(rex,?y)")

    def test_leaves_recommendations(self):
        rec = Recommendation("@feed")
        assert substitute(rec, {"x": Argument.parse("1")}) is rec

    def test_rule(self):
        theta = {"x": Argument.parse("1")}
        assert substitute(Rule.parse("A(?x)=>B(?x)"), theta) == Rule.parse("A(1)=>B(1)")

    def test_keeps_confidence(self):
        fact = Fact.parse("P(?x)", 0.4)
        assert substitute(fact, {"x": Argument.parse("1")}).confidence == 0.4

    def test_follows_variable_chains(self):
        theta = {"y": Argument.parse("?x"), "x": Argument.parse("3")}
        assert substitute(F("P(?y)"), theta) == F("P(3)")
