"""
Tests for teaching sentences.
"""

import pytest

from prometheus_reasoning import Fact, ParseError, Recommendation, Rule, parse_sentence


class TestParseSentence:
    """Test suite for parse_sentence()."""

    def test_fact(self):
        assert parse_sentence("Dog(rex)") == Fact.parse("Dog(rex)")

    def test_rule_string(self):
        assert parse_sentence("A(?x)=>B(?x)") == Rule.parse("A(?x)=>B(?x)")

    def test_if_then(self):
        rule = parse_sentence("if Dog(?x) and Hungry(?x) then @feed and Fed(?x)")
        assert rule == Rule.parse("Dog(?x),Hungry(?x)=>@feed,Fed(?x)")

    def test_keywords_case_insensitive(self):
        assert parse_sentence("IF A(1) THEN B(1)") == Rule.parse("A(1)=>B(1)")

    @pytest.mark.parametrize(
        "sentence",
        ["", "   ", "dogs are animals", "if A(1) then", "if A(1) then B(1)=>C(1)"],
    )
    def test_malformed(self, sentence):
        with pytest.raises(ParseError):
            parse_sentence(sentence)


class TestTeach:
    """Test suite for ExpertSystem.teach()."""

    def test_teach_fact(self, es):
        es.teach("Dog(rex)")
        assert es.get_facts() == {Fact.parse("Dog(rex)")}

    def test_teach_rule(self, es):
        es.teach("if Dog(?x) then Animal(?x)")
        assert es.get_ready_rules() == {Rule.parse("Dog(?x)=>Animal(?x)")}

    def test_teach_recommendation(self, es):
        es.teach("@walk")
        assert es.get_recommendations() == {Recommendation("@walk")}

    def test_failed_teach_adds_nothing(self, es):
        with pytest.raises(ParseError):
            es.teach("if Dog(?x then Animal(?x)")
        assert not es.get_facts()
        assert not es.get_ready_rules()

    def test_taught_knowledge_is_used(self, es):
        es.teach("Dog(rex)")
        es.teach("Hungry(rex)")
        es.teach("if Dog(?x) and Hungry(?x) then @feed")
        assert es.think() == {Recommendation("@feed")}
