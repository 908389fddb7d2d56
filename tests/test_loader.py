"""
Tests for knowledge node data files.
"""

import logging

import pytest

from prometheus_reasoning import Fact, KnowledgeNodeNetwork, ParseError, Recommendation
from prometheus_reasoning.knn import load_knowledge_nodes, read_records

FLAT = """\
# animals
Fur(yes);2;Mammal(yes);0.9;Bird(yes);0.1

Feathers(yes);1;Bird(yes);0.95
@pet;1
"""

YAML = """\
- tag: Fur(yes)
  threshold: 2
  outputs:
    Mammal(yes): 0.9
    "@pet": 0.4
- tag: "@pet"
  threshold: 1
"""


class TestReadRecords:
    """Test suite for read_records()."""

    def test_skips_blank_and_comment_lines(self):
        records = list(read_records(FLAT.splitlines()))
        assert [number for number, _ in records] == [2, 4, 5]
        assert records[1][1] == ["Feathers(yes)", "1", "Bird(yes)", "0.95"]

    def test_custom_delimiter(self):
        assert list(read_records(["A(1)|1"], delimiter="|")) == [(1, ["A(1)", "1"])]


class TestLoadFlatFile:
    """Test suite for flat-file loading."""

    def test_loads_nodes(self, tmp_path, clock):
        path = tmp_path / "animals.txt"
        path.write_text(FLAT)

        nodes = load_knowledge_nodes(path, clock=clock)

        assert [node.input_tag for node in nodes] == [
            Fact.parse("Fur(yes)"),
            Fact.parse("Feathers(yes)"),
            Recommendation("@pet"),
        ]
        assert nodes[0].threshold == 2
        assert isinstance(nodes[0].threshold, int)
        assert nodes[0].outputs == {Fact.parse("Mammal(yes)"): 0.9, Fact.parse("Bird(yes)"): 0.1}
        assert nodes[0].created_at == clock.now

    def test_strict_error_names_line(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("Fur(yes);2\nFeathers(yes);many\n")

        with pytest.raises(ParseError, match=r"bad\.txt:2"):
            load_knowledge_nodes(path)

    def test_lenient_skips_bad_records(self, tmp_path, caplog):
        path = tmp_path / "bad.txt"
        path.write_text("Fur(yes);2\nFeathers(yes);many\n@pet;1\n")

        with caplog.at_level(logging.WARNING):
            nodes = load_knowledge_nodes(path, strict=False)

        assert len(nodes) == 2
        assert "Skipping malformed record" in caplog.text


class TestLoadYaml:
    """Test suite for YAML loading."""

    def test_loads_nodes(self, tmp_path):
        path = tmp_path / "animals.yaml"
        path.write_text(YAML)

        nodes = load_knowledge_nodes(path)

        assert len(nodes) == 2
        assert nodes[0].outputs == {Fact.parse("Mammal(yes)"): 0.9, Recommendation("@pet"): 0.4}
        assert nodes[1].input_tag == Recommendation("@pet")

    def test_entry_without_threshold(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("- tag: Fur(yes)\n")

        with pytest.raises(ParseError):
            load_knowledge_nodes(path)

    def test_outputs_must_be_mapping(self, tmp_path, caplog):
        path = tmp_path / "bad.yaml"
        path.write_text(
            "- tag: A(1)\n  threshold: 1\n  outputs: [B(1)]\n"
            "- tag: C(1)\n  threshold: 1\n"
        )

        with pytest.raises(ParseError, match=r"bad\.yaml:1"):
            load_knowledge_nodes(path)

        with caplog.at_level(logging.WARNING):
            nodes = load_knowledge_nodes(path, strict=False)
        assert [node.input_tag for node in nodes] == [Fact.parse("C(1)")]
        assert "Skipping malformed record" in caplog.text

    def test_top_level_must_be_list(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("tag: Fur(yes)\n")

        with pytest.raises(ParseError):
            load_knowledge_nodes(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_knowledge_nodes(path) == []


class TestLoadData:
    """Test suite for KnowledgeNodeNetwork.load_data()."""

    def test_load_then_search(self, tmp_path, settings, clock):
        path = tmp_path / "animals.txt"
        path.write_text(FLAT)
        knn = KnowledgeNodeNetwork(settings=settings, clock=clock)

        assert knn.load_data(path) == 3

        knn.add_active_tag(Fact.parse("Feathers(yes)"))
        assert knn.search() == {Fact.parse("Bird(yes)")}

    def test_duplicates_not_counted(self, tmp_path, settings):
        path = tmp_path / "animals.txt"
        path.write_text(FLAT)
        knn = KnowledgeNodeNetwork(settings=settings)

        knn.load_data(path)
        assert knn.load_data(path) == 0
