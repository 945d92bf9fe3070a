"""Tests for GEXF parsing, spells and snapshot materialization."""

import pytest

from migraflow.kernel.graph import FormatError
from migraflow.kernel.temporal import (
    AttributeType,
    Spell,
    TemporalGraph,
    TemporalNode,
    TimeRange,
    compute_time_range,
    is_active,
    materialize_all,
    snapshot_at,
)
from migraflow._internal.ingest.gexf import coerce_attribute, parse_gexf, parse_leading_int


def test_parse_nodes_and_typed_attributes(gexf_text):
    graph = parse_gexf(gexf_text)

    assert [n.id for n in graph.nodes] == ["NYC", "LA", "CHI"]
    nyc, la, chi = graph.nodes
    assert nyc.label == "New York City"
    assert nyc.attributes == {"region": "Northeast", "population": 8336817, "coastal": True}
    # unparsable integers keep the raw string
    assert la.attributes == {"region": "West", "population": "unknown"}
    # label defaults to id
    assert chi.label == "CHI"


def test_attribute_definitions_need_id_title_type(gexf_text):
    graph = parse_gexf(gexf_text)
    assert sorted(graph.node_attributes) == ["0", "1", "2"]
    assert graph.node_attributes["1"].kind is AttributeType.INTEGER
    assert sorted(graph.edge_attributes) == ["0", "1"]


def test_parse_edges(gexf_text):
    """Missing ids are synthesized, bad weights default to 1, endpoint-less edges skipped."""
    graph = parse_gexf(gexf_text)

    assert [(e.id, e.source, e.target, e.weight) for e in graph.edges] == [
        ("flow-0", "NYC", "LA", 12500.0),
        ("e1", "LA", "NYC", 1.0),
        ("flow-2", "CHI", "NYC", 15200.0),
    ]
    assert graph.edges[0].attributes == {"migration_type": "economic", "economic_factor": 0.15}
    assert graph.edges[1].spells == [Spell(start=2020, end=2021)]


def test_time_range(gexf_text):
    assert parse_gexf(gexf_text).time_range == TimeRange(start=2020, end=2022)


def test_namespace_free_document_parses_the_same(gexf_text):
    plain = gexf_text.replace(' xmlns="http://gexf.net/1.3"', "")
    assert parse_gexf(plain) == parse_gexf(gexf_text)


def test_gexf_12_namespace(gexf_text):
    older = gexf_text.replace("http://gexf.net/1.3", "http://www.gexf.net/1.2draft")
    graph = parse_gexf(older)
    assert len(graph.nodes) == 3


def test_malformed_xml_is_format_error():
    with pytest.raises(FormatError, match="GEXF parsing error"):
        parse_gexf("<gexf><graph></gexf>")


def test_missing_graph_is_format_error():
    with pytest.raises(FormatError, match="No graph element"):
        parse_gexf('<gexf version="1.3"><meta/></gexf>')


def test_no_spells_gives_zero_range():
    graph = parse_gexf(
        '<gexf><graph><nodes><node id="a"/><node id="b"/></nodes>'
        '<edges><edge source="a" target="b"/></edges></graph></gexf>'
    )
    assert graph.time_range == TimeRange(start=0, end=0)
    assert graph.edges[0].weight == 1.0
    assert graph.edges[0].id == "e0"


def test_spell_bounds_default_to_zero():
    graph = parse_gexf(
        '<gexf><graph><nodes><node id="a"><spells>'
        '<spell end="2001"/><spell start="x" end="y"/>'
        '</spells></node></nodes></graph></gexf>'
    )
    assert graph.nodes[0].spells == [Spell(start=0, end=2001), Spell(start=0, end=0)]


def test_coerce_attribute():
    assert coerce_attribute("42", AttributeType.INTEGER) == 42
    assert coerce_attribute("42.9", AttributeType.INTEGER) == 42
    assert coerce_attribute("3.5", AttributeType.DOUBLE) == 3.5
    assert coerce_attribute("1e3", AttributeType.FLOAT) == 1000.0
    assert coerce_attribute("n/a", AttributeType.FLOAT) == "n/a"
    assert coerce_attribute("True", AttributeType.BOOLEAN) is True
    assert coerce_attribute("yes", AttributeType.BOOLEAN) is False
    assert coerce_attribute("x", AttributeType.from_tag("liststring")) == "x"


def test_parse_leading_int():
    assert parse_leading_int("2020-01-01") == 2020
    assert parse_leading_int(" -5") == -5
    assert parse_leading_int("abc") is None
    assert parse_leading_int(None) is None


# Snapshots

def test_materialize_all_one_snapshot_per_year(gexf_text):
    snapshots = materialize_all(parse_gexf(gexf_text))
    assert [s.timestamp for s in snapshots] == [2020, 2021, 2022]


def test_snapshot_node_and_edge_activity_are_independent(gexf_text):
    """CHI -> NYC is active in 2020 although CHI itself is not."""
    snap = snapshot_at(parse_gexf(gexf_text), 2020)

    assert [n.id for n in snap.nodes] == ["NYC", "LA"]
    assert [(e.source, e.target) for e in snap.edges] == [
        ("NYC", "LA"), ("LA", "NYC"), ("CHI", "NYC"),
    ]


def test_snapshot_converts_weight_and_attributes(gexf_text):
    snapshots = materialize_all(parse_gexf(gexf_text))

    first_edge = snapshots[0].edges[0]
    assert first_edge.value == 12500.0
    assert first_edge.attributes["migration_type"] == "economic"
    assert [len(s.edges) for s in snapshots] == [3, 2, 1]
    assert [len(s.nodes) for s in snapshots] == [2, 3, 3]


def test_snapshot_outside_range_is_empty(gexf_text):
    snap = snapshot_at(parse_gexf(gexf_text), 1999)
    assert snap.nodes == [] and snap.edges == []


def test_spell_semantics():
    assert is_active([Spell(start=2000, end=2000)], 2000)
    assert not is_active([], 2000)
    assert is_active([Spell(start=1990, end=1991), Spell(start=1995, end=1999)], 1996)
    assert compute_time_range([], []) == TimeRange(start=0, end=0)


def test_materialize_all_takes_declared_range():
    """Huge ranges are not rejected here; bounding them is the caller's job."""
    graph = TemporalGraph(
        nodes=[TemporalNode(id="a", label="a", spells=[Spell(start=1, end=1000)])],
        time_range=TimeRange(start=1, end=1000),
    )
    assert len(materialize_all(graph)) == 1000


def test_unwrapped_attvalues_and_spells():
    """attvalue and spell elements placed directly under a node or edge are read."""
    text = """\
<gexf xmlns="http://gexf.net/1.3" version="1.3">
  <graph mode="dynamic" timeformat="integer">
    <attributes class="node"><attribute id="0" title="region" type="string"/></attributes>
    <attributes class="edge"><attribute id="0" title="count" type="integer"/></attributes>
    <nodes>
      <node id="a" label="A"><attvalue for="0" value="West"/><spell start="2020" end="2022"/></node>
      <node id="b" label="B"><spell start="2021" end="2022"/></node>
    </nodes>
    <edges>
      <edge id="ab" source="a" target="b" weight="3">
        <attvalue for="0" value="7"/>
        <spell start="2021" end="2021"/>
      </edge>
    </edges>
  </graph>
</gexf>
"""
    graph = parse_gexf(text)

    assert graph.nodes[0].attributes == {"region": "West"}
    assert graph.nodes[0].spells == [Spell(start=2020, end=2022)]
    assert graph.edges[0].attributes == {"count": 7}
    assert graph.edges[0].spells == [Spell(start=2021, end=2021)]
    assert graph.time_range == TimeRange(start=2020, end=2022)
    assert [len(s.edges) for s in materialize_all(graph)] == [0, 1, 0]


def test_edge_without_id_is_kept_with_synthesized_id(gexf_text):
    edges = parse_gexf(gexf_text).edges
    assert [e.id for e in edges] == ["flow-0", "e1", "flow-2"]
