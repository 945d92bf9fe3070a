"""Temporal graph models, spell semantics and snapshot materialization."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .graph import AttributeValue, Edge, Node


class AttributeType(str, Enum):
    """GEXF attribute type tags the parser coerces; anything else is a string."""
    INTEGER = "integer"
    DOUBLE = "double"
    FLOAT = "float"
    BOOLEAN = "boolean"
    STRING = "string"

    @classmethod
    def from_tag(cls, tag: str) -> "AttributeType":
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return cls.STRING


class AttributeDefinition(BaseModel):
    """One ``<attribute id title type>`` declaration."""
    id: str
    title: str
    type: str  # declared tag, kept verbatim

    model_config = ConfigDict(extra="forbid")

    @property
    def kind(self) -> AttributeType:
        return AttributeType.from_tag(self.type)


class Spell(BaseModel):
    """Closed interval [start, end] during which an entity is active."""
    start: int = 0
    end: int = 0

    model_config = ConfigDict(extra="forbid", frozen=True)

    def contains(self, timestamp: int) -> bool:
        return self.start <= timestamp <= self.end


class TimeRange(BaseModel):
    start: int = 0
    end: int = 0

    model_config = ConfigDict(extra="forbid", frozen=True)

    def years(self) -> range:
        """Every integer timestamp in the range, both ends included."""
        return range(self.start, self.end + 1)


class TemporalNode(BaseModel):
    id: str
    label: str
    attributes: Dict[str, AttributeValue] = Field(default_factory=dict)
    spells: List[Spell] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class TemporalEdge(BaseModel):
    id: str
    source: str
    target: str
    weight: float = 1.0
    attributes: Dict[str, AttributeValue] = Field(default_factory=dict)
    spells: List[Spell] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class TemporalGraph(BaseModel):
    """Parsed GEXF graph: entities carry their validity spells."""
    nodes: List[TemporalNode] = Field(default_factory=list)
    edges: List[TemporalEdge] = Field(default_factory=list)
    node_attributes: Dict[str, AttributeDefinition] = Field(default_factory=dict)
    edge_attributes: Dict[str, AttributeDefinition] = Field(default_factory=dict)
    time_range: TimeRange = Field(default_factory=TimeRange)

    model_config = ConfigDict(extra="forbid")


class Snapshot(BaseModel):
    """Nodes and edges active at one integer timestamp."""
    timestamp: int
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


def is_active(spells: Iterable[Spell], timestamp: int) -> bool:
    """True if any spell contains the timestamp. No spells means never active."""
    return any(spell.contains(timestamp) for spell in spells)


def compute_time_range(
    nodes: Iterable[TemporalNode],
    edges: Iterable[TemporalEdge],
) -> TimeRange:
    """Min start / max end over every spell; ``{0, 0}`` when there are none."""
    starts: List[int] = []
    ends: List[int] = []
    for entity in [*nodes, *edges]:
        for spell in entity.spells:
            starts.append(spell.start)
            ends.append(spell.end)
    if not starts:
        return TimeRange(start=0, end=0)
    return TimeRange(start=min(starts), end=max(ends))


def _to_node(node: TemporalNode) -> Node:
    return Node(id=node.id, label=node.label, attributes=dict(node.attributes))


def _to_edge(edge: TemporalEdge) -> Edge:
    return Edge(
        source=edge.source,
        target=edge.target,
        value=edge.weight,
        attributes=dict(edge.attributes),
    )


def static_entities(graph: TemporalGraph) -> Tuple[List[Node], List[Edge]]:
    """Every node and edge as plain Node/Edge records, ignoring spells."""
    return [_to_node(n) for n in graph.nodes], [_to_edge(e) for e in graph.edges]


def snapshot_at(graph: TemporalGraph, timestamp: int) -> Snapshot:
    """Materialize the graph at one timestamp.

    Node activity and edge activity are evaluated independently: an edge
    whose spell covers the timestamp is included even when one of its
    endpoints is inactive that year. This mirrors GEXF spell semantics.
    """
    return Snapshot(
        timestamp=timestamp,
        nodes=[_to_node(n) for n in graph.nodes if is_active(n.spells, timestamp)],
        edges=[_to_edge(e) for e in graph.edges if is_active(e.spells, timestamp)],
    )


def materialize_all(graph: TemporalGraph) -> List[Snapshot]:
    """One snapshot per integer in ``graph.time_range``, inclusive.

    Cost is O(years x (nodes + edges)). The range is taken as declared;
    callers handling untrusted files must bound ``time_range`` themselves
    before calling (the CLI does so with ``--max-years``).
    """
    return [snapshot_at(graph, year) for year in graph.time_range.years()]
