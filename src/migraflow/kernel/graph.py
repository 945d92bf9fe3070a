"""Canonical migration graph models and validation."""

from __future__ import annotations

import math
import unicodedata
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FormatError(ValueError):
    """Raised when input text is structurally unusable (headers, line count, XML)."""


class GraphValidationError(ValueError):
    """Raised when a MigrationGraph violates its structural invariants."""


# bool first so smart-union keeps True/False from collapsing into ints
AttributeValue = Union[bool, int, float, str, List[Union[int, float, str]]]

# Edge fields addressable by name alongside edge attributes
EDGE_CORE_FIELDS = ("source", "target", "value", "moe")
NODE_CORE_FIELDS = ("id", "label")


class Node(BaseModel):
    """A place in the flow graph (state, city, region)."""
    id: str
    label: str
    attributes: Dict[str, AttributeValue] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @property
    def categories(self) -> Dict[str, str]:
        """String-valued attributes (region, division, ...)."""
        return {k: v for k, v in self.attributes.items() if isinstance(v, str)}

    @property
    def numerics(self) -> Dict[str, float]:
        """Number-valued attributes (population, economic_index, ...)."""
        return {
            k: v for k, v in self.attributes.items()
            if isinstance(v, (int, float)) and not isinstance(v, bool)
        }

    @property
    def display_name(self) -> str:
        return self.label or self.id


class Edge(BaseModel):
    """A directed weighted flow between two node ids."""
    source: str
    target: str
    value: float
    moe: Optional[float] = None  # margin of error, only set when > 0
    attributes: Dict[str, AttributeValue] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def get(self, key: str) -> Optional[AttributeValue]:
        """Look up a core field or an extra attribute by name."""
        if key in EDGE_CORE_FIELDS:
            return getattr(self, key)
        return self.attributes.get(key)


class MigrationGraph(BaseModel):
    """Nodes (label-sorted) plus directed edges in file order."""
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


def label_sort_key(label: str) -> tuple[str, str]:
    """Collation key approximating a locale-aware compare.

    Accents are stripped and case folded for the primary key; the raw label
    breaks ties so the order is total and reproducible on every platform.
    """
    decomposed = unicodedata.normalize("NFKD", label)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), label)


def sort_nodes_by_label(nodes: List[Node]) -> List[Node]:
    return sorted(nodes, key=lambda n: label_sort_key(n.label))


def validate_migration_graph(graph: MigrationGraph) -> None:
    """Check MigrationGraph invariants (raises GraphValidationError).

    - node ids unique and non-empty
    - every edge endpoint references an existing node
    - no self-loops
    - value finite and > 0; moe, when present, finite and > 0
    """
    node_ids: set[str] = set()
    for node in graph.nodes:
        if not node.id:
            raise GraphValidationError(f"empty node id for label {node.label!r}")
        if node.id in node_ids:
            raise GraphValidationError(f"duplicate node id: {node.id}")
        node_ids.add(node.id)

    for index, edge in enumerate(graph.edges):
        where = f"edge {index} ({edge.source} -> {edge.target})"
        if edge.source not in node_ids or edge.target not in node_ids:
            raise GraphValidationError(f"{where} references missing node")
        if edge.is_self_loop:
            raise GraphValidationError(f"{where} is a self-loop")
        if not (math.isfinite(edge.value) and edge.value > 0):
            raise GraphValidationError(f"{where} has non-positive value {edge.value}")
        if edge.moe is not None and not (math.isfinite(edge.moe) and edge.moe > 0):
            raise GraphValidationError(f"{where} has invalid moe {edge.moe}")
