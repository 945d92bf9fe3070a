"""Chord projection: a square flow matrix aligned with the node list."""

from typing import Dict, List, Sequence

from pydantic import BaseModel, ConfigDict, Field

from migraflow.kernel.graph import Edge, Node


class ChordProjection(BaseModel):
    """``matrix[i][j]`` is the total flow from ``nodes[i]`` to ``nodes[j]``."""
    matrix: List[List[float]] = Field(default_factory=list)
    labels: List[str] = Field(default_factory=list)
    nodes: List[Node] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


def to_chord(nodes: Sequence[Node], edges: Sequence[Edge]) -> ChordProjection:
    """Accumulate edge values into an n x n matrix.

    Parallel edges add up. Self-loops land on the diagonal and both
    directions of a pair are kept. Edges naming an unknown node are skipped.
    """
    index: Dict[str, int] = {}
    for position, node in enumerate(nodes):
        index.setdefault(node.id, position)

    size = len(nodes)
    matrix = [[0.0] * size for _ in range(size)]
    for edge in edges:
        row = index.get(edge.source)
        col = index.get(edge.target)
        if row is None or col is None:
            continue
        matrix[row][col] += edge.value

    return ChordProjection(
        matrix=matrix,
        labels=[node.display_name for node in nodes],
        nodes=[node.model_copy(deep=True) for node in nodes],
    )
