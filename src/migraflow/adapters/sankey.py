"""Sankey projection: strict bipartite partitioning and a two-column layout.

Sankey layouts flow strictly left to right, so every surviving link must go
from a left-column node to a right-column node and no node may sit in both
columns. Nodes that are pure sources go left, pure targets go right, and
mixed nodes (both a source and a target somewhere) default to left. Any edge
that would then need a left node as its target is dropped.

This partitioning is lossy for cyclic graphs: with ``A -> B`` and ``B -> A``
both A and B are mixed, both go left, and neither edge survives. The number
of edges lost is reported in ``SankeyProjection.dropped_links`` and logged.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from migraflow.config import (
    SANKEY_HEIGHT,
    SANKEY_MARGIN,
    SANKEY_NODE_GAP,
    SANKEY_NODE_WIDTH,
    SANKEY_WIDTH,
)
from migraflow.kernel.graph import Edge, Node

logger = logging.getLogger(__name__)


class SankeyNode(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(extra="forbid")


class SankeyLink(BaseModel):
    source: str
    target: str
    value: float

    model_config = ConfigDict(extra="forbid")


class BipartitePartition(BaseModel):
    """Disjoint left/right node id sets."""
    left: Set[str] = Field(default_factory=set)
    right: Set[str] = Field(default_factory=set)

    model_config = ConfigDict(extra="forbid")

    @field_serializer("left", "right")
    def _sorted_ids(self, ids: Set[str]) -> List[str]:
        return sorted(ids)

    @model_validator(mode="after")
    def _check_disjoint(self) -> "BipartitePartition":
        overlap = self.left & self.right
        if overlap:
            raise ValueError(f"node(s) on both sides: {sorted(overlap)}")
        return self


class SankeyProjection(BaseModel):
    nodes: List[SankeyNode] = Field(default_factory=list)
    links: List[SankeyLink] = Field(default_factory=list)
    partition: BipartitePartition = Field(default_factory=BipartitePartition)
    dropped_links: int = 0  # input edges with no link in the projection

    model_config = ConfigDict(extra="forbid")


class SankeyLayoutConfig(BaseModel):
    """Canvas geometry for :func:`layout_sankey` (pixels)."""
    width: float = SANKEY_WIDTH
    height: float = SANKEY_HEIGHT
    margin: float = SANKEY_MARGIN
    node_width: float = SANKEY_NODE_WIDTH
    node_gap: float = SANKEY_NODE_GAP

    model_config = ConfigDict(extra="forbid")

    @field_validator("width", "height", "node_width")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("margin", "node_gap")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @model_validator(mode="after")
    def _fits_canvas(self) -> "SankeyLayoutConfig":
        if self.height - 2 * self.margin <= 0:
            raise ValueError("margins leave no vertical space")
        if self.width - 2 * self.margin - 2 * self.node_width < 0:
            raise ValueError("columns do not fit the canvas width")
        return self


class SankeyNodeBox(BaseModel):
    """A node rectangle: top-left corner plus size."""
    id: str
    name: str
    column: Literal["left", "right"]
    value: float  # max(outgoing, incoming) over surviving links
    x: float
    y: float
    width: float
    height: float

    model_config = ConfigDict(extra="forbid")


class SankeyLinkBand(BaseModel):
    """A link ribbon: band top and thickness at each end."""
    source: str
    target: str
    value: float
    source_y: float
    source_thickness: float
    target_y: float
    target_thickness: float

    model_config = ConfigDict(extra="forbid")


class SankeyLayout(BaseModel):
    width: float
    height: float
    nodes: List[SankeyNodeBox] = Field(default_factory=list)
    links: List[SankeyLinkBand] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


def partition_bipartite(
    nodes: Sequence[Node],
    edges: Iterable[Edge],
) -> Tuple[BipartitePartition, List[Edge]]:
    """Split touched nodes into left/right columns and keep the edges that fit.

    Self-loops and edges naming unknown nodes are discarded first. Of the
    rest, an edge survives iff its source is left-only and its target is
    right-only.

    Returns:
        (partition, kept edges in input order)
    """
    known = {node.id for node in nodes}
    candidates = [
        e for e in edges
        if not e.is_self_loop and e.source in known and e.target in known
    ]

    sources = {e.source for e in candidates}
    targets = {e.target for e in candidates}
    # pure sources and mixed nodes go left; pure targets go right
    left = set(sources)
    right = targets - sources

    kept = [
        e for e in candidates
        if e.source in left and e.source not in right
        and e.target in right and e.target not in left
    ]
    return BipartitePartition(left=left, right=right), kept


def to_sankey(nodes: Sequence[Node], edges: Sequence[Edge]) -> SankeyProjection:
    """Project a node/edge set onto a strict two-column Sankey structure.

    Nodes without a surviving link are left out; node order follows the
    input. Empty input gives an empty projection.
    """
    partition, kept = partition_bipartite(nodes, edges)

    linked: Set[str] = set()
    for edge in kept:
        linked.add(edge.source)
        linked.add(edge.target)

    projection = SankeyProjection(
        nodes=[
            SankeyNode(id=node.id, name=node.display_name)
            for node in nodes if node.id in linked
        ],
        links=[SankeyLink(source=e.source, target=e.target, value=e.value) for e in kept],
        partition=partition,
        dropped_links=len(edges) - len(kept),
    )
    if projection.dropped_links:
        logger.info(
            "sankey projection dropped %d of %d edges that cannot flow left to right",
            projection.dropped_links, len(edges),
        )
    return projection


def _stack_column(
    column: Literal["left", "right"],
    members: List[SankeyNode],
    magnitude: Dict[str, float],
    x: float,
    cfg: SankeyLayoutConfig,
) -> Tuple[List[SankeyNodeBox], float]:
    """Stack one column top-down; returns boxes and the pixels-per-unit scale."""
    if not members:
        return [], 0.0
    available = max(0.0, cfg.height - 2 * cfg.margin - cfg.node_gap * (len(members) - 1))
    total = sum(magnitude[m.id] for m in members)
    scale = available / total if total > 0 else 0.0

    boxes: List[SankeyNodeBox] = []
    y = cfg.margin
    for member in members:
        height = magnitude[member.id] * scale
        boxes.append(SankeyNodeBox(
            id=member.id,
            name=member.name,
            column=column,
            value=magnitude[member.id],
            x=x,
            y=y,
            width=cfg.node_width,
            height=height,
        ))
        y += height + cfg.node_gap
    return boxes, scale


def layout_sankey(
    projection: SankeyProjection,
    config: Optional[SankeyLayoutConfig] = None,
) -> SankeyLayout:
    """Compute node boxes and link bands for a two-column Sankey.

    Each column shares ``height - 2*margin - gap*(n-1)`` among its nodes in
    proportion to ``max(outgoing, incoming)``. Boxes never overlap and a
    column with a single node fills the whole available height. Link bands
    are stacked inside their nodes in link order.
    """
    if config is None:
        config = SankeyLayoutConfig()
    outgoing: Dict[str, float] = defaultdict(float)
    incoming: Dict[str, float] = defaultdict(float)
    for link in projection.links:
        outgoing[link.source] += link.value
        incoming[link.target] += link.value
    magnitude = {
        node.id: max(outgoing[node.id], incoming[node.id]) for node in projection.nodes
    }

    left_members = [n for n in projection.nodes if n.id in projection.partition.left]
    right_members = [n for n in projection.nodes if n.id in projection.partition.right]

    left_x = config.margin
    right_x = config.width - config.margin - config.node_width
    left_boxes, left_scale = _stack_column("left", left_members, magnitude, left_x, config)
    right_boxes, right_scale = _stack_column("right", right_members, magnitude, right_x, config)

    # next free y inside each node for stacking its link bands
    cursor = {box.id: box.y for box in [*left_boxes, *right_boxes]}
    bands: List[SankeyLinkBand] = []
    for link in projection.links:
        source_thickness = link.value * left_scale
        target_thickness = link.value * right_scale
        bands.append(SankeyLinkBand(
            source=link.source,
            target=link.target,
            value=link.value,
            source_y=cursor[link.source],
            source_thickness=source_thickness,
            target_y=cursor[link.target],
            target_thickness=target_thickness,
        ))
        cursor[link.source] += source_thickness
        cursor[link.target] += target_thickness

    return SankeyLayout(
        width=config.width,
        height=config.height,
        nodes=[*left_boxes, *right_boxes],
        links=bands,
    )
