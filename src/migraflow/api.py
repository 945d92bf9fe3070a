"""Public API for migraflow.

High-level functions that take raw dataset text and return complete,
structured results. Callers should use these instead of importing from
``migraflow._internal``.
"""

import logging
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from migraflow.config import DEFAULT_TIMESTAMP
from migraflow.kernel.graph import MigrationGraph
from migraflow.kernel.temporal import Snapshot, TemporalGraph, TimeRange, materialize_all, snapshot_at, static_entities
from migraflow.adapters.chord import ChordProjection, to_chord
from migraflow.adapters.edges import break_cycles as break_edge_cycles
from migraflow.adapters.sankey import SankeyLayout, SankeyProjection, to_sankey
from migraflow._internal.ingest.gexf import parse_gexf
from migraflow._internal.ingest.tabular import detect_schema, parse_migration_csv
from migraflow._internal.ingest.two_file import parse_two_file_csv
from migraflow._internal.reporting.metadata import DatasetMetadata, describe_properties

logger = logging.getLogger(__name__)

DatasetKind = Literal["csv", "gexf"]
ProjectionKind = Literal["sankey", "chord"]


class DatasetRecord(BaseModel):
    """A parsed dataset ready to hand to storage: snapshots plus their range."""
    name: str
    kind: DatasetKind
    time_range: TimeRange
    snapshots: List[Snapshot] = Field(default_factory=list)
    metadata: DatasetMetadata = Field(default_factory=DatasetMetadata)

    model_config = ConfigDict(extra="forbid")


class DatasetSummary(BaseModel):
    """Counts and property overview reported by ``migraflow inspect``."""
    kind: DatasetKind
    schema_name: str  # tidy, legacy or gexf
    nodes: int
    edges: int
    time_range: TimeRange
    metadata: DatasetMetadata

    model_config = ConfigDict(extra="forbid")


def load_csv(text: str) -> MigrationGraph:
    """Parse a tidy or legacy wide migration CSV (schema auto-detected)."""
    return parse_migration_csv(text)


def load_two_file_csv(
    nodes_text: str,
    edges_text: str,
    *,
    id_field: str,
    source_field: str,
    target_field: str,
    value_field: str,
    label_field: Optional[str] = None,
) -> MigrationGraph:
    """Parse a nodes CSV plus an edges CSV with caller-named columns."""
    return parse_two_file_csv(
        nodes_text,
        edges_text,
        id_field=id_field,
        source_field=source_field,
        target_field=target_field,
        value_field=value_field,
        label_field=label_field,
    )


def load_gexf(text: str) -> TemporalGraph:
    return parse_gexf(text)


def sniff_kind(text: str) -> DatasetKind:
    """``gexf`` when the text starts with ``<`` (after whitespace/BOM), else ``csv``."""
    return "gexf" if text.lstrip("\ufeff \t\r\n").startswith("<") else "csv"


def shared_period(graph: MigrationGraph) -> Optional[int]:
    """The integer ``period`` every edge carries, or None if absent or mixed."""
    periods = {edge.attributes.get("period") for edge in graph.edges}
    if len(periods) != 1:
        return None
    period = periods.pop()
    if isinstance(period, int) and not isinstance(period, bool):
        return period
    return None


def csv_timestamp(graph: MigrationGraph) -> int:
    shared = shared_period(graph)
    return DEFAULT_TIMESTAMP if shared is None else shared


def build_dataset(
    text: str,
    *,
    kind: Literal["auto", "csv", "gexf"] = "auto",
    name: str = "dataset",
    timestamp: Optional[int] = None,
    max_years: Optional[int] = None,
) -> DatasetRecord:
    """Parse text into a DatasetRecord.

    CSV input becomes a single snapshot. Its timestamp is ``timestamp`` when
    given, else the ``period`` shared by every edge, else
    ``config.DEFAULT_TIMESTAMP``. GEXF input becomes one snapshot per year of
    its time range.

    Args:
        text: Raw CSV or GEXF text
        kind: ``csv``, ``gexf`` or ``auto`` (sniffed from the first character)
        name: Display name stored on the record
        timestamp: Snapshot timestamp for CSV input
        max_years: Refuse GEXF ranges spanning more years than this

    Raises:
        FormatError: Structurally unusable input
        ValueError: Unknown ``kind``, or GEXF range larger than ``max_years``
    """
    if kind == "auto":
        kind = sniff_kind(text)

    if kind == "csv":
        graph = parse_migration_csv(text)
        if timestamp is None:
            timestamp = csv_timestamp(graph)
        snapshots = [Snapshot(timestamp=timestamp, nodes=graph.nodes, edges=graph.edges)]
        time_range = TimeRange(start=timestamp, end=timestamp)
    elif kind == "gexf":
        temporal = parse_gexf(text)
        time_range = temporal.time_range
        check_year_span(time_range, max_years)
        snapshots = materialize_all(temporal)
    else:
        raise ValueError(f"Unknown dataset kind: {kind!r} (expected auto, csv or gexf)")

    metadata = describe_properties(
        [node for snapshot in snapshots for node in snapshot.nodes],
        [edge for snapshot in snapshots for edge in snapshot.edges],
    )
    logger.debug(
        "built %s dataset %r: %d snapshot(s) over %d-%d",
        kind, name, len(snapshots), time_range.start, time_range.end,
    )
    return DatasetRecord(
        name=name,
        kind=kind,
        time_range=time_range,
        snapshots=snapshots,
        metadata=metadata,
    )


def check_year_span(time_range: TimeRange, max_years: Optional[int]) -> None:
    """Raise ValueError when ``time_range`` covers more than ``max_years`` years."""
    if max_years is None:
        return
    span = len(time_range.years())
    if span > max_years:
        raise ValueError(
            f"time range {time_range.start}-{time_range.end} spans {span} years, "
            f"more than the limit of {max_years}"
        )


def inspect_dataset(text: str, *, kind: Literal["auto", "csv", "gexf"] = "auto") -> DatasetSummary:
    """Parse text and summarize it without materializing snapshots."""
    if kind == "auto":
        kind = sniff_kind(text)
    if kind == "csv":
        graph = parse_migration_csv(text)
        timestamp = csv_timestamp(graph)
        return DatasetSummary(
            kind="csv",
            schema_name=detect_schema(text),
            nodes=len(graph.nodes),
            edges=len(graph.edges),
            time_range=TimeRange(start=timestamp, end=timestamp),
            metadata=describe_properties(graph.nodes, graph.edges),
        )
    if kind == "gexf":
        temporal = parse_gexf(text)
        all_nodes, all_edges = static_entities(temporal)
        return DatasetSummary(
            kind="gexf",
            schema_name="gexf",
            nodes=len(temporal.nodes),
            edges=len(temporal.edges),
            time_range=temporal.time_range,
            metadata=describe_properties(all_nodes, all_edges),
        )
    raise ValueError(f"Unknown dataset kind: {kind!r} (expected auto, csv or gexf)")


def load_snapshot(
    text: str,
    *,
    year: Optional[int] = None,
    kind: Literal["auto", "csv", "gexf"] = "auto",
) -> Snapshot:
    """One snapshot of a dataset.

    CSV input has a single snapshot; ``year`` only overrides its timestamp.
    GEXF input is materialized at ``year``, defaulting to the first year of
    its time range.
    """
    if kind == "auto":
        kind = sniff_kind(text)
    if kind == "csv":
        graph = parse_migration_csv(text)
        timestamp = year if year is not None else csv_timestamp(graph)
        return Snapshot(timestamp=timestamp, nodes=graph.nodes, edges=graph.edges)
    if kind == "gexf":
        temporal = parse_gexf(text)
        return snapshot_at(temporal, temporal.time_range.start if year is None else year)
    raise ValueError(f"Unknown dataset kind: {kind!r} (expected auto, csv or gexf)")


def project(
    snapshot: Union[Snapshot, MigrationGraph],
    kind: ProjectionKind,
    *,
    break_cycles: bool = False,
) -> Union[SankeyProjection, ChordProjection]:
    """Project a snapshot (or graph) for a Sankey or Chord view.

    With ``break_cycles`` only one direction per node pair is kept before
    projecting.

    Raises:
        ValueError: Unknown projection kind
    """
    edges = snapshot.edges
    if break_cycles:
        edges = break_edge_cycles(edges)
    if kind == "sankey":
        return to_sankey(snapshot.nodes, edges)
    if kind == "chord":
        return to_chord(snapshot.nodes, edges)
    raise ValueError(f"Unknown projection kind: {kind!r} (expected sankey or chord)")


def json_schemas() -> Dict[str, Any]:
    """JSON schemas of the public records, keyed by model name."""
    models = [
        MigrationGraph,
        TemporalGraph,
        Snapshot,
        SankeyProjection,
        SankeyLayout,
        ChordProjection,
        DatasetMetadata,
        DatasetRecord,
    ]
    return {model.__name__: model.model_json_schema() for model in models}
