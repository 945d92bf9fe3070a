"""Serialize a MigrationGraph to the tidy CSV schema."""

import csv
import io
from typing import List, Optional, Union

from migraflow.kernel.graph import AttributeValue, MigrationGraph
from migraflow._internal.ingest.tabular import TIDY_HEADERS


def format_number(value: Optional[float]) -> str:
    """``12500.0`` -> ``"12500"``; ``None`` -> ``""``."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_attribute(value: Optional[AttributeValue]) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, list):
        return ";".join(format_attribute(item) for item in value)
    return value


def extra_columns(graph: MigrationGraph) -> List[str]:
    """Edge attribute names written after ``moe``, in first-seen order."""
    reserved = set(TIDY_HEADERS)
    names: List[str] = []
    for edge in graph.edges:
        for key in edge.attributes:
            if key.strip().lower() not in reserved and key not in names:
                names.append(key)
    return names


def write_tidy_csv(graph: MigrationGraph, period: Optional[Union[int, str]] = None) -> str:
    """Render one tidy row per edge, in edge order.

    The period column comes from the edge's ``period`` attribute when it has
    one, else from ``period``, else it is left blank. Every other edge
    attribute gets its own column after ``moe``.

    Re-parsing the output with ``parse_migration_csv`` yields the same edges
    and the same edge-bearing nodes. Not preserved:

    - nodes that no edge touches (a row per edge has nowhere to put them)
    - boolean and list attributes, which come back as text
    - attribute name case, since tidy headers are matched lower-cased
    """
    labels = {node.id: node.label for node in graph.nodes}
    extras = extra_columns(graph)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([*TIDY_HEADERS, *extras])
    for edge in graph.edges:
        edge_period = edge.attributes.get("period", period)
        writer.writerow([
            "" if edge_period is None else edge_period,
            edge.source,
            labels.get(edge.source, edge.source),
            edge.target,
            labels.get(edge.target, edge.target),
            format_number(edge.value),
            format_number(edge.moe),
            *(format_attribute(edge.attributes.get(name)) for name in extras),
        ])
    return buffer.getvalue()
