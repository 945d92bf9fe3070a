"""Two-file CSV ingestion: a nodes table plus an edges table.

Column roles are named by the caller (e.g. ``id``/``name`` for locations,
``origin``/``dest``/``count`` for flows). Field names match
case-insensitively; every other column becomes an attribute.
"""

import logging
import math
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from migraflow.codes import DropReason
from migraflow.kernel.graph import (
    AttributeValue,
    Edge,
    FormatError,
    MigrationGraph,
    Node,
    sort_nodes_by_label,
    validate_migration_graph,
)
from migraflow.kernel.normalize import coerce_cell
from migraflow._internal.io.csv_rows import cell, header_index, is_blank_row, read_csv_rows

logger = logging.getLogger(__name__)


def _read_table(text: str, what: str) -> Tuple[List[str], List[List[str]]]:
    rows = [row for row in read_csv_rows(text) if not is_blank_row(row)]
    if not rows:
        raise FormatError(f"{what} CSV file is empty")
    return [h.strip() for h in rows[0]], rows[1:]


def _require_field(columns: Dict[str, int], headers: Sequence[str], field: str, role: str, what: str) -> int:
    position = columns.get(field.strip().lower())
    if position is None:
        raise FormatError(
            f'{role} field "{field}" not found in {what} file. '
            f"Available fields: {', '.join(headers)}"
        )
    return position


def _attributes(
    row: Sequence[str],
    headers: Sequence[str],
    skip: Sequence[int],
) -> Dict[str, AttributeValue]:
    attributes: Dict[str, AttributeValue] = {}
    for position, name in enumerate(headers):
        if position in skip or not name:
            continue
        raw = cell(row, position)
        if raw:
            attributes[name] = coerce_cell(raw)
    return attributes


def _edge_value(raw: str) -> Optional[float]:
    value = coerce_cell(raw)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return float(value)


def parse_two_file_csv(
    nodes_text: str,
    edges_text: str,
    *,
    id_field: str,
    source_field: str,
    target_field: str,
    value_field: str,
    label_field: Optional[str] = None,
) -> MigrationGraph:
    """Join a nodes CSV and an edges CSV into a MigrationGraph.

    Node ids are taken verbatim (trimmed). When ``label_field`` is omitted,
    or a row's label cell is blank, the id doubles as the label. Duplicate
    node ids keep the first row.

    Raises:
        FormatError: Either file empty, or a named field missing from its header
    """
    node_headers, node_rows = _read_table(nodes_text, "nodes")
    node_columns = header_index(node_headers)
    id_position = _require_field(node_columns, node_headers, id_field, "ID", "nodes")
    label_position = id_position
    if label_field is not None:
        label_position = _require_field(node_columns, node_headers, label_field, "Label", "nodes")

    drops: Counter = Counter()
    nodes: Dict[str, Node] = {}
    for row in node_rows:
        node_id = cell(row, id_position)
        if not node_id:
            drops[DropReason.EMPTY_ID] += 1
            continue
        if node_id in nodes:
            continue
        nodes[node_id] = Node(
            id=node_id,
            label=cell(row, label_position) or node_id,
            attributes=_attributes(row, node_headers, (id_position, label_position)),
        )

    edge_headers, edge_rows = _read_table(edges_text, "edges")
    edge_columns = header_index(edge_headers)
    source_position = _require_field(edge_columns, edge_headers, source_field, "Source", "edges")
    target_position = _require_field(edge_columns, edge_headers, target_field, "Target", "edges")
    value_position = _require_field(edge_columns, edge_headers, value_field, "Value", "edges")
    core_positions = (source_position, target_position, value_position)

    edges: List[Edge] = []
    for row in edge_rows:
        source = cell(row, source_position)
        target = cell(row, target_position)
        if not source or not target:
            drops[DropReason.EMPTY_ID] += 1
            continue
        value = _edge_value(cell(row, value_position))
        if value is None:
            drops[DropReason.NON_POSITIVE_ESTIMATE] += 1
            continue
        if source not in nodes or target not in nodes:
            drops[DropReason.UNKNOWN_NODE] += 1
            continue
        if source == target:
            drops[DropReason.SELF_LOOP] += 1
            continue
        edges.append(Edge(
            source=source,
            target=target,
            value=value,
            attributes=_attributes(row, edge_headers, core_positions),
        ))

    graph = MigrationGraph(nodes=sort_nodes_by_label(list(nodes.values())), edges=edges)
    validate_migration_graph(graph)

    summary = {reason.value: count for reason, count in sorted(drops.items())}
    logger.debug(
        "parsed two-file CSV: %d nodes, %d edges, dropped %s",
        len(graph.nodes), len(graph.edges), summary or "nothing",
    )
    return graph
