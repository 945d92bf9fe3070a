"""State-to-state migration CSV ingestion (tidy and legacy wide schemas).

Two on-disk schemas carry the same data:

- tidy: one row per edge, header
  ``period,source_id,source_label,destination_id,destination_label,estimate,moe``
  (any column order, names matched case-insensitively)
- legacy wide: the Census table layout, one row per source state with an
  estimate/MOE column pair per destination

The parser extracts the largest valid subset. Bad rows and cells are
dropped and tallied by DropReason; only header-level problems raise.
"""

import logging
import math
from collections import Counter
from typing import Dict, List, Literal, Optional, Sequence

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
from migraflow.kernel.normalize import coerce_cell, is_positive_number, normalize_id, parse_number
from migraflow.kernel.regions import region_attributes
from migraflow._internal.io.csv_rows import cell, header_index, is_blank_row, read_csv_rows

logger = logging.getLogger(__name__)

Schema = Literal["tidy", "legacy"]

TIDY_HEADERS = (
    "period",
    "source_id",
    "source_label",
    "destination_id",
    "destination_label",
    "estimate",
    "moe",
)
TIDY_REQUIRED = ("source_label", "destination_label", "estimate")
_TIDY_CORE = frozenset({"source_id", "source_label", "destination_id", "destination_label", "estimate", "moe"})

# Legacy wide layout. The data offset is a fixed constant independent of how
# many metadata columns a given vintage carries; see DESIGN.md open questions.
LEGACY_MIN_LINES = 4
LEGACY_HEADER_ROW = 1
LEGACY_FIRST_DATA_ROW = 3
LEGACY_HEADER_COLUMN_OFFSET = 7
LEGACY_DATA_COLUMN_OFFSET = 9
LEGACY_COLUMN_STEP = 2

EXCLUDED_IDS = frozenset({
    "TOTAL",
    "UNITED_STATES",
    "UNITED_STATES2",
    "US_ISLAND_AREA",
})
EXCLUDED_SOURCE_LABELS = frozenset({"Puerto Rico"})


class _NodeCollector:
    """First-seen node registry; label and region come from the first sighting."""

    def __init__(self) -> None:
        self._nodes: Dict[str, Node] = {}

    def add(self, node_id: str, label: str) -> None:
        if node_id in self._nodes:
            return
        self._nodes[node_id] = Node(id=node_id, label=label, attributes=region_attributes(label))

    def sorted_nodes(self) -> List[Node]:
        return sort_nodes_by_label(list(self._nodes.values()))


def _schema_for_header(header: Sequence[str]) -> Schema:
    names = {name.strip().lower() for name in header}
    if "source_id" in names and "destination_id" in names:
        return "tidy"
    return "legacy"


def detect_schema(text: str) -> Schema:
    """Pick the parse path from the first line's cells."""
    rows = read_csv_rows(text)
    if not rows:
        raise FormatError("CSV input is empty")
    return _schema_for_header(rows[0])


def parse_migration_csv(text: str) -> MigrationGraph:
    """Parse a tidy or legacy wide migration CSV into a MigrationGraph.

    Raises:
        FormatError: Empty input, too few lines, or required headers absent
    """
    rows = read_csv_rows(text)
    if not rows:
        raise FormatError("CSV input is empty")

    schema = _schema_for_header(rows[0])
    drops: Counter = Counter()
    if schema == "tidy":
        graph = _parse_tidy(rows, drops)
    else:
        graph = _parse_legacy(rows, drops)

    validate_migration_graph(graph)
    _log_drops(schema, graph, drops)
    return graph


def _log_drops(schema: str, graph: MigrationGraph, drops: Counter) -> None:
    summary = {reason.value: count for reason, count in sorted(drops.items())}
    logger.debug(
        "parsed %s migration CSV: %d nodes, %d edges, dropped %s",
        schema, len(graph.nodes), len(graph.edges), summary or "nothing",
    )


def _parse_tidy(rows: List[List[str]], drops: Counter) -> MigrationGraph:
    columns = header_index(rows[0])
    missing = [name for name in TIDY_REQUIRED if name not in columns]
    if missing:
        raise FormatError(
            f"Tidy CSV missing required column(s): {', '.join(missing)}. "
            f"Found: {', '.join(h.strip() for h in rows[0])}"
        )

    extra_columns = [
        (name, position) for name, position in columns.items() if name not in _TIDY_CORE
    ]

    nodes = _NodeCollector()
    edges: List[Edge] = []

    for row in rows[1:]:
        if is_blank_row(row):
            continue

        source_label = cell(row, columns["source_label"])
        target_label = cell(row, columns["destination_label"])
        if not source_label or not target_label:
            drops[DropReason.BLANK_LABEL] += 1
            continue

        source_id = cell(row, columns.get("source_id")) or normalize_id(source_label)
        target_id = cell(row, columns.get("destination_id")) or normalize_id(target_label)
        if not source_id or not target_id:
            drops[DropReason.EMPTY_ID] += 1
            continue

        nodes.add(source_id, source_label)
        nodes.add(target_id, target_label)

        estimate = parse_number(cell(row, columns["estimate"]))
        if not is_positive_number(estimate):
            drops[_estimate_drop_reason(estimate)] += 1
            continue

        if source_id == target_id:
            drops[DropReason.SELF_LOOP] += 1
            continue

        moe: Optional[float] = None
        if "moe" in columns:
            parsed_moe = parse_number(cell(row, columns["moe"]))
            if is_positive_number(parsed_moe):
                moe = parsed_moe

        edges.append(Edge(
            source=source_id,
            target=target_id,
            value=estimate,
            moe=moe,
            attributes=_extra_attributes(row, extra_columns),
        ))

    return MigrationGraph(nodes=nodes.sorted_nodes(), edges=edges)


def _extra_attributes(row: Sequence[str], extra_columns) -> Dict[str, AttributeValue]:
    attributes: Dict[str, AttributeValue] = {}
    for name, position in extra_columns:
        raw = cell(row, position)
        if raw:
            attributes[name] = coerce_cell(raw)
    return attributes


def _estimate_drop_reason(estimate: float) -> DropReason:
    if math.isnan(estimate):
        return DropReason.UNPARSABLE_ESTIMATE
    return DropReason.NON_POSITIVE_ESTIMATE


def _is_excluded(node_id: str) -> bool:
    return not node_id or node_id in EXCLUDED_IDS


def legacy_destinations(header_row: Sequence[str]) -> List[str]:
    """Destination names from the legacy header row, in column order.

    Names sit at every other column starting at LEGACY_HEADER_COLUMN_OFFSET.
    Blank names, ``Total`` and "year ago" columns are not destinations.
    """
    destinations: List[str] = []
    for position in range(LEGACY_HEADER_COLUMN_OFFSET, len(header_row), LEGACY_COLUMN_STEP):
        name = header_row[position].strip()
        if name and name != "Total" and "year ago" not in name:
            destinations.append(name)
    return destinations


def _parse_legacy(rows: List[List[str]], drops: Counter) -> MigrationGraph:
    if len(rows) < LEGACY_MIN_LINES:
        raise FormatError(
            f"Invalid CSV format: needs at least {LEGACY_MIN_LINES} lines "
            f"(3 headers + data), got {len(rows)}"
        )

    destinations = legacy_destinations(rows[LEGACY_HEADER_ROW])
    if not destinations:
        raise FormatError("Legacy CSV header row lists no destination columns")

    nodes = _NodeCollector()
    edges: List[Edge] = []
    alignment_warned = False

    for row in rows[LEGACY_FIRST_DATA_ROW:]:
        if not row:
            continue
        source_label = row[0].strip()
        if not source_label:
            drops[DropReason.BLANK_LABEL] += 1
            continue
        source_id = normalize_id(source_label)
        if source_label in EXCLUDED_SOURCE_LABELS or _is_excluded(source_id):
            drops[DropReason.EXCLUDED_LABEL] += 1
            continue

        nodes.add(source_id, source_label)

        pairs_available = max(0, (len(row) - LEGACY_DATA_COLUMN_OFFSET + 1) // LEGACY_COLUMN_STEP)
        if pairs_available < len(destinations) and not alignment_warned:
            logger.warning(
                "legacy CSV row for %r has %d estimate/MOE pairs for %d destinations; "
                "column alignment may not match this table vintage",
                source_label, pairs_available, len(destinations),
            )
            alignment_warned = True

        for dest_index, column in enumerate(
            range(LEGACY_DATA_COLUMN_OFFSET, len(row), LEGACY_COLUMN_STEP)
        ):
            if dest_index >= len(destinations):
                break
            dest_label = destinations[dest_index]
            dest_id = normalize_id(dest_label)
            if _is_excluded(dest_id):
                drops[DropReason.EXCLUDED_LABEL] += 1
                continue
            if dest_id == source_id:
                drops[DropReason.SELF_LOOP] += 1
                continue

            nodes.add(dest_id, dest_label)

            edge = _legacy_edge(source_id, dest_id, cell(row, column), cell(row, column + 1), drops)
            if edge is not None:
                edges.append(edge)

    return MigrationGraph(nodes=nodes.sorted_nodes(), edges=edges)


def _legacy_edge(
    source_id: str,
    target_id: str,
    estimate_raw: str,
    moe_raw: str,
    drops: Counter,
) -> Optional[Edge]:
    if not estimate_raw or estimate_raw in ("N/A", "0"):
        drops[DropReason.NON_POSITIVE_ESTIMATE] += 1
        return None
    estimate = parse_number(estimate_raw)
    if not is_positive_number(estimate):
        drops[_estimate_drop_reason(estimate)] += 1
        return None

    moe: Optional[float] = None
    if moe_raw and moe_raw != "+/- 0":
        parsed_moe = parse_number(moe_raw.replace("+/- ", "").replace("+/-", ""))
        if is_positive_number(parsed_moe):
            moe = parsed_moe

    return Edge(source=source_id, target=target_id, value=estimate, moe=moe)
