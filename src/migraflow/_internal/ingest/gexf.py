"""GEXF ingestion: attribute definitions, typed attvalues and spells.

Element names are matched on their local part, so GEXF 1.2 and 1.3
documents with a default namespace parse the same as un-namespaced ones.
``<attvalue>`` and ``<spell>`` are found anywhere below their node or edge,
with or without the ``<attvalues>``/``<spells>`` wrappers.
"""

import logging
import math
import re
import xml.etree.ElementTree as ET
from collections import Counter
from typing import Dict, Iterator, List, Optional

from migraflow.codes import DropReason
from migraflow.kernel.graph import AttributeValue, FormatError
from migraflow.kernel.temporal import (
    AttributeDefinition,
    AttributeType,
    Spell,
    TemporalEdge,
    TemporalGraph,
    TemporalNode,
    compute_time_range,
)

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*[-+]?\d+")
_LEADING_FLOAT = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

DEFAULT_EDGE_WEIGHT = 1.0


def _local(tag: str) -> str:
    """Tag name without its ``{namespace}`` prefix."""
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    for child in element:
        if _local(child.tag) == name:
            yield child


def _grandchildren(element: ET.Element, container: str, name: str) -> Iterator[ET.Element]:
    for block in _children(element, container):
        yield from _children(block, name)


def _descendants(element: ET.Element, name: str) -> Iterator[ET.Element]:
    """Every element below ``element`` with local name ``name``, wrapped or not."""
    for descendant in element.iter():
        if descendant is not element and _local(descendant.tag) == name:
            yield descendant


def _find_graph(root: ET.Element) -> Optional[ET.Element]:
    for element in root.iter():
        if _local(element.tag) == "graph":
            return element
    return None


def parse_leading_int(raw: Optional[str]) -> Optional[int]:
    """Integer prefix of ``raw`` (``"2020-01-01"`` -> 2020), or None."""
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    return int(match.group(0)) if match else None


def parse_leading_float(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    match = _LEADING_FLOAT.match(raw)
    return float(match.group(0)) if match else None


def coerce_attribute(raw: str, kind: AttributeType) -> AttributeValue:
    """Convert an attvalue string by its declared type.

    Numbers that do not parse keep the raw string rather than becoming NaN.
    """
    if kind is AttributeType.INTEGER:
        number = parse_leading_int(raw)
        return raw if number is None else number
    if kind in (AttributeType.DOUBLE, AttributeType.FLOAT):
        real = parse_leading_float(raw)
        return raw if real is None else real
    if kind is AttributeType.BOOLEAN:
        return raw.lower() == "true"
    return raw


def parse_gexf(xml_text: str) -> TemporalGraph:
    """Parse a GEXF document into a TemporalGraph.

    Raises:
        FormatError: Malformed XML, or no ``<graph>`` element
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise FormatError(f"GEXF parsing error: {e}") from e

    graph = _find_graph(root)
    if graph is None:
        raise FormatError("No graph element found in GEXF file")

    node_attributes = _parse_definitions(graph, "node")
    edge_attributes = _parse_definitions(graph, "edge")

    drops: Counter = Counter()
    nodes = _parse_nodes(graph, node_attributes, drops)
    edges = _parse_edges(graph, edge_attributes, drops)

    summary = {reason.value: count for reason, count in sorted(drops.items())}
    logger.debug(
        "parsed GEXF: %d nodes, %d edges, dropped %s",
        len(nodes), len(edges), summary or "nothing",
    )

    return TemporalGraph(
        nodes=nodes,
        edges=edges,
        node_attributes=node_attributes,
        edge_attributes=edge_attributes,
        time_range=compute_time_range(nodes, edges),
    )


def _parse_definitions(graph: ET.Element, element_class: str) -> Dict[str, AttributeDefinition]:
    definitions: Dict[str, AttributeDefinition] = {}
    for block in _children(graph, "attributes"):
        if block.get("class") != element_class:
            continue
        for attribute in _children(block, "attribute"):
            attr_id = attribute.get("id")
            title = attribute.get("title")
            type_tag = attribute.get("type")
            if attr_id and title and type_tag:
                definitions[attr_id] = AttributeDefinition(id=attr_id, title=title, type=type_tag)
    return definitions


def _parse_attvalues(
    element: ET.Element,
    definitions: Dict[str, AttributeDefinition],
    drops: Counter,
) -> Dict[str, AttributeValue]:
    values: Dict[str, AttributeValue] = {}
    for attvalue in _descendants(element, "attvalue"):
        key = attvalue.get("for")
        raw = attvalue.get("value")
        if not key or raw is None:
            continue
        definition = definitions.get(key)
        if definition is None:
            drops[DropReason.UNKNOWN_ATTRIBUTE] += 1
            continue
        values[definition.title] = coerce_attribute(raw, definition.kind)
    return values


def _parse_spells(element: ET.Element) -> List[Spell]:
    spells: List[Spell] = []
    for spell in _descendants(element, "spell"):
        start = parse_leading_int(spell.get("start"))
        end = parse_leading_int(spell.get("end"))
        spells.append(Spell(start=start or 0, end=end or 0))
    return spells


def _parse_weight(raw: Optional[str]) -> float:
    weight = parse_leading_float(raw)
    if weight is None or not math.isfinite(weight):
        return DEFAULT_EDGE_WEIGHT
    return weight


def _parse_nodes(
    graph: ET.Element,
    definitions: Dict[str, AttributeDefinition],
    drops: Counter,
) -> List[TemporalNode]:
    nodes: List[TemporalNode] = []
    for element in _grandchildren(graph, "nodes", "node"):
        node_id = element.get("id")
        if not node_id:
            drops[DropReason.MISSING_NODE_ID] += 1
            continue
        nodes.append(TemporalNode(
            id=node_id,
            label=element.get("label") or node_id,
            attributes=_parse_attvalues(element, definitions, drops),
            spells=_parse_spells(element),
        ))
    return nodes


def _parse_edges(
    graph: ET.Element,
    definitions: Dict[str, AttributeDefinition],
    drops: Counter,
) -> List[TemporalEdge]:
    """Edges with both endpoints.

    An edge without an ``id`` is kept rather than dropped; it gets
    ``e<index>``, counting every ``<edge>`` element including skipped ones.
    """
    edges: List[TemporalEdge] = []
    for index, element in enumerate(_grandchildren(graph, "edges", "edge")):
        source = element.get("source")
        target = element.get("target")
        if not source or not target:
            drops[DropReason.MISSING_ENDPOINT] += 1
            continue
        edges.append(TemporalEdge(
            id=element.get("id") or f"e{index}",
            source=source,
            target=target,
            weight=_parse_weight(element.get("weight")),
            attributes=_parse_attvalues(element, definitions, drops),
            spells=_parse_spells(element),
        ))
    return edges
