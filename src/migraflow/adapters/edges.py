"""Edge-list utilities shared by the projections: cycle breaking, filtering, aggregation."""

from collections import defaultdict
from typing import Dict, Iterable, List, Literal, Optional, Tuple, Union

from migraflow.kernel.graph import AttributeValue, Edge

GroupBy = Literal["source", "target", "source-target"]
GROUP_BY_OPTIONS = ("source", "target", "source-target")

# filter value meaning "no filter"
ALL = "all"


def break_cycles(edges: Iterable[Edge]) -> List[Edge]:
    """Keep one direction per unordered node pair.

    Self-loops are dropped. When both directions of a pair occur, the
    direction with the strictly larger summed value wins; on a tie the
    direction whose source sorts first wins. Edges of the winning direction
    (and of one-directional pairs) are returned as copies, in input order.
    """
    candidates = [e for e in edges if not e.is_self_loop]

    totals: Dict[Tuple[str, str], float] = defaultdict(float)
    for edge in candidates:
        totals[(edge.source, edge.target)] += edge.value

    result: List[Edge] = []
    for edge in candidates:
        forward = (edge.source, edge.target)
        backward = (edge.target, edge.source)
        if backward in totals:
            if totals[forward] < totals[backward]:
                continue
            if totals[forward] == totals[backward] and edge.source > edge.target:
                continue
        result.append(edge.model_copy(deep=True))
    return result


def _matches(actual: Optional[AttributeValue], wanted: AttributeValue) -> bool:
    if isinstance(actual, list):
        return wanted in actual
    return actual == wanted


def filter_by_property(
    edges: Iterable[Edge],
    key: str,
    value: Optional[AttributeValue],
) -> List[Edge]:
    """Edges whose property ``key`` equals ``value`` (or contains it, for lists).

    ``None`` or ``"all"`` disables the filter and returns every edge in a
    new list. ``key`` may name a core field (``source``, ``target``,
    ``value``, ``moe``) or an attribute.
    """
    if value is None or value == ALL:
        return list(edges)
    return [edge for edge in edges if _matches(edge.get(key), value)]


def _group_key(edge: Edge, group_by: str) -> Union[str, Tuple[str, str]]:
    if group_by == "source":
        return edge.source
    if group_by == "target":
        return edge.target
    return (edge.source, edge.target)


def aggregate_by_key(edges: Iterable[Edge], group_by: GroupBy = "source-target") -> List[Edge]:
    """Merge edges that share a group key.

    Values are summed. Attributes merge key by key with the later edge
    winning, and ``moe`` is replaced whenever a later edge carries one.
    ``source``/``target`` come from the first edge of each group. Groups
    are returned in first-seen order; input edges are not modified.

    Raises:
        ValueError: Unknown ``group_by``
    """
    if group_by not in GROUP_BY_OPTIONS:
        raise ValueError(
            f"Unknown group_by {group_by!r}; expected one of {', '.join(GROUP_BY_OPTIONS)}"
        )

    groups: Dict[Union[str, Tuple[str, str]], Edge] = {}
    for edge in edges:
        key = _group_key(edge, group_by)
        existing = groups.get(key)
        if existing is None:
            groups[key] = edge.model_copy(deep=True)
            continue
        existing.value += edge.value
        existing.attributes.update(edge.model_copy(deep=True).attributes)
        if edge.moe is not None:
            existing.moe = edge.moe
    return list(groups.values())


def unique_property_values(edges: Iterable[Edge], key: str) -> List[Union[int, float, str]]:
    """Distinct scalar values of property ``key``, list members flattened.

    Numbers come first in ascending order, then strings in ascending order.
    Booleans and missing values are ignored.
    """
    numbers = set()
    strings = set()
    for edge in edges:
        raw = edge.get(key)
        for value in raw if isinstance(raw, list) else [raw]:
            if isinstance(value, bool) or value is None:
                continue
            if isinstance(value, (int, float)):
                numbers.add(value)
            elif isinstance(value, str):
                strings.add(value)
    return [*sorted(numbers), *sorted(strings)]
