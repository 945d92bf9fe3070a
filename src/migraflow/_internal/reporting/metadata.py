"""Detect which node and edge properties a dataset carries."""

from typing import Iterable, List, Set

from pydantic import BaseModel, ConfigDict, Field

from migraflow.kernel.graph import AttributeValue, Edge, Node


class PropertyKinds(BaseModel):
    nodes: List[str] = Field(default_factory=list)
    edges: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class DatasetMetadata(BaseModel):
    """Property names found on nodes/edges, split by value kind.

    Core fields (``id``, ``label``, ``source``, ``target``, ``value``) are not
    listed. ``moe`` is listed as a numeric edge property when any edge has one.
    All lists are sorted.
    """
    node_properties: List[str] = Field(default_factory=list)
    edge_properties: List[str] = Field(default_factory=list)
    numeric: PropertyKinds = Field(default_factory=PropertyKinds)
    categorical: PropertyKinds = Field(default_factory=PropertyKinds)

    model_config = ConfigDict(extra="forbid")


def _is_numeric(value: AttributeValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _scan(items, names: Set[str], numeric: Set[str], categorical: Set[str]) -> None:
    for key, value in items:
        names.add(key)
        if _is_numeric(value):
            numeric.add(key)
        elif isinstance(value, str):
            categorical.add(key)


def describe_properties(nodes: Iterable[Node], edges: Iterable[Edge]) -> DatasetMetadata:
    node_names: Set[str] = set()
    node_numeric: Set[str] = set()
    node_categorical: Set[str] = set()
    for node in nodes:
        _scan(node.attributes.items(), node_names, node_numeric, node_categorical)

    edge_names: Set[str] = set()
    edge_numeric: Set[str] = set()
    edge_categorical: Set[str] = set()
    for edge in edges:
        if edge.moe is not None:
            _scan([("moe", edge.moe)], edge_names, edge_numeric, edge_categorical)
        _scan(edge.attributes.items(), edge_names, edge_numeric, edge_categorical)

    return DatasetMetadata(
        node_properties=sorted(node_names),
        edge_properties=sorted(edge_names),
        numeric=PropertyKinds(nodes=sorted(node_numeric), edges=sorted(edge_numeric)),
        categorical=PropertyKinds(nodes=sorted(node_categorical), edges=sorted(edge_categorical)),
    )
