"""migraflow: migration-flow ingestion and Sankey/Chord projection."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("migraflow")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from migraflow.api import (
    DatasetRecord,
    DatasetSummary,
    build_dataset,
    inspect_dataset,
    json_schemas,
    load_csv,
    load_gexf,
    load_snapshot,
    load_two_file_csv,
    project,
)
from migraflow.codes import DropReason
from migraflow.kernel.graph import (
    Edge,
    FormatError,
    GraphValidationError,
    MigrationGraph,
    Node,
    validate_migration_graph,
)
from migraflow.kernel.temporal import Snapshot, TemporalGraph, materialize_all, snapshot_at
from migraflow.adapters.sankey import SankeyLayoutConfig, layout_sankey, to_sankey
from migraflow.adapters.chord import to_chord
from migraflow.adapters.edges import (
    aggregate_by_key,
    break_cycles,
    filter_by_property,
    unique_property_values,
)

__all__ = [
    "__version__",
    "DatasetRecord",
    "DatasetSummary",
    "build_dataset",
    "inspect_dataset",
    "json_schemas",
    "load_csv",
    "load_gexf",
    "load_snapshot",
    "load_two_file_csv",
    "project",
    "DropReason",
    "Edge",
    "FormatError",
    "GraphValidationError",
    "MigrationGraph",
    "Node",
    "validate_migration_graph",
    "Snapshot",
    "TemporalGraph",
    "materialize_all",
    "snapshot_at",
    "SankeyLayoutConfig",
    "layout_sankey",
    "to_sankey",
    "to_chord",
    "aggregate_by_key",
    "break_cycles",
    "filter_by_property",
    "unique_property_values",
]
