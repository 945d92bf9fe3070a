"""Performance sentinels (gated)."""

from __future__ import annotations

import pytest

from migraflow.api import build_dataset, load_csv, project
from migraflow._internal.benchmarks import (
    MAX_GEXF_MATERIALIZE_MS,
    MAX_STATE_CSV_PARSE_MS,
    MAX_STATE_PROJECTION_MS,
    ring_gexf,
    state_to_state_tidy_csv,
)


def _assert_budget(benchmark, max_ms: float) -> None:
    mean_ms = benchmark.stats.stats.mean * 1000.0
    assert mean_ms < max_ms, f"Mean {mean_ms:.2f} ms exceeded budget {max_ms:.2f} ms"


@pytest.mark.perf
def test_state_csv_parse_sentinel(benchmark):
    text = state_to_state_tidy_csv()
    graph = benchmark.pedantic(lambda: load_csv(text), rounds=3, iterations=1)

    assert len(graph.nodes) == 51
    assert len(graph.edges) == 51 * 50

    _assert_budget(benchmark, MAX_STATE_CSV_PARSE_MS)


@pytest.mark.perf
def test_state_projection_sentinel(benchmark):
    graph = load_csv(state_to_state_tidy_csv())

    def _project_both():
        return project(graph, "sankey", break_cycles=True), project(graph, "chord")

    sankey, chord = benchmark.pedantic(_project_both, rounds=3, iterations=1)

    assert sankey.dropped_links + len(sankey.links) == len(graph.edges)
    assert len(chord.matrix) == 51

    _assert_budget(benchmark, MAX_STATE_PROJECTION_MS)


@pytest.mark.perf
def test_gexf_materialize_sentinel(benchmark):
    text = ring_gexf(500, 1990, 2020)
    record = benchmark.pedantic(lambda: build_dataset(text, kind="gexf"), rounds=3, iterations=1)

    assert len(record.snapshots) == 31
    assert all(len(snapshot.edges) == 500 for snapshot in record.snapshots)

    _assert_budget(benchmark, MAX_GEXF_MATERIALIZE_MS)
