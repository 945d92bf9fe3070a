"""Performance sentinels: synthetic full-size workloads and their time budgets."""

from __future__ import annotations

import os
from typing import List

from migraflow.kernel.normalize import normalize_id
from migraflow.kernel.regions import STATE_LABELS


def _budget_from_env(var_name: str, default_ms: float) -> float:
    raw = os.getenv(var_name)
    if not raw:
        return default_ms
    try:
        return float(raw)
    except ValueError:
        return default_ms


MAX_STATE_CSV_PARSE_MS = _budget_from_env("MIGRAFLOW_MAX_STATE_CSV_PARSE_MS", 1000.0)
MAX_STATE_PROJECTION_MS = _budget_from_env("MIGRAFLOW_MAX_STATE_PROJECTION_MS", 500.0)
MAX_GEXF_MATERIALIZE_MS = _budget_from_env("MIGRAFLOW_MAX_GEXF_MATERIALIZE_MS", 2000.0)


def state_to_state_tidy_csv(period: int = 2021) -> str:
    """Tidy CSV with a flow for every ordered pair of the 51 state labels."""
    lines: List[str] = ["period,source_id,source_label,destination_id,destination_label,estimate,moe"]
    for i, source in enumerate(STATE_LABELS):
        for j, target in enumerate(STATE_LABELS):
            if i == j:
                continue
            estimate = 100 + (i * 51 + j) % 900
            lines.append(
                f"{period},{normalize_id(source)},{source},"
                f"{normalize_id(target)},{target},{estimate},{estimate // 10 + 1}"
            )
    return "\n".join(lines) + "\n"


def ring_gexf(node_count: int, start: int, end: int) -> str:
    """GEXF ring graph; every node and edge is active over [start, end]."""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<gexf xmlns="http://gexf.net/1.3" version="1.3">',
        '<graph mode="dynamic" defaultedgetype="directed" timeformat="integer">',
        "<nodes>",
    ]
    spell = f'<spells><spell start="{start}" end="{end}"/></spells>'
    for i in range(node_count):
        parts.append(f'<node id="n{i}" label="Node {i}">{spell}</node>')
    parts.append("</nodes><edges>")
    for i in range(node_count):
        parts.append(
            f'<edge id="e{i}" source="n{i}" target="n{(i + 1) % node_count}" weight="{i + 1}">{spell}</edge>'
        )
    parts.append("</edges></graph></gexf>")
    return "\n".join(parts)
