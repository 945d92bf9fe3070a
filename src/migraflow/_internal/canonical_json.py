"""Canonical JSON serialization for CLI output and schema files.

Every JSON document the package writes goes through here so that equal
inputs always produce byte-identical output.
"""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Canonical JSON serialization.

    Rules:
    - Sorted keys
    - Stable separators (",", ":")
    - Non-ASCII labels written as UTF-8, not escaped
    - List order is preserved (callers order lists before calling)

    Args:
        obj: JSON-compatible Python object

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False
    )
