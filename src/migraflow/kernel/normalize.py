"""Value and label normalization for migration datasets.

Census exports carry estimates as display strings ("1,234", "+/-56",
"− 12", "N/A"). These helpers turn them into floats and derive the
stable node identifiers used across every parser.

Rules:
- Sign is a formatting artifact for estimate/MOE fields: results are absolute
- Unparsable input yields NaN, never an exception
- Identifiers are ASCII [A-Z0-9_] tokens, deterministic per label
"""

import math
import re
from typing import Any

_NUMBER_NOISE = re.compile(r'["\s,$±+/]')
_LEADING_NUMBER = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_WHITESPACE_RUN = re.compile(r"\s+")
_NON_ID_CHARS = re.compile(r"[^A-Za-z0-9_]")


def parse_number(raw: Any) -> float:
    """Parse a display-formatted estimate into a non-negative float.

    Strips quotes, the Unicode minus sign, ``±``, ``+/-``, currency marks,
    thousands separators and whitespace, then parses the leading numeric
    token (``"12abc"`` parses as 12, like a lenient float prefix parse).

    Args:
        raw: Cell value (usually str; numbers and None are accepted)

    Returns:
        ``abs(value)``, or NaN for empty, ``N/A`` or non-numeric input
    """
    if raw is None:
        return math.nan
    if isinstance(raw, bool):
        return math.nan
    if isinstance(raw, (int, float)):
        return abs(float(raw))

    text = str(raw).replace('"', "").strip()
    if text.upper() == "N/A":
        return math.nan
    cleaned = _NUMBER_NOISE.sub("", text.replace("−", "-"))
    if not cleaned:
        return math.nan

    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return math.nan
    return abs(float(match.group(0)))


def is_positive_number(value: float) -> bool:
    """True for finite values strictly greater than zero."""
    return math.isfinite(value) and value > 0


def normalize_id(label: str) -> str:
    """Derive a stable node id from a free-text label.

    trim -> whitespace runs to ``_`` -> drop chars outside ``[A-Za-z0-9_]``
    -> uppercase. ``normalize_id(normalize_id(x)) == normalize_id(x)``.
    """
    collapsed = _WHITESPACE_RUN.sub("_", label.strip())
    return _NON_ID_CHARS.sub("", collapsed).upper()


def coerce_cell(raw: str) -> Any:
    """Coerce a free-form CSV cell into int, float or stripped str.

    Used for dataset-specific extra columns. Unlike :func:`parse_number`
    this keeps the sign and only accepts a cell that is numeric as a whole.
    """
    text = raw.strip()
    if not text:
        return text
    unquoted = text.replace(",", "") if _looks_grouped(text) else text
    try:
        return int(unquoted)
    except ValueError:
        pass
    try:
        value = float(unquoted)
    except ValueError:
        return text
    if not math.isfinite(value):
        return text
    return value


def _looks_grouped(text: str) -> bool:
    """Detect thousands-grouped numbers such as ``12,500`` or ``1,234.5``."""
    return re.fullmatch(r"-?\d{1,3}(,\d{3})+(\.\d+)?", text) is not None
