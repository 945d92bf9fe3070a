"""Drop reason codes for row-level data quality filtering.

Parsers never fail on a bad row or cell; they drop it and count it under
one of these codes. Header-level problems raise FormatError instead.
"""

from enum import Enum


class DropReason(str, Enum):
    """Why a row, cell or entity was left out of a parsed graph."""

    # Tabular rows / cells
    BLANK_LABEL = "BLANK_LABEL"
    EMPTY_ID = "EMPTY_ID"
    NON_POSITIVE_ESTIMATE = "NON_POSITIVE_ESTIMATE"
    UNPARSABLE_ESTIMATE = "UNPARSABLE_ESTIMATE"
    SELF_LOOP = "SELF_LOOP"
    EXCLUDED_LABEL = "EXCLUDED_LABEL"
    UNKNOWN_NODE = "UNKNOWN_NODE"

    # GEXF entities
    MISSING_NODE_ID = "MISSING_NODE_ID"
    MISSING_ENDPOINT = "MISSING_ENDPOINT"
    UNKNOWN_ATTRIBUTE = "UNKNOWN_ATTRIBUTE"
