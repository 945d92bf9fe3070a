"""Tests for value parsing, id normalization and the region table."""

import math

import pytest

from migraflow.kernel.normalize import coerce_cell, is_positive_number, normalize_id, parse_number
from migraflow.kernel.regions import STATE_LABELS, STATE_REGIONS, region_attributes


@pytest.mark.parametrize("raw,expected", [
    ("1,234", 1234.0),
    ('"12,500"', 12500.0),
    ("+/-56", 56.0),
    ("±7", 7.0),
    ("− 12", 12.0),
    ("-30", 30.0),
    ("$1,000.50", 1000.5),
    ("12abc", 12.0),
    (" 42 ", 42.0),
    (1500, 1500.0),
    (-2.5, 2.5),
])
def test_parse_number_display_strings(raw, expected):
    """Display formatting is stripped and the result is absolute."""
    assert parse_number(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "N/A", "n/a", "abc", None, True])
def test_parse_number_unparsable_is_nan(raw):
    """Empty, N/A and non-numeric input give NaN instead of raising."""
    assert math.isnan(parse_number(raw))


def test_is_positive_number():
    assert is_positive_number(1.0)
    assert not is_positive_number(0.0)
    assert not is_positive_number(math.nan)
    assert not is_positive_number(math.inf)


def test_normalize_id_rules():
    """trim, whitespace runs to underscore, strip non-id chars, uppercase."""
    assert normalize_id("  New   York ") == "NEW_YORK"
    assert normalize_id("District of Columbia") == "DISTRICT_OF_COLUMBIA"
    assert normalize_id("U.S. Island Area") == "US_ISLAND_AREA"
    assert normalize_id("United States2") == "UNITED_STATES2"
    assert normalize_id("") == ""


def test_normalize_id_is_idempotent():
    for label in STATE_LABELS + ("  Puerto   Rico ", "Côte d'Ivoire", "a-b c"):
        once = normalize_id(label)
        assert normalize_id(once) == once


def test_state_labels_give_51_distinct_ids():
    """The 50 states plus DC normalize to 51 distinct ids."""
    assert len(STATE_LABELS) == 51
    assert len({normalize_id(label) for label in STATE_LABELS}) == 51


def test_region_attributes_exact_label_only():
    """Lookup is by exact label; there is no fuzzy fallback."""
    assert region_attributes("Texas") == {"region": "South", "division": "West South Central"}
    assert region_attributes("Maryland") == {"region": "Northeast", "division": "Mid-Atlantic"}
    assert region_attributes("texas") == {}
    assert region_attributes("Puerto Rico") == {}


def test_region_table_is_read_only():
    with pytest.raises(TypeError):
        STATE_REGIONS["Puerto Rico"] = STATE_REGIONS["Texas"]  # type: ignore[index]


def test_coerce_cell_keeps_types():
    """Extra columns keep ints as ints and leave text alone."""
    assert coerce_cell("2021") == 2021
    assert isinstance(coerce_cell("2021"), int)
    assert coerce_cell("0.25") == 0.25
    assert coerce_cell("12,500") == 12500
    assert coerce_cell("-3") == -3
    assert coerce_cell("economic") == "economic"
    assert coerce_cell("2021-2022") == "2021-2022"
    assert coerce_cell("nan") == "nan"
