"""Tests for detection of misordered table numbers."""

from __future__ import annotations

import pytest

from tablecheck.services.headings import TableHeading
from tablecheck.services.ordering import (
    Misordering,
    find_misordered_numbers,
    find_misorderings,
    flagged_numbers,
    is_increasing,
)


def _headings(*numbers: str) -> list[TableHeading]:
    return [TableHeading(number, "") for number in numbers]


def test_increasing_sequence_has_no_flags() -> None:
    assert find_misordered_numbers(_headings("1", "2", "3.1", "3.2")) == []


def test_empty_input_yields_empty_output() -> None:
    assert find_misordered_numbers([]) == []
    assert find_misorderings([]) == []


def test_first_record_is_never_flagged() -> None:
    assert find_misordered_numbers(["0"]) == []


def test_decrease_flags_previous_and_current() -> None:
    assert find_misordered_numbers(_headings("2", "1")) == ["2", "1"]


def test_decrease_flags_current_only_when_requested() -> None:
    assert find_misordered_numbers(_headings("2", "1"), include_previous=False) == ["1"]


def test_duplicate_number_is_flagged() -> None:
    assert find_misorderings(["1", "2", "2"]) == [
        Misordering(index=2, previous="2", current="2")
    ]


def test_cursor_advances_after_a_flag() -> None:
    # 3 > 1 is fine once the cursor has moved to 1.
    assert find_misorderings(["2", "1", "3"]) == [
        Misordering(index=1, previous="2", current="1")
    ]
    assert find_misordered_numbers(["3", "2", "1"]) == ["3", "2", "2", "1"]


def test_lexicographic_comparison_flags_nine_then_ten() -> None:
    assert find_misordered_numbers(["9", "10"], include_previous=False) == ["10"]


def test_numeric_comparison_accepts_nine_then_ten() -> None:
    assert find_misordered_numbers(["9", "10", "10.1", "10.2"], comparison="numeric") == []


def test_numeric_comparison_still_flags_real_decrease() -> None:
    assert find_misordered_numbers(["2.10", "2.9"], comparison="numeric") == ["2.10", "2.9"]


@pytest.mark.parametrize(
    ("previous", "current", "expected"),
    [
        ("1", "2", True),
        ("2", "1", False),
        ("1", "1", False),
        ("3", "3.1", True),
        ("9", "10", False),
    ],
)
def test_is_increasing_lexicographic(previous: str, current: str, expected: bool) -> None:
    assert is_increasing(previous, current) is expected


def test_numeric_mode_falls_back_for_malformed_numbers() -> None:
    assert is_increasing("a", "b", comparison="numeric") is True
    assert is_increasing("9", "1x", comparison="numeric") is False


def test_flagged_numbers_keeps_detection_order() -> None:
    entries = [
        Misordering(index=1, previous="5", current="4"),
        Misordering(index=3, previous="7", current="6"),
    ]
    assert flagged_numbers(entries) == ["5", "4", "7", "6"]
    assert flagged_numbers(entries, include_previous=False) == ["4", "6"]


def test_numeric_mode_tolerates_non_decimal_digits() -> None:
    # Superscript digits are not parseable as integers; compare them as strings.
    assert find_misordered_numbers(["1", "²"], comparison="numeric") == []
    assert find_misordered_numbers(["²", "1"], comparison="numeric") == ["²", "1"]
