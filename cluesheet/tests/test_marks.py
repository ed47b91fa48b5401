"""
Tests for cell marks.

Tests:
- Normalization on construction
- Primary changes preserve numbers
- Number and bar color toggles
- Plain-data form
"""

import pytest

from ..engine_core.marks import (
    CellMark,
    PrimaryMark,
    EMPTY_MARK,
    NUMBER_MARKER_KEYS,
    BAR_COLOR_KEYS,
    create_mark,
    is_empty_mark,
    has_numbers,
    with_primary,
    with_toggled_number,
    with_toggled_bar_color,
    without_number,
    without_numbers,
    mark_to_dict,
    mark_from_dict,
)


class TestNormalization:
    """Invalid combinations cannot be built."""

    def test_bars_dropped_unless_primary_is_bars(self):
        mark = CellMark(primary=PrimaryMark.HAS, bar_colors={1, 2})
        assert mark.bar_colors == frozenset()

    def test_bars_kept_on_bars_primary(self):
        mark = CellMark(primary=PrimaryMark.BARS, bar_colors=[2, 3])
        assert mark.bar_colors == frozenset({2, 3})

    def test_create_mark_returns_empty_constant(self):
        assert create_mark(PrimaryMark.EMPTY) is EMPTY_MARK

    def test_empty_with_numbers_is_not_empty(self):
        mark = create_mark(PrimaryMark.EMPTY, numbers=[2])
        assert not is_empty_mark(mark)
        assert has_numbers(mark)

    def test_marks_compare_by_value(self):
        assert create_mark(PrimaryMark.NOT, [1, 2]) == create_mark(PrimaryMark.NOT, [2, 1])

    def test_settled_primaries(self):
        assert create_mark(PrimaryMark.HAS).is_settled
        assert create_mark(PrimaryMark.NOT).is_settled
        assert not create_mark(PrimaryMark.BARS, bar_colors=[1]).is_settled
        assert not EMPTY_MARK.is_settled


class TestPrimaryChanges:
    """Setting a primary keeps the numbers."""

    @pytest.mark.parametrize("primary", [PrimaryMark.HAS, PrimaryMark.NOT])
    def test_numbers_preserved(self, primary):
        mark = create_mark(PrimaryMark.EMPTY, numbers=[1, 3])
        updated = with_primary(mark, primary)
        assert updated.primary is primary
        assert updated.numbers == frozenset({1, 3})

    def test_leaving_bars_drops_colors(self):
        mark = create_mark(PrimaryMark.BARS, numbers=[4], bar_colors=[1, 2])
        updated = with_primary(mark, PrimaryMark.NOT)
        assert updated.bar_colors == frozenset()
        assert updated.numbers == frozenset({4})


class TestToggles:
    """Number and bar color toggles."""

    def test_toggle_number_is_involution(self):
        mark = create_mark(PrimaryMark.HAS)
        for num in NUMBER_MARKER_KEYS:
            assert with_toggled_number(with_toggled_number(mark, num), num) == mark

    def test_toggle_number_any_primary(self):
        mark = with_toggled_number(create_mark(PrimaryMark.NOT), 2)
        assert mark.primary is PrimaryMark.NOT
        assert mark.numbers == frozenset({2})

    def test_toggle_bar_switches_to_bars(self):
        mark = with_toggled_bar_color(create_mark(PrimaryMark.HAS, [1]), 3)
        assert mark.primary is PrimaryMark.BARS
        assert mark.bar_colors == frozenset({3})
        assert mark.numbers == frozenset({1})

    def test_removing_last_bar_reverts_to_empty(self):
        mark = create_mark(PrimaryMark.BARS, numbers=[2], bar_colors=[4])
        updated = with_toggled_bar_color(mark, 4)
        assert updated.primary is PrimaryMark.EMPTY
        assert updated.numbers == frozenset({2})

    def test_removing_last_bar_without_numbers_is_empty(self):
        mark = create_mark(PrimaryMark.BARS, bar_colors=[1])
        assert with_toggled_bar_color(mark, 1) is EMPTY_MARK

    def test_bar_colors_accumulate(self):
        mark = EMPTY_MARK
        for color in BAR_COLOR_KEYS:
            mark = with_toggled_bar_color(mark, color)
        assert mark.bar_colors == frozenset(BAR_COLOR_KEYS)

    def test_without_number_absent_returns_same(self):
        mark = create_mark(PrimaryMark.NOT, [1])
        assert without_number(mark, 2) is mark

    def test_without_numbers(self):
        mark = create_mark(PrimaryMark.EMPTY, [1, 2])
        assert without_numbers(mark) is EMPTY_MARK


class TestPlainData:
    """Dict form used by storage and the API."""

    def test_to_dict_uses_sorted_lists(self):
        mark = create_mark(PrimaryMark.BARS, numbers=[3, 1], bar_colors=[4, 2])
        assert mark_to_dict(mark) == {
            "primary": "bars",
            "numbers": [1, 3],
            "barColors": [2, 4],
        }

    def test_from_dict_normalizes(self):
        mark = mark_from_dict({"primary": "has", "numbers": [2], "barColors": [1]})
        assert mark == create_mark(PrimaryMark.HAS, [2])

    def test_from_empty_dict(self):
        assert mark_from_dict({}) is EMPTY_MARK
