"""
Cell Marks - The value stored in a single (card, player) cell.

A mark has three orthogonal facets:
- primary: mutually exclusive base state (empty, has, not, bars)
- numbers: "maybe" markers (1-4), allowed on ANY primary, used by automation
- bar_colors: colored stripes (1-4), only meaningful when primary is bars

Design principles:
- Immutable: every derivation returns a new mark
- Normalized on construction: invalid combinations cannot exist
- Total: no operation raises for keys drawn from the closed key spaces
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


NUMBER_MARKER_KEYS: tuple[int, ...] = (1, 2, 3, 4)
BAR_COLOR_KEYS: tuple[int, ...] = (1, 2, 3, 4)


class PrimaryMark(Enum):
    """Primary marker types (mutually exclusive)."""
    EMPTY = "empty"
    HAS = "has"  # player holds this card
    NOT = "not"  # player does not hold this card
    BARS = "bars"  # colored stripes helper marker


# Primaries that represent a known fact about the cell
SETTLED_PRIMARIES = frozenset({PrimaryMark.HAS, PrimaryMark.NOT})


@dataclass(frozen=True)
class CellMark:
    """
    Mark for a single cell.

    Construct through create_mark() where possible. Direct construction is
    still normalized: numbers/bar_colors become frozensets, and bar_colors
    are dropped unless primary is BARS.
    """
    primary: PrimaryMark = PrimaryMark.EMPTY
    numbers: frozenset[int] = field(default_factory=frozenset)
    bar_colors: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "numbers", frozenset(self.numbers))
        if self.primary is PrimaryMark.BARS:
            object.__setattr__(self, "bar_colors", frozenset(self.bar_colors))
        else:
            object.__setattr__(self, "bar_colors", frozenset())

    @property
    def is_empty(self) -> bool:
        return is_empty_mark(self)

    @property
    def is_settled(self) -> bool:
        """True for HAS/NOT, the primaries automation never overwrites."""
        return self.primary in SETTLED_PRIMARIES


EMPTY_MARK = CellMark()


def is_empty_mark(mark: CellMark) -> bool:
    """Check if a mark is effectively empty (no visual content)."""
    return mark.primary is PrimaryMark.EMPTY and not mark.numbers


def has_numbers(mark: CellMark) -> bool:
    return bool(mark.numbers)


def create_mark(
    primary: PrimaryMark,
    numbers: Iterable[int] = (),
    bar_colors: Iterable[int] = (),
) -> CellMark:
    """
    Create a normalized mark.

    Returns the EMPTY_MARK constant when the result carries no content.
    """
    numbers = frozenset(numbers)
    if primary is PrimaryMark.EMPTY and not numbers:
        return EMPTY_MARK
    return CellMark(primary=primary, numbers=numbers, bar_colors=bar_colors)


def with_primary(mark: CellMark, primary: PrimaryMark) -> CellMark:
    """Replace the primary, preserving numbers (and bars if still BARS)."""
    return create_mark(primary, mark.numbers, mark.bar_colors)


def with_toggled_number(mark: CellMark, num: int) -> CellMark:
    return create_mark(mark.primary, mark.numbers ^ {num}, mark.bar_colors)


def with_toggled_bar_color(mark: CellMark, color: int) -> CellMark:
    """
    Toggle a bar color.

    Switches primary to BARS; removing the last color reverts the
    primary to EMPTY while keeping numbers.
    """
    colors = mark.bar_colors ^ {color}
    if not colors:
        return create_mark(PrimaryMark.EMPTY, mark.numbers)
    return create_mark(PrimaryMark.BARS, mark.numbers, colors)


def without_number(mark: CellMark, num: int) -> CellMark:
    if num not in mark.numbers:
        return mark
    return create_mark(mark.primary, mark.numbers - {num}, mark.bar_colors)


def without_numbers(mark: CellMark) -> CellMark:
    if not mark.numbers:
        return mark
    return create_mark(mark.primary, (), mark.bar_colors)


def mark_to_dict(mark: CellMark) -> dict[str, Any]:
    """Plain-data form used by storage and API collaborators."""
    return {
        "primary": mark.primary.value,
        "numbers": sorted(mark.numbers),
        "barColors": sorted(mark.bar_colors),
    }


def mark_from_dict(data: dict[str, Any]) -> CellMark:
    return create_mark(
        PrimaryMark(data.get("primary", PrimaryMark.EMPTY.value)),
        data.get("numbers", ()),
        data.get("barColors", ()),
    )
