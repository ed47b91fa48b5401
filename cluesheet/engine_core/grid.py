"""
Mark Grid - Sparse store of cell marks keyed by (card_id, player_id).

The grid is owned by one session and passed by reference; there is no
module-level instance. Empty marks are never stored: a missing key reads
as EMPTY_MARK.

All queries scan the sparse mapping directly. Writes either touch a single
cell or go through batch_set(), which builds the next mapping completely
before swapping it in, so a reader never sees half of a batch.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from .marks import (
    CellMark,
    PrimaryMark,
    EMPTY_MARK,
    is_empty_mark,
    without_number,
    mark_to_dict,
    mark_from_dict,
)


CellKey = tuple[int, int]  # (card_id, player_id)


@dataclass(frozen=True)
class MarkUpdate:
    """A pending write of one cell."""
    card_id: int
    player_id: int
    mark: CellMark


@dataclass
class MarkGrid:
    """Sparse mapping from (card_id, player_id) to a non-empty CellMark."""
    _cells: dict[CellKey, CellMark] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, key: CellKey) -> bool:
        return key in self._cells

    def cells(self) -> Iterator[tuple[int, int, CellMark]]:
        """Iterate stored cells as (card_id, player_id, mark)."""
        for (card_id, player_id), mark in self._cells.items():
            yield card_id, player_id, mark

    # --- Point access ---

    def get(self, card_id: int, player_id: int) -> CellMark:
        return self._cells.get((card_id, player_id), EMPTY_MARK)

    def set(self, card_id: int, player_id: int, mark: CellMark) -> None:
        key = (card_id, player_id)
        if is_empty_mark(mark):
            self._cells.pop(key, None)
        else:
            self._cells[key] = mark

    def clear(self, card_id: int, player_id: int) -> None:
        self._cells.pop((card_id, player_id), None)

    def batch_set(self, updates: Iterable[MarkUpdate]) -> None:
        """Apply many writes as one unit."""
        next_cells = dict(self._cells)
        for update in updates:
            key = (update.card_id, update.player_id)
            if is_empty_mark(update.mark):
                next_cells.pop(key, None)
            else:
                next_cells[key] = update.mark
        self._cells = next_cells

    def reset(self) -> None:
        self._cells = {}

    # --- Row/column queries (derived, not stored) ---

    def row(self, card_id: int) -> dict[int, CellMark]:
        """Marks present in a row, keyed by player_id."""
        return {
            player_id: mark
            for (c, player_id), mark in self._cells.items()
            if c == card_id
        }

    def column(self, player_id: int) -> dict[int, CellMark]:
        """Marks present in a column, keyed by card_id."""
        return {
            card_id: mark
            for (card_id, p), mark in self._cells.items()
            if p == player_id
        }

    def find_number_in_column(self, player_id: int, num: int) -> list[int]:
        """Card ids in a column whose mark carries number `num`."""
        return sorted(
            card_id
            for (card_id, p), mark in self._cells.items()
            if p == player_id and num in mark.numbers
        )

    def row_has_primary(self, card_id: int, primary: PrimaryMark) -> bool:
        return any(
            c == card_id and mark.primary is primary
            for (c, _), mark in self._cells.items()
        )

    def column_has_primary(self, player_id: int, primary: PrimaryMark) -> bool:
        return any(
            p == player_id and mark.primary is primary
            for (_, p), mark in self._cells.items()
        )

    def column_has_number(self, player_id: int, num: int) -> bool:
        return any(
            p == player_id and num in mark.numbers
            for (_, p), mark in self._cells.items()
        )

    def count_primary_in_row(self, card_id: int, primary: PrimaryMark) -> int:
        return sum(
            1
            for (c, _), mark in self._cells.items()
            if c == card_id and mark.primary is primary
        )

    def all_used_numbers(self) -> frozenset[int]:
        used: set[int] = set()
        for mark in self._cells.values():
            used |= mark.numbers
        return frozenset(used)

    # --- Column-wide edits ---

    def remove_number_from_column(self, player_id: int, num: int) -> list[MarkUpdate]:
        """Strip `num` from every cell in a column. Returns the applied updates."""
        updates = [
            MarkUpdate(card_id, player_id, without_number(self.get(card_id, player_id), num))
            for card_id in self.find_number_in_column(player_id, num)
        ]
        self.batch_set(updates)
        return updates

    # --- Plain-data round trip ---

    def to_dict(self) -> dict[str, Any]:
        return {
            "cells": [
                {"cardId": card_id, "playerId": player_id, "mark": mark_to_dict(mark)}
                for (card_id, player_id), mark in sorted(self._cells.items())
            ]
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MarkGrid:
        grid = cls()
        grid.batch_set(
            MarkUpdate(cell["cardId"], cell["playerId"], mark_from_dict(cell["mark"]))
            for cell in data.get("cells", [])
        )
        return grid
