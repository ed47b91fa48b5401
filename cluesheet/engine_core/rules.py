"""
Rule Engine - Cascading automation rules over the mark grid.

Triggers:
- Mark-as-HAS: row elimination (if enabled)
- Mark-as-NOT: last-maybe deduction (if enabled), which can resolve a
  cell to HAS and so trigger row elimination
- Setup confirmation of public cards and of owner cards (always on)

Cascades run off an explicit worklist instead of recursion. Every write
of one operation (the user's own edit plus everything it triggers) is
staged on an overlay and committed with a single MarkGrid.batch_set().

Termination: a cascade only ever moves unsettled cells to HAS or NOT and
never rewrites a settled cell, so each cell changes at most once per
cascade.
"""

from __future__ import annotations
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, TYPE_CHECKING

from .marks import (
    CellMark,
    PrimaryMark,
    create_mark,
    with_primary,
    with_toggled_number,
    with_toggled_bar_color,
    without_number,
    EMPTY_MARK,
)
from .grid import MarkGrid, MarkUpdate
from .constraints import EditValidator

if TYPE_CHECKING:
    from ..config.settings import AutoRulesConfig

logger = logging.getLogger(__name__)


PLAYER_IDS: tuple[int, ...] = (1, 2, 3, 4, 5, 6)
OWNER_PLAYER_ID = 1


class ChangeSource(Enum):
    """What caused a cell to change."""
    USER = "user"
    ROW_ELIMINATION = "rowElimination"
    LAST_MAYBE_DEDUCTION = "lastMaybeDeduction"
    SETUP_PUBLIC = "setupPublic"
    SETUP_OWNER = "setupOwner"


class EventKind(Enum):
    MARKED_HAS = "marked_has"
    MARKED_NOT = "marked_not"


@dataclass(frozen=True)
class CascadeEvent:
    """A pending trigger on the worklist."""
    kind: EventKind
    card_id: int
    player_id: int


@dataclass(frozen=True)
class MarkChange:
    """One cell that changed during an operation."""
    card_id: int
    player_id: int
    before: CellMark
    after: CellMark
    source: ChangeSource


@dataclass
class CascadeResult:
    """Outcome of an engine operation."""
    changes: list[MarkChange] = field(default_factory=list)
    fired: list[str] = field(default_factory=list)  # Human-readable rule log

    def changed_cells(self) -> set[tuple[int, int]]:
        return {(c.card_id, c.player_id) for c in self.changes}

    def by_source(self, source: ChangeSource) -> list[MarkChange]:
        return [c for c in self.changes if c.source is source]


class _StagedGrid:
    """
    Read-through overlay on a MarkGrid.

    Reads see staged writes first; nothing touches the grid until commit().
    """

    def __init__(self, grid: MarkGrid):
        self._grid = grid
        self._staged: dict[tuple[int, int], CellMark] = {}
        self._changes: dict[tuple[int, int], MarkChange] = {}

    def get(self, card_id: int, player_id: int) -> CellMark:
        key = (card_id, player_id)
        if key in self._staged:
            return self._staged[key]
        return self._grid.get(card_id, player_id)

    def set(self, card_id: int, player_id: int, mark: CellMark, source: ChangeSource) -> bool:
        """Stage a write. Returns False when the value is unchanged."""
        key = (card_id, player_id)
        before = self.get(card_id, player_id)
        if before == mark:
            return False
        self._staged[key] = mark
        original = self._changes.get(key)
        first_before = original.before if original else before
        self._changes[key] = MarkChange(card_id, player_id, first_before, mark, source)
        return True

    def find_number_in_column(self, player_id: int, num: int) -> list[int]:
        card_ids = set(self._grid.find_number_in_column(player_id, num))
        for (card_id, p), mark in self._staged.items():
            if p != player_id:
                continue
            if num in mark.numbers:
                card_ids.add(card_id)
            else:
                card_ids.discard(card_id)
        return sorted(card_ids)

    def commit(self, result: CascadeResult) -> CascadeResult:
        self._grid.batch_set(
            MarkUpdate(card_id, player_id, mark)
            for (card_id, player_id), mark in self._staged.items()
        )
        result.changes.extend(
            change for change in self._changes.values() if change.before != change.after
        )
        return result


@dataclass
class RuleEngine:
    """
    Applies user edits and setup events, plus the cascades they trigger.

    Stateless apart from its configuration; the grid is passed in.
    """
    rules: AutoRulesConfig
    players: tuple[int, ...] = PLAYER_IDS
    validator: EditValidator | None = None

    def __post_init__(self):
        if self.validator is None:
            self.validator = EditValidator(rules=self.rules)

    # =========================================================================
    # User edits
    # =========================================================================

    def mark_has(self, grid: MarkGrid, card_id: int, player_id: int) -> CascadeResult:
        """Set primary to HAS (numbers preserved) and run the cascade."""
        staged = _StagedGrid(grid)
        result = CascadeResult()
        current = staged.get(card_id, player_id)
        staged.set(card_id, player_id, with_primary(current, PrimaryMark.HAS), ChangeSource.USER)
        self._run(staged, deque([CascadeEvent(EventKind.MARKED_HAS, card_id, player_id)]), result)
        return staged.commit(result)

    def mark_not(self, grid: MarkGrid, card_id: int, player_id: int) -> CascadeResult:
        """Set primary to NOT (numbers preserved) and run the cascade."""
        staged = _StagedGrid(grid)
        result = CascadeResult()
        current = staged.get(card_id, player_id)
        staged.set(card_id, player_id, with_primary(current, PrimaryMark.NOT), ChangeSource.USER)
        self._run(staged, deque([CascadeEvent(EventKind.MARKED_NOT, card_id, player_id)]), result)
        return staged.commit(result)

    def toggle_number(self, grid: MarkGrid, card_id: int, player_id: int, num: int) -> CascadeResult:
        """
        Toggle a number marker.

        Removing a number clears it from the whole column only while the
        column-removal constraint is required.
        """
        staged = _StagedGrid(grid)
        current = staged.get(card_id, player_id)
        if num in current.numbers and self.validator.number_removal_clears_column():
            for other_card in staged.find_number_in_column(player_id, num):
                mark = staged.get(other_card, player_id)
                staged.set(other_card, player_id, without_number(mark, num), ChangeSource.USER)
        else:
            staged.set(card_id, player_id, with_toggled_number(current, num), ChangeSource.USER)
        return staged.commit(CascadeResult())

    def toggle_bar_color(self, grid: MarkGrid, card_id: int, player_id: int, color: int) -> CascadeResult:
        """Bars are manual-only helpers: no cascade."""
        staged = _StagedGrid(grid)
        current = staged.get(card_id, player_id)
        staged.set(card_id, player_id, with_toggled_bar_color(current, color), ChangeSource.USER)
        return staged.commit(CascadeResult())

    def clear_cell(self, grid: MarkGrid, card_id: int, player_id: int) -> CascadeResult:
        staged = _StagedGrid(grid)
        staged.set(card_id, player_id, EMPTY_MARK, ChangeSource.USER)
        return staged.commit(CascadeResult())

    # =========================================================================
    # Setup events (always on)
    # =========================================================================

    def confirm_public_cards(self, grid: MarkGrid, public_cards: Iterable[int]) -> CascadeResult:
        """Every cell of each public row becomes NOT; prior marks are discarded."""
        staged = _StagedGrid(grid)
        result = CascadeResult()
        not_mark = create_mark(PrimaryMark.NOT)
        for card_id in public_cards:
            for player_id in self.players:
                staged.set(card_id, player_id, not_mark, ChangeSource.SETUP_PUBLIC)
            result.fired.append(f"Public card {card_id}: row marked NOT")
        logger.debug("Public cards confirmed: %s", result.fired)
        return staged.commit(result)

    def confirm_owner_cards(
        self,
        grid: MarkGrid,
        owner_cards: Iterable[int],
        public_cards: Iterable[int],
        all_cards: Iterable[int],
        owner_id: int = OWNER_PLAYER_ID,
    ) -> CascadeResult:
        """
        Owner rows: HAS for the owner, NOT for everyone else.
        Every other non-public card: NOT in the owner's column only.
        """
        owned = set(owner_cards)
        public = set(public_cards)
        staged = _StagedGrid(grid)
        result = CascadeResult()
        has_mark = create_mark(PrimaryMark.HAS)
        not_mark = create_mark(PrimaryMark.NOT)

        for card_id in sorted(owned):
            for player_id in self.players:
                mark = has_mark if player_id == owner_id else not_mark
                staged.set(card_id, player_id, mark, ChangeSource.SETUP_OWNER)
            result.fired.append(f"Owner card {card_id}: HAS for P{owner_id}, NOT elsewhere")

        for card_id in all_cards:
            if card_id in owned or card_id in public:
                continue
            staged.set(card_id, owner_id, not_mark, ChangeSource.SETUP_OWNER)

        logger.debug("Owner cards confirmed for P%d: %s", owner_id, sorted(owned))
        return staged.commit(result)

    # =========================================================================
    # Cascade
    # =========================================================================

    def _run(self, staged: _StagedGrid, worklist: deque[CascadeEvent], result: CascadeResult) -> None:
        while worklist:
            event = worklist.popleft()
            if event.kind is EventKind.MARKED_HAS:
                self._eliminate_row(staged, event, result)
            else:
                worklist.extend(self._deduce_last_maybe(staged, event, result))

    def _eliminate_row(self, staged: _StagedGrid, event: CascadeEvent, result: CascadeResult) -> None:
        """At most one player holds a card: mark unsettled cells NOT."""
        if not self.rules.row_elimination:
            return
        for player_id in self.players:
            if player_id == event.player_id:
                continue
            mark = staged.get(event.card_id, player_id)
            if mark.is_settled:
                continue
            staged.set(
                event.card_id,
                player_id,
                with_primary(mark, PrimaryMark.NOT),
                ChangeSource.ROW_ELIMINATION,
            )
            result.fired.append(
                f"Row elimination: card {event.card_id} P{player_id} -> NOT"
            )
            logger.debug(
                "Row elimination: card %d P%d -> NOT (P%d has it)",
                event.card_id, player_id, event.player_id,
            )

    def _deduce_last_maybe(
        self, staged: _StagedGrid, event: CascadeEvent, result: CascadeResult
    ) -> list[CascadeEvent]:
        """
        For each number on the NOT cell, if exactly one cell in the column
        still carries it without being NOT, that cell must be HAS.
        """
        if not self.rules.last_maybe_deduction:
            return []
        source = staged.get(event.card_id, event.player_id)
        resolved: list[CascadeEvent] = []
        for num in sorted(source.numbers):
            column_cards = staged.find_number_in_column(event.player_id, num)
            marks = {card_id: staged.get(card_id, event.player_id) for card_id in column_cards}
            if any(m.primary is PrimaryMark.HAS for m in marks.values()):
                continue
            candidates = [
                card_id for card_id, m in marks.items()
                if m.primary is not PrimaryMark.NOT
            ]
            if len(candidates) != 1:
                continue
            (card_id,) = candidates
            staged.set(
                card_id,
                event.player_id,
                with_primary(marks[card_id], PrimaryMark.HAS),
                ChangeSource.LAST_MAYBE_DEDUCTION,
            )
            result.fired.append(
                f"Last maybe {num}: card {card_id} P{event.player_id} -> HAS"
            )
            logger.debug(
                "Last-maybe deduction on number %d: card %d P%d -> HAS",
                num, card_id, event.player_id,
            )
            resolved.append(CascadeEvent(EventKind.MARKED_HAS, card_id, event.player_id))
        return resolved
