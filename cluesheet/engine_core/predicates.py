"""
Derived predicates - Read-time computations over the grid.

Nothing here is stored, so results can never drift from the marks.
"""

from __future__ import annotations
from typing import Iterable, TYPE_CHECKING

from .marks import PrimaryMark
from .grid import MarkGrid
from .rules import PLAYER_IDS, OWNER_PLAYER_ID

if TYPE_CHECKING:
    from .setup import GameSetup


def is_murder_item(
    grid: MarkGrid,
    card_id: int,
    locked_cards: Iterable[int] = (),
    players: tuple[int, ...] = PLAYER_IDS,
) -> bool:
    """A card nobody holds: not locked, and NOT in every column."""
    if card_id in set(locked_cards):
        return False
    return all(grid.get(card_id, p).primary is PrimaryMark.NOT for p in players)


def murder_items(
    grid: MarkGrid,
    card_ids: Iterable[int],
    locked_cards: Iterable[int] = (),
    players: tuple[int, ...] = PLAYER_IDS,
) -> list[int]:
    locked = set(locked_cards)
    return [c for c in card_ids if is_murder_item(grid, c, locked, players)]


def owned_cards(
    grid: MarkGrid,
    card_ids: Iterable[int],
    owner_id: int = OWNER_PLAYER_ID,
) -> list[int]:
    """Cards the owner's column marks as HAS."""
    return [c for c in card_ids if grid.get(c, owner_id).primary is PrimaryMark.HAS]


def is_row_locked(card_id: int, public_cards: Iterable[int], owner_cards: Iterable[int]) -> bool:
    return card_id in set(public_cards) or card_id in set(owner_cards)


def is_cell_locked(
    card_id: int,
    player_id: int,
    setup: GameSetup,
    owner_id: int = OWNER_PLAYER_ID,
) -> bool:
    """
    Locked cells reject manual edits.

    Public and owner rows are locked once confirmed. Once the owner's hand
    has been confirmed, the owner's own column is locked as well.
    """
    if is_row_locked(card_id, setup.public_cards, setup.owner_cards):
        return True
    return player_id == owner_id and setup.is_playing and bool(setup.owner_cards)
