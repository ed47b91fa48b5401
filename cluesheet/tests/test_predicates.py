"""
Tests for derived predicates.
"""

from ..engine_core.marks import PrimaryMark, create_mark
from ..engine_core.predicates import (
    is_murder_item,
    murder_items,
    owned_cards,
    is_row_locked,
    is_cell_locked,
)
from ..engine_core.rules import PLAYER_IDS
from ..engine_core.setup import GameSetup, SetupPhase


def mark_row_not(grid, card_id):
    for player_id in PLAYER_IDS:
        grid.set(card_id, player_id, create_mark(PrimaryMark.NOT))


class TestMurderItem:
    """A card is a murder item when every column reads NOT."""

    def test_all_not_is_murder_item(self, grid):
        mark_row_not(grid, 3)
        assert is_murder_item(grid, 3)

    def test_flips_when_one_column_changes(self, grid):
        mark_row_not(grid, 3)
        grid.set(3, 4, create_mark(PrimaryMark.EMPTY))
        assert not is_murder_item(grid, 3)

        grid.set(3, 4, create_mark(PrimaryMark.BARS, bar_colors=[1]))
        assert not is_murder_item(grid, 3)

    def test_numbers_do_not_matter(self, grid):
        mark_row_not(grid, 3)
        grid.set(3, 2, create_mark(PrimaryMark.NOT, [1, 2]))
        assert is_murder_item(grid, 3)

    def test_locked_cards_excluded(self, grid):
        mark_row_not(grid, 7)
        assert not is_murder_item(grid, 7, locked_cards=[7, 8])

    def test_murder_items_lists_matches(self, grid, catalog):
        mark_row_not(grid, 2)
        mark_row_not(grid, 9)
        mark_row_not(grid, 15)
        assert murder_items(grid, catalog.card_ids, locked_cards=[15]) == [2, 9]

    def test_respects_player_columns(self, grid):
        for player_id in (1, 2, 3):
            grid.set(4, player_id, create_mark(PrimaryMark.NOT))
        assert is_murder_item(grid, 4, players=(1, 2, 3))
        assert not is_murder_item(grid, 4)


class TestOwnership:

    def test_owned_cards(self, grid, catalog):
        grid.set(1, 1, create_mark(PrimaryMark.HAS))
        grid.set(6, 1, create_mark(PrimaryMark.HAS, [2]))
        grid.set(8, 2, create_mark(PrimaryMark.HAS))
        assert owned_cards(grid, catalog.card_ids) == [1, 6]


class TestLocking:
    """Public and owner rows lock, and the owner column after setup."""

    def test_row_locked(self):
        assert is_row_locked(7, public_cards=[7, 8], owner_cards=[])
        assert is_row_locked(1, public_cards=[], owner_cards=[1])
        assert not is_row_locked(2, public_cards=[7], owner_cards=[1])

    def test_owner_column_locked_after_owner_setup(self):
        setup = GameSetup(
            public_count=2,
            hand_size=4,
            phase=SetupPhase.PLAYING,
            public_cards=(7, 8),
            owner_cards=(1, 2, 3, 4),
        )
        assert is_cell_locked(10, 1, setup)
        assert not is_cell_locked(10, 2, setup)
        assert is_cell_locked(7, 3, setup)

    def test_owner_column_open_without_hand(self):
        setup = GameSetup.create(public_count=0, hand_size=0)
        assert setup.is_playing
        assert not is_cell_locked(10, 1, setup)
