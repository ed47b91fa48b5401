"""
Tests for the setup state machine.

Tests:
- Deal layout
- Phase transitions and skipped steps
- Selection limits and messages
"""

import pytest

from ..engine_core.setup import (
    GameSetup,
    SetupPhase,
    derive_hand_layout,
    validate_selection,
)


class TestHandLayout:

    @pytest.mark.parametrize(
        "players,expected",
        [(2, (9, 0)), (3, (6, 0)), (4, (4, 2)), (5, (3, 3)), (6, (3, 0))],
    )
    def test_standard_deck(self, players, expected):
        assert derive_hand_layout(21, players) == expected


class TestPhases:
    """selectPublic -> selectOwner -> playing."""

    def test_starts_with_public_when_any(self):
        assert GameSetup.create(2, 4).phase is SetupPhase.SELECT_PUBLIC

    def test_skips_public_when_none(self):
        assert GameSetup.create(0, 3).phase is SetupPhase.SELECT_OWNER

    def test_nothing_to_select_is_playing(self):
        assert GameSetup.create(0, 0).is_playing

    def test_full_flow(self):
        setup = GameSetup.create(2, 4)
        for card_id in (7, 8):
            setup = setup.toggle_selection(card_id)
        setup = setup.confirm()

        assert setup.phase is SetupPhase.SELECT_OWNER
        assert setup.public_cards == (7, 8)
        assert setup.current_selection == ()

        for card_id in (1, 2, 3, 4):
            setup = setup.toggle_selection(card_id)
        setup = setup.confirm()

        assert setup.is_playing
        assert setup.owner_cards == (1, 2, 3, 4)
        assert setup.locked_cards == frozenset({1, 2, 3, 4, 7, 8})

    def test_public_without_hand_goes_to_playing(self):
        setup = GameSetup.create(1, 0).toggle_selection(5).confirm()
        assert setup.is_playing

    def test_info_per_phase(self):
        setup = GameSetup.create(2, 4)
        assert setup.info().title == "Select Public Cards"
        assert setup.info().required_count == 2
        assert GameSetup.create(0, 0).info() is None


class TestSelection:

    def test_selection_capped_at_required(self):
        setup = GameSetup.create(2, 4)
        for card_id in (3, 1, 9):
            setup = setup.toggle_selection(card_id)
        assert setup.current_selection == (1, 3)

    def test_deselect(self):
        setup = GameSetup.create(2, 4).toggle_selection(3).toggle_selection(3)
        assert setup.current_selection == ()

    def test_locked_cards_not_selectable(self):
        setup = GameSetup.create(2, 4).toggle_selection(7).toggle_selection(8).confirm()
        assert setup.toggle_selection(7).current_selection == ()

    def test_ignored_while_playing(self):
        setup = GameSetup.create(0, 0)
        assert setup.toggle_selection(1) is setup

    def test_messages(self):
        assert validate_selection(1, 2).message == "Please select 1 more card."
        assert validate_selection(0, 3).message == "Please select 3 more cards."
        assert validate_selection(4, 3).message == (
            "Too many cards selected. Please deselect 1 card."
        )
        assert validate_selection(3, 3).valid

    def test_check_selection(self):
        setup = GameSetup.create(2, 4).toggle_selection(1)
        check = setup.check_selection()
        assert not check.valid
        assert "1 more card" in check.message


class TestSetupStorage:

    def test_dict_keeps_deal_layout(self):
        setup = GameSetup.create(2, 4).toggle_selection(7).toggle_selection(8).confirm()

        data = setup.to_dict()

        assert data["publicCount"] == 2
        assert data["handSize"] == 4
        assert GameSetup.from_dict(data) == setup

    def test_missing_phase_derived_from_layout(self):
        setup = GameSetup.from_dict({"publicCount": 0, "handSize": 4})
        assert setup.phase is SetupPhase.SELECT_OWNER
        assert setup.public_cards == ()
