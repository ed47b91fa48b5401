"""
Tests for shown-to tracking.
"""

from ..engine_core.ownership import ShownToTracker, OTHER_PLAYER_IDS


class TestShownToTracker:

    def test_toggle_adds_and_removes(self):
        tracker = ShownToTracker()
        assert tracker.toggle(4, 2) == frozenset({2})
        assert tracker.toggle(4, 5) == frozenset({2, 5})
        assert tracker.toggle(4, 2) == frozenset({5})
        assert tracker.is_shown(4, 5)
        assert not tracker.is_shown(4, 2)

    def test_empty_set_not_stored(self):
        tracker = ShownToTracker()
        tracker.toggle(4, 2)
        tracker.toggle(4, 2)
        assert not tracker.has_been_shown(4)
        assert len(tracker) == 0

    def test_unknown_card_reads_empty(self):
        assert ShownToTracker().shown_to(9) == frozenset()

    def test_clear_card_and_reset(self):
        tracker = ShownToTracker()
        tracker.toggle(1, 3)
        tracker.toggle(2, 4)

        tracker.clear_card(1)
        assert not tracker.has_been_shown(1)
        assert tracker.has_been_shown(2)

        tracker.reset()
        assert len(tracker) == 0

    def test_dict_round_trip(self):
        tracker = ShownToTracker()
        tracker.toggle(3, 6)
        tracker.toggle(3, 2)

        data = tracker.to_dict()
        assert data == {"3": [2, 6]}
        assert ShownToTracker.from_dict(data).shown_to(3) == frozenset({2, 6})

    def test_every_opponent(self):
        tracker = ShownToTracker()
        for player_id in OTHER_PLAYER_IDS:
            tracker.toggle(7, player_id)
        assert tracker.shown_to(7) == frozenset(OTHER_PLAYER_IDS)
        assert 1 not in tracker.shown_to(7)
