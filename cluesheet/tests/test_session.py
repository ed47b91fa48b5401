"""
Tests for session management.
"""

import time

from ..config.settings import AutoRulesConfig, DEFAULT_CONFIG
from ..engine_core.action import Action
from ..engine_core.marks import PrimaryMark
from ..session import SessionState


class TestSessionManager:

    def test_create_default_session(self, session_manager):
        session = session_manager.create_session()

        assert session.config == DEFAULT_CONFIG
        assert session.players == (1, 2, 3, 4)
        assert session.sheet.setup.public_count == 2
        assert session.sheet.setup.hand_size == 4
        assert session.state is SessionState.SETUP
        assert session_manager.list_active_sessions() == [session.session_id]

    def test_sessions_are_independent(self, session_manager, six_player_config):
        first = session_manager.create_session(six_player_config)
        second = session_manager.create_session(six_player_config)

        for card_id in (1, 2, 3):
            first.dispatch(Action.toggle_selection(card_id))
        first.dispatch(Action.confirm_owner())

        assert first.state is SessionState.PLAYING
        assert second.state is SessionState.SETUP
        assert len(second.sheet.grid) == 0

    def test_end_session(self, session_manager):
        session = session_manager.create_session()

        assert session_manager.end_session(session.session_id)
        assert session.state is SessionState.ENDED
        assert session_manager.get_session(session.session_id) is None
        assert not session_manager.end_session(session.session_id)

    def test_cleanup_stale_sessions(self, session_manager):
        old = session_manager.create_session()
        fresh = session_manager.create_session()
        old.created_at = time.time() - 7200

        ended = session_manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert ended == [old.session_id]
        assert session_manager.list_active_sessions() == [fresh.session_id]


class TestSession:

    def test_six_player_layout(self, session_manager, six_player_config):
        session = session_manager.create_session(six_player_config)
        setup = session.sheet.setup

        assert session.players == (1, 2, 3, 4, 5, 6)
        assert (setup.hand_size, setup.public_count) == (3, 0)
        assert setup.phase.value == "selectOwner"

    def test_dispatch_uses_configured_rules(self, session_manager, six_player_config):
        session = session_manager.create_session(six_player_config)
        for card_id in (1, 2, 3):
            session.dispatch(Action.toggle_selection(card_id))
        session.dispatch(Action.confirm_owner())

        result = session.dispatch(Action.mark_has(10, 2))

        assert result.success
        for player_id in (3, 4, 5, 6):
            assert session.sheet.grid.get(10, player_id).primary is PrimaryMark.NOT

    def test_update_auto_rules(self, session_manager, six_player_config):
        session = session_manager.create_session(six_player_config)
        for card_id in (1, 2, 3):
            session.dispatch(Action.toggle_selection(card_id))
        session.dispatch(Action.confirm_owner())

        session.update_auto_rules(AutoRulesConfig())
        session.dispatch(Action.mark_has(10, 2))

        assert not session.config.auto_rules.row_elimination
        assert session.sheet.grid.get(10, 3).primary is PrimaryMark.EMPTY

    def test_murder_items(self, session_manager, six_player_config):
        session = session_manager.create_session(six_player_config)
        for card_id in (1, 2, 3):
            session.dispatch(Action.toggle_selection(card_id))
        session.dispatch(Action.confirm_owner())

        for player_id in (2, 3, 4, 5, 6):
            session.dispatch(Action.mark_not(12, player_id))

        assert session.murder_items() == [12]
        assert session.owned_cards() == [1, 2, 3]
