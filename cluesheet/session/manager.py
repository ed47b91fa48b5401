"""
Session Manager - Creates and manages sheet sessions.

LIFECYCLE:
1. User picks a theme and players -> session created with an empty grid
2. Setup: select/confirm public cards, then the owner's cards
3. Play: manual edits, each followed by any enabled cascades
4. New game -> grid, reveals and setup reset in place
5. Session ended -> removed from memory

PERSISTENCE RULES:
- Sessions are in-memory only
- Persisting the grid or config is a storage collaborator's job; it can
  store SheetState.to_dict() output and restore it with SheetState.from_dict()
"""

from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..catalog import CardCatalog
from ..config.settings import AppConfig, AutoRulesConfig, DEFAULT_CONFIG
from ..engine_core.action import Action, ActionResult
from ..engine_core.reducer import Reducer
from ..engine_core.state import SheetState

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a sheet session."""
    SETUP = "setup"  # Selecting public/owner cards
    PLAYING = "playing"  # Setup complete
    ENDED = "ended"


@dataclass
class Session:
    """
    A single sheet session.

    Owns the SheetState exclusively; every mutation goes through dispatch().
    """
    session_id: str
    config: AppConfig
    catalog: CardCatalog
    sheet: SheetState
    created_at: float
    reducer: Reducer = field(init=False)
    ended: bool = False

    def __post_init__(self):
        self.reducer = self._build_reducer()

    @classmethod
    def create(cls, config: AppConfig, session_id: str | None = None) -> Session:
        hand_size, public_count = config.hand_layout
        return cls(
            session_id=session_id or str(uuid.uuid4()),
            config=config,
            catalog=CardCatalog(config.theme_id),
            sheet=SheetState.create(public_count=public_count, hand_size=hand_size),
            created_at=time.time(),
        )

    def _build_reducer(self) -> Reducer:
        return Reducer(
            catalog=self.catalog,
            rules=self.config.auto_rules,
            players=self.players,
        )

    @property
    def players(self) -> tuple[int, ...]:
        """Column ids, in order."""
        return tuple(sorted(p.id for p in self.config.players))

    @property
    def state(self) -> SessionState:
        if self.ended:
            return SessionState.ENDED
        if self.sheet.setup.is_playing:
            return SessionState.PLAYING
        return SessionState.SETUP

    def is_active(self) -> bool:
        return not self.ended

    def dispatch(self, action: Action) -> ActionResult:
        return self.reducer.apply(self.sheet, action)

    def update_auto_rules(self, auto_rules: AutoRulesConfig) -> None:
        """Swap automation rules; takes effect from the next action."""
        self.config = self.config.with_auto_rules(auto_rules)
        self.reducer = self._build_reducer()
        logger.info(
            "Session %s auto rules: row_elimination=%s last_maybe_deduction=%s",
            self.session_id, auto_rules.row_elimination, auto_rules.last_maybe_deduction,
        )

    def murder_items(self) -> list[int]:
        return self.reducer.murder_items(self.sheet)

    def owned_cards(self) -> list[int]:
        return self.reducer.owned_cards(self.sheet)


class SessionManager:
    """
    Manages sheet sessions.

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(self, config: AppConfig | None = None) -> Session:
        session = Session.create(config or DEFAULT_CONFIG)
        self._sessions[session.session_id] = session
        logger.info(
            "Created session %s (theme=%s, players=%d)",
            session.session_id, session.config.theme_id, session.config.player_count,
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.ended = True
        session.sheet.reset()
        logger.info("Ended session %s", session_id)
        return True

    def list_active_sessions(self) -> list[str]:
        return [sid for sid, session in self._sessions.items() if session.is_active()]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """End sessions older than max_age_seconds. Returns their ids."""
        now = time.time()
        stale = [
            sid for sid, session in self._sessions.items()
            if now - session.created_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id)
        return stale
