"""
API Service - Business logic layer between the API and the engine.

The service:
1. Translates API requests to engine actions
2. Manages sessions
3. Builds sheet views for presentation

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Lookup failures and rejected actions come back as ErrorResponse values.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from .schemas import (
    # Requests
    CreateSessionRequest,
    CellEditRequest,
    SelectCardRequest,
    ShownToRequest,
    # Responses
    SessionResponse,
    SheetResponse,
    ActionResponse,
    CellValidationResponse,
    ThemeListResponse,
    ErrorResponse,
    # Shared
    MarkInfo,
    CellInfo,
    CardRow,
    PlayerInfo,
    AutoRulesInfo,
    SetupInfo,
    CellChangeInfo,
    ValidationInfo,
    CardInfo,
    ThemeInfo,
    # Enums
    SessionStatus,
    PrimaryMarkName,
    CellOperation,
    ErrorCode,
)
from .. import __version__
from ..catalog import THEMES
from ..config.settings import AppConfig, AutoRulesConfig, PlayerConfig, DEFAULT_CONFIG
from ..engine_core.action import Action, ActionResult
from ..engine_core.constraints import EditValidation
from ..engine_core.marks import CellMark, NUMBER_MARKER_KEYS, BAR_COLOR_KEYS
from ..engine_core.predicates import is_cell_locked
from ..engine_core.setup import SetupPhase
from ..session import SessionManager, Session

logger = logging.getLogger(__name__)


def _mark_info(mark: CellMark) -> MarkInfo:
    return MarkInfo(
        primary=PrimaryMarkName(mark.primary.value),
        numbers=sorted(mark.numbers),
        bar_colors=sorted(mark.bar_colors),
    )


def _validation_info(check: EditValidation) -> ValidationInfo:
    return ValidationInfo(allowed=check.allowed, reason=check.reason)


def _session_not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Session {session_id} not found",
        error_code=ErrorCode.SESSION_NOT_FOUND,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        session = service.create_session(CreateSessionRequest())
        service.edit_cell(session.session_id, 7, 2, CellEditRequest(op="has"))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # =========================================================================
    # Catalog
    # =========================================================================

    def list_themes(self) -> ThemeListResponse:
        return ThemeListResponse(
            themes=[
                ThemeInfo(
                    theme_id=theme.id,
                    label=theme.label,
                    cards=[
                        CardInfo(card_id=c.id, name=c.name, category=c.category.value)
                        for c in theme.cards
                    ],
                )
                for theme in THEMES.values()
            ]
        )

    def health(self) -> dict:
        return {"status": "healthy", "service": "cluesheet", "version": __version__}

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """Create a session; invalid theme or players yield an ErrorResponse."""
        try:
            config = self._build_config(request)
        except ValidationError as e:
            theme_error = any(
                err["loc"] and err["loc"][0] in ("theme_id", "themeId") for err in e.errors()
            )
            code = ErrorCode.INVALID_THEME if theme_error else ErrorCode.VALIDATION_ERROR
            logger.info("Rejected session config: %s", code.value)
            return ErrorResponse(
                error=f"Invalid session configuration: {e.error_count()} error(s)",
                error_code=code,
                details={"errors": [err["msg"] for err in e.errors()]},
            )
        session = self.session_manager.create_session(config)
        return self._session_to_response(session)

    def _build_config(self, request: CreateSessionRequest) -> AppConfig:
        players = (
            tuple(PlayerConfig(id=p.id, name=p.name, color=p.color) for p in request.players)
            if request.players is not None
            else DEFAULT_CONFIG.players
        )
        auto_rules = (
            AutoRulesConfig(**request.auto_rules.model_dump())
            if request.auto_rules
            else DEFAULT_CONFIG.auto_rules
        )
        return AppConfig(
            theme_id=request.theme_id or DEFAULT_CONFIG.theme_id,
            players=players,
            auto_rules=auto_rules,
        )

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def update_auto_rules(self, session_id: str, rules: AutoRulesInfo) -> SheetResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        session.update_auto_rules(AutoRulesConfig(**rules.model_dump()))
        return self._build_sheet(session)

    # =========================================================================
    # Sheet
    # =========================================================================

    def get_sheet(self, session_id: str) -> SheetResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._build_sheet(session)

    def edit_cell(
        self,
        session_id: str,
        card_id: int,
        player_id: int,
        request: CellEditRequest,
    ) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._dispatch(session, self._cell_action(card_id, player_id, request))

    def validate_cell(
        self, session_id: str, card_id: int, player_id: int
    ) -> CellValidationResponse | ErrorResponse:
        """Report which manual edits the cell currently accepts."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        sheet = session.sheet

        def check(action: Action) -> ValidationInfo:
            return _validation_info(session.reducer.validate_edit(sheet, action))

        return CellValidationResponse(
            session_id=session_id,
            card_id=card_id,
            player_id=player_id,
            mark=_mark_info(sheet.grid.get(card_id, player_id)),
            can_mark_has=check(Action.mark_has(card_id, player_id)),
            can_mark_not=check(Action.mark_not(card_id, player_id)),
            can_clear=check(Action.clear_cell(card_id, player_id)),
            numbers={
                n: check(Action.toggle_number(card_id, player_id, n)) for n in NUMBER_MARKER_KEYS
            },
            bar_colors={
                c: check(Action.toggle_bar_color(card_id, player_id, c)) for c in BAR_COLOR_KEYS
            },
        )

    # =========================================================================
    # Setup, reveals, reset
    # =========================================================================

    def select_card(self, session_id: str, request: SelectCardRequest) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._dispatch(session, Action.toggle_selection(request.card_id))

    def confirm_setup(self, session_id: str) -> ActionResponse | ErrorResponse:
        """Confirm whichever setup step is current."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        if session.sheet.setup.phase is SetupPhase.SELECT_PUBLIC:
            action = Action.confirm_public()
        else:
            action = Action.confirm_owner()
        return self._dispatch(session, action)

    def toggle_shown_to(self, session_id: str, request: ShownToRequest) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._dispatch(session, Action.toggle_shown_to(request.card_id, request.player_id))

    def reset_game(self, session_id: str) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._dispatch(session, Action.reset_game())

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _cell_action(card_id: int, player_id: int, request: CellEditRequest) -> Action:
        if request.op is CellOperation.HAS:
            return Action.mark_has(card_id, player_id)
        if request.op is CellOperation.NOT:
            return Action.mark_not(card_id, player_id)
        if request.op is CellOperation.TOGGLE_NUMBER:
            return Action.toggle_number(card_id, player_id, request.key)
        if request.op is CellOperation.TOGGLE_BAR:
            return Action.toggle_bar_color(card_id, player_id, request.key)
        return Action.clear_cell(card_id, player_id)

    def _dispatch(self, session: Session, action: Action) -> ActionResponse | ErrorResponse:
        result = session.dispatch(action)
        if not result.success:
            return ErrorResponse(
                error=result.error or "Action failed",
                error_code=ErrorCode.__members__.get(result.error_code, ErrorCode.INTERNAL_ERROR),
            )
        return self._action_to_response(session, result)

    def _action_to_response(self, session: Session, result: ActionResult) -> ActionResponse:
        return ActionResponse(
            session_id=session.session_id,
            success=True,
            changes=[
                CellChangeInfo(
                    card_id=c.card_id,
                    player_id=c.player_id,
                    before=_mark_info(c.before),
                    after=_mark_info(c.after),
                    source=c.source.value,
                )
                for c in result.changes
            ],
            messages=result.state_changes,
            sheet=self._build_sheet(session),
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        setup = session.sheet.setup
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            theme_id=session.config.theme_id,
            player_count=session.config.player_count,
            hand_size=setup.hand_size,
            public_count=setup.public_count,
            created_at=session.created_at,
        )

    def _build_sheet(self, session: Session) -> SheetResponse:
        sheet = session.sheet
        setup = sheet.setup
        info = setup.info()
        murder = set(session.murder_items())
        owned = set(session.owned_cards())
        public = set(setup.public_cards)

        rows = [
            CardRow(
                card_id=card.id,
                name=card.name,
                category=card.category.value,
                cells=[
                    CellInfo(
                        player_id=player_id,
                        mark=_mark_info(sheet.grid.get(card.id, player_id)),
                        locked=is_cell_locked(card.id, player_id, setup),
                    )
                    for player_id in session.players
                ],
                is_public=card.id in public,
                is_owned=card.id in owned,
                is_murder_item=card.id in murder,
                shown_to=sorted(sheet.shown_to.shown_to(card.id)),
            )
            for card in session.catalog.cards
        ]

        return SheetResponse(
            session_id=session.session_id,
            theme_id=session.config.theme_id,
            players=[
                PlayerInfo(player_id=p.id, name=p.name, color=p.color)
                for p in session.config.players
            ],
            auto_rules=AutoRulesInfo(
                row_elimination=session.config.auto_rules.row_elimination,
                last_maybe_deduction=session.config.auto_rules.last_maybe_deduction,
            ),
            setup=SetupInfo(
                phase=setup.phase.value,
                public_cards=list(setup.public_cards),
                owner_cards=list(setup.owner_cards),
                current_selection=list(setup.current_selection),
                required_count=setup.required_count,
                title=info.title if info else None,
                instruction=info.instruction if info else None,
                confirm_label=info.confirm_label if info else None,
            ),
            rows=rows,
            murder_items=sorted(murder),
        )
