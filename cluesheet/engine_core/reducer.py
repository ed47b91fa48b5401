"""
Reducer - Applies actions to the sheet state.

The reducer is the single point of sheet mutation.
All changes must go through apply_action().

Design principles:
- Validates before applying
- Returns ActionResult with success/failure, never raises for bad input
- Delegates mark writes and cascades to the RuleEngine
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .action import Action, ActionType, ActionResult, CELL_ACTIONS
from .marks import NUMBER_MARKER_KEYS, BAR_COLOR_KEYS, PrimaryMark
from .constraints import EditValidation
from .predicates import is_cell_locked, murder_items, owned_cards
from .rules import RuleEngine, CascadeResult, PLAYER_IDS, OWNER_PLAYER_ID
from .setup import SetupPhase
from .state import SheetState

if TYPE_CHECKING:
    from ..catalog import CardCatalog
    from ..config.settings import AutoRulesConfig

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to a SheetState.

    Stateless - all state is in SheetState.
    The catalog and auto-rule config provide validation context.
    """
    catalog: CardCatalog
    rules: AutoRulesConfig
    players: tuple[int, ...] = PLAYER_IDS
    engine: RuleEngine = field(init=False)

    def __post_init__(self):
        self.engine = RuleEngine(rules=self.rules, players=self.players)

    def apply(self, state: SheetState, action: Action) -> ActionResult:
        """
        Apply an action to the sheet.

        Returns ActionResult with the (mutated) state or an error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            message, code = validation_error
            logger.info("Rejected %s: %s", action.action_type.value, message)
            return ActionResult.failure(message, error_code=code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        result = handler(state, action)
        if result.success:
            state.action_history.append(action)
        return result

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate_action(self, state: SheetState, action: Action) -> tuple[str, str] | None:
        """Returns (message, error_code) if invalid, None if valid."""
        payload = action.payload
        action_type = action.action_type
        setup = state.setup

        if action_type in CELL_ACTIONS:
            if payload.card_id not in self.catalog or payload.player_id not in self.players:
                return f"No cell for card {payload.card_id}, player {payload.player_id}", "INVALID_CELL"
            if not setup.is_playing:
                return "Finish setup before marking cells", "SETUP_INCOMPLETE"
            if is_cell_locked(payload.card_id, payload.player_id, setup):
                return "This cell is locked", "CELL_LOCKED"

            mark = state.grid.get(payload.card_id, payload.player_id)
            if action_type is ActionType.TOGGLE_NUMBER:
                if payload.key not in NUMBER_MARKER_KEYS:
                    return f"Unknown number marker: {payload.key}", "INVALID_KEY"
                check = self.engine.validator.can_toggle_number(mark, payload.key)
                if not check.allowed:
                    return check.reason, "EDIT_DENIED"
            if action_type is ActionType.TOGGLE_BAR_COLOR and payload.key not in BAR_COLOR_KEYS:
                return f"Unknown bar color: {payload.key}", "INVALID_KEY"

        elif action_type is ActionType.TOGGLE_SELECTION:
            if setup.is_playing:
                return "Setup is already complete", "WRONG_PHASE"
            if payload.card_id not in self.catalog:
                return f"Unknown card: {payload.card_id}", "INVALID_CELL"

        elif action_type is ActionType.CONFIRM_PUBLIC:
            if setup.phase is not SetupPhase.SELECT_PUBLIC:
                return "Not selecting public cards", "WRONG_PHASE"
            check = setup.check_selection()
            if not check.valid:
                return check.message, "INVALID_SELECTION"

        elif action_type is ActionType.CONFIRM_OWNER:
            if setup.phase is not SetupPhase.SELECT_OWNER:
                return "Not selecting your cards", "WRONG_PHASE"
            check = setup.check_selection()
            if not check.valid:
                return check.message, "INVALID_SELECTION"

        elif action_type is ActionType.TOGGLE_SHOWN_TO:
            if payload.player_id == OWNER_PLAYER_ID or payload.player_id not in self.players:
                return f"Cannot show a card to player {payload.player_id}", "INVALID_CELL"
            if payload.card_id not in self.owned_cards(state):
                return f"Card {payload.card_id} is not yours", "NOT_OWNED"

        return None

    def validate_edit(self, state: SheetState, action: Action) -> EditValidation:
        """Advisory check for a proposed cell edit, without applying it."""
        error = self._validate_action(state, action)
        if error:
            return EditValidation.deny(error[0])
        return EditValidation.allow()

    def _get_handler(self, action_type: ActionType):
        handlers = {
            ActionType.MARK_HAS: self._handle_mark_has,
            ActionType.MARK_NOT: self._handle_mark_not,
            ActionType.TOGGLE_NUMBER: self._handle_toggle_number,
            ActionType.TOGGLE_BAR_COLOR: self._handle_toggle_bar_color,
            ActionType.CLEAR_CELL: self._handle_clear_cell,
            ActionType.TOGGLE_SELECTION: self._handle_toggle_selection,
            ActionType.CONFIRM_PUBLIC: self._handle_confirm_public,
            ActionType.CONFIRM_OWNER: self._handle_confirm_owner,
            ActionType.TOGGLE_SHOWN_TO: self._handle_toggle_shown_to,
            ActionType.RESET_GAME: self._handle_reset_game,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Cell edits
    # =========================================================================

    def _handle_mark_has(self, state: SheetState, action: Action) -> ActionResult:
        p = action.payload
        return self._cell_result(state, self.engine.mark_has(state.grid, p.card_id, p.player_id))

    def _handle_mark_not(self, state: SheetState, action: Action) -> ActionResult:
        p = action.payload
        return self._cell_result(state, self.engine.mark_not(state.grid, p.card_id, p.player_id))

    def _handle_toggle_number(self, state: SheetState, action: Action) -> ActionResult:
        p = action.payload
        return self._cell_result(
            state, self.engine.toggle_number(state.grid, p.card_id, p.player_id, p.key)
        )

    def _handle_toggle_bar_color(self, state: SheetState, action: Action) -> ActionResult:
        p = action.payload
        return self._cell_result(
            state, self.engine.toggle_bar_color(state.grid, p.card_id, p.player_id, p.key)
        )

    def _handle_clear_cell(self, state: SheetState, action: Action) -> ActionResult:
        p = action.payload
        return self._cell_result(state, self.engine.clear_cell(state.grid, p.card_id, p.player_id))

    def _cell_result(self, state: SheetState, cascade: CascadeResult) -> ActionResult:
        # A card that stops being owned loses its shown-to reveals
        for change in cascade.changes:
            if (
                change.player_id == OWNER_PLAYER_ID
                and change.before.primary is PrimaryMark.HAS
                and change.after.primary is not PrimaryMark.HAS
            ):
                state.shown_to.clear_card(change.card_id)
        return ActionResult.success_with_state(state, cascade.changes, cascade.fired)

    # =========================================================================
    # Setup
    # =========================================================================

    def _handle_toggle_selection(self, state: SheetState, action: Action) -> ActionResult:
        state.setup = state.setup.toggle_selection(action.payload.card_id)
        return ActionResult.success_with_state(state)

    def _handle_confirm_public(self, state: SheetState, action: Action) -> ActionResult:
        state.setup = state.setup.confirm()
        cascade = self.engine.confirm_public_cards(state.grid, state.setup.public_cards)
        logger.info("Public cards locked: %s", list(state.setup.public_cards))
        return ActionResult.success_with_state(state, cascade.changes, cascade.fired)

    def _handle_confirm_owner(self, state: SheetState, action: Action) -> ActionResult:
        state.setup = state.setup.confirm()
        cascade = self.engine.confirm_owner_cards(
            state.grid,
            owner_cards=state.setup.owner_cards,
            public_cards=state.setup.public_cards,
            all_cards=self.catalog.card_ids,
        )
        logger.info("Owner cards locked: %s", list(state.setup.owner_cards))
        return ActionResult.success_with_state(state, cascade.changes, cascade.fired)

    # =========================================================================
    # Other
    # =========================================================================

    def _handle_toggle_shown_to(self, state: SheetState, action: Action) -> ActionResult:
        p = action.payload
        shown = state.shown_to.toggle(p.card_id, p.player_id)
        return ActionResult.success_with_state(
            state,
            descriptions=[f"Card {p.card_id} shown to {sorted(shown)}"],
        )

    def _handle_reset_game(self, state: SheetState, action: Action) -> ActionResult:
        state.reset()
        logger.info("Game reset")
        return ActionResult.success_with_state(state, descriptions=["Game reset"])

    # =========================================================================
    # Queries
    # =========================================================================

    def owned_cards(self, state: SheetState) -> list[int]:
        return owned_cards(state.grid, self.catalog.card_ids, OWNER_PLAYER_ID)

    def murder_items(self, state: SheetState) -> list[int]:
        return murder_items(
            state.grid,
            self.catalog.card_ids,
            locked_cards=state.setup.locked_cards,
            players=self.players,
        )


def apply_action(
    catalog: CardCatalog,
    rules: AutoRulesConfig,
    state: SheetState,
    action: Action,
    players: tuple[int, ...] = PLAYER_IDS,
) -> ActionResult:
    """Convenience function to apply a single action."""
    return Reducer(catalog=catalog, rules=rules, players=players).apply(state, action)
