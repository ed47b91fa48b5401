"""
Action System - Actions, payloads, and results.

Actions represent:
1. Manual cell edits (HAS, NOT, numbers, bar colors, clear)
2. Setup steps (selecting and confirming public/owner cards)
3. Shown-to reveals and game reset

All sheet changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Cell edits
    MARK_HAS = "mark_has"
    MARK_NOT = "mark_not"
    TOGGLE_NUMBER = "toggle_number"
    TOGGLE_BAR_COLOR = "toggle_bar_color"
    CLEAR_CELL = "clear_cell"

    # Setup
    TOGGLE_SELECTION = "toggle_selection"
    CONFIRM_PUBLIC = "confirm_public"
    CONFIRM_OWNER = "confirm_owner"

    # Other
    TOGGLE_SHOWN_TO = "toggle_shown_to"
    RESET_GAME = "reset_game"


CELL_ACTIONS = frozenset({
    ActionType.MARK_HAS,
    ActionType.MARK_NOT,
    ActionType.TOGGLE_NUMBER,
    ActionType.TOGGLE_BAR_COLOR,
    ActionType.CLEAR_CELL,
})


@dataclass
class ActionPayload:
    """
    Payload for an action.

    Different action types use different fields; the reducer validates.
    """
    card_id: int | None = None
    player_id: int | None = None
    key: int | None = None  # number marker or bar color


@dataclass
class Action:
    """A complete action to be applied to the sheet."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None

    @classmethod
    def mark_has(cls, card_id: int, player_id: int) -> Action:
        return cls(ActionType.MARK_HAS, ActionPayload(card_id=card_id, player_id=player_id))

    @classmethod
    def mark_not(cls, card_id: int, player_id: int) -> Action:
        return cls(ActionType.MARK_NOT, ActionPayload(card_id=card_id, player_id=player_id))

    @classmethod
    def toggle_number(cls, card_id: int, player_id: int, num: int) -> Action:
        return cls(
            ActionType.TOGGLE_NUMBER,
            ActionPayload(card_id=card_id, player_id=player_id, key=num),
        )

    @classmethod
    def toggle_bar_color(cls, card_id: int, player_id: int, color: int) -> Action:
        return cls(
            ActionType.TOGGLE_BAR_COLOR,
            ActionPayload(card_id=card_id, player_id=player_id, key=color),
        )

    @classmethod
    def clear_cell(cls, card_id: int, player_id: int) -> Action:
        return cls(ActionType.CLEAR_CELL, ActionPayload(card_id=card_id, player_id=player_id))

    @classmethod
    def toggle_selection(cls, card_id: int) -> Action:
        return cls(ActionType.TOGGLE_SELECTION, ActionPayload(card_id=card_id))

    @classmethod
    def confirm_public(cls) -> Action:
        return cls(ActionType.CONFIRM_PUBLIC)

    @classmethod
    def confirm_owner(cls) -> Action:
        return cls(ActionType.CONFIRM_OWNER)

    @classmethod
    def toggle_shown_to(cls, card_id: int, player_id: int) -> Action:
        return cls(ActionType.TOGGLE_SHOWN_TO, ActionPayload(card_id=card_id, player_id=player_id))

    @classmethod
    def reset_game(cls) -> Action:
        return cls(ActionType.RESET_GAME)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action succeeded
    - The sheet state (if succeeded)
    - Error message and code (if failed)
    - Cell changes, including automated ones, for UI updates
    """
    success: bool
    new_state: Any | None = None  # SheetState
    error: str | None = None
    error_code: str | None = None

    changes: list[Any] = field(default_factory=list)  # MarkChange
    state_changes: list[str] = field(default_factory=list)  # Human-readable

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[Any] | None = None,
        descriptions: list[str] | None = None,
    ) -> ActionResult:
        return cls(
            success=True,
            new_state=state,
            changes=changes or [],
            state_changes=descriptions or [],
        )
