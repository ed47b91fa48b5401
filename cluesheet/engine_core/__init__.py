"""
Engine Core - Mark-state engine for the deduction sheet.

The engine is the runtime that:
1. Models cell marks as normalized immutable values
2. Stores them in a sparse grid
3. Validates manual edits against rule-dependent constraints
4. Applies cascading automation rules
5. Answers derived questions (murder items, ownership)
"""

from .marks import (
    PrimaryMark,
    CellMark,
    EMPTY_MARK,
    NUMBER_MARKER_KEYS,
    BAR_COLOR_KEYS,
    create_mark,
    with_primary,
    with_toggled_number,
    with_toggled_bar_color,
    without_number,
    without_numbers,
    is_empty_mark,
)
from .grid import MarkGrid, MarkUpdate
from .constraints import (
    AutoRuleId,
    ConstraintId,
    CONSTRAINT_DEPENDENCIES,
    EditValidation,
    EditValidator,
    is_constraint_required,
)
from .rules import RuleEngine, CascadeResult, MarkChange, ChangeSource, PLAYER_IDS, OWNER_PLAYER_ID
from .predicates import is_murder_item, murder_items, owned_cards, is_row_locked, is_cell_locked
from .ownership import ShownToTracker, OTHER_PLAYER_IDS
from .setup import GameSetup, SetupPhase, PhaseInfo, SelectionCheck, derive_hand_layout, validate_selection
from .state import SheetState
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action

__all__ = [
    "PrimaryMark",
    "CellMark",
    "EMPTY_MARK",
    "NUMBER_MARKER_KEYS",
    "BAR_COLOR_KEYS",
    "create_mark",
    "with_primary",
    "with_toggled_number",
    "with_toggled_bar_color",
    "without_number",
    "without_numbers",
    "is_empty_mark",
    "MarkGrid",
    "MarkUpdate",
    "AutoRuleId",
    "ConstraintId",
    "CONSTRAINT_DEPENDENCIES",
    "EditValidation",
    "EditValidator",
    "is_constraint_required",
    "RuleEngine",
    "CascadeResult",
    "MarkChange",
    "ChangeSource",
    "PLAYER_IDS",
    "OWNER_PLAYER_ID",
    "is_murder_item",
    "murder_items",
    "owned_cards",
    "is_row_locked",
    "is_cell_locked",
    "ShownToTracker",
    "OTHER_PLAYER_IDS",
    "GameSetup",
    "SetupPhase",
    "PhaseInfo",
    "SelectionCheck",
    "derive_hand_layout",
    "validate_selection",
    "SheetState",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
]
