"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a presentation client and the
engine. Key spaces (number markers, bar colors, opponent ids) are closed
Literal types so out-of-range input is rejected here, before it reaches
the engine.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- INVALID_THEME: Theme id not in the catalog
- VALIDATION_ERROR: Request body failed validation
- SETUP_INCOMPLETE / WRONG_PHASE / INVALID_SELECTION: setup flow errors
- CELL_LOCKED / EDIT_DENIED / INVALID_CELL / INVALID_KEY: rejected edits
- NOT_OWNED: shown-to toggled on a card the owner does not hold
"""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


NumberKey = Literal[1, 2, 3, 4]
BarColorKey = Literal[1, 2, 3, 4]
OpponentId = Literal[2, 3, 4, 5, 6]


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    SETUP = "setup"
    PLAYING = "playing"
    ENDED = "ended"


class PrimaryMarkName(str, Enum):
    EMPTY = "empty"
    HAS = "has"
    NOT = "not"
    BARS = "bars"


class CellOperation(str, Enum):
    HAS = "has"
    NOT = "not"
    TOGGLE_NUMBER = "toggleNumber"
    TOGGLE_BAR = "toggleBar"
    CLEAR = "clear"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_THEME = "INVALID_THEME"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SETUP_INCOMPLETE = "SETUP_INCOMPLETE"
    WRONG_PHASE = "WRONG_PHASE"
    INVALID_SELECTION = "INVALID_SELECTION"
    CELL_LOCKED = "CELL_LOCKED"
    EDIT_DENIED = "EDIT_DENIED"
    INVALID_CELL = "INVALID_CELL"
    INVALID_KEY = "INVALID_KEY"
    NOT_OWNED = "NOT_OWNED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class MarkInfo(BaseModel):
    primary: PrimaryMarkName = PrimaryMarkName.EMPTY
    numbers: list[int] = Field(default_factory=list)
    bar_colors: list[int] = Field(default_factory=list)


class CellInfo(BaseModel):
    player_id: int
    mark: MarkInfo
    locked: bool = False


class CardRow(BaseModel):
    """One row of the sheet."""
    card_id: int
    name: str
    category: str
    cells: list[CellInfo] = Field(default_factory=list)
    is_public: bool = False
    is_owned: bool = False
    is_murder_item: bool = False
    shown_to: list[int] = Field(default_factory=list)


class PlayerInfo(BaseModel):
    player_id: int
    name: str
    color: str


class AutoRulesInfo(BaseModel):
    row_elimination: bool = False
    last_maybe_deduction: bool = False


class SetupInfo(BaseModel):
    phase: str
    public_cards: list[int] = Field(default_factory=list)
    owner_cards: list[int] = Field(default_factory=list)
    current_selection: list[int] = Field(default_factory=list)
    required_count: int = 0
    title: Optional[str] = None
    instruction: Optional[str] = None
    confirm_label: Optional[str] = None


class CellChangeInfo(BaseModel):
    card_id: int
    player_id: int
    before: MarkInfo
    after: MarkInfo
    source: str = Field(description="user, rowElimination, lastMaybeDeduction, setupPublic, setupOwner")


class ValidationInfo(BaseModel):
    allowed: bool
    reason: Optional[str] = None


class CardInfo(BaseModel):
    card_id: int
    name: str
    category: str


class ThemeInfo(BaseModel):
    theme_id: str
    label: str
    cards: list[CardInfo] = Field(default_factory=list)


# =============================================================================
# Request Models
# =============================================================================

class PlayerInput(BaseModel):
    id: int = Field(ge=1, le=6)
    name: str
    color: str


class CreateSessionRequest(BaseModel):
    """Request to create a sheet session. Omitted fields use defaults."""
    theme_id: Optional[str] = None
    players: Optional[list[PlayerInput]] = None
    auto_rules: Optional[AutoRulesInfo] = None


class CellEditRequest(BaseModel):
    """A manual edit of one cell."""
    op: CellOperation
    key: Optional[Union[NumberKey, BarColorKey]] = Field(
        None, description="Number marker for toggleNumber, bar color for toggleBar (1-4)"
    )

    @model_validator(mode="after")
    def key_required_for_toggles(self):
        if self.op in (CellOperation.TOGGLE_NUMBER, CellOperation.TOGGLE_BAR) and self.key is None:
            raise ValueError(f"'key' is required for {self.op.value}")
        return self


class SelectCardRequest(BaseModel):
    card_id: int


class ShownToRequest(BaseModel):
    card_id: int
    player_id: OpponentId


# =============================================================================
# Response Models
# =============================================================================

class SessionResponse(BaseModel):
    session_id: str
    status: SessionStatus
    theme_id: str
    player_count: int
    hand_size: int
    public_count: int
    created_at: float
    api_version: str = "v1"


class SheetResponse(BaseModel):
    """Complete sheet for rendering."""
    session_id: str
    theme_id: str
    players: list[PlayerInfo] = Field(default_factory=list)
    auto_rules: AutoRulesInfo
    setup: SetupInfo
    rows: list[CardRow] = Field(default_factory=list)
    murder_items: list[int] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Result of an edit or setup step, with every cell it changed."""
    session_id: str
    success: bool = True
    changes: list[CellChangeInfo] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)
    sheet: Optional[SheetResponse] = None


class CellValidationResponse(BaseModel):
    """Which edits are currently allowed on a cell."""
    session_id: str
    card_id: int
    player_id: int
    mark: MarkInfo
    can_mark_has: ValidationInfo
    can_mark_not: ValidationInfo
    can_clear: ValidationInfo
    numbers: dict[int, ValidationInfo] = Field(default_factory=dict)
    bar_colors: dict[int, ValidationInfo] = Field(default_factory=dict)


class ThemeListResponse(BaseModel):
    themes: list[ThemeInfo] = Field(default_factory=list)


class SessionListResponse(BaseModel):
    sessions: list[str] = Field(default_factory=list)
    count: int = 0


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str = "cluesheet"
    version: str


class ErrorResponse(BaseModel):
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None
