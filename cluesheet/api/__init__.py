"""
API Module - Presentation client interface.

Exposes the sheet engine via REST API. A client:
1. Lists themes and creates a session
2. Walks through public and owner card setup
3. Edits cells and renders the returned changes
4. Records which owned cards were shown to whom

All state is session-scoped. Nothing is persisted.
"""

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
    CellChangeInfo,
    # Enums
    CellOperation,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "CellEditRequest",
    "SelectCardRequest",
    "ShownToRequest",
    # Responses
    "SessionResponse",
    "SheetResponse",
    "ActionResponse",
    "CellValidationResponse",
    "ThemeListResponse",
    "ErrorResponse",
    # Shared
    "MarkInfo",
    "CellInfo",
    "CardRow",
    "CellChangeInfo",
    # Enums
    "CellOperation",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
