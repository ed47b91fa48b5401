"""
FastAPI Application - REST API for a deduction sheet client.

Endpoints:
    GET    /api/v1/themes                                       List themes and cards
    POST   /api/v1/sessions                                     Create sheet session
    GET    /api/v1/sessions                                     List active sessions
    GET    /api/v1/sessions/{id}                                Get session status
    DELETE /api/v1/sessions/{id}                                End session
    GET    /api/v1/sessions/{id}/sheet                          Get the full sheet
    POST   /api/v1/sessions/{id}/cells/{card}/{player}          Edit a cell
    GET    /api/v1/sessions/{id}/cells/{card}/{player}/validation  Allowed edits
    POST   /api/v1/sessions/{id}/setup/select                   Toggle a setup selection
    POST   /api/v1/sessions/{id}/setup/confirm                  Confirm current setup step
    POST   /api/v1/sessions/{id}/shown-to                       Toggle a shown-to reveal
    POST   /api/v1/sessions/{id}/reset                          New game
    PUT    /api/v1/sessions/{id}/auto-rules                     Update automation rules

Every cell edit response lists all cells changed, the user's edit and any
cascaded deductions, each tagged with its source.
"""

from typing import Union

from .. import __version__
from ..config.settings import get_env_settings, configure_logging


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        CellEditRequest,
        SelectCardRequest,
        ShownToRequest,
        # Response models
        SessionResponse,
        SheetResponse,
        ActionResponse,
        CellValidationResponse,
        ThemeListResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        ErrorResponse,
        # Shared
        AutoRulesInfo,
        # Enums
        ErrorCode,
    )

    settings = get_env_settings()

    app = FastAPI(
        title="Clue Sheet API",
        description="""
Deduction sheet engine for Clue-style games.

## Flow

1. `POST /sessions` with a theme and players
2. Select and confirm public cards, then your own cards
3. Edit cells; enabled automation rules cascade after each edit

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_THEME` | Theme id not in the catalog |
| `SETUP_INCOMPLETE` | Cell edited before setup finished |
| `WRONG_PHASE` | Setup action outside its step |
| `INVALID_SELECTION` | Wrong number of cards selected |
| `CELL_LOCKED` | Cell belongs to a locked row or column |
| `EDIT_DENIED` | Edit blocked by an active constraint |
| `NOT_OWNED` | Shown-to on a card you do not hold |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.INVALID_THEME: 400,
        ErrorCode.VALIDATION_ERROR: 400,
    }

    def make_error_response(response: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_codes.get(response.error_code, 409),
            content=response.model_dump(),
        )

    def respond(response):
        if hasattr(response, "error"):
            return make_error_response(response)
        return response

    error_responses = {
        404: {"model": ErrorResponse, "description": "Session not found"},
        409: {"model": ErrorResponse, "description": "Action rejected"},
    }

    # =========================================================================
    # Catalog
    # =========================================================================

    @app.get(
        "/api/v1/themes",
        response_model=ThemeListResponse,
        tags=["Catalog"],
        summary="List themes and their cards",
    )
    async def list_themes() -> ThemeListResponse:
        return api_service.list_themes()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid theme or players"}},
        tags=["Sessions"],
        summary="Create a new sheet session",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new sheet session.

        Omitted fields fall back to the default theme, four players and
        all automation rules off.
        """
        return respond(api_service.create_session(body))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a sheet session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.put(
        "/api/v1/sessions/{session_id}/auto-rules",
        response_model=SheetResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Update automation rules",
    )
    async def update_auto_rules(
        session_id: str, body: AutoRulesInfo
    ) -> Union[SheetResponse, JSONResponse]:
        """New rules apply from the next edit; existing marks are untouched."""
        return respond(api_service.update_auto_rules(session_id, body))

    # =========================================================================
    # Sheet Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/sheet",
        response_model=SheetResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sheet"],
        summary="Get the full sheet",
    )
    async def get_sheet(session_id: str) -> Union[SheetResponse, JSONResponse]:
        return respond(api_service.get_sheet(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/cells/{card_id}/{player_id}",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Sheet"],
        summary="Edit a cell",
    )
    async def edit_cell(
        session_id: str,
        card_id: int,
        player_id: int,
        body: CellEditRequest,
    ) -> Union[ActionResponse, JSONResponse]:
        """
        Apply a manual edit and any cascades it triggers.

        **Request Body:**
        ```json
        {"op": "toggleNumber", "key": 2}
        ```
        """
        return respond(api_service.edit_cell(session_id, card_id, player_id, body))

    @app.get(
        "/api/v1/sessions/{session_id}/cells/{card_id}/{player_id}/validation",
        response_model=CellValidationResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sheet"],
        summary="Which edits a cell currently accepts",
    )
    async def validate_cell(
        session_id: str, card_id: int, player_id: int
    ) -> Union[CellValidationResponse, JSONResponse]:
        return respond(api_service.validate_cell(session_id, card_id, player_id))

    # =========================================================================
    # Setup & Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/setup/select",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Setup"],
        summary="Select or deselect a card for the current setup step",
    )
    async def select_card(
        session_id: str, body: SelectCardRequest
    ) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.select_card(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/setup/confirm",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Setup"],
        summary="Confirm the current setup step",
    )
    async def confirm_setup(session_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.confirm_setup(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/shown-to",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Sheet"],
        summary="Toggle whether an owned card was shown to a player",
    )
    async def toggle_shown_to(
        session_id: str, body: ShownToRequest
    ) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.toggle_shown_to(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Setup"],
        summary="Start a new game",
    )
    async def reset_game(session_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.reset_game(session_id))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(**api_service.health())

    @app.get("/", tags=["System"])
    async def root():
        return {
            "name": "Clue Sheet API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


def main(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Configure logging and serve the API with uvicorn."""
    import uvicorn

    configure_logging(get_env_settings().log_level)
    uvicorn.run(create_app(), host=host, port=port)


# For running under an external server: uvicorn cluesheet.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass


if __name__ == "__main__":
    main()
