"""
Session Module - Manages ephemeral sheet sessions.

A session represents one game on the deduction sheet:
- Created when the user starts a sheet
- Holds the grid, shown-to reveals and setup progress
- Reset in place on a new game
- Destroyed when ended

Sessions are EPHEMERAL: nothing is persisted here.
"""

from .manager import SessionManager, Session, SessionState

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
]
