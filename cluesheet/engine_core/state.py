"""
Sheet State - Everything one session knows about the current game.

The state is owned by a single session and mutated in place through the
reducer. It is never a module-level singleton, so tests can build as many
independent sheets as they like.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .grid import MarkGrid
from .ownership import ShownToTracker
from .setup import GameSetup


@dataclass
class SheetState:
    """
    Current sheet: marks, shown-to reveals and setup progress.

    action_history records successfully applied actions (for replay/logging).
    """
    setup: GameSetup
    grid: MarkGrid = field(default_factory=MarkGrid)
    shown_to: ShownToTracker = field(default_factory=ShownToTracker)
    action_history: list[Any] = field(default_factory=list)

    @classmethod
    def create(cls, public_count: int, hand_size: int) -> SheetState:
        return cls(setup=GameSetup.create(public_count, hand_size))

    def reset(self) -> None:
        """Start a new game with the same deal layout."""
        self.grid.reset()
        self.shown_to.reset()
        self.setup = GameSetup.create(self.setup.public_count, self.setup.hand_size)
        self.action_history.clear()

    def to_dict(self) -> dict[str, Any]:
        return {
            "grid": self.grid.to_dict(),
            "shownTo": self.shown_to.to_dict(),
            "setup": self.setup.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SheetState:
        """Rebuild a stored sheet. Action history is not persisted."""
        return cls(
            setup=GameSetup.from_dict(data["setup"]),
            grid=MarkGrid.from_dict(data.get("grid", {})),
            shown_to=ShownToTracker.from_dict(data.get("shownTo", {})),
        )
