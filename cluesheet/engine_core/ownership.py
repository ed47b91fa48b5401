"""
Shown-To Tracking - Which opponents have been shown each owned card.

When another player asks to see a card, the sheet owner shows it; this
tracker records those reveals. It is independent of the mark grid and has
no cascading behavior. Empty sets are never stored.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any


OTHER_PLAYER_IDS: tuple[int, ...] = (2, 3, 4, 5, 6)


@dataclass
class ShownToTracker:
    """Per-card set of opponents who have seen it."""
    _shown: dict[int, frozenset[int]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._shown)

    def is_shown(self, card_id: int, player_id: int) -> bool:
        return player_id in self._shown.get(card_id, frozenset())

    def shown_to(self, card_id: int) -> frozenset[int]:
        return self._shown.get(card_id, frozenset())

    def has_been_shown(self, card_id: int) -> bool:
        return card_id in self._shown

    def toggle(self, card_id: int, player_id: int) -> frozenset[int]:
        """Toggle a reveal; returns the card's new shown-to set."""
        players = self.shown_to(card_id) ^ {player_id}
        if players:
            self._shown[card_id] = players
        else:
            self._shown.pop(card_id, None)
        return players

    def clear_card(self, card_id: int) -> None:
        """Drop a card's entries, e.g. when it is no longer owned."""
        self._shown.pop(card_id, None)

    def reset(self) -> None:
        self._shown = {}

    def to_dict(self) -> dict[str, Any]:
        return {str(card_id): sorted(players) for card_id, players in sorted(self._shown.items())}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ShownToTracker:
        tracker = cls()
        for card_id, players in data.items():
            if players:
                tracker._shown[int(card_id)] = frozenset(players)
        return tracker
