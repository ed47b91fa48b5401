"""
Game Setup - Two-step setup after a game reset.

Steps:
1. Select public cards (cards left over after dealing, visible to all)
2. Select owner cards (cards in the sheet owner's hand)

After both steps the game is PLAYING. Steps with nothing to select are
skipped. The grid writes that follow each confirmation live in the rule
engine; this module only tracks which step we are in and what was chosen.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


SOLUTION_SIZE = 3  # One suspect, one weapon, one room


class SetupPhase(Enum):
    SELECT_PUBLIC = "selectPublic"
    SELECT_OWNER = "selectOwner"
    PLAYING = "playing"


@dataclass(frozen=True)
class SelectionCheck:
    valid: bool
    message: str | None = None


@dataclass(frozen=True)
class PhaseInfo:
    """Display text for a setup step."""
    title: str
    instruction: str
    required_count: int
    confirm_label: str


def _plural(count: int, word: str = "card") -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def derive_hand_layout(
    card_count: int,
    player_count: int,
    solution_size: int = SOLUTION_SIZE,
) -> tuple[int, int]:
    """
    Hand size and public card count for a deal.

    Cards outside the solution are dealt evenly; the remainder is public.
    """
    dealt = max(card_count - solution_size, 0)
    return dealt // player_count, dealt % player_count


def initial_phase(public_count: int, hand_size: int) -> SetupPhase:
    if public_count > 0:
        return SetupPhase.SELECT_PUBLIC
    if hand_size > 0:
        return SetupPhase.SELECT_OWNER
    return SetupPhase.PLAYING


def validate_selection(selection_count: int, required_count: int) -> SelectionCheck:
    if selection_count < required_count:
        missing = required_count - selection_count
        noun = "card" if missing == 1 else "cards"
        return SelectionCheck(False, f"Please select {missing} more {noun}.")
    if selection_count > required_count:
        extra = selection_count - required_count
        return SelectionCheck(
            False,
            f"Too many cards selected. Please deselect {_plural(extra)}.",
        )
    return SelectionCheck(True)


def phase_info(phase: SetupPhase, public_count: int, hand_size: int) -> PhaseInfo | None:
    if phase is SetupPhase.SELECT_PUBLIC:
        return PhaseInfo(
            title="Select Public Cards",
            instruction=f"Select the {_plural(public_count, 'public card')} visible to all players.",
            required_count=public_count,
            confirm_label="Confirm Public Cards",
        )
    if phase is SetupPhase.SELECT_OWNER:
        return PhaseInfo(
            title="Select Your Cards",
            instruction=f"Select the {_plural(hand_size)} in your hand.",
            required_count=hand_size,
            confirm_label="Confirm Your Cards",
        )
    return None


@dataclass(frozen=True)
class GameSetup:
    """
    Setup progress. All transitions return a new GameSetup.
    """
    public_count: int
    hand_size: int
    phase: SetupPhase = SetupPhase.PLAYING
    public_cards: tuple[int, ...] = ()
    owner_cards: tuple[int, ...] = ()
    current_selection: tuple[int, ...] = field(default=())

    @classmethod
    def create(cls, public_count: int, hand_size: int) -> GameSetup:
        return cls(
            public_count=public_count,
            hand_size=hand_size,
            phase=initial_phase(public_count, hand_size),
        )

    @property
    def is_playing(self) -> bool:
        return self.phase is SetupPhase.PLAYING

    @property
    def locked_cards(self) -> frozenset[int]:
        return frozenset(self.public_cards) | frozenset(self.owner_cards)

    @property
    def required_count(self) -> int:
        if self.phase is SetupPhase.SELECT_PUBLIC:
            return self.public_count
        if self.phase is SetupPhase.SELECT_OWNER:
            return self.hand_size
        return 0

    def info(self) -> PhaseInfo | None:
        return phase_info(self.phase, self.public_count, self.hand_size)

    def check_selection(self) -> SelectionCheck:
        return validate_selection(len(self.current_selection), self.required_count)

    def toggle_selection(self, card_id: int) -> GameSetup:
        """
        Select or deselect a card for the current step.

        Ignored while playing, for cards already locked, and when the
        selection is full.
        """
        if self.is_playing or card_id in self.locked_cards:
            return self
        selection = list(self.current_selection)
        if card_id in selection:
            selection.remove(card_id)
        elif len(selection) >= self.required_count:
            return self
        else:
            selection.append(card_id)
        return replace(self, current_selection=tuple(sorted(selection)))

    def confirm(self) -> GameSetup:
        """Advance past the current step. Caller checks the selection first."""
        if self.phase is SetupPhase.SELECT_PUBLIC:
            next_phase = SetupPhase.SELECT_OWNER if self.hand_size > 0 else SetupPhase.PLAYING
            return replace(
                self,
                phase=next_phase,
                public_cards=self.current_selection,
                current_selection=(),
            )
        if self.phase is SetupPhase.SELECT_OWNER:
            return replace(
                self,
                phase=SetupPhase.PLAYING,
                owner_cards=self.current_selection,
                current_selection=(),
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "publicCount": self.public_count,
            "handSize": self.hand_size,
            "phase": self.phase.value,
            "publicCards": list(self.public_cards),
            "ownerCards": list(self.owner_cards),
            "currentSelection": list(self.current_selection),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameSetup:
        public_count = data["publicCount"]
        hand_size = data["handSize"]
        phase = data.get("phase")
        return cls(
            public_count=public_count,
            hand_size=hand_size,
            phase=SetupPhase(phase) if phase else initial_phase(public_count, hand_size),
            public_cards=tuple(sorted(data.get("publicCards", ()))),
            owner_cards=tuple(sorted(data.get("ownerCards", ()))),
            current_selection=tuple(sorted(data.get("currentSelection", ()))),
        )
