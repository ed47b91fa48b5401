"""
Themes - Card sets for each supported theme.

Every theme has the same shape: 21 cards numbered 1..21, split into
6 suspects, 6 weapons and 9 rooms. The engine only reads card ids and
categories; names are for display.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class CategoryId(Enum):
    SUSPECTS = "suspects"
    WEAPONS = "weapons"
    ROOMS = "rooms"


CATEGORIES: tuple[tuple[CategoryId, str], ...] = (
    (CategoryId.SUSPECTS, "Suspects"),
    (CategoryId.WEAPONS, "Weapons"),
    (CategoryId.ROOMS, "Rooms"),
)


@dataclass(frozen=True)
class CardDefinition:
    id: int
    name: str
    category: CategoryId


@dataclass(frozen=True)
class Theme:
    id: str
    label: str
    cards: tuple[CardDefinition, ...]


def _cards(suspects: list[str], weapons: list[str], rooms: list[str]) -> tuple[CardDefinition, ...]:
    cards = []
    for category, names in (
        (CategoryId.SUSPECTS, suspects),
        (CategoryId.WEAPONS, weapons),
        (CategoryId.ROOMS, rooms),
    ):
        for name in names:
            cards.append(CardDefinition(id=len(cards) + 1, name=name, category=category))
    return tuple(cards)


ONE_PIECE = Theme(
    id="onePiece",
    label="One Piece",
    cards=_cards(
        suspects=["Luffy", "Nami/ Usopp", "Robin/ Franky", "Sanji", "Zoro", "Chopper/ Brook"],
        weapons=["Treasure Chest", "Binoculars", "Necklace", "Pirate Coins", "Meat", "Sword"],
        rooms=[
            "Land of Wano", "Fish-Man Island", "Dressrosa", "Punk Hazard", "Drum Kingdom",
            "Marineford", "Whole Cake Island", "Amazon Lily", "Water Seven",
        ],
    ),
)

HARRY_POTTER = Theme(
    id="harryPotter",
    label="Harry Potter",
    cards=_cards(
        suspects=[
            "Fenrir Greyback", "Lucius Malfoy", "Peter Pettigrew",
            "Draco Malfoy", "Snatcher", "Bellatrix Lestrange",
        ],
        weapons=[
            "Jinxed Broomstick", "Cursed Necklace", "Love Potion",
            "Poisoned Mead", "Incendio", "Stupefy",
        ],
        rooms=[
            "Malfoy Manor", "Hog's Head", "Shrieking Shack", "Hogwarts Castle",
            "Forbidden Forest", "Gringotts", "Weasley's Wheezes", "Ministry Magic",
            "Grimmauld Place",
        ],
    ),
)

THEMES: dict[str, Theme] = {theme.id: theme for theme in (ONE_PIECE, HARRY_POTTER)}
DEFAULT_THEME_ID = ONE_PIECE.id


def get_theme(theme_id: str) -> Theme:
    """Raises KeyError for unknown themes."""
    return THEMES[theme_id]


def get_cards(theme_id: str) -> tuple[CardDefinition, ...]:
    return get_theme(theme_id).cards


def card_ids(theme_id: str) -> tuple[int, ...]:
    return tuple(card.id for card in get_cards(theme_id))


def cards_by_category(theme_id: str, category: CategoryId) -> tuple[CardDefinition, ...]:
    return tuple(card for card in get_cards(theme_id) if card.category is category)


class CardCatalog:
    """
    Read-only view of one theme's cards.

    This is what sessions and the reducer hold on to.
    """

    def __init__(self, theme_id: str = DEFAULT_THEME_ID):
        self.theme = get_theme(theme_id)
        self._by_id = {card.id: card for card in self.theme.cards}

    @property
    def theme_id(self) -> str:
        return self.theme.id

    @property
    def cards(self) -> tuple[CardDefinition, ...]:
        return self.theme.cards

    @property
    def card_ids(self) -> tuple[int, ...]:
        return tuple(self._by_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, card_id: int) -> bool:
        return card_id in self._by_id

    def get_card(self, card_id: int) -> CardDefinition | None:
        return self._by_id.get(card_id)

    def by_category(self, category: CategoryId) -> tuple[CardDefinition, ...]:
        return tuple(card for card in self.cards if card.category is category)
