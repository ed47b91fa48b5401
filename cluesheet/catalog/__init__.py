"""
Card Catalog - Static card sets per theme.

The catalog is a lookup collaborator: it supplies card ids, names and
categories. The engine never mutates it.
"""

from .themes import (
    CategoryId,
    CATEGORIES,
    CardDefinition,
    Theme,
    THEMES,
    DEFAULT_THEME_ID,
    CardCatalog,
    get_theme,
    get_cards,
    card_ids,
    cards_by_category,
)

__all__ = [
    "CategoryId",
    "CATEGORIES",
    "CardDefinition",
    "Theme",
    "THEMES",
    "DEFAULT_THEME_ID",
    "CardCatalog",
    "get_theme",
    "get_cards",
    "card_ids",
    "cards_by_category",
]
