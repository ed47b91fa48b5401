"""
Clue Sheet - Deduction aid for Clue-style elimination games.

Tracks a grid of (card x player) marks for the sheet owner and keeps them
consistent as information is gathered. The engine provides:
- An immutable mark model with normalizing constructors
- A sparse grid store with row/column queries
- Opt-in cascading automation rules (row elimination, last-maybe deduction)
- Setup initialization for public and owned cards
- Derived predicates such as murder-item detection
"""

__version__ = "0.1.0"
