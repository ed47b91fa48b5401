"""
Pytest fixtures for cluesheet tests.
"""

import pytest

from ..catalog import CardCatalog
from ..config.settings import AppConfig, AutoRulesConfig, PlayerConfig, PLAYER_COLORS
from ..engine_core.grid import MarkGrid
from ..engine_core.reducer import Reducer
from ..engine_core.rules import RuleEngine
from ..engine_core.state import SheetState
from ..session import SessionManager


@pytest.fixture
def catalog() -> CardCatalog:
    return CardCatalog("onePiece")


@pytest.fixture
def grid() -> MarkGrid:
    """Empty sparse grid."""
    return MarkGrid()


@pytest.fixture
def rules_off() -> AutoRulesConfig:
    return AutoRulesConfig()


@pytest.fixture
def rules_on() -> AutoRulesConfig:
    """Both automation rules enabled."""
    return AutoRulesConfig(row_elimination=True, last_maybe_deduction=True)


@pytest.fixture
def engine(rules_on: AutoRulesConfig) -> RuleEngine:
    """Rule engine over all six columns with every rule on."""
    return RuleEngine(rules=rules_on)


@pytest.fixture
def manual_engine(rules_off: AutoRulesConfig) -> RuleEngine:
    return RuleEngine(rules=rules_off)


@pytest.fixture
def six_player_config(rules_on: AutoRulesConfig) -> AppConfig:
    """Six players: 18 dealt cards, three each, nothing public."""
    return AppConfig(
        theme_id="onePiece",
        players=tuple(
            PlayerConfig(id=i, name="You" if i == 1 else f"P{i}", color=PLAYER_COLORS[i - 1])
            for i in range(1, 7)
        ),
        auto_rules=rules_on,
    )


@pytest.fixture
def playing_state() -> SheetState:
    """A sheet with setup skipped: nothing public, no hand to confirm."""
    return SheetState.create(public_count=0, hand_size=0)


@pytest.fixture
def setup_state() -> SheetState:
    """Four-player layout: two public cards, four in hand."""
    return SheetState.create(public_count=2, hand_size=4)


@pytest.fixture
def reducer(catalog: CardCatalog, rules_on: AutoRulesConfig) -> Reducer:
    return Reducer(catalog=catalog, rules=rules_on)


@pytest.fixture
def session_manager() -> SessionManager:
    return SessionManager()
