"""
Settings - Validated sheet configuration and environment settings.

AppConfig is what a settings/storage collaborator hands the engine. It is
validated with pydantic; the engine treats it as read-only input.
Keys accept both snake_case and the camelCase used in stored JSON.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..catalog import THEMES, DEFAULT_THEME_ID
from ..engine_core.constraints import AutoRuleId
from ..engine_core.setup import derive_hand_layout


MIN_PLAYERS = 2
MAX_PLAYERS = 6
OWNER_PLAYER_ID = 1

PLAYER_COLORS: tuple[str, ...] = (
    "#111827f2",  # owner column, background
    "#ffffffff",
    "#0082c8",
    "#f58231",
    "#911eb4",
    "#46f0f0",
)

_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class AutoRulesConfig(BaseModel):
    """
    Toggleable automation rules, both off by default.

    Murder-item detection and setup auto-marking are always on and are
    deliberately not toggles here.
    """
    model_config = _MODEL_CONFIG

    row_elimination: bool = Field(False, alias="rowElimination")
    last_maybe_deduction: bool = Field(False, alias="lastMaybeDeduction")

    def is_enabled(self, rule_id: AutoRuleId) -> bool:
        if rule_id is AutoRuleId.ROW_ELIMINATION:
            return self.row_elimination
        if rule_id is AutoRuleId.LAST_MAYBE_DEDUCTION:
            return self.last_maybe_deduction
        return False


DEFAULT_AUTO_RULES = AutoRulesConfig()


class PlayerConfig(BaseModel):
    model_config = _MODEL_CONFIG

    id: int = Field(ge=1, le=MAX_PLAYERS)
    name: str = Field(min_length=1, max_length=30)
    color: str = Field(min_length=1, max_length=20)

    @field_validator("name", "color", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value


class AppConfig(BaseModel):
    """Sheet configuration: theme, players and automation rules."""
    model_config = _MODEL_CONFIG

    theme_id: str = Field(DEFAULT_THEME_ID, alias="themeId")
    players: tuple[PlayerConfig, ...] = Field(min_length=MIN_PLAYERS, max_length=MAX_PLAYERS)
    auto_rules: AutoRulesConfig = Field(default_factory=AutoRulesConfig, alias="autoRules")

    @field_validator("theme_id")
    @classmethod
    def known_theme(cls, value: str) -> str:
        if value not in THEMES:
            raise ValueError(f"Unknown theme: {value}")
        return value

    @model_validator(mode="after")
    def check_players(self) -> AppConfig:
        ids = [p.id for p in self.players]
        if len(set(ids)) != len(ids):
            raise ValueError("Player ids must be unique")
        if OWNER_PLAYER_ID not in ids:
            raise ValueError("Player 1 (the sheet owner) is required")
        return self

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def hand_layout(self) -> tuple[int, int]:
        """(hand_size, public_count) for this theme and player count."""
        card_count = len(THEMES[self.theme_id].cards)
        return derive_hand_layout(card_count, self.player_count)

    def with_auto_rules(self, auto_rules: AutoRulesConfig) -> AppConfig:
        return self.model_copy(update={"auto_rules": auto_rules})


DEFAULT_CONFIG = AppConfig(
    theme_id=DEFAULT_THEME_ID,
    players=(
        PlayerConfig(id=1, name="You", color=PLAYER_COLORS[0]),
        PlayerConfig(id=2, name="P2", color=PLAYER_COLORS[1]),
        PlayerConfig(id=3, name="P3", color=PLAYER_COLORS[2]),
        PlayerConfig(id=4, name="P4", color=PLAYER_COLORS[3]),
    ),
)


@dataclass
class EnvironmentSettings:
    """Deployment settings read from the environment."""
    env: str = "development"
    log_level: str = "INFO"
    allowed_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> EnvironmentSettings:
        return cls(
            env=os.getenv("CLUESHEET_ENV", "development"),
            log_level=os.getenv("CLUESHEET_LOG_LEVEL", "INFO").upper(),
            allowed_origins=tuple(os.getenv("ALLOWED_ORIGINS", "*").split(",")),
        )


def get_env_settings() -> EnvironmentSettings:
    return EnvironmentSettings.from_env()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
