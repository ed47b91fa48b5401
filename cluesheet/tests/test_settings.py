"""
Tests for configuration models, environment settings and the catalog.
"""

import logging

import pytest
from pydantic import ValidationError

from ..catalog import CardCatalog, CategoryId, THEMES, get_theme, cards_by_category
from ..config.settings import (
    AppConfig,
    AutoRulesConfig,
    PlayerConfig,
    EnvironmentSettings,
    DEFAULT_CONFIG,
    configure_logging,
)
from ..engine_core.constraints import AutoRuleId


def players(*ids):
    return tuple(PlayerConfig(id=i, name=f"P{i}", color="#000000") for i in ids)


class TestAutoRulesConfig:

    def test_defaults_off(self):
        rules = AutoRulesConfig()
        assert not rules.is_enabled(AutoRuleId.ROW_ELIMINATION)
        assert not rules.is_enabled(AutoRuleId.LAST_MAYBE_DEDUCTION)

    def test_camel_case_keys(self):
        rules = AutoRulesConfig.model_validate({"rowElimination": True, "lastMaybeDeduction": False})
        assert rules.row_elimination
        assert not rules.last_maybe_deduction

    def test_old_flags_ignored(self):
        rules = AutoRulesConfig.model_validate({"murderDetection": False, "rowElimination": True})
        assert rules.row_elimination
        assert not hasattr(rules, "murderDetection")

    def test_frozen(self):
        with pytest.raises(ValidationError):
            AutoRulesConfig().row_elimination = True


class TestAppConfig:

    def test_default_config(self):
        assert DEFAULT_CONFIG.theme_id == "onePiece"
        assert DEFAULT_CONFIG.player_count == 4
        assert DEFAULT_CONFIG.hand_layout == (4, 2)

    def test_unknown_theme(self):
        with pytest.raises(ValidationError, match="Unknown theme"):
            AppConfig(theme_id="starWars", players=players(1, 2))

    def test_owner_required(self):
        with pytest.raises(ValidationError, match="Player 1"):
            AppConfig(players=players(2, 3))

    def test_unique_ids(self):
        with pytest.raises(ValidationError, match="unique"):
            AppConfig(players=players(1, 2, 2))

    @pytest.mark.parametrize("ids", [(1,), (1, 2, 3, 4, 5, 6, 6)])
    def test_player_count_bounds(self, ids):
        with pytest.raises(ValidationError):
            AppConfig(players=players(*ids))

    def test_player_name_stripped(self):
        player = PlayerConfig(id=2, name="  Ann  ", color="#fff")
        assert player.name == "Ann"

    def test_stored_json_shape(self):
        config = AppConfig.model_validate({
            "themeId": "harryPotter",
            "players": [
                {"id": 1, "name": "You", "color": "#111"},
                {"id": 2, "name": "Bo", "color": "#222"},
                {"id": 3, "name": "Cy", "color": "#333"},
            ],
            "autoRules": {"rowElimination": True},
        })
        assert config.theme_id == "harryPotter"
        assert config.hand_layout == (6, 0)
        assert config.auto_rules.row_elimination

    def test_with_auto_rules(self):
        updated = DEFAULT_CONFIG.with_auto_rules(AutoRulesConfig(last_maybe_deduction=True))
        assert updated.auto_rules.last_maybe_deduction
        assert not DEFAULT_CONFIG.auto_rules.last_maybe_deduction


class TestEnvironmentSettings:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CLUESHEET_ENV", "production")
        monkeypatch.setenv("CLUESHEET_LOG_LEVEL", "debug")
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example,https://b.example")

        settings = EnvironmentSettings.from_env()

        assert settings.env == "production"
        assert settings.log_level == "DEBUG"
        assert settings.allowed_origins == ("https://a.example", "https://b.example")

    def test_defaults(self, monkeypatch):
        for name in ("CLUESHEET_ENV", "CLUESHEET_LOG_LEVEL", "ALLOWED_ORIGINS"):
            monkeypatch.delenv(name, raising=False)
        settings = EnvironmentSettings.from_env()
        assert settings == EnvironmentSettings()

    def test_configure_logging_unknown_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging("chatty")

        assert calls[0]["level"] == logging.INFO


class TestCatalog:

    @pytest.mark.parametrize("theme_id", list(THEMES))
    def test_theme_shape(self, theme_id):
        theme = get_theme(theme_id)
        assert [c.id for c in theme.cards] == list(range(1, 22))
        assert len(cards_by_category(theme_id, CategoryId.SUSPECTS)) == 6
        assert len(cards_by_category(theme_id, CategoryId.WEAPONS)) == 6
        assert len(cards_by_category(theme_id, CategoryId.ROOMS)) == 9

    def test_unknown_theme(self):
        with pytest.raises(KeyError):
            get_theme("nope")

    def test_card_catalog(self, catalog):
        assert len(catalog) == 21
        assert 21 in catalog
        assert 22 not in catalog
        assert catalog.get_card(1).name == "Luffy"
        assert catalog.get_card(99) is None
