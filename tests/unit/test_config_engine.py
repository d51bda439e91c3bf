"""
Unit Tests for Config Engine
"""

import shutil
from pathlib import Path

import pytest
import yaml

from capital_flow.domain.models import AnalyzerSettings, Asset, CatalogConfigError
from capital_flow.domain.services.config_engine import ConfigEngine

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


RULES = {
    "matcher": {
        "alternative_min_percentage": 40,
        "max_alternatives": 3,
        "high_confidence_min": 80,
        "medium_confidence_min": 60,
    },
    "analyzer": {"window_size": 7},
    "history": {"retention_days": 30},
}


def _write_config(config_dir, scenarios, transitions=None, rules=None):
    with open(config_dir / "rules.yml", "w", encoding="utf-8") as f:
        yaml.safe_dump(rules or RULES, f)
    with open(config_dir / "scenarios.yml", "w", encoding="utf-8") as f:
        yaml.safe_dump({"scenarios": scenarios, "transitions": transitions or []}, f)


@pytest.mark.unit
class TestConfigEngine:

    def test_loads_shipped_config(self, config_engine):
        assert len(config_engine.catalog) == 12
        assert config_engine.analyzer_settings == AnalyzerSettings()
        assert config_engine.get_rule("analyzer", "window_size") == 7

    def test_getters_before_load(self):
        engine = ConfigEngine(CONFIG_DIR)

        with pytest.raises(RuntimeError, match="Config not loaded"):
            engine.catalog
        with pytest.raises(RuntimeError, match="Config not loaded"):
            engine.analyzer_settings
        with pytest.raises(RuntimeError, match="Config not loaded"):
            engine.get_rule("history")

    def test_missing_directory(self, tmp_path):
        engine = ConfigEngine(tmp_path / "nowhere")

        with pytest.raises(FileNotFoundError, match="Config not found"):
            engine.load_all()

    def test_missing_scenarios_file(self, tmp_path):
        shutil.copy(CONFIG_DIR / "rules.yml", tmp_path / "rules.yml")

        with pytest.raises(FileNotFoundError, match="scenarios.yml"):
            ConfigEngine(tmp_path).load_all()

    def test_minimal_config(self, tmp_path):
        _write_config(
            tmp_path,
            scenarios=[
                {"id": 2, "name": "Gold bid", "must_have": {"gold": "up"}},
                {"id": 1, "name": "Risk on", "must_have": {"btc": "up"},
                 "confluence": {"gold": ["down", "flat"]}},
            ],
            transitions=[{"from": 1, "candidates": [2]}],
        )
        engine = ConfigEngine(tmp_path)
        engine.load_all()

        assert engine.catalog.ids == (1, 2)
        assert engine.catalog.by_id(1).max_score == 13
        assert engine.catalog.by_id(2).description == ""
        assert engine.catalog.transition_table == {1: (2,)}

    def test_custom_rules(self, tmp_path):
        rules = {
            "matcher": {
                "alternative_min_percentage": 50,
                "max_alternatives": 2,
                "high_confidence_min": 75,
                "medium_confidence_min": 50,
            },
            "analyzer": {"window_size": 5},
            "history": {"retention_days": 10},
        }
        _write_config(tmp_path, [{"id": 1, "name": "A", "must_have": {"btc": "up"}}], rules=rules)
        engine = ConfigEngine(tmp_path)
        engine.load_all()

        assert engine.analyzer_settings == AnalyzerSettings(
            window_size=5, retention_days=10,
            alternative_min_percentage=50, max_alternatives=2,
            high_confidence_min=75, medium_confidence_min=50,
        )

    def test_missing_rule(self, tmp_path):
        _write_config(
            tmp_path,
            [{"id": 1, "name": "A", "must_have": {"btc": "up"}}],
            rules={"matcher": RULES["matcher"], "analyzer": RULES["analyzer"]},
        )
        with pytest.raises(CatalogConfigError, match="Missing rule"):
            ConfigEngine(tmp_path).load_all()

    @pytest.mark.parametrize("must_have", [
        {"btc": "sideways"},
        {"silver": "up"},
        {"btc": ["up", "up"]},
    ])
    def test_invalid_constraint(self, tmp_path, must_have):
        _write_config(tmp_path, [{"id": 1, "name": "A", "must_have": must_have}])

        with pytest.raises(CatalogConfigError, match="invalid constraint"):
            ConfigEngine(tmp_path).load_all()

    def test_missing_name(self, tmp_path):
        _write_config(tmp_path, [{"id": 1, "must_have": {"btc": "up"}}])

        with pytest.raises(CatalogConfigError, match="Invalid scenario 1"):
            ConfigEngine(tmp_path).load_all()

    def test_degenerate_scenario_fails_load(self, tmp_path):
        _write_config(tmp_path, [{"id": 1, "name": "A", "confluence": {"btc": "up"}}])

        with pytest.raises(CatalogConfigError, match="never match"):
            ConfigEngine(tmp_path).load_all()

    def test_duplicate_transition_entry(self, tmp_path):
        _write_config(
            tmp_path,
            [
                {"id": 1, "name": "A", "must_have": {"btc": "up"}},
                {"id": 2, "name": "B", "must_have": {"gold": "up"}},
            ],
            transitions=[{"from": 1, "candidates": [2]}, {"from": 1, "candidates": [2]}],
        )
        with pytest.raises(CatalogConfigError, match="Duplicate transition entry"):
            ConfigEngine(tmp_path).load_all()

    def test_non_mapping_file(self, tmp_path):
        _write_config(tmp_path, [])
        (tmp_path / "scenarios.yml").write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(CatalogConfigError, match="Expected a mapping"):
            ConfigEngine(tmp_path).load_all()

    def test_inverted_confidence_thresholds(self, tmp_path):
        rules = dict(RULES, matcher=dict(RULES["matcher"], medium_confidence_min=90))
        _write_config(tmp_path, [{"id": 1, "name": "A", "must_have": {"btc": "up"}}], rules=rules)

        with pytest.raises(CatalogConfigError, match="Invalid rule"):
            ConfigEngine(tmp_path).load_all()

    @pytest.mark.parametrize("entry", [
        {"from": 1},
        {"from": "one", "candidates": [2]},
        {"from": 1, "candidates": 2},
        ["1", "2"],
        "1 -> 2",
    ])
    def test_malformed_transition_entry(self, tmp_path, entry):
        _write_config(
            tmp_path,
            [
                {"id": 1, "name": "A", "must_have": {"btc": "up"}},
                {"id": 2, "name": "B", "must_have": {"gold": "up"}},
            ],
            transitions=[entry],
        )
        with pytest.raises(CatalogConfigError, match="Invalid transition entry"):
            ConfigEngine(tmp_path).load_all()

    @pytest.mark.parametrize("entry", ["scenario one", 7, ["id", 1]])
    def test_non_mapping_scenario_entry(self, tmp_path, entry):
        _write_config(tmp_path, [{"id": 1, "name": "A", "must_have": {"btc": "up"}}, entry])

        with pytest.raises(CatalogConfigError, match="Invalid scenario entry"):
            ConfigEngine(tmp_path).load_all()

    def test_malformed_trades_block(self, tmp_path):
        _write_config(
            tmp_path,
            [{"id": 1, "name": "A", "must_have": {"btc": "up"}, "trades": ["btc"]}],
        )
        with pytest.raises(CatalogConfigError, match="Invalid scenario 1"):
            ConfigEngine(tmp_path).load_all()

    def test_confluence_notes_loaded(self, config_engine):
        dollar_safety = config_engine.catalog.by_id(1)

        assert [asset.value for asset, _ in dollar_safety.confluence_notes] == ["gold"]
        assert dollar_safety.notes_for(Asset.GOLD)[0].startswith("If gold is falling")

    def test_confluence_notes_for_unknown_asset(self, tmp_path):
        _write_config(tmp_path, [{
            "id": 1, "name": "A", "must_have": {"btc": "up"}, "confluence": {"gold": "down"},
            "confluence_notes": {"silver": ["If silver is rising: ignore it."]},
        }])
        with pytest.raises(CatalogConfigError, match="unknown asset 'silver'"):
            ConfigEngine(tmp_path).load_all()

    def test_single_confluence_note_string(self, tmp_path):
        _write_config(tmp_path, [{
            "id": 1, "name": "A", "must_have": {"btc": "up"}, "confluence": {"gold": "down"},
            "confluence_notes": {"gold": "If gold is rising: trade smaller."},
        }])
        engine = ConfigEngine(tmp_path)
        engine.load_all()

        assert engine.catalog.by_id(1).notes_for(Asset.GOLD) == ("If gold is rising: trade smaller.",)
