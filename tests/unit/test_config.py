"""Tests for configuration loading and validation."""

import pytest
import yaml
from pydantic import ValidationError

from turntree.config import Config, TreeConfig, TurnTreeConfig
from turntree.io.directories import get_config_dir, get_config_path


class TestSchema:
    def test_defaults(self):
        config = TurnTreeConfig()
        assert config.tree.auto_collapse_depth == 2
        assert config.tree.linear_fold_threshold == 6
        assert config.tree.fold_show_edges == 2
        assert config.logging.level == "WARNING"

    def test_threshold_must_cover_edges(self):
        with pytest.raises(ValidationError):
            TreeConfig(linear_fold_threshold=3, fold_show_edges=2)

    def test_negative_depth(self):
        with pytest.raises(ValidationError):
            TreeConfig(auto_collapse_depth=-1)

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            TurnTreeConfig(logging={"level": "LOUD"})


class TestConfig:
    def test_defaults_without_file(self):
        config = Config()
        assert config.get("tree.auto_collapse_depth") == 2
        assert config.get("display.snippet_length") > 0
        assert config.get("missing.key", "fallback") == "fallback"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "turntree.yaml"
        path.write_text(yaml.dump({"tree": {"auto_collapse_depth": 5}}))

        config = Config(path)

        assert config.get("tree.auto_collapse_depth") == 5
        # Untouched keys keep their defaults
        assert config.get("tree.fold_show_edges") == 2
        assert config.config_path == path

    def test_loads_from_xdg_dir(self, isolated_config_dir):
        path = isolated_config_dir / "turntree" / "turntree.yaml"
        path.parent.mkdir(parents=True)
        path.write_text(yaml.dump({"display": {"debug": True}}))

        assert get_config_path() == path
        assert Config().get("display.debug") is True

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"tree": {"fold_show_edges": 0}}))
        with pytest.raises(ValueError, match="Invalid configuration"):
            Config(path)

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            Config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(tmp_path / "nope.yaml")

    def test_set_validates(self):
        config = Config()
        config.set("tree.auto_collapse_depth", 4)
        assert config.get("tree.auto_collapse_depth") == 4

        with pytest.raises(ValueError, match="tree.auto_collapse_depth"):
            config.set("tree.auto_collapse_depth", -3)
        assert config.get("tree.auto_collapse_depth") == 4

    def test_save_and_reload(self, tmp_path):
        config = Config()
        config.set("display.breadcrumb_length", 12)
        path = tmp_path / "saved.yaml"
        config.save(path)

        assert Config(path).get("display.breadcrumb_length") == 12

    def test_to_dict_is_a_copy(self):
        config = Config()
        data = config.to_dict()
        data["tree"]["auto_collapse_depth"] = 99
        assert config.get("tree.auto_collapse_depth") == 2


def test_config_dir_respects_xdg(isolated_config_dir):
    assert get_config_dir() == isolated_config_dir / "turntree"
