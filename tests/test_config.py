"""Tests for configuration loading."""

import pytest
import yaml

from cellpilot.utils.config import Config, get_config, load_config, set_config


def test_defaults():
    config = Config()

    assert config.get("analysis.sample_size") == 10
    assert config.get("analysis.relationships.fuzzy_threshold") == 0.7
    assert config.get("formula.max_length") == 50000
    assert config.get("feature_gate.beta.end_date") == "2025-10-01"
    assert config.get("missing.key", "fallback") == "fallback"


def test_set_nested_key():
    config = Config()

    config.set("analysis.relationships.fuzzy_threshold", 0.5)
    config.set("new.section.value", 1)

    assert config.get("analysis.relationships.fuzzy_threshold") == 0.5
    assert config.get("new.section.value") == 1


def test_to_dict_is_a_copy():
    config = Config()
    config.to_dict()["analysis"]["sample_size"] = 3
    assert config.get("analysis.sample_size") == 10


def test_yaml_merges_with_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(yaml.safe_dump({"analysis": {"relationships": {"fuzzy_threshold": 0.6}}}))

    config = load_config(path)

    assert get_config() is config
    assert config.get("analysis.relationships.fuzzy_threshold") == 0.6
    assert config.get("analysis.relationships.medium_threshold") == 0.85
    assert config.get("analysis.sample_size") == 10


def test_save_and_reload(tmp_path):
    config = Config()
    config.set("api.port", 9000)
    path = tmp_path / "nested" / "config.yml"

    config.save(path)

    assert Config.from_yaml(path).get("api.port") == 9000


def test_missing_yaml():
    with pytest.raises(FileNotFoundError):
        Config.from_yaml("does-not-exist.yml")


def test_env_var_config(tmp_path, monkeypatch):
    path = tmp_path / "env.yml"
    path.write_text(yaml.safe_dump({"formula": {"max_length": 100}}))
    monkeypatch.setenv("CELLPILOT_CONFIG", str(path))
    set_config(None)

    assert get_config().get("formula.max_length") == 100


def test_env_var_missing_file_falls_back(tmp_path, monkeypatch):
    monkeypatch.setenv("CELLPILOT_CONFIG", str(tmp_path / "gone.yml"))
    monkeypatch.chdir(tmp_path)
    set_config(None)

    assert get_config().get("formula.max_length") == 50000


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
