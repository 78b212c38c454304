"""
Tests for configuration models and the YAML loader.
"""

import logging

import pytest

from sigcop.config.loader import (
    ConfigurationError,
    config_from_dict,
    generate_default_config,
    load_config_from_yaml,
)
from sigcop.config.models import CopConfig, SigCopConfig
from sigcop.cops.registry import CopRegistry


def test_defaults():
    config = SigCopConfig()
    assert config.all_cops.include == ["*.rb"]
    assert config.is_enabled("Sorbet/MethodsShouldHaveSignatures")
    assert config.for_cop("Sorbet/MethodsShouldHaveSignatures").line_length_limit is None


def test_rubocop_style_keys():
    config = config_from_dict({
        "AllCops": {"Exclude": ["db/*"]},
        "Sorbet/MethodsShouldHaveSignatures": {"LineLengthLimit": 100},
        "Sorbet/EmptyLineAfterSig": {"Enabled": False},
    })
    assert config.all_cops.exclude == ["db/*"]
    assert config.for_cop("Sorbet/MethodsShouldHaveSignatures").line_length_limit == 100
    assert not config.is_enabled("Sorbet/EmptyLineAfterSig")


def test_empty_cop_section_uses_defaults():
    config = config_from_dict({"Sorbet/EmptyLineAfterSig": None})
    assert config.for_cop("Sorbet/EmptyLineAfterSig") == CopConfig()


def test_invalid_line_length_limit():
    with pytest.raises(ConfigurationError, match="validation failed"):
        config_from_dict({"Sorbet/MethodsShouldHaveSignatures": {"LineLengthLimit": 0}})


def test_non_mapping_is_rejected():
    with pytest.raises(ConfigurationError):
        config_from_dict(["Sorbet/EmptyLineAfterSig"])


def test_unknown_cop_warns(caplog):
    with caplog.at_level(logging.WARNING):
        config_from_dict({"Style/Nope": {"Enabled": True}}, known_cops=CopRegistry.list_cops())
    assert "Unknown cop in configuration: Style/Nope" in caplog.text


class TestLoadFromYaml:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config_from_yaml(tmp_path / "missing.yml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / ".sigcop.yml"
        path.write_text("")
        with pytest.raises(ConfigurationError, match="empty"):
            load_config_from_yaml(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / ".sigcop.yml"
        path.write_text("AllCops: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config_from_yaml(path)

    def test_generated_config_loads(self, tmp_path):
        path = tmp_path / "nested" / ".sigcop.yml"
        generate_default_config(path, CopRegistry.list_cops())
        config = load_config_from_yaml(path, known_cops=CopRegistry.list_cops())
        assert config.for_cop("Sorbet/MethodsShouldHaveSignatures").line_length_limit == 120
        assert config.is_enabled("Sorbet/EmptyLineAfterSig")
        assert config.all_cops == SigCopConfig().all_cops


def test_registry_lookup():
    assert CopRegistry.get_cop("Sorbet/EmptyLineAfterSig").name == "Sorbet/EmptyLineAfterSig"
    with pytest.raises(ValueError, match="Unknown cop"):
        CopRegistry.get_cop("Sorbet/Nope")


def test_only_overrides_enabled():
    config = config_from_dict({"Sorbet/EmptyLineAfterSig": {"Enabled": False}})
    assert [c.name for c in CopRegistry.enabled_cops(config)] == ["Sorbet/MethodsShouldHaveSignatures"]
    assert [c.name for c in CopRegistry.enabled_cops(config, ["Sorbet/EmptyLineAfterSig"])] == [
        "Sorbet/EmptyLineAfterSig"
    ]
