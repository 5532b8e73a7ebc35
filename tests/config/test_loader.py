"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: defaults < global < project < env < kwargs
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from propcontract.config import loader
from propcontract.config.loader import PROJECT_CONFIG_NAME, _deep_merge, _load_yaml, load_config
from propcontract.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global config at a temp file and clear PROPCONTRACT__ env vars."""
    global_path = tmp_path / "global" / "config.yaml"
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", global_path)
    for key in list(os.environ):
        if key.upper().startswith("PROPCONTRACT__"):
            monkeypatch.delenv(key)
    return global_path


def write_yaml(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path / "c.yaml", "rule:\n  severity: warning\n")

        assert _load_yaml(path) == {"rule": {"severity": "warning"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        assert _load_yaml(write_yaml(tmp_path / "empty.yaml", "")) == {}

    def test_raises_for_invalid_yaml(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path / "bad.yaml", "rule:\n  severity:\n    - [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(path)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_for_non_mapping(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path / "list.yaml", "- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(path)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_nested_merge(self) -> None:
        base = {"rule": {"severity": "error", "forbid_default_for_required": True}}
        override = {"rule": {"severity": "warning"}}

        assert _deep_merge(base, override) == {
            "rule": {"severity": "warning", "forbid_default_for_required": True}
        }

    def test_does_not_mutate_base(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})

        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_when_no_files(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.rule.forbid_default_for_required is False
        assert config.detection.pragma == "React"
        assert config.discovery.max_workers == 1

    def test_project_yaml(self, tmp_path: Path) -> None:
        write_yaml(tmp_path / PROJECT_CONFIG_NAME, "rule:\n  ignore_functional_components: true\n")

        assert load_config(tmp_path).rule.ignore_functional_components is True

    def test_project_overrides_global(self, tmp_path: Path, isolated_environment: Path) -> None:
        write_yaml(isolated_environment, "rule:\n  severity: warning\n  forbid_default_for_required: true\n")
        write_yaml(tmp_path / PROJECT_CONFIG_NAME, "rule:\n  severity: error\n")

        config = load_config(tmp_path)

        assert config.rule.severity == "error"
        assert config.rule.forbid_default_for_required is True

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write_yaml(tmp_path / PROJECT_CONFIG_NAME, "rule:\n  forbid_default_for_required: false\n")
        monkeypatch.setenv("PROPCONTRACT__RULE__FORBID_DEFAULT_FOR_REQUIRED", "true")

        assert load_config(tmp_path).rule.forbid_default_for_required is True

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROPCONTRACT__RULE__SEVERITY", "warning")

        config = load_config(tmp_path, rule={"severity": "error"})

        assert config.rule.severity == "error"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path / "custom.yaml", "detection:\n  pragma: Preact\n")
        write_yaml(tmp_path / PROJECT_CONFIG_NAME, "detection:\n  pragma: Inferno\n")

        assert load_config(tmp_path, config_path=path).detection.pragma == "Preact"

    def test_missing_explicit_config_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path, config_path=tmp_path / "missing.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_invalid_value(self, tmp_path: Path) -> None:
        write_yaml(tmp_path / PROJECT_CONFIG_NAME, "discovery:\n  max_workers: 0\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "max_workers" in exc_info.value.message

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        write_yaml(tmp_path / PROJECT_CONFIG_NAME, "rule:\n  forbidDefaultForRequired: true\n")

        with pytest.raises(ConfigError):
            load_config(tmp_path)
