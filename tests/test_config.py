"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from glossary.config.policies import DEFAULT_SIZE_THRESHOLD_BYTES, Policies, load_policies
from glossary.config.settings import PROJECT_ROOT, Settings


@pytest.fixture
def default_yaml() -> dict:
    return {
        "policy_version": "test-version",
        "paths": {
            "terms_file": "glossary.yaml",
            "export_file": "site/terms.json",
            "logs_dir": "logs",
        },
        "validation": {"base_terms_path": None},
        "export": {
            "pretty": False,
            "size_threshold_bytes": 1024,
            "oversize_action": "error",
            "only_if_new": False,
            "version_label": "dev",
        },
    }


def _write(config_dir: Path, name: str, payload: dict) -> None:
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / name).write_text(yaml.safe_dump(payload), encoding="utf-8")


def test_load_policies_defaults() -> None:
    policies = load_policies(None)
    assert isinstance(policies, Policies)
    assert policies.export.size_threshold_bytes == DEFAULT_SIZE_THRESHOLD_BYTES
    assert policies.export.oversize_action == "error"
    assert policies.validation.base_terms_path is None


def test_load_policies_rejects_invalid_values() -> None:
    with pytest.raises(ValidationError):
        load_policies({"export": {"oversize_action": "ignore"}})
    with pytest.raises(ValidationError):
        load_policies({"export": {"size_threshold_bytes": 0}})


def test_blank_base_path_means_unset() -> None:
    assert load_policies({"validation": {"base_terms_path": "  "}}).validation.base_terms_path is None


def test_repository_default_config_loads() -> None:
    settings = Settings(config_dir=PROJECT_ROOT / "config")
    assert settings.paths.terms_file == Path("terms.yaml")
    assert settings.policies.export.version_label == "local"


def test_settings_read_yaml(tmp_path: Path, default_yaml: dict) -> None:
    _write(tmp_path, "default.yaml", default_yaml)

    settings = Settings(config_dir=tmp_path)

    assert settings.paths.terms_file == Path("glossary.yaml")
    assert settings.policies.policy_version == "test-version"
    assert settings.policy_version == "test-version"
    assert settings.policies.export.size_threshold_bytes == 1024
    assert settings.log_file == Path("logs") / "glossary.log"


def test_settings_environment_override(tmp_path: Path, default_yaml: dict) -> None:
    _write(tmp_path, "default.yaml", default_yaml)
    _write(tmp_path, "production.yaml", {"export": {"oversize_action": "warn", "pretty": True}})

    settings = Settings(config_dir=tmp_path, environment="production")

    assert settings.environment == "production"
    assert settings.policies.export.oversize_action == "warn"
    assert settings.policies.export.pretty is True
    assert settings.policies.export.size_threshold_bytes == 1024


def test_settings_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, default_yaml: dict) -> None:
    _write(tmp_path, "default.yaml", default_yaml)
    monkeypatch.setenv("GLOSSARY_SETTINGS__export__size_threshold_bytes", "4096")

    settings = Settings(config_dir=tmp_path)
    assert settings.policies.export.size_threshold_bytes == 4096


def test_base_terms_path_shortcut(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, default_yaml: dict) -> None:
    _write(tmp_path, "default.yaml", default_yaml)
    monkeypatch.setenv("GLOSSARY_BASE_TERMS_PATH", str(tmp_path / "base.yaml"))

    settings = Settings(config_dir=tmp_path)
    assert settings.policies.validation.base_terms_path == tmp_path / "base.yaml"


def test_create_dirs(tmp_path: Path) -> None:
    Settings(
        config_dir=tmp_path / "config",
        create_dirs=True,
        paths={"export_file": tmp_path / "out" / "terms.json", "logs_dir": tmp_path / "logs"},
    )
    assert (tmp_path / "out").is_dir()
    assert (tmp_path / "logs").is_dir()


def test_unknown_environment_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        Settings(config_dir=tmp_path, environment="staging")
