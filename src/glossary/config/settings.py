"""Layered settings for the glossary tooling.

Precedence, highest first:

1. keyword arguments (the CLI passes ``--override`` values here),
2. ``GLOSSARY_*`` environment variables for top-level fields,
3. ``GLOSSARY_SETTINGS__section__key`` variables for nested values,
4. ``config/<environment>.yaml``,
5. ``config/default.yaml``,
6. model defaults.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal, Mapping

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .policies import Policies, load_policies

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = PROJECT_ROOT / "config"

_NESTED_ENV_PREFIX = "GLOSSARY_SETTINGS__"


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated with ``override``; nested mappings merge key by key."""

    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _nested_env_overrides() -> Dict[str, Any]:
    """Collect ``GLOSSARY_SETTINGS__export__pretty=true`` style variables."""

    overrides: Dict[str, Any] = {}
    for name, raw in os.environ.items():
        if not name.startswith(_NESTED_ENV_PREFIX):
            continue
        keys = name[len(_NESTED_ENV_PREFIX) :].lower().split("__")
        value: Any = raw
        for key in reversed(keys):
            value = {key: value}
        overrides = deep_merge(overrides, value)
    return overrides


def _layered_config(config_dir: Path, environment: str) -> Dict[str, Any]:
    layered = deep_merge(_read_yaml(config_dir / "default.yaml"), _read_yaml(config_dir / f"{environment}.yaml"))
    return deep_merge(layered, _nested_env_overrides())


class PathsConfig(BaseModel):
    """Where the glossary source, the export artifact and the logs live.

    Relative paths resolve against the working directory, so the tooling is
    run from the repository checkout.
    """

    terms_file: Path = Field(default=Path("terms.yaml"))
    export_file: Path = Field(default=Path("docs/terms.json"))
    logs_dir: Path = Field(default=Path("logs"))

    def ensure_exists(self) -> None:
        Path(self.export_file).parent.mkdir(parents=True, exist_ok=True)
        Path(self.logs_dir).mkdir(parents=True, exist_ok=True)


class Settings(BaseSettings):
    """Configuration shared by the validation, export and CLI layers."""

    model_config = SettingsConfigDict(
        env_prefix="GLOSSARY_",
        validate_assignment=True,
        extra="allow",
    )

    environment: Literal["development", "testing", "production"] = Field(default="development")
    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    create_dirs: bool = Field(
        default=False,
        description="Create the export and log directories on start-up.",
    )
    base_terms_path: Path | None = Field(
        default=None,
        description="Shortcut for validation.base_terms_path (GLOSSARY_BASE_TERMS_PATH).",
    )
    policies: Policies

    @model_validator(mode="before")
    @classmethod
    def _merge_config_layers(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        config_dir = Path(values.get("config_dir") or DEFAULT_CONFIG_DIR)
        environment = values.get("environment") or os.getenv("GLOSSARY_ENV", "development")
        explicit = {key: value for key, value in values.items() if value is not None}
        combined = deep_merge(_layered_config(config_dir, environment), explicit)

        # Policy sections may sit at the top level of the YAML or under "policies".
        policies = combined.pop("policies", None)
        if not isinstance(policies, Policies):
            sections = {
                name: combined[name]
                for name in Policies.model_fields
                if combined.get(name) is not None
            }
            policies = load_policies(deep_merge(sections, policies or {}))
        combined["policies"] = policies
        return combined

    @model_validator(mode="after")
    def _finalize(self) -> "Settings":
        validation = self.policies.validation
        if self.base_terms_path is not None and validation.base_terms_path is None:
            validation.base_terms_path = self.base_terms_path
        if self.create_dirs:
            self.paths.ensure_exists()
        return self

    @property
    def policy_version(self) -> str:
        return self.policies.policy_version

    @property
    def log_file(self) -> Path:
        return Path(self.paths.logs_dir) / "glossary.log"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, built on first use."""

    return Settings()


__all__ = ["Settings", "get_settings", "PathsConfig", "PROJECT_ROOT", "deep_merge"]
