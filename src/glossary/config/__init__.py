"""Configuration utilities for the glossary tooling."""

from .policies import (
    DEFAULT_SIZE_THRESHOLD_BYTES,
    ExportPolicy,
    Policies,
    ValidationPolicy,
    load_policies,
)
from .settings import PathsConfig, Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "PathsConfig",
    "Policies",
    "load_policies",
    "ValidationPolicy",
    "ExportPolicy",
    "DEFAULT_SIZE_THRESHOLD_BYTES",
]
